"""Menu catalog routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import Response

from restopos.api.deps import AppConfigDep, Repo
from restopos.core.exceptions import NotFoundError, ValidationError
from restopos.core.rate_limit import limiter
from restopos.core.responses import list_response
from restopos.schemas.menu import MenuItem, MenuItemCreate, MenuItemUpdate
from restopos.services.billing import generate_menu_pdf
from restopos.services.ids import generate_entity_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
@limiter.limit("60/minute")
def list_menu_items(request: Request, repo: Repo, category: Optional[str] = None):
    """List menu items, optionally for one category."""
    items = repo.get_menu_items()
    if category:
        items = [item for item in items if item.category.value == category]
    return list_response(items)


@router.get("/printable.pdf")
@limiter.limit("10/minute")
def printable_menu(request: Request, repo: Repo, config: AppConfigDep):
    """Printable menu grouped by category."""
    pdf = generate_menu_pdf(repo.get_menu_items(), config)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": 'inline; filename="menu.pdf"'},
    )


@router.post("/", response_model=MenuItem, status_code=201)
@limiter.limit("30/minute")
def create_menu_item(request: Request, data: MenuItemCreate, repo: Repo):
    items = repo.get_menu_items()
    item_id = data.id or generate_entity_id("ITEM")
    if any(item.id == item_id for item in items):
        raise ValidationError(f"Menu item {item_id} already exists")
    item = MenuItem(**data.model_dump(exclude={"id"}), id=item_id)
    repo.save_menu_items(items + [item])
    logger.info(f"Menu item {item.id} ({item.name}) added")
    return item


@router.put("/{item_id}", response_model=MenuItem)
@limiter.limit("30/minute")
def update_menu_item(request: Request, item_id: str, data: MenuItemUpdate, repo: Repo):
    """Edit a menu item. Orders already placed keep their copy."""
    items = repo.get_menu_items()
    for index, item in enumerate(items):
        if item.id == item_id:
            updated = MenuItem.model_validate(
                {**item.model_dump(), **data.model_dump(exclude_unset=True, exclude_none=True)}
            )
            items[index] = updated
            repo.save_menu_items(items)
            return updated
    raise NotFoundError("Menu item", item_id)


@router.delete("/{item_id}", status_code=204)
@limiter.limit("30/minute")
def delete_menu_item(request: Request, item_id: str, repo: Repo):
    items = repo.get_menu_items()
    remaining = [item for item in items if item.id != item_id]
    if len(remaining) == len(items):
        raise NotFoundError("Menu item", item_id)
    repo.save_menu_items(remaining)
    logger.info(f"Menu item {item_id} removed")
    return Response(status_code=204)
