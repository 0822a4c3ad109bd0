"""Order routes: kanban board, lifecycle actions, bills and the archive."""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request
from fastapi.responses import Response

from restopos.api.deps import AppConfigDep, Repo
from restopos.core.rate_limit import limiter
from restopos.core.responses import list_response
from restopos.schemas.order import (
    ArchiveFileSize,
    DiscountRequest,
    KanbanBoard,
    Order,
    OrderCreate,
    RedeemRequest,
    VersionedAction,
)
from restopos.services import order_service
from restopos.services.billing import bill_lines, generate_bill_pdf, render_text_receipt
from restopos.services.reports_service import generate_archive_xlsx, search_orders
from restopos.services.whatsapp_service import get_whatsapp_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _expected(body: Optional[VersionedAction]) -> Optional[int]:
    return body.expected_version if body else None


@router.get("/", response_model=KanbanBoard)
@limiter.limit("60/minute")
def get_order_board(request: Request, repo: Repo, config: AppConfigDep):
    """Active orders grouped by status."""
    groups = order_service.load_manager(repo, config).grouped_by_status()
    return KanbanBoard(**{status.value: orders for status, orders in groups.items()})


@router.post("/", response_model=Order, status_code=201)
@limiter.limit("30/minute")
def create_order(
    request: Request,
    data: OrderCreate,
    repo: Repo,
    config: AppConfigDep,
    background_tasks: BackgroundTasks,
):
    """Submit a new order."""
    order, customer = order_service.place_order(repo, config, data)
    if customer is not None:
        background_tasks.add_task(
            get_whatsapp_service().send_order_confirmation, customer, order, config
        )
    return order


@router.get("/archive")
@limiter.limit("60/minute")
def list_archived_orders(request: Request, repo: Repo, search: Optional[str] = None):
    """Archived orders, newest first, optionally filtered by id, customer or table."""
    orders = search_orders(repo.get_archived_orders(), search)
    orders.sort(key=lambda o: o.created_at, reverse=True)
    return list_response(orders)


@router.get("/archive/file-size", response_model=ArchiveFileSize)
@limiter.limit("60/minute")
def get_archive_file_size(request: Request, repo: Repo):
    size = repo.get_archive_file_size()
    if size is None:
        raise HTTPException(
            status_code=404,
            detail=f"The {repo.name} data source does not keep an archive file",
        )
    return size


@router.get("/archive/export.xlsx")
@limiter.limit("10/minute")
def export_archive(request: Request, repo: Repo, config: AppConfigDep, search: Optional[str] = None):
    orders = search_orders(repo.get_archived_orders(), search)
    content = generate_archive_xlsx(orders, config)
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": 'attachment; filename="order-archive.xlsx"'},
    )


@router.get("/{order_id}", response_model=Order)
@limiter.limit("60/minute")
def get_order(request: Request, order_id: str, repo: Repo, config: AppConfigDep):
    return order_service.load_manager(repo, config).get(order_id)


@router.post("/{order_id}/advance", response_model=Order)
@limiter.limit("60/minute")
def advance_order(
    request: Request,
    order_id: str,
    repo: Repo,
    config: AppConfigDep,
    body: Optional[VersionedAction] = None,
):
    """Move an order to the next kitchen status."""
    manager = order_service.load_manager(repo, config)
    order = manager.advance(order_id, _expected(body))
    order_service.save_manager(repo, manager)
    return order


@router.post("/{order_id}/discount", response_model=Order)
@limiter.limit("60/minute")
def apply_discount(
    request: Request,
    order_id: str,
    body: DiscountRequest,
    repo: Repo,
    config: AppConfigDep,
):
    """Set the discount percentage (clamped to the configured maximum)."""
    manager = order_service.load_manager(repo, config)
    order = manager.apply_discount(order_id, body.percentage, body.expected_version)
    order_service.save_manager(repo, manager)
    return order


@router.post("/{order_id}/archive", response_model=Order)
@limiter.limit("60/minute")
def archive_order(
    request: Request,
    order_id: str,
    repo: Repo,
    config: AppConfigDep,
    body: Optional[VersionedAction] = None,
):
    """Move an order to history and free its table."""
    return order_service.archive_order(repo, config, order_id, _expected(body))


@router.delete("/{order_id}", response_model=Order)
@limiter.limit("30/minute")
def cancel_order(
    request: Request,
    order_id: str,
    repo: Repo,
    config: AppConfigDep,
    expected_version: Optional[int] = None,
):
    """Cancel an order that is still in the received state."""
    return order_service.cancel_order(repo, config, order_id, expected_version)


@router.post("/{order_id}/redeem", response_model=Order)
@limiter.limit("30/minute")
def redeem_points(
    request: Request,
    order_id: str,
    body: RedeemRequest,
    repo: Repo,
    config: AppConfigDep,
):
    order, _ = order_service.redeem_points(
        repo, config, order_id, body.points, body.customer_id, body.expected_version
    )
    return order


@router.post("/{order_id}/revert-redemption", response_model=Order)
@limiter.limit("30/minute")
def revert_redemption(
    request: Request,
    order_id: str,
    repo: Repo,
    config: AppConfigDep,
    body: Optional[VersionedAction] = None,
):
    order, _ = order_service.revert_redemption(repo, config, order_id, _expected(body))
    return order


@router.get("/{order_id}/bill")
@limiter.limit("60/minute")
def get_bill(request: Request, order_id: str, repo: Repo, config: AppConfigDep):
    """Formatted bill values plus a plain-text receipt."""
    order = order_service.load_manager(repo, config).get(order_id)
    bill = bill_lines(order, config)
    bill["text"] = render_text_receipt(order, config)
    return bill


@router.get("/{order_id}/bill.pdf")
@limiter.limit("20/minute")
def get_bill_pdf(request: Request, order_id: str, repo: Repo, config: AppConfigDep):
    order = order_service.load_manager(repo, config).get(order_id)
    return Response(
        content=generate_bill_pdf(order, config),
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="bill-{order.id}.pdf"'},
    )
