"""Tables management routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Request

from restopos.api.deps import Repo
from restopos.core.exceptions import NotFoundError
from restopos.core.rate_limit import limiter
from restopos.core.responses import list_response
from restopos.schemas.table import STATUS_CYCLE, Table, TableCreate, TableStatus, TableUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _index_of(tables, table_id: int) -> int:
    for index, table in enumerate(tables):
        if table.id == table_id:
            return index
    logger.warning(f"Table {table_id} not found")
    raise NotFoundError("Table", table_id)


@router.get("/")
@limiter.limit("60/minute")
def list_tables(request: Request, repo: Repo, status: Optional[TableStatus] = None):
    """List all tables."""
    tables = repo.get_tables()
    if status:
        tables = [t for t in tables if t.status == status]
    return list_response(tables)


@router.post("/", response_model=Table, status_code=201)
@limiter.limit("30/minute")
def create_table(request: Request, data: TableCreate, repo: Repo):
    """Add a table; it gets the next free number."""
    tables = repo.get_tables()
    table = Table(id=max((t.id for t in tables), default=0) + 1, capacity=data.capacity)
    repo.save_tables(tables + [table])
    logger.info(f"Table {table.id} added (capacity {table.capacity})")
    return table


@router.put("/{table_id}", response_model=Table)
@limiter.limit("30/minute")
def update_table(request: Request, table_id: int, data: TableUpdate, repo: Repo):
    tables = repo.get_tables()
    index = _index_of(tables, table_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    tables[index] = Table.model_validate({**tables[index].model_dump(), **changes})
    repo.save_tables(tables)
    return tables[index]


@router.post("/{table_id}/cycle-status", response_model=Table)
@limiter.limit("60/minute")
def cycle_table_status(request: Request, table_id: int, repo: Repo):
    """available -> occupied -> reserved -> available."""
    tables = repo.get_tables()
    index = _index_of(tables, table_id)
    current = tables[index]
    tables[index] = Table.model_validate({
        **current.model_dump(),
        "status": STATUS_CYCLE[current.status],
    })
    repo.save_tables(tables)
    return tables[index]
