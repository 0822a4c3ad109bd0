"""Staff roster and payroll routes."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response

from restopos.api.deps import Repo
from restopos.core.exceptions import NotFoundError
from restopos.core.rate_limit import limiter
from restopos.core.responses import list_response
from restopos.schemas.staff import (
    SalarySummary,
    StaffMember,
    StaffMemberCreate,
    StaffMemberUpdate,
    StaffTransaction,
    StaffTransactionCreate,
)
from restopos.services import staff_payroll_service
from restopos.services.ids import generate_entity_id

logger = logging.getLogger(__name__)

router = APIRouter()


def _find_member(staff: List[StaffMember], staff_id: str) -> int:
    for index, member in enumerate(staff):
        if member.id == staff_id:
            return index
    logger.warning(f"Staff member {staff_id} not found")
    raise NotFoundError("Staff member", staff_id)


def _period(year: Optional[int], month: Optional[int]):
    now = datetime.now(timezone.utc)
    return year or now.year, month or now.month


@router.get("/")
@limiter.limit("60/minute")
def list_staff(request: Request, repo: Repo):
    return list_response(repo.get_staff())


@router.post("/", response_model=StaffMember, status_code=201)
@limiter.limit("30/minute")
def create_staff_member(request: Request, data: StaffMemberCreate, repo: Repo):
    member = StaffMember(id=generate_entity_id("STAFF"), **data.model_dump())
    repo.save_staff(repo.get_staff() + [member])
    logger.info(f"Staff member {member.id} added as {member.role.value}")
    return member


@router.put("/{staff_id}", response_model=StaffMember)
@limiter.limit("30/minute")
def update_staff_member(request: Request, staff_id: str, data: StaffMemberUpdate, repo: Repo):
    staff = repo.get_staff()
    index = _find_member(staff, staff_id)
    staff[index] = StaffMember.model_validate(
        {**staff[index].model_dump(), **data.model_dump(exclude_unset=True, exclude_none=True)}
    )
    repo.save_staff(staff)
    return staff[index]


@router.delete("/{staff_id}", status_code=204)
@limiter.limit("30/minute")
def delete_staff_member(request: Request, staff_id: str, repo: Repo):
    staff = repo.get_staff()
    index = _find_member(staff, staff_id)
    del staff[index]
    repo.save_staff(staff)
    return Response(status_code=204)


@router.get("/{staff_id}/transactions")
@limiter.limit("60/minute")
def list_transactions(
    request: Request,
    staff_id: str,
    repo: Repo,
    year: Optional[int] = None,
    month: Optional[int] = Query(default=None, ge=1, le=12),
):
    """Payments for one staff member, optionally limited to a month."""
    _find_member(repo.get_staff(), staff_id)
    transactions = [tx for tx in repo.get_staff_transactions() if tx.staff_id == staff_id]
    if year or month:
        year, month = _period(year, month)
        transactions = staff_payroll_service.transactions_for_month(transactions, staff_id, year, month)
    return list_response(transactions)


@router.post("/{staff_id}/transactions", response_model=StaffTransaction, status_code=201)
@limiter.limit("30/minute")
def add_transaction(request: Request, staff_id: str, data: StaffTransactionCreate, repo: Repo):
    """Record a payment; salary payments update the carry forward balance."""
    staff = repo.get_staff()
    index = _find_member(staff, staff_id)
    transactions = repo.get_staff_transactions()
    transaction, member = staff_payroll_service.record_transaction(staff[index], transactions, data)
    repo.save_staff_transactions(transactions + [transaction])
    if member != staff[index]:
        staff[index] = member
        repo.save_staff(staff)
    return transaction


@router.get("/{staff_id}/summary", response_model=SalarySummary)
@limiter.limit("60/minute")
def get_salary_summary(
    request: Request,
    staff_id: str,
    repo: Repo,
    year: Optional[int] = None,
    month: Optional[int] = Query(default=None, ge=1, le=12),
):
    staff = repo.get_staff()
    member = staff[_find_member(staff, staff_id)]
    year, month = _period(year, month)
    return staff_payroll_service.salary_summary(member, repo.get_staff_transactions(), year, month)


@router.get("/{staff_id}/report.csv")
@limiter.limit("10/minute")
def download_report(
    request: Request,
    staff_id: str,
    repo: Repo,
    year: Optional[int] = None,
    month: Optional[int] = Query(default=None, ge=1, le=12),
):
    """CSV statement of a month's payments with the payroll summary."""
    staff = repo.get_staff()
    member = staff[_find_member(staff, staff_id)]
    year, month = _period(year, month)
    all_transactions = repo.get_staff_transactions()
    in_month = staff_payroll_service.transactions_for_month(all_transactions, staff_id, year, month)
    summary = staff_payroll_service.salary_summary(member, all_transactions, year, month)
    content = staff_payroll_service.generate_transaction_report(in_month, summary)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{staff_id}-{year}-{month:02d}.csv"'},
    )
