"""Staff payments, monthly payroll summary and the CSV statement."""

import csv
import io
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

from restopos.schemas.staff import (
    SalarySummary,
    StaffMember,
    StaffTransaction,
    StaffTransactionCreate,
    TransactionType,
)
from restopos.services.ids import generate_entity_id
from restopos.services.pricing import ZERO, quantize_money

logger = logging.getLogger(__name__)

DEDUCTION_TYPES = (TransactionType.ADVANCE, TransactionType.DAILY_WAGE)


def transactions_for_month(
    transactions: List[StaffTransaction], staff_id: str, year: int, month: int
) -> List[StaffTransaction]:
    return [
        tx for tx in transactions
        if tx.staff_id == staff_id and tx.date.year == year and tx.date.month == month
    ]


def _sum(transactions: List[StaffTransaction], *types: TransactionType) -> Decimal:
    return sum((tx.amount for tx in transactions if tx.type in types), ZERO)


def salary_summary(
    member: StaffMember,
    transactions: List[StaffTransaction],
    year: int,
    month: int,
) -> SalarySummary:
    """Monthly position: salary + carry forward + bonuses - deductions - salary paid."""
    in_month = transactions_for_month(transactions, member.id, year, month)
    gross = member.salary or ZERO
    carry = member.carry_forward_balance
    bonuses = _sum(in_month, TransactionType.BONUS)
    deductions = _sum(in_month, *DEDUCTION_TYPES)
    paid = _sum(in_month, TransactionType.SALARY)
    return SalarySummary(
        staff_id=member.id,
        year=year,
        month=month,
        gross_salary=gross,
        carry_forward=carry,
        bonuses=bonuses,
        total_deductions=deductions,
        salaries_paid=paid,
        net_payable=gross + carry + bonuses - deductions - paid,
    )


def record_transaction(
    member: StaffMember,
    transactions: List[StaffTransaction],
    data: StaffTransactionCreate,
) -> Tuple[StaffTransaction, StaffMember]:
    """Create a transaction; a salary payment also resets the carry forward.

    After a salary payment the member carries forward whatever was still
    payable for the month minus the amount just paid.
    """
    date = data.date or datetime.now(timezone.utc)
    transaction = StaffTransaction(
        id=generate_entity_id("TXN"),
        staff_id=member.id,
        date=date,
        amount=data.amount,
        type=data.type,
        payment_mode=data.payment_mode,
        notes=data.notes,
    )

    if data.type == TransactionType.SALARY:
        net_payable = salary_summary(member, transactions, date.year, date.month).net_payable
        member = member.model_copy(update={"carry_forward_balance": net_payable - data.amount})
        logger.info(f"Salary paid to {member.id}; carry forward now {member.carry_forward_balance}")

    return transaction, member


def generate_transaction_report(
    transactions: List[StaffTransaction],
    summary: Optional[SalarySummary] = None,
) -> str:
    """CSV statement: one row per transaction, then a key/value summary block."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["Transaction ID", "Date", "Type", "Amount", "Payment Mode", "Notes"])
    for tx in transactions:
        writer.writerow([
            tx.id,
            tx.date.date().isoformat(),
            tx.type.value,
            quantize_money(tx.amount),
            tx.payment_mode.value,
            tx.notes or "",
        ])

    if summary is not None:
        writer.writerow([])
        writer.writerow(["Transaction Summary"])
        writer.writerow(["Gross Salary", quantize_money(summary.gross_salary)])
        writer.writerow(["Carry Forward from Last Month", quantize_money(summary.carry_forward)])
        writer.writerow(["Total Bonus", quantize_money(summary.bonuses)])
        writer.writerow(["Total Deductions (Advance + Daily)", quantize_money(summary.total_deductions)])
        writer.writerow(["Total Salary Paid this month", quantize_money(summary.salaries_paid)])
        writer.writerow(["Final Net Payable this month", quantize_money(summary.net_payable)])
    return buffer.getvalue()
