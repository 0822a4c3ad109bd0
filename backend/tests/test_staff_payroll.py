"""Tests for staff payments and the monthly payroll summary."""

import csv
import io
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from restopos.schemas.staff import (
    Shift,
    StaffMember,
    StaffRole,
    StaffTransaction,
    StaffTransactionCreate,
    TransactionType,
)
from restopos.services.staff_payroll_service import (
    generate_transaction_report,
    record_transaction,
    salary_summary,
    transactions_for_month,
)

MARCH = datetime(2026, 3, 10, tzinfo=timezone.utc)


@pytest.fixture
def member():
    return StaffMember(id="STAFF01", name="Alice", role=StaffRole.WAITER, shift=Shift.MORNING,
                       salary=Decimal("30000"))


def _tx(tx_id, amount, tx_type, date=MARCH, staff_id="STAFF01"):
    return StaffTransaction(id=tx_id, staff_id=staff_id, date=date, amount=Decimal(amount), type=tx_type)


class TestSalarySummary:
    """net = salary + carry forward + bonuses - deductions - salary paid."""

    def test_summary(self, member):
        txs = [
            _tx("T1", "2000", TransactionType.ADVANCE),
            _tx("T2", "500", TransactionType.DAILY_WAGE),
            _tx("T3", "1000", TransactionType.BONUS),
            _tx("T4", "9999", TransactionType.ADVANCE, date=datetime(2026, 2, 1, tzinfo=timezone.utc)),
            _tx("T5", "9999", TransactionType.ADVANCE, staff_id="STAFF02"),
        ]
        summary = salary_summary(member, txs, 2026, 3)
        assert summary.total_deductions == Decimal("2500")
        assert summary.bonuses == Decimal("1000")
        assert summary.net_payable == Decimal("28500")

    def test_carry_forward_included(self, member):
        member = member.model_copy(update={"carry_forward_balance": Decimal("1500")})
        assert salary_summary(member, [], 2026, 3).net_payable == Decimal("31500")

    def test_member_without_salary(self, member):
        member = member.model_copy(update={"salary": None})
        assert salary_summary(member, [], 2026, 3).net_payable == Decimal("0")

    def test_transactions_for_month(self):
        txs = [_tx("T1", "1", TransactionType.BONUS),
               _tx("T2", "1", TransactionType.BONUS, date=datetime(2026, 4, 1, tzinfo=timezone.utc))]
        assert [tx.id for tx in transactions_for_month(txs, "STAFF01", 2026, 3)] == ["T1"]


class TestRecordTransaction:
    def test_advance_leaves_carry_forward(self, member):
        tx, updated = record_transaction(
            member, [], StaffTransactionCreate(amount=Decimal("1000"), type=TransactionType.ADVANCE, date=MARCH)
        )
        assert tx.id.startswith("TXN")
        assert tx.staff_id == "STAFF01"
        assert updated.carry_forward_balance == Decimal("0")

    def test_salary_payment_sets_carry_forward(self, member):
        existing = [_tx("T1", "2000", TransactionType.ADVANCE)]
        _, updated = record_transaction(
            member, existing,
            StaffTransactionCreate(amount=Decimal("25000"), type=TransactionType.SALARY, date=MARCH),
        )
        # 30000 - 2000 still payable, 25000 paid
        assert updated.carry_forward_balance == Decimal("3000")


class TestReport:
    def test_csv_statement(self, member):
        txs = [_tx("T1", "2000", TransactionType.ADVANCE), _tx("T2", "1000", TransactionType.BONUS)]
        report = generate_transaction_report(txs, salary_summary(member, txs, 2026, 3))
        rows = list(csv.reader(io.StringIO(report)))

        assert rows[0] == ["Transaction ID", "Date", "Type", "Amount", "Payment Mode", "Notes"]
        assert rows[1] == ["T1", "2026-03-10", "Advance", "2000.00", "Cash", ""]
        assert ["Final Net Payable this month", "29000.00"] in rows
