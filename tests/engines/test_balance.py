"""
Tests for the ledger balance reader.

Covers:
- Unpaid, partially paid and fully paid invoices
- Voided payments excluded
- Overpayment reported, outstanding clamped at zero
- Foreign payments and currencies rejected
"""

from datetime import date
from uuid import uuid4

import pytest

from ledger_engines.balance import outstanding_balance
from ledger_kernel.domain.dtos import Payment, RecordStatus, SettlementStatus
from ledger_kernel.domain.values import Money
from ledger_kernel.exceptions import CurrencyMismatchError, ValidationError


class TestOutstandingBalance:
    """Balance of one invoice from its payment history."""

    def test_no_payments_is_unpaid(self, make_invoice, inr):
        invoice = make_invoice(100000)

        balance = outstanding_balance(invoice, [])

        assert balance.total_paid == inr(0)
        assert balance.outstanding == inr(100000)
        assert balance.status == SettlementStatus.UNPAID
        assert not balance.is_overpaid

    def test_partial_payment(self, make_invoice, make_payment, inr):
        invoice = make_invoice(100000)

        balance = outstanding_balance(invoice, [make_payment(invoice, 40000)])

        assert balance.total_paid == inr(40000)
        assert balance.outstanding == inr(60000)
        assert balance.status == SettlementStatus.PARTIALLY_PAID

    def test_several_payments_sum(self, make_invoice, make_payment, inr):
        invoice = make_invoice(100000)
        payments = [make_payment(invoice, 10000), make_payment(invoice, 25050)]

        balance = outstanding_balance(invoice, payments)

        assert balance.total_paid == inr(35050)
        assert balance.outstanding == inr(64950)

    def test_exact_payment_is_fully_paid(self, make_invoice, make_payment, inr):
        invoice = make_invoice(100000)

        balance = outstanding_balance(invoice, [make_payment(invoice, 100000)])

        assert balance.outstanding == inr(0)
        assert balance.status == SettlementStatus.FULLY_PAID
        assert not balance.is_overpaid

    def test_voided_payments_ignored(self, make_invoice, make_payment, inr):
        invoice = make_invoice(100000)
        payments = [
            make_payment(invoice, 40000),
            make_payment(invoice, 60000, record_status=RecordStatus.VOIDED),
        ]

        balance = outstanding_balance(invoice, payments)

        assert balance.total_paid == inr(40000)
        assert balance.outstanding == inr(60000)

    def test_only_voided_payments_is_unpaid(self, make_invoice, make_payment):
        invoice = make_invoice(100000)
        voided = make_payment(invoice, 40000, record_status=RecordStatus.VOIDED)

        balance = outstanding_balance(invoice, [voided])

        assert balance.status == SettlementStatus.UNPAID

    def test_overpayment_reported_not_negative(self, make_invoice, make_payment, inr):
        """Legacy data may overpay; outstanding stays at zero."""
        invoice = make_invoice(100000)
        payments = [make_payment(invoice, 80000), make_payment(invoice, 30000)]

        balance = outstanding_balance(invoice, payments)

        assert balance.outstanding == inr(0)
        assert balance.is_overpaid
        assert balance.overpaid_by == inr(10000)
        assert balance.total_paid == inr(110000)
        assert balance.status == SettlementStatus.FULLY_PAID

    def test_zero_total_invoice_is_fully_paid(self, make_invoice, inr):
        invoice = make_invoice(0)

        balance = outstanding_balance(invoice, [])

        assert balance.outstanding == inr(0)
        assert balance.status == SettlementStatus.FULLY_PAID

    def test_identity_holds(self, make_invoice, make_payment):
        invoice = make_invoice(123457)
        payments = [make_payment(invoice, 3), make_payment(invoice, 100000)]

        balance = outstanding_balance(invoice, payments)

        assert balance.total_paid + balance.outstanding == invoice.total_amount

    def test_payment_for_other_invoice_rejected(self, make_invoice, make_payment):
        invoice = make_invoice(100000)
        other = make_invoice(50000)

        with pytest.raises(ValidationError) as exc_info:
            outstanding_balance(invoice, [make_payment(other, 1000)])
        assert exc_info.value.field == "payments"

    def test_payment_in_other_currency_rejected(self, make_invoice):
        invoice = make_invoice(100000)
        foreign = Payment(
            id=uuid4(),
            invoice_id=invoice.id,
            party_id=invoice.party_id,
            amount=Money.of(1000, "USD"),
            payment_date=date(2024, 1, 15),
            payment_method="wire",
        )

        with pytest.raises(CurrencyMismatchError):
            outstanding_balance(invoice, [foreign])

    def test_emits_engine_trace(self, make_invoice, captured_logs):
        outstanding_balance(make_invoice(100000), [])

        traces = [r for r in captured_logs() if r["message"] == "LEDGER_ENGINE_TRACE"]
        assert traces
        assert traces[-1]["engine_name"] == "ledger_balance"
        assert traces[-1]["engine_version"] == "1.0"
