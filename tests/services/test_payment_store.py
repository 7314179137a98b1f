"""
Tests for PaymentStoreService: append, void and the invoice claim.
"""

from datetime import date
from uuid import uuid4

import pytest

from ledger_kernel.domain.dtos import Payment, RecordStatus
from ledger_kernel.domain.ports import PaymentStore
from ledger_kernel.domain.values import Money
from ledger_kernel.exceptions import (
    ConcurrencyConflictError,
    PaymentAlreadyVoidedError,
    PaymentNotFoundError,
    ValidationError,
)


class TestInsertPayment:
    """Appending payment rows."""

    def test_round_trip(self, payment_store, create_invoice, make_payment):
        invoice = create_invoice(100000)
        payment = make_payment(invoice, 40000)

        stored = payment_store.insert_payment(payment)

        assert stored == payment
        assert payment_store.get_payment(payment.id) == payment

    def test_requires_recording_actor(self, payment_store, create_invoice):
        invoice = create_invoice(100000)
        anonymous = Payment(
            id=uuid4(),
            invoice_id=invoice.id,
            party_id=invoice.party_id,
            amount=Money.of(100, "INR"),
            payment_date=date(2024, 2, 1),
            payment_method="cash",
        )

        with pytest.raises(ValidationError) as exc_info:
            payment_store.insert_payment(anonymous)
        assert exc_info.value.field == "recorded_by"

    def test_active_lists_exclude_voided(self, payment_store, create_invoice, make_payment):
        invoice = create_invoice(100000)
        kept = payment_store.insert_payment(make_payment(invoice, 100, payment_date=date(2024, 1, 2)))
        dropped = payment_store.insert_payment(make_payment(invoice, 200))
        payment_store.void_payment(dropped.id, uuid4())

        assert [p.id for p in payment_store.list_active_payments(invoice.id)] == [kept.id]

    def test_active_lists_ordered_by_date(self, payment_store, create_invoice, make_payment):
        invoice = create_invoice(100000)
        late = payment_store.insert_payment(make_payment(invoice, 100, payment_date=date(2024, 3, 1)))
        early = payment_store.insert_payment(make_payment(invoice, 100, payment_date=date(2024, 1, 2)))

        assert [p.id for p in payment_store.list_active_payments(invoice.id)] == [early.id, late.id]

    def test_bulk_lookup_has_every_invoice(self, payment_store, create_invoice, make_payment):
        paid = create_invoice(100000)
        unpaid = create_invoice(50000)
        payment_store.insert_payment(make_payment(paid, 100))

        grouped = payment_store.list_active_payments_for_invoices([paid.id, unpaid.id])

        assert len(grouped[paid.id]) == 1
        assert grouped[unpaid.id] == []

    def test_bulk_lookup_empty(self, payment_store):
        assert payment_store.list_active_payments_for_invoices([]) == {}

    def test_satisfies_port(self, payment_store):
        assert isinstance(payment_store, PaymentStore)


class TestVoidPayment:
    """Flipping rows to VOIDED."""

    def test_void_stamps_actor_and_time(
        self, payment_store, create_invoice, make_payment, deterministic_clock
    ):
        invoice = create_invoice(100000)
        payment = payment_store.insert_payment(make_payment(invoice, 100))
        voider = uuid4()

        voided = payment_store.void_payment(payment.id, voider)
        model = payment_store._selector.get_model(payment.id)

        assert voided.record_status == RecordStatus.VOIDED
        assert model.voided_by_id == voider
        assert model.updated_by_id == voider
        assert model.voided_at.replace(tzinfo=None) == deterministic_clock.now().replace(tzinfo=None)

    def test_double_void(self, payment_store, create_invoice, make_payment):
        invoice = create_invoice(100000)
        payment = payment_store.insert_payment(make_payment(invoice, 100))
        payment_store.void_payment(payment.id, uuid4())

        with pytest.raises(PaymentAlreadyVoidedError):
            payment_store.void_payment(payment.id, uuid4())

    def test_unknown_payment(self, payment_store):
        with pytest.raises(PaymentNotFoundError):
            payment_store.void_payment(uuid4(), uuid4())


class TestClaimInvoice:
    """Ledger version compare-and-set."""

    def test_claim_advances_version(self, payment_store, invoice_selector, create_invoice):
        invoice = create_invoice(100000)

        new_version = payment_store.claim_invoice(invoice.id, 0)

        assert new_version == 1
        assert invoice_selector.get_invoice(invoice.id).ledger_version == 1

    def test_stale_version_conflicts(self, payment_store, create_invoice, captured_logs):
        invoice = create_invoice(100000)
        payment_store.claim_invoice(invoice.id, 0)

        with pytest.raises(ConcurrencyConflictError) as exc_info:
            payment_store.claim_invoice(invoice.id, 0)

        assert exc_info.value.invoice_id == invoice.id
        assert exc_info.value.expected_version == 0
        assert "invoice_claim_conflict" in [r["message"] for r in captured_logs()]

    def test_missing_invoice_conflicts(self, payment_store):
        with pytest.raises(ConcurrencyConflictError):
            payment_store.claim_invoice(uuid4(), 0)
