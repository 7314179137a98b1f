"""
Tests for the void path.
"""

import pytest

from ledger_engines.balance import outstanding_balance
from ledger_engines.void import prepare_void
from ledger_kernel.domain.dtos import RecordStatus
from ledger_kernel.exceptions import PaymentAlreadyVoidedError


class TestPrepareVoid:
    """Voiding flips status and nothing else."""

    def test_voided_copy(self, make_invoice, make_payment):
        payment = make_payment(make_invoice(100000), 40000)

        voided = prepare_void(payment)

        assert voided.record_status == RecordStatus.VOIDED
        assert voided.id == payment.id
        assert voided.amount == payment.amount
        assert payment.is_active

    def test_void_restores_prior_balance(self, make_invoice, make_payment):
        invoice = make_invoice(100000)
        first = make_payment(invoice, 30000)
        before = outstanding_balance(invoice, [first])
        second = make_payment(invoice, 45000)

        after_void = outstanding_balance(invoice, [first, prepare_void(second)])

        assert after_void == before

    def test_double_void_rejected(self, make_invoice, make_payment):
        payment = make_payment(make_invoice(100000), 40000, record_status=RecordStatus.VOIDED)

        with pytest.raises(PaymentAlreadyVoidedError) as exc_info:
            prepare_void(payment)
        assert exc_info.value.payment_id == payment.id
