"""
Module: ledger_engines.void
Responsibility:
    The reversal path.  A payment is never deleted; voiding flips it to
    VOIDED so every balance ignores it while the row stays for audit.
    Recomputing a balance after voiding a payment reproduces the balance
    from before it was recorded.
"""

from __future__ import annotations

from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.dtos import Payment
from ledger_kernel.exceptions import PaymentAlreadyVoidedError


@traced_engine("payment_void", "1.0")
def prepare_void(payment: Payment) -> Payment:
    """
    The voided form of ``payment``.

    Raises:
        PaymentAlreadyVoidedError: ``payment`` is already voided.
    """
    if not payment.is_active:
        raise PaymentAlreadyVoidedError(payment.id)
    return payment.voided()
