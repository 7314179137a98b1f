"""
Module: ledger_engines.write_off
Responsibility:
    Close an invoice's residual balance with a synthetic payment equal to
    the outstanding amount, method ``write-off``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - The write-off amount is exactly the current outstanding, so the
      invoice ends at outstanding == 0 and not overpaid.
    - Remarks are mandatory; a write-off without a justification is not
      recorded.
    - The invoice total is never modified.  The write-off is an ordinary
      payment row that a void can reverse.

Failure modes:
    - ValidationError on empty remarks.
    - NothingToWriteOffError when the invoice owes nothing.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from uuid import UUID, uuid4

from ledger_engines.balance import outstanding_balance
from ledger_engines.tracer import traced_engine
from ledger_engines.validation import require_text
from ledger_kernel.domain.dtos import WRITE_OFF_METHOD, Invoice, Payment, PaymentType
from ledger_kernel.exceptions import NothingToWriteOffError


@traced_engine("write_off", "1.0", fingerprint_fields=("invoice", "remarks"))
def prepare_write_off(
    invoice: Invoice,
    existing_payments: Sequence[Payment],
    remarks: str,
    *,
    payment_date: date,
    recorded_by: UUID | None = None,
    payment_id: UUID | None = None,
) -> Payment:
    """
    Build the write-off payment for ``invoice``.

    Raises:
        ValidationError: ``remarks`` is empty.
        NothingToWriteOffError: outstanding is already zero.
    """
    justification = require_text(remarks, "remarks")

    balance = outstanding_balance(invoice, existing_payments)
    if balance.outstanding.is_zero:
        raise NothingToWriteOffError(invoice.id)

    return Payment(
        id=payment_id or uuid4(),
        invoice_id=invoice.id,
        party_id=invoice.party_id,
        amount=balance.outstanding,
        payment_date=payment_date,
        payment_method=WRITE_OFF_METHOD,
        payment_type=PaymentType.FULL,
        remarks=justification,
        recorded_by=recorded_by,
    )
