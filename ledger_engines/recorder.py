"""
Module: ledger_engines.recorder
Responsibility:
    Validate one manual payment against one invoice and build the Payment
    record to append.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The service persists the
    returned Payment.

Invariants enforced:
    - amount > 0.
    - amount <= the invoice's current outstanding balance.  A manual entry
      can never overpay an invoice.
    - The payment's currency is the invoice's currency.

Failure modes:
    - ValidationError on a non-positive amount or empty payment method.
    - CurrencyMismatchError when the amount is in another currency.
    - ExceedsOutstandingError (carrying the computed outstanding) when the
      amount is larger than what is owed.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID, uuid4

from ledger_engines.balance import outstanding_balance
from ledger_engines.tracer import traced_engine
from ledger_engines.validation import require_positive, require_same_currency, require_text
from ledger_kernel.domain.dtos import Invoice, Payment, PaymentDraft, PaymentType
from ledger_kernel.exceptions import ExceedsOutstandingError
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.recorder")


@traced_engine("payment_recorder", "1.0", fingerprint_fields=("invoice", "draft"))
def prepare_payment(
    invoice: Invoice,
    existing_payments: Sequence[Payment],
    draft: PaymentDraft,
    *,
    payment_id: UUID | None = None,
) -> Payment:
    """
    Build the ACTIVE payment ``draft`` describes, after checking it fits.

    When the draft does not say, the payment type is FULL if the payment
    clears the invoice and PARTIAL otherwise.

    Raises:
        ValidationError, CurrencyMismatchError, ExceedsOutstandingError
    """
    require_positive(draft.amount)
    require_text(draft.metadata.payment_method, "payment_method")
    require_same_currency(invoice, draft.amount)

    balance = outstanding_balance(invoice, existing_payments)
    if draft.amount > balance.outstanding:
        logger.warning(
            "payment_exceeds_outstanding",
            extra={
                "invoice_id": str(invoice.id),
                "amount": draft.amount.minor_units,
                "outstanding": balance.outstanding.minor_units,
            },
        )
        raise ExceedsOutstandingError(invoice.id, draft.amount, balance.outstanding)

    payment_type = draft.payment_type
    if payment_type is None:
        payment_type = (
            PaymentType.FULL if draft.amount == balance.outstanding else PaymentType.PARTIAL
        )

    metadata = draft.metadata
    return Payment(
        id=payment_id or uuid4(),
        invoice_id=invoice.id,
        party_id=invoice.party_id,
        amount=draft.amount,
        payment_date=metadata.payment_date,
        payment_method=metadata.payment_method.strip(),
        payment_type=payment_type,
        reference_number=metadata.reference_number,
        bank_name=metadata.bank_name,
        remarks=metadata.remarks,
        recorded_by=metadata.recorded_by,
    )
