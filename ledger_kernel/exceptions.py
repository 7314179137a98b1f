"""
Typed Exception Hierarchy for the Payment Ledger.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

A request layer has to turn every ledger failure into an actionable
message: "amount exceeds the outstanding balance of 250.00", not
"something went wrong".  That is only possible when:
  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (invoice id, attempted amount,
     computed outstanding) rather than just a message string

Example:
    try:
        service.record_payment(command, actor_id)
    except ExceedsOutstandingError as e:
        return {"error": e.code, "outstanding": e.outstanding.minor_units}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PaymentLedgerError (base)
    |
    +-- ValidationError
    |   +-- CurrencyMismatchError
    |   +-- InvalidCurrencyError
    |
    +-- ExceedsOutstandingError
    +-- NothingToWriteOffError
    |
    +-- NotFoundError
    |   +-- InvoiceNotFoundError
    |   +-- PaymentNotFoundError
    |   +-- AllocationBatchNotFoundError
    |
    +-- PaymentAlreadyVoidedError
    +-- ConcurrencyConflictError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                        | When Raised
----------------------------|----------------------------------------------
VALIDATION_ERROR            | Malformed / non-positive amount, missing field
CURRENCY_MISMATCH           | Money of two currencies combined
INVALID_CURRENCY            | Not a known ISO 4217 code
EXCEEDS_OUTSTANDING         | Single payment larger than outstanding balance
NOTHING_TO_WRITE_OFF        | Write-off on an invoice with zero outstanding
INVOICE_NOT_FOUND           | Invoice id does not exist
PAYMENT_NOT_FOUND           | Payment id does not exist
ALLOCATION_BATCH_NOT_FOUND  | No payments carry the allocation batch id
PAYMENT_ALREADY_VOIDED      | Voiding a payment that is already voided
CONCURRENCY_CONFLICT        | Invoice ledger changed between read and write

===============================================================================
HANDLING PATTERNS
===============================================================================

1. ConcurrencyConflictError is retryable: re-run the WHOLE operation
   against fresh state (see ``ledger_kernel.services.transaction``).

2. A FIFO allocation that leaves money unallocated is NOT an error; it is
   reported through ``AllocationResult.remaining``.

3. ``to_dict()`` gives the request layer a serializable payload with money
   rendered as integer minor units.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID


def _plain(value: Any) -> Any:
    # Money renders as minor units; UUIDs as strings.
    minor_units = getattr(value, "minor_units", None)
    if minor_units is not None:
        return minor_units
    if isinstance(value, UUID):
        return str(value)
    return value


class PaymentLedgerError(Exception):
    """
    Base exception for all payment ledger errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "PAYMENT_LEDGER_ERROR"

    def to_dict(self) -> dict[str, Any]:
        """Serializable payload: the code plus every public attribute."""
        payload: dict[str, Any] = {"code": self.code, "message": str(self)}
        for key, value in vars(self).items():
            if not key.startswith("_"):
                payload[key] = _plain(value)
        return payload


# Validation


class ValidationError(PaymentLedgerError):
    """Input rejected before it reached the ledger."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class CurrencyMismatchError(ValidationError):
    """Two monetary values in different currencies were combined."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, expected: str, received: str):
        self.expected = str(expected)
        self.received = str(received)
        super().__init__(
            "currency",
            f"expected {self.expected}, received {self.received}",
        )


class InvalidCurrencyError(ValidationError):
    """Currency code is not a recognized ISO 4217 code."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__("currency", f"unknown ISO 4217 code {currency!r}")


# Balance rules


class ExceedsOutstandingError(PaymentLedgerError):
    """
    A single payment is larger than the invoice's outstanding balance.

    Carries the computed outstanding so the caller can display it.
    """

    code: str = "EXCEEDS_OUTSTANDING"

    def __init__(self, invoice_id: UUID, amount: Any, outstanding: Any):
        self.invoice_id = invoice_id
        self.amount = amount
        self.outstanding = outstanding
        super().__init__(
            f"Payment of {amount} exceeds outstanding balance "
            f"{outstanding} on invoice {invoice_id}"
        )


class NothingToWriteOffError(PaymentLedgerError):
    """Write-off attempted on an invoice whose outstanding balance is zero."""

    code: str = "NOTHING_TO_WRITE_OFF"

    def __init__(self, invoice_id: UUID):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice {invoice_id} has no outstanding balance to write off")


# Lookup


class NotFoundError(PaymentLedgerError):
    """Base exception for missing records."""

    code: str = "NOT_FOUND"


class InvoiceNotFoundError(NotFoundError):
    """Invoice with given ID was not found."""

    code: str = "INVOICE_NOT_FOUND"

    def __init__(self, invoice_id: UUID):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice not found: {invoice_id}")


class PaymentNotFoundError(NotFoundError):
    """Payment with given ID was not found."""

    code: str = "PAYMENT_NOT_FOUND"

    def __init__(self, payment_id: UUID):
        self.payment_id = payment_id
        super().__init__(f"Payment not found: {payment_id}")


class AllocationBatchNotFoundError(NotFoundError):
    """No payment carries the given allocation batch id."""

    code: str = "ALLOCATION_BATCH_NOT_FOUND"

    def __init__(self, allocation_batch_id: UUID):
        self.allocation_batch_id = allocation_batch_id
        super().__init__(f"Allocation batch not found: {allocation_batch_id}")


# Reversal


class PaymentAlreadyVoidedError(PaymentLedgerError):
    """Payment is already voided; voiding twice would hide a logic error."""

    code: str = "PAYMENT_ALREADY_VOIDED"

    def __init__(self, payment_id: UUID):
        self.payment_id = payment_id
        super().__init__(f"Payment {payment_id} is already voided")


# Concurrency


class ConcurrencyConflictError(PaymentLedgerError):
    """
    The invoice ledger changed between the read and the write.

    Safe to retry: the operation re-reads fresh state on the next attempt.
    """

    code: str = "CONCURRENCY_CONFLICT"

    def __init__(self, invoice_id: UUID, expected_version: int):
        self.invoice_id = invoice_id
        self.expected_version = expected_version
        super().__init__(
            f"Concurrency conflict on invoice {invoice_id}: ledger version "
            f"{expected_version} was modified by another transaction"
        )
