"""
DTOs -- Pure domain data transfer objects for the payment ledger.

Responsibility:
    Defines the immutable data structures that flow between the storage
    adapters, the engines and the caller: Invoice and Payment (records),
    LedgerBalance (the derived outstanding balance), PaymentMetadata and
    PaymentDraft (engine inputs), and AllocationLine / AllocationResult
    (the FIFO allocation report).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Free of ORM dependencies.  ORM models convert to and from these types
    via ``to_dto()`` / ``from_dto()`` at the persistence boundary.

Invariants enforced:
    - Invoice.total_amount is never negative
    - Payment.amount is strictly positive
    - LedgerBalance.outstanding is never negative; overpayment is reported
      through ``is_overpaid`` / ``overpaid_by`` instead
    - AllocationResult: allocated + remaining == total_amount, and the
      allocation lines sum to allocated

Data flow:
    Invoice + Payment* -> LedgerBalance
    PaymentDraft -> Payment                      (single payment)
    PaymentMetadata -> Payment* + AllocationResult (FIFO allocation)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any
from uuid import UUID

from ledger_kernel.domain.values import Currency, Money
from ledger_kernel.exceptions import ValidationError

# Payment method recorded on synthetic write-off payments.
WRITE_OFF_METHOD = "write-off"


class RecordStatus(str, Enum):
    """
    Audit status of a payment row.

    Contract:
        Lifecycle: ACTIVE -> VOIDED.  Payments are never deleted; a voided
        payment is excluded from every sum but retained for audit.
    """

    ACTIVE = "active"
    VOIDED = "voided"


class PaymentType(str, Enum):
    """How a payment relates to the invoice balance when it was recorded."""

    ADVANCE = "advance"
    PARTIAL = "partial"
    FULL = "full"


class SettlementStatus(str, Enum):
    """
    Settlement state of an invoice, derived from its balance (never stored).

    Contract:
        UNPAID -> PARTIALLY_PAID -> FULLY_PAID.  Overpayment is a side flag
        on LedgerBalance, not a state.
    """

    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    FULLY_PAID = "fully_paid"


class AllocationLineStatus(str, Enum):
    """Result of a FIFO allocation on one invoice."""

    FULLY_PAID = "fully_paid"
    PARTIALLY_PAID = "partially_paid"


@dataclass(frozen=True)
class Invoice:
    """
    An invoice as the ledger sees it.

    Contract:
        Produced upstream by the sales module.  Read-only to the ledger:
        nothing here ever changes ``total_amount``.

    Guarantees:
        - total_amount >= 0 (validated in __post_init__)

    ``ledger_version`` is the optimistic concurrency token bumped by every
    write to the invoice's payments.
    """

    id: UUID
    invoice_number: str
    party_id: UUID
    invoice_date: date
    total_amount: Money
    ledger_version: int = 0

    def __post_init__(self) -> None:
        if self.total_amount.is_negative:
            raise ValidationError("total_amount", "invoice total cannot be negative")

    @property
    def currency(self) -> Currency:
        return self.total_amount.currency


@dataclass(frozen=True)
class Payment:
    """
    One payment entry against one invoice.

    Contract:
        Created once (single payment, FIFO allocation or write-off);
        afterwards only ``record_status`` may change, and only from ACTIVE
        to VOIDED.

    Guarantees:
        - amount is strictly positive (validated in __post_init__)
    """

    id: UUID
    invoice_id: UUID
    party_id: UUID
    amount: Money
    payment_date: date
    payment_method: str
    payment_type: PaymentType = PaymentType.PARTIAL
    record_status: RecordStatus = RecordStatus.ACTIVE
    reference_number: str | None = None
    bank_name: str | None = None
    remarks: str | None = None
    allocation_batch_id: UUID | None = None
    recorded_by: UUID | None = None

    def __post_init__(self) -> None:
        if not self.amount.is_positive:
            raise ValidationError("amount", "payment amount must be greater than zero")
        if not self.payment_method or not self.payment_method.strip():
            raise ValidationError("payment_method", "payment method is required")

    @property
    def is_active(self) -> bool:
        return self.record_status == RecordStatus.ACTIVE

    @property
    def is_write_off(self) -> bool:
        return self.payment_method == WRITE_OFF_METHOD

    def voided(self) -> Payment:
        """Copy of this payment with record status VOIDED."""
        return replace(self, record_status=RecordStatus.VOIDED)


@dataclass(frozen=True)
class LedgerBalance:
    """
    Outstanding balance of one invoice, derived from its active payments.

    Guarantees:
        - outstanding >= 0
        - total_paid + outstanding == total_amount whenever not overpaid
        - overpaid_by is zero unless is_overpaid
    """

    invoice_id: UUID
    total_amount: Money
    total_paid: Money
    outstanding: Money
    is_overpaid: bool
    overpaid_by: Money

    @property
    def status(self) -> SettlementStatus:
        if self.outstanding.is_zero:
            return SettlementStatus.FULLY_PAID
        if self.total_paid.is_zero:
            return SettlementStatus.UNPAID
        return SettlementStatus.PARTIALLY_PAID


@dataclass(frozen=True)
class InvoiceBalance:
    """An invoice paired with its current balance, for read-side listings."""

    invoice: Invoice
    balance: LedgerBalance


@dataclass(frozen=True)
class PaymentMetadata:
    """Fields shared by every payment created in one operation."""

    payment_date: date
    payment_method: str
    reference_number: str | None = None
    bank_name: str | None = None
    remarks: str | None = None
    recorded_by: UUID | None = None


@dataclass(frozen=True)
class PaymentDraft:
    """A caller's request to record one payment, before validation."""

    amount: Money
    metadata: PaymentMetadata
    payment_type: PaymentType | None = None


@dataclass(frozen=True)
class AllocationLine:
    """
    FIFO allocation outcome for a single invoice.

    Guarantees:
        - 0 < allocated <= outstanding_before
    """

    invoice_id: UUID
    invoice_number: str
    invoice_date: date
    outstanding_before: Money
    allocated: Money
    status: AllocationLineStatus
    payment_id: UUID

    @property
    def outstanding_after(self) -> Money:
        return self.outstanding_before - self.allocated

    def to_dict(self) -> dict[str, Any]:
        return {
            "invoice_id": str(self.invoice_id),
            "invoice_number": self.invoice_number,
            "invoice_date": self.invoice_date.isoformat(),
            "outstanding_before": self.outstanding_before.minor_units,
            "allocated": self.allocated.minor_units,
            "outstanding_after": self.outstanding_after.minor_units,
            "status": self.status.value,
            "payment_id": str(self.payment_id),
        }


@dataclass(frozen=True)
class AllocationResult:
    """
    Complete FIFO allocation report.

    Contract:
        Returned to the caller verbatim; not persisted as its own entity.
        The persisted form is the set of payments sharing
        ``allocation_batch_id``.

    Guarantees:
        - allocated + remaining == total_amount
        - sum(line.allocated) == allocated
        - lines are in the order the invoices were visited (oldest first)
    """

    party_id: UUID
    allocation_batch_id: UUID
    total_amount: Money
    allocated: Money
    remaining: Money
    lines: tuple[AllocationLine, ...]

    @property
    def is_fully_allocated(self) -> bool:
        """True if the entire submitted amount was applied to invoices."""
        return self.remaining.is_zero

    @property
    def invoice_count(self) -> int:
        return len(self.lines)

    def to_dict(self) -> dict[str, Any]:
        """Render with integer minor units for the request layer."""
        return {
            "party_id": str(self.party_id),
            "allocation_batch_id": str(self.allocation_batch_id),
            "currency": self.total_amount.currency.code,
            "total_amount": self.total_amount.minor_units,
            "allocated": self.allocated.minor_units,
            "remaining": self.remaining.minor_units,
            "allocations": [line.to_dict() for line in self.lines],
        }
