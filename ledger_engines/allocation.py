"""
Module: ledger_engines.allocation
Responsibility:
    Distribute one lump payment across a party's outstanding invoices,
    oldest invoice first (FIFO), producing one Payment per invoice touched
    and an AllocationResult describing the split.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    The caller supplies the party's invoices and their payments; the
    service persists the returned payments.

Invariants enforced:
    - Conservation: allocated + remaining == total_amount, and the lines
      sum to allocated (asserted before returning).
    - Ordering: invoices are visited by ascending invoice date, ties broken
      by invoice id, so the same inputs always allocate the same way.
    - An invoice with zero outstanding is never touched.
    - Each line allocates at most the invoice's outstanding balance.
    - Early exit: once nothing remains, no further invoice is visited.
    - Every payment produced by one call shares one allocation_batch_id.

Failure modes:
    - ValidationError if total_amount <= 0 or the payment method is empty.
    - No open invoices, or more money than is owed, is NOT an error: the
      unallocated part comes back as ``remaining`` for the caller to handle.

Audit relevance:
    The batch id lets the whole allocation be displayed or voided as a
    unit.  Invoices in a currency other than the payment's are skipped and
    the skip is logged, since money cannot settle a debt in another
    currency.

Usage:
    from ledger_engines.allocation import allocate_fifo

    allocation = allocate_fifo(
        party_id=party_id,
        total_amount=Money.of(70000, "INR"),
        metadata=PaymentMetadata(payment_date=date(2024, 2, 1), payment_method="cheque"),
        invoices=invoices,
        payments=payments,
    )
    allocation.result.remaining  # Money(0, Currency('INR'))
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from uuid import UUID, uuid4

from ledger_engines.balance import outstanding_balance
from ledger_engines.tracer import traced_engine
from ledger_engines.validation import group_by_invoice, require_positive, require_text
from ledger_kernel.domain.dtos import (
    AllocationLine,
    AllocationLineStatus,
    AllocationResult,
    Invoice,
    Payment,
    PaymentMetadata,
    PaymentType,
)
from ledger_kernel.domain.values import Money
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.allocation")


@dataclass(frozen=True)
class OpenInvoice:
    """An invoice with a positive outstanding balance, ready for allocation."""

    invoice: Invoice
    outstanding: Money

    @property
    def sort_key(self) -> tuple:
        return (self.invoice.invoice_date, self.invoice.id)


@dataclass(frozen=True)
class FifoAllocation:
    """
    Output of ``allocate_fifo``.

    Guarantees:
        - ``payments[i]`` settles ``result.lines[i]`` (same invoice, same amount).
    """

    result: AllocationResult
    payments: tuple[Payment, ...]


def open_invoices(
    party_id: UUID,
    currency_amount: Money,
    invoices: Sequence[Invoice],
    payments: Sequence[Payment],
) -> list[OpenInvoice]:
    """
    The party's invoices that still owe money, in FIFO order.

    Invoices of other parties are ignored, as are invoices in a currency
    other than ``currency_amount``'s.
    """
    by_invoice = group_by_invoice(payments)
    skipped_currency = 0
    candidates: list[OpenInvoice] = []

    for invoice in invoices:
        if invoice.party_id != party_id:
            continue
        if invoice.currency != currency_amount.currency:
            skipped_currency += 1
            continue
        balance = outstanding_balance(invoice, by_invoice.get(invoice.id, ()))
        if balance.outstanding.is_positive:
            candidates.append(OpenInvoice(invoice=invoice, outstanding=balance.outstanding))

    if skipped_currency:
        logger.warning(
            "fifo_allocation_currency_skipped",
            extra={
                "party_id": str(party_id),
                "currency": currency_amount.currency.code,
                "skipped_invoices": skipped_currency,
            },
        )

    candidates.sort(key=lambda open_invoice: open_invoice.sort_key)
    return candidates


@traced_engine(
    "fifo_allocation",
    "1.0",
    fingerprint_fields=("party_id", "total_amount", "invoices", "payments"),
)
def allocate_fifo(
    party_id: UUID,
    total_amount: Money,
    metadata: PaymentMetadata,
    invoices: Sequence[Invoice],
    payments: Sequence[Payment],
    *,
    allocation_batch_id: UUID | None = None,
    id_factory: Callable[[], UUID] = uuid4,
) -> FifoAllocation:
    """
    Allocate ``total_amount`` across the party's invoices, oldest first.

    Args:
        party_id: The payer.  Invoices of other parties are ignored.
        total_amount: The lump sum, strictly positive.
        metadata: Date, method and references copied onto every payment.
        invoices: The party's invoices (settled ones may be included).
        payments: Existing payments on those invoices (voided ones may be
            included; only active ones reduce the outstanding).
        allocation_batch_id: Tag shared by every payment created here;
            generated when not given.
        id_factory: Source of payment ids.

    Raises:
        ValidationError: total_amount <= 0 or empty payment method.
    """
    require_positive(total_amount, "total_amount")
    method = require_text(metadata.payment_method, "payment_method")

    batch_id = allocation_batch_id or id_factory()
    currency = total_amount.currency
    candidates = open_invoices(party_id, total_amount, invoices, payments)

    logger.info(
        "fifo_allocation_started",
        extra={
            "party_id": str(party_id),
            "allocation_batch_id": str(batch_id),
            "total_amount": total_amount.minor_units,
            "currency": currency.code,
            "open_invoice_count": len(candidates),
        },
    )

    remaining = total_amount
    lines: list[AllocationLine] = []
    new_payments: list[Payment] = []

    for candidate in candidates:
        if not remaining.is_positive:
            break

        invoice = candidate.invoice
        allocated = min(remaining, candidate.outstanding)
        clears_invoice = allocated == candidate.outstanding
        payment_id = id_factory()

        new_payments.append(
            Payment(
                id=payment_id,
                invoice_id=invoice.id,
                party_id=party_id,
                amount=allocated,
                payment_date=metadata.payment_date,
                payment_method=method,
                payment_type=PaymentType.FULL if clears_invoice else PaymentType.PARTIAL,
                reference_number=metadata.reference_number,
                bank_name=metadata.bank_name,
                remarks=metadata.remarks,
                allocation_batch_id=batch_id,
                recorded_by=metadata.recorded_by,
            )
        )
        lines.append(
            AllocationLine(
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                invoice_date=invoice.invoice_date,
                outstanding_before=candidate.outstanding,
                allocated=allocated,
                status=(
                    AllocationLineStatus.FULLY_PAID
                    if clears_invoice
                    else AllocationLineStatus.PARTIALLY_PAID
                ),
                payment_id=payment_id,
            )
        )
        remaining = remaining - allocated

    allocated_total = Money.sum((line.allocated for line in lines), currency)

    # INVARIANT: conservation -- every submitted minor unit is either allocated or remaining
    assert allocated_total + remaining == total_amount, (
        f"FIFO conservation violated: {allocated_total} + {remaining} != {total_amount}"
    )

    result = AllocationResult(
        party_id=party_id,
        allocation_batch_id=batch_id,
        total_amount=total_amount,
        allocated=allocated_total,
        remaining=remaining,
        lines=tuple(lines),
    )

    if not candidates:
        logger.warning(
            "fifo_allocation_no_open_invoices",
            extra={
                "party_id": str(party_id),
                "total_amount": total_amount.minor_units,
            },
        )
    elif remaining.is_positive:
        logger.warning(
            "fifo_allocation_unallocated_remainder",
            extra={
                "party_id": str(party_id),
                "remaining": remaining.minor_units,
            },
        )

    logger.info(
        "fifo_allocation_completed",
        extra={
            "party_id": str(party_id),
            "allocation_batch_id": str(batch_id),
            "total_amount": total_amount.minor_units,
            "allocated": allocated_total.minor_units,
            "remaining": remaining.minor_units,
            "invoices_touched": len(lines),
        },
    )

    return FifoAllocation(result=result, payments=tuple(new_payments))
