"""
Ports -- storage contracts the ledger is written against.

The service layer depends on these protocols, not on SQLAlchemy; the
SQLAlchemy adapters live in ``ledger_kernel.selectors.invoice_selector``
and ``ledger_kernel.services.payment_store``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable
from uuid import UUID

from ledger_kernel.domain.dtos import Invoice, Payment


@runtime_checkable
class InvoiceSource(Protocol):
    """
    Read access to invoices produced by the sales module.

    ``list_invoices_for_party`` may return settled invoices too; the
    ledger filters on outstanding balance itself.
    """

    def get_invoice(self, invoice_id: UUID, *, for_update: bool = False) -> Invoice: ...

    def list_invoices_for_party(self, party_id: UUID) -> Sequence[Invoice]: ...


@runtime_checkable
class PaymentStore(Protocol):
    """
    Append-only payment storage with void support.

    ``claim_invoice`` is the compare-and-set on the invoice's ledger
    version; it raises ConcurrencyConflictError when the version moved.
    """

    def list_active_payments(self, invoice_id: UUID) -> Sequence[Payment]: ...

    def list_active_payments_for_invoices(
        self, invoice_ids: Iterable[UUID]
    ) -> dict[UUID, list[Payment]]: ...

    def get_payment(self, payment_id: UUID) -> Payment: ...

    def list_batch_payments(self, allocation_batch_id: UUID) -> Sequence[Payment]: ...

    def insert_payment(self, payment: Payment) -> Payment: ...

    def void_payment(self, payment_id: UUID, actor_id: UUID) -> Payment: ...

    def claim_invoice(self, invoice_id: UUID, expected_version: int) -> int: ...
