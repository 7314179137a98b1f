"""
InvoiceSelector -- read access to invoices (implements ``InvoiceSource``).

Invoices are owned by the sales module; this selector is the ledger's only
way in.  ``get_invoice(..., for_update=True)`` issues SELECT ... FOR UPDATE
on PostgreSQL so a single-invoice check-then-write holds the row until
commit.  On SQLite the clause is not rendered and the ledger version
compare-and-set alone guards the write.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select

from ledger_kernel.domain.dtos import Invoice
from ledger_kernel.exceptions import InvoiceNotFoundError
from ledger_kernel.models.invoice import InvoiceModel
from ledger_kernel.selectors.base import BaseSelector


class InvoiceSelector(BaseSelector[InvoiceModel]):
    """Loads invoices as ``Invoice`` DTOs."""

    def get_invoice(self, invoice_id: UUID, *, for_update: bool = False) -> Invoice:
        """
        Load one invoice.

        Raises:
            InvoiceNotFoundError: No invoice with that id.
        """
        stmt = (
            select(InvoiceModel)
            .where(InvoiceModel.id == invoice_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        model = self.session.execute(stmt).scalar_one_or_none()
        if model is None:
            raise InvoiceNotFoundError(invoice_id)
        return model.to_dto()

    def list_invoices_for_party(self, party_id: UUID) -> Sequence[Invoice]:
        """All invoices of a party, oldest first (invoice date, then id)."""
        stmt = (
            select(InvoiceModel)
            .where(InvoiceModel.party_id == party_id)
            .order_by(InvoiceModel.invoice_date, InvoiceModel.id)
            .execution_options(populate_existing=True)
        )
        return [model.to_dto() for model in self.session.execute(stmt).scalars()]
