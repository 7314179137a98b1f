"""
PaymentSelector -- read access to invoice payments.

Every list is ordered by payment date, then insertion time, then id, so the
same ledger always renders in the same order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from uuid import UUID

from sqlalchemy import select

from ledger_kernel.domain.dtos import Payment, RecordStatus
from ledger_kernel.exceptions import PaymentNotFoundError
from ledger_kernel.models.invoice import InvoiceModel
from ledger_kernel.models.payment import PaymentModel
from ledger_kernel.selectors.base import BaseSelector

_ORDERING = (PaymentModel.payment_date, PaymentModel.created_at, PaymentModel.id)


class PaymentSelector(BaseSelector[PaymentModel]):
    """Loads payments as ``Payment`` DTOs."""

    def list_active_payments(self, invoice_id: UUID) -> Sequence[Payment]:
        stmt = (
            select(PaymentModel)
            .where(
                PaymentModel.invoice_id == invoice_id,
                PaymentModel.record_status == RecordStatus.ACTIVE.value,
            )
            .order_by(*_ORDERING)
            .execution_options(populate_existing=True)
        )
        return [model.to_dto() for model in self.session.execute(stmt).scalars()]

    def list_active_payments_for_invoices(
        self, invoice_ids: Iterable[UUID]
    ) -> dict[UUID, list[Payment]]:
        """
        Active payments for many invoices in one query.

        Every requested id is present in the result, mapped to an empty list
        when the invoice has no active payments.
        """
        ids = list(invoice_ids)
        grouped: dict[UUID, list[Payment]] = {invoice_id: [] for invoice_id in ids}
        if not ids:
            return grouped
        stmt = (
            select(PaymentModel)
            .where(
                PaymentModel.invoice_id.in_(ids),
                PaymentModel.record_status == RecordStatus.ACTIVE.value,
            )
            .order_by(*_ORDERING)
            .execution_options(populate_existing=True)
        )
        for model in self.session.execute(stmt).scalars():
            grouped[model.invoice_id].append(model.to_dto())
        return grouped

    def get_payment(self, payment_id: UUID) -> Payment:
        """
        Load one payment, active or voided.

        Raises:
            PaymentNotFoundError: No payment with that id.
        """
        model = self.get_model(payment_id)
        return model.to_dto()

    def get_model(self, payment_id: UUID) -> PaymentModel:
        stmt = (
            select(PaymentModel)
            .where(PaymentModel.id == payment_id)
            .execution_options(populate_existing=True)
        )
        model = self.session.execute(stmt).scalar_one_or_none()
        if model is None:
            raise PaymentNotFoundError(payment_id)
        return model

    def list_batch_payments(self, allocation_batch_id: UUID) -> Sequence[Payment]:
        """All payments of one FIFO allocation, in the order they were allocated."""
        stmt = (
            select(PaymentModel)
            .join(InvoiceModel, InvoiceModel.id == PaymentModel.invoice_id)
            .where(PaymentModel.allocation_batch_id == allocation_batch_id)
            .order_by(InvoiceModel.invoice_date, InvoiceModel.id)
            .execution_options(populate_existing=True)
        )
        return [model.to_dto() for model in self.session.execute(stmt).scalars()]
