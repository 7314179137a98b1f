"""
Invoice ORM model (``ledger_kernel.models.invoice``).

Responsibility
--------------
Persistence for the invoices the ledger settles.  Rows are written by the
sales module; the ledger reads them and bumps ``ledger_version`` on every
payment-changing write, never touching the amounts.

Architecture position
---------------------
**Kernel > Models** -- persistence.  Imports from ``ledger_kernel.db`` and
the domain DTOs.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase
from ledger_kernel.db.types import CurrencyCode, MinorUnits, Reference
from ledger_kernel.domain.dtos import Invoice
from ledger_kernel.domain.values import Money


class InvoiceModel(TrackedBase):
    """
    ORM model for invoices.

    Maps to the ``Invoice`` frozen dataclass.

    Guarantees:
        - invoice_number is unique (uq_invoices_invoice_number).
        - total_amount is a non-negative count of minor units
          (ck_invoices_total_amount_non_negative).
        - ledger_version starts at 0 and only ever increases.
    """

    __tablename__ = "invoices"

    __table_args__ = (
        UniqueConstraint("invoice_number", name="uq_invoices_invoice_number"),
        CheckConstraint("total_amount >= 0", name="ck_invoices_total_amount_non_negative"),
        Index("idx_invoices_party_date", "party_id", "invoice_date"),
    )

    invoice_number: Mapped[Reference] = mapped_column(nullable=False)
    party_id: Mapped[UUID] = mapped_column(nullable=False)
    invoice_date: Mapped[date] = mapped_column(Date, nullable=False)
    currency: Mapped[CurrencyCode] = mapped_column(nullable=False)
    total_amount: Mapped[MinorUnits] = mapped_column(nullable=False)
    ledger_version: Mapped[int] = mapped_column(nullable=False, default=0)

    def to_dto(self) -> Invoice:
        """Convert ORM model to frozen dataclass."""
        return Invoice(
            id=self.id,
            invoice_number=self.invoice_number,
            party_id=self.party_id,
            invoice_date=self.invoice_date,
            total_amount=Money.of(self.total_amount, self.currency),
            ledger_version=self.ledger_version,
        )

    @classmethod
    def from_dto(cls, dto: Invoice, created_by_id: UUID) -> InvoiceModel:
        """Create ORM model from frozen dataclass."""
        return cls(
            id=dto.id,
            invoice_number=dto.invoice_number,
            party_id=dto.party_id,
            invoice_date=dto.invoice_date,
            currency=dto.currency.code,
            total_amount=dto.total_amount.minor_units,
            ledger_version=dto.ledger_version,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<Invoice {self.invoice_number}: {self.total_amount} {self.currency}>"
