"""
Invoice payment ORM model (``ledger_kernel.models.payment``).

Responsibility
--------------
Append-only storage for payment entries.  A row is inserted once and
afterwards only its record status (plus the void audit columns) may
change.  Rows are never deleted; a voided row stays for audit and is
filtered out of every balance.

Architecture position
---------------------
**Kernel > Models** -- persistence.  Imports from ``ledger_kernel.db`` and
the domain DTOs.
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase
from ledger_kernel.db.types import CurrencyCode, LongText, MinorUnits, Reference, ShortCode
from ledger_kernel.domain.dtos import Payment, PaymentType, RecordStatus
from ledger_kernel.domain.values import Money


class PaymentModel(TrackedBase):
    """
    ORM model for invoice payments.

    Maps to the ``Payment`` frozen dataclass.

    Guarantees:
        - amount is a strictly positive count of minor units
          (ck_invoice_payments_amount_positive).
        - record_status stored as string enum value.
        - voided_at / voided_by_id are set together, exactly when
          record_status is ``voided``.
    """

    __tablename__ = "invoice_payments"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_invoice_payments_amount_positive"),
        Index("idx_invoice_payments_invoice_status", "invoice_id", "record_status"),
        Index("idx_invoice_payments_party_id", "party_id"),
        Index("idx_invoice_payments_allocation_batch_id", "allocation_batch_id"),
    )

    invoice_id: Mapped[UUID] = mapped_column(
        ForeignKey("invoices.id"), nullable=False
    )
    party_id: Mapped[UUID] = mapped_column(nullable=False)
    amount: Mapped[MinorUnits] = mapped_column(nullable=False)
    currency: Mapped[CurrencyCode] = mapped_column(nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_method: Mapped[ShortCode] = mapped_column(nullable=False)
    payment_type: Mapped[ShortCode] = mapped_column(
        nullable=False, default=PaymentType.PARTIAL.value
    )
    record_status: Mapped[ShortCode] = mapped_column(
        nullable=False, default=RecordStatus.ACTIVE.value
    )
    reference_number: Mapped[Reference | None] = mapped_column(nullable=True)
    bank_name: Mapped[Reference | None] = mapped_column(nullable=True)
    remarks: Mapped[LongText | None] = mapped_column(nullable=True)
    allocation_batch_id: Mapped[UUID | None] = mapped_column(nullable=True)
    recorded_by: Mapped[UUID | None] = mapped_column(nullable=True)
    voided_at: Mapped[datetime | None] = mapped_column(nullable=True)
    voided_by_id: Mapped[UUID | None] = mapped_column(nullable=True)

    @property
    def is_active(self) -> bool:
        return self.record_status == RecordStatus.ACTIVE.value

    def to_dto(self) -> Payment:
        """Convert ORM model to frozen dataclass."""
        return Payment(
            id=self.id,
            invoice_id=self.invoice_id,
            party_id=self.party_id,
            amount=Money.of(self.amount, self.currency),
            payment_date=self.payment_date,
            payment_method=self.payment_method,
            payment_type=PaymentType(self.payment_type),
            record_status=RecordStatus(self.record_status),
            reference_number=self.reference_number,
            bank_name=self.bank_name,
            remarks=self.remarks,
            allocation_batch_id=self.allocation_batch_id,
            recorded_by=self.recorded_by,
        )

    @classmethod
    def from_dto(cls, dto: Payment, created_by_id: UUID) -> PaymentModel:
        """Create ORM model from frozen dataclass."""
        return cls(
            id=dto.id,
            invoice_id=dto.invoice_id,
            party_id=dto.party_id,
            amount=dto.amount.minor_units,
            currency=dto.amount.currency.code,
            payment_date=dto.payment_date,
            payment_method=dto.payment_method,
            payment_type=dto.payment_type.value,
            record_status=dto.record_status.value,
            reference_number=dto.reference_number,
            bank_name=dto.bank_name,
            remarks=dto.remarks,
            allocation_batch_id=dto.allocation_batch_id,
            recorded_by=dto.recorded_by,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<Payment {self.id}: {self.amount} {self.currency} "
            f"on {self.invoice_id} ({self.record_status})>"
        )
