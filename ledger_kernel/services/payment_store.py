"""
PaymentStoreService -- append-only payment storage (implements ``PaymentStore``).

Responsibility:
    Inserts payment rows, flips them to VOIDED, and claims invoices for a
    write by advancing their ledger version.  Reads are delegated to
    ``PaymentSelector``.

Architecture position:
    Kernel > Services -- imperative shell.  Called only by
    ``PaymentLedgerService``; engines never see this class.

Invariants enforced:
    - Append-only: rows are inserted once; the only later change is
      ACTIVE -> VOIDED, recorded with voided_at / voided_by_id.
    - Compare-and-set: ``claim_invoice`` succeeds only if the invoice's
      ledger_version still equals the version the caller read.  Under
      PostgreSQL the UPDATE also holds the row lock until commit.
    - Flush-only: never commits.

Failure modes:
    - ConcurrencyConflictError: the version moved, or PostgreSQL reported a
      serialization failure or deadlock on the claim.
    - PaymentNotFoundError / PaymentAlreadyVoidedError on void.
    - ValidationError if a payment is inserted without a recording actor.

Audit relevance:
    created_by_id on every row is the recording actor; a void stamps the
    voiding actor and time without touching the amount.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import Payment, RecordStatus
from ledger_kernel.exceptions import (
    ConcurrencyConflictError,
    PaymentAlreadyVoidedError,
    ValidationError,
)
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.invoice import InvoiceModel
from ledger_kernel.models.payment import PaymentModel
from ledger_kernel.selectors.payment_selector import PaymentSelector
from ledger_kernel.services.base import BaseService

logger = get_logger("services.payment_store")

# serialization_failure, deadlock_detected
_RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def _sqlstate(exc: OperationalError) -> str | None:
    return getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)


class PaymentStoreService(BaseService[PaymentModel]):
    """
    SQLAlchemy-backed payment store.

    Contract:
        Shares the caller's session; every write is flushed, none committed.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._selector = PaymentSelector(session)

    # -- reads ---------------------------------------------------------------

    def list_active_payments(self, invoice_id: UUID) -> Sequence[Payment]:
        return self._selector.list_active_payments(invoice_id)

    def list_active_payments_for_invoices(
        self, invoice_ids: Iterable[UUID]
    ) -> dict[UUID, list[Payment]]:
        return self._selector.list_active_payments_for_invoices(invoice_ids)

    def get_payment(self, payment_id: UUID) -> Payment:
        return self._selector.get_payment(payment_id)

    def list_batch_payments(self, allocation_batch_id: UUID) -> Sequence[Payment]:
        return self._selector.list_batch_payments(allocation_batch_id)

    # -- writes --------------------------------------------------------------

    def insert_payment(self, payment: Payment) -> Payment:
        """
        Append one payment row.

        Raises:
            ValidationError: ``payment.recorded_by`` is not set.
        """
        if payment.recorded_by is None:
            raise ValidationError("recorded_by", "payments must name the recording actor")

        model = PaymentModel.from_dto(payment, created_by_id=payment.recorded_by)
        self.session.add(model)
        self.session.flush()

        logger.debug(
            "payment_row_inserted",
            extra={
                "payment_id": str(payment.id),
                "invoice_id": str(payment.invoice_id),
                "amount": payment.amount.minor_units,
            },
        )
        return model.to_dto()

    def void_payment(self, payment_id: UUID, actor_id: UUID) -> Payment:
        """
        Flip a payment to VOIDED.

        Raises:
            PaymentNotFoundError: No payment with that id.
            PaymentAlreadyVoidedError: The payment is already voided.
        """
        model = self._selector.get_model(payment_id)
        if not model.is_active:
            raise PaymentAlreadyVoidedError(payment_id)

        model.record_status = RecordStatus.VOIDED.value
        model.voided_at = self._clock.now()
        model.voided_by_id = actor_id
        model.updated_by_id = actor_id
        self.session.flush()

        logger.debug(
            "payment_row_voided",
            extra={"payment_id": str(payment_id), "voided_by_id": str(actor_id)},
        )
        return model.to_dto()

    def claim_invoice(self, invoice_id: UUID, expected_version: int) -> int:
        """
        Advance the invoice's ledger version if nobody else has.

        Returns:
            The new ledger version.

        Raises:
            ConcurrencyConflictError: The stored version is no longer
                ``expected_version``.
        """
        stmt = (
            update(InvoiceModel)
            .where(
                InvoiceModel.id == invoice_id,
                InvoiceModel.ledger_version == expected_version,
            )
            .values(ledger_version=InvoiceModel.ledger_version + 1)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
        except OperationalError as exc:
            if _sqlstate(exc) in _RETRYABLE_SQLSTATES:
                logger.warning(
                    "invoice_claim_serialization_failure",
                    extra={"invoice_id": str(invoice_id), "sqlstate": _sqlstate(exc)},
                )
                raise ConcurrencyConflictError(invoice_id, expected_version) from exc
            raise

        if result.rowcount != 1:
            logger.warning(
                "invoice_claim_conflict",
                extra={
                    "invoice_id": str(invoice_id),
                    "expected_version": expected_version,
                },
            )
            raise ConcurrencyConflictError(invoice_id, expected_version)

        return expected_version + 1
