"""
PaymentLedgerService -- Orchestrates ledger operations via engines + storage ports.

Thin glue layer that, per operation:
1. Reads the invoice(s) through the InvoiceSource port
2. Reads their active payments through the PaymentStore port
3. Calls the pure engine (recorder, FIFO allocator, write-off, void)
4. Claims every affected invoice (ledger version compare-and-set), in FIFO
   order, and writes the resulting payment rows

All computation lives in ``ledger_engines``.  The service shares the
caller's session and never commits; wrap calls in ``session_scope()`` or
``run_atomic()`` so each operation is one transaction.

Concurrency:
    Every payment-changing write claims the invoices it touches.  If another
    transaction changed one of them since it was read, the claim raises
    ConcurrencyConflictError and the whole operation should be re-run
    (``run_atomic`` does this).  Claims are per invoice; a FIFO allocation
    never locks the party's untouched invoices.

Usage:
    with session_scope() as session:
        service = PaymentLedgerService(session)
        result = service.allocate_fifo(
            AllocateFifoCommand(
                party_id=party_id, amount=70000,
                payment_date=date(2024, 2, 1), payment_method="cheque",
            ),
            actor_id=actor_id,
        )
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from ledger_engines.allocation import allocate_fifo
from ledger_engines.balance import outstanding_balance
from ledger_engines.recorder import prepare_payment
from ledger_engines.void import prepare_void
from ledger_engines.write_off import prepare_write_off
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.commands import (
    AllocateFifoCommand,
    LedgerCommand,
    RecordPaymentCommand,
    WriteOffCommand,
)
from ledger_kernel.domain.dtos import (
    AllocationResult,
    InvoiceBalance,
    LedgerBalance,
    Payment,
    PaymentDraft,
    PaymentMetadata,
)
from ledger_kernel.domain.ports import InvoiceSource, PaymentStore
from ledger_kernel.domain.values import Money
from ledger_kernel.exceptions import AllocationBatchNotFoundError, PaymentAlreadyVoidedError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.selectors.invoice_selector import InvoiceSelector
from ledger_kernel.services.payment_store import PaymentStoreService

logger = get_logger("services.payment_ledger")


class PaymentLedgerService:
    """
    Orchestrates payment recording, FIFO allocation, write-off and void.

    Contract:
        Stateless between calls apart from its injected collaborators.  One
        instance per session.

    Guarantees:
        - Never commits or rolls back.
        - Every write is preceded by a successful claim on each affected
          invoice, made against the ledger version the computation read.

    Non-goals:
        - Does NOT refund or credit overpayments or unallocated remainders;
          those are reported to the caller.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        *,
        default_currency: str = "INR",
        lock_invoice_rows: bool = True,
        invoice_source: InvoiceSource | None = None,
        payment_store: PaymentStore | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._default_currency = default_currency
        self._lock_invoice_rows = lock_invoice_rows
        self._invoices = invoice_source or InvoiceSelector(session)
        self._payments = payment_store or PaymentStoreService(session, self._clock)

    # =========================================================================
    # Writes
    # =========================================================================

    def record_payment(self, command: RecordPaymentCommand, actor_id: UUID) -> Payment:
        """
        Record one payment against one invoice.

        Raises:
            InvoiceNotFoundError, ValidationError, ExceedsOutstandingError,
            ConcurrencyConflictError
        """
        with LogContext.bind(actor_id=actor_id, invoice_id=command.invoice_id):
            logger.info("record_payment_started", extra={"amount": command.amount})

            invoice = self._invoices.get_invoice(
                command.invoice_id, for_update=self._lock_invoice_rows
            )
            existing = self._payments.list_active_payments(invoice.id)

            draft = PaymentDraft(
                amount=Money.of(command.amount, invoice.currency),
                metadata=PaymentMetadata(
                    payment_date=command.payment_date,
                    payment_method=command.payment_method,
                    reference_number=command.reference_number,
                    bank_name=command.bank_name,
                    remarks=command.remarks,
                    recorded_by=actor_id,
                ),
                payment_type=command.payment_type,
            )
            payment = prepare_payment(invoice=invoice, existing_payments=existing, draft=draft)

            self._payments.claim_invoice(invoice.id, invoice.ledger_version)
            stored = self._payments.insert_payment(payment)

            logger.info(
                "payment_recorded",
                extra={
                    "payment_id": str(stored.id),
                    "amount": stored.amount.minor_units,
                    "payment_type": stored.payment_type.value,
                },
            )
            return stored

    def allocate_fifo(self, command: AllocateFifoCommand, actor_id: UUID) -> AllocationResult:
        """
        Spread a lump payment over the party's open invoices, oldest first.

        An amount larger than everything owed is not an error; the excess is
        returned as ``remaining``.

        Raises:
            ValidationError, ConcurrencyConflictError
        """
        currency = command.currency or self._default_currency
        with LogContext.bind(actor_id=actor_id, party_id=command.party_id):
            invoices = list(self._invoices.list_invoices_for_party(command.party_id))
            payments_by_invoice = self._payments.list_active_payments_for_invoices(
                invoice.id for invoice in invoices
            )
            payments = [
                payment
                for invoice_payments in payments_by_invoice.values()
                for payment in invoice_payments
            ]

            allocation = allocate_fifo(
                party_id=command.party_id,
                total_amount=Money.of(command.amount, currency),
                metadata=PaymentMetadata(
                    payment_date=command.payment_date,
                    payment_method=command.payment_method,
                    reference_number=command.reference_number,
                    bank_name=command.bank_name,
                    remarks=command.remarks,
                    recorded_by=actor_id,
                ),
                invoices=invoices,
                payments=payments,
            )
            result = allocation.result

            versions = {invoice.id: invoice.ledger_version for invoice in invoices}
            with LogContext.bind(allocation_batch_id=result.allocation_batch_id):
                for payment in allocation.payments:
                    self._payments.claim_invoice(payment.invoice_id, versions[payment.invoice_id])
                    self._payments.insert_payment(payment)

                logger.info(
                    "fifo_allocation_recorded",
                    extra={
                        "allocated": result.allocated.minor_units,
                        "remaining": result.remaining.minor_units,
                        "payments_created": len(allocation.payments),
                    },
                )
            return result

    def write_off(self, command: WriteOffCommand, actor_id: UUID) -> Payment:
        """
        Close the invoice's outstanding balance with a write-off payment.

        Raises:
            InvoiceNotFoundError, ValidationError, NothingToWriteOffError,
            ConcurrencyConflictError
        """
        with LogContext.bind(actor_id=actor_id, invoice_id=command.invoice_id):
            invoice = self._invoices.get_invoice(
                command.invoice_id, for_update=self._lock_invoice_rows
            )
            existing = self._payments.list_active_payments(invoice.id)

            payment = prepare_write_off(
                invoice=invoice,
                existing_payments=existing,
                remarks=command.remarks,
                payment_date=command.payment_date or self._clock.today(),
                recorded_by=actor_id,
            )

            self._payments.claim_invoice(invoice.id, invoice.ledger_version)
            stored = self._payments.insert_payment(payment)

            logger.info(
                "invoice_written_off",
                extra={
                    "payment_id": str(stored.id),
                    "amount": stored.amount.minor_units,
                },
            )
            return stored

    def void_payment(self, payment_id: UUID, actor_id: UUID) -> Payment:
        """
        Void one payment.  Its invoice's balance no longer counts it.

        Raises:
            PaymentNotFoundError, PaymentAlreadyVoidedError,
            ConcurrencyConflictError
        """
        payment = self._payments.get_payment(payment_id)
        with LogContext.bind(actor_id=actor_id, invoice_id=payment.invoice_id):
            prepare_void(payment)

            invoice = self._invoices.get_invoice(
                payment.invoice_id, for_update=self._lock_invoice_rows
            )
            self._payments.claim_invoice(invoice.id, invoice.ledger_version)
            voided = self._payments.void_payment(payment_id, actor_id)

            logger.info(
                "payment_voided",
                extra={
                    "payment_id": str(payment_id),
                    "amount": voided.amount.minor_units,
                    "allocation_batch_id": (
                        str(voided.allocation_batch_id)
                        if voided.allocation_batch_id
                        else None
                    ),
                },
            )
            return voided

    def void_allocation_batch(
        self, allocation_batch_id: UUID, actor_id: UUID
    ) -> tuple[Payment, ...]:
        """
        Void every still-active payment of one FIFO allocation.

        Payments of the batch that were voided individually are left alone.

        Raises:
            AllocationBatchNotFoundError: No payment carries the batch id.
            PaymentAlreadyVoidedError: Every payment of the batch is already
                voided.
            ConcurrencyConflictError
        """
        with LogContext.bind(actor_id=actor_id, allocation_batch_id=allocation_batch_id):
            batch = list(self._payments.list_batch_payments(allocation_batch_id))
            if not batch:
                raise AllocationBatchNotFoundError(allocation_batch_id)

            active = [payment for payment in batch if payment.is_active]
            if not active:
                raise PaymentAlreadyVoidedError(batch[0].id)

            voided: list[Payment] = []
            for payment in active:
                prepare_void(payment)
                invoice = self._invoices.get_invoice(payment.invoice_id)
                self._payments.claim_invoice(invoice.id, invoice.ledger_version)
                voided.append(self._payments.void_payment(payment.id, actor_id))

            logger.info(
                "allocation_batch_voided",
                extra={
                    "payments_voided": len(voided),
                    "amount": sum(payment.amount.minor_units for payment in voided),
                },
            )
            return tuple(voided)

    def execute(self, command: LedgerCommand, actor_id: UUID) -> Payment | AllocationResult:
        """Run any of the three tagged commands."""
        if isinstance(command, RecordPaymentCommand):
            return self.record_payment(command, actor_id)
        if isinstance(command, AllocateFifoCommand):
            return self.allocate_fifo(command, actor_id)
        if isinstance(command, WriteOffCommand):
            return self.write_off(command, actor_id)
        raise TypeError(f"Unsupported ledger command: {type(command).__name__}")

    # =========================================================================
    # Reads
    # =========================================================================

    def get_balance(self, invoice_id: UUID) -> LedgerBalance:
        """Current balance of one invoice."""
        invoice = self._invoices.get_invoice(invoice_id)
        return outstanding_balance(
            invoice=invoice,
            payments=self._payments.list_active_payments(invoice_id),
        )

    def get_party_balances(self, party_id: UUID) -> list[InvoiceBalance]:
        """Every invoice of a party with its balance, oldest first."""
        invoices = sorted(
            self._invoices.list_invoices_for_party(party_id),
            key=lambda invoice: (invoice.invoice_date, invoice.id),
        )
        payments_by_invoice = self._payments.list_active_payments_for_invoices(
            invoice.id for invoice in invoices
        )
        return [
            InvoiceBalance(
                invoice=invoice,
                balance=outstanding_balance(
                    invoice=invoice,
                    payments=payments_by_invoice.get(invoice.id, []),
                ),
            )
            for invoice in invoices
        ]
