"""Services for the payment ledger (write side and orchestration)."""

from ledger_kernel.services.payment_ledger_service import PaymentLedgerService
from ledger_kernel.services.payment_store import PaymentStoreService
from ledger_kernel.services.transaction import DEFAULT_MAX_ATTEMPTS, run_atomic

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "PaymentLedgerService",
    "PaymentStoreService",
    "run_atomic",
]
