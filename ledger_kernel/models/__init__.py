"""ORM models for the payment ledger."""

from ledger_kernel.models.invoice import InvoiceModel
from ledger_kernel.models.payment import PaymentModel

__all__ = [
    "InvoiceModel",
    "PaymentModel",
]
