"""Selectors for the payment ledger (read side)."""

from ledger_kernel.selectors.invoice_selector import InvoiceSelector
from ledger_kernel.selectors.payment_selector import PaymentSelector

__all__ = [
    "InvoiceSelector",
    "PaymentSelector",
]
