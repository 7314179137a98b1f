"""
Shared input checks for the ledger engines.

Every engine validates its inputs with these helpers so the same bad input
produces the same ValidationError no matter which operation received it.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from uuid import UUID

from ledger_kernel.domain.dtos import Invoice, Payment
from ledger_kernel.domain.values import Money
from ledger_kernel.exceptions import CurrencyMismatchError, ValidationError


def require_positive(amount: Money, field: str = "amount") -> Money:
    """Reject zero and negative amounts."""
    if not amount.is_positive:
        raise ValidationError(field, "amount must be greater than zero")
    return amount


def require_text(value: str | None, field: str) -> str:
    """Return ``value`` stripped; reject None and blank."""
    if value is None or not value.strip():
        raise ValidationError(field, "must not be empty")
    return value.strip()


def require_same_currency(invoice: Invoice, amount: Money) -> None:
    if amount.currency != invoice.currency:
        raise CurrencyMismatchError(invoice.currency.code, amount.currency.code)


def check_payments_belong(invoice: Invoice, payments: Sequence[Payment]) -> None:
    """
    Every payment must reference ``invoice`` and share its currency.

    Raises:
        ValidationError: a payment references another invoice.
        CurrencyMismatchError: a payment is in another currency.
    """
    for payment in payments:
        if payment.invoice_id != invoice.id:
            raise ValidationError(
                "payments",
                f"payment {payment.id} belongs to invoice {payment.invoice_id}, "
                f"not {invoice.id}",
            )
        require_same_currency(invoice, payment.amount)


def group_by_invoice(payments: Iterable[Payment]) -> dict[UUID, list[Payment]]:
    grouped: dict[UUID, list[Payment]] = {}
    for payment in payments:
        grouped.setdefault(payment.invoice_id, []).append(payment)
    return grouped
