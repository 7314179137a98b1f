"""
Module: ledger_engines.balance
Responsibility:
    Compute an invoice's total paid and outstanding balance from its
    payment history.  Every settlement status the ledger reports is
    derived from this one function.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The caller fetches the
    payments; this module never reads storage.

Invariants enforced:
    - Only ACTIVE payments count; voided payments are ignored.
    - outstanding == max(0, total_amount - total_paid).
    - Overpayment is never folded into outstanding: it is reported as
      is_overpaid / overpaid_by.

Failure modes:
    - ValidationError if a payment references another invoice.
    - CurrencyMismatchError if a payment is in another currency.
"""

from __future__ import annotations

from collections.abc import Sequence

from ledger_engines.tracer import traced_engine
from ledger_engines.validation import check_payments_belong
from ledger_kernel.domain.dtos import Invoice, LedgerBalance, Payment
from ledger_kernel.domain.values import Money


@traced_engine("ledger_balance", "1.0")
def outstanding_balance(invoice: Invoice, payments: Sequence[Payment]) -> LedgerBalance:
    """
    Balance of ``invoice`` given its payment history.

    ``payments`` may include voided entries; they are skipped.
    """
    check_payments_belong(invoice, payments)

    total_paid = Money.sum(
        (payment.amount for payment in payments if payment.is_active),
        invoice.currency,
    )
    raw = invoice.total_amount - total_paid
    zero = Money.zero(invoice.currency)

    return LedgerBalance(
        invoice_id=invoice.id,
        total_amount=invoice.total_amount,
        total_paid=total_paid,
        outstanding=raw if raw.is_positive else zero,
        is_overpaid=raw.is_negative,
        overpaid_by=-raw if raw.is_negative else zero,
    )
