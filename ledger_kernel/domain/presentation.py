"""
Presentation -- the only place money meets decimal text.

Request handlers and report renderers convert user-entered strings such as
``"1000.50"`` into Money here, and render Money back for display.  Engines
and services never import this module; inside the ledger everything is
integer minor units.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ledger_kernel.domain.values import Currency, Money
from ledger_kernel.exceptions import ValidationError


def parse_major_amount(text: str, currency: str | Currency, field: str = "amount") -> Money:
    """
    Parse a decimal string in major units into Money.

    Parsing is exact: ``"1000.5"`` in INR is 100050 paise.  A value with
    more fractional digits than the currency carries is rejected rather
    than rounded, since silently rounding user input would move money.

    Raises:
        ValidationError: if ``text`` is not a finite decimal number or has
            too many fractional digits.
    """
    if isinstance(currency, str):
        currency = Currency(currency)
    try:
        value = Decimal(str(text).strip())
    except InvalidOperation as exc:
        raise ValidationError(field, f"{text!r} is not a number") from exc
    if not value.is_finite():
        raise ValidationError(field, f"{text!r} is not a finite number")

    scaled = value * currency.minor_unit_factor
    if scaled != scaled.to_integral_value():
        raise ValidationError(
            field,
            f"{text!r} has more than {currency.decimal_places} decimal places",
        )
    return Money.of(int(scaled), currency)


def format_major_amount(money: Money) -> str:
    """Render Money as a plain major-unit string (``Money(100050, INR)`` -> ``"1000.50"``)."""
    places = money.currency.decimal_places
    sign = "-" if money.is_negative else ""
    whole, fraction = divmod(abs(money.minor_units), money.currency.minor_unit_factor)
    if places == 0:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{fraction:0{places}d}"


def format_display(money: Money) -> str:
    """Render Money with its currency code for messages (``"1000.50 INR"``)."""
    return f"{format_major_amount(money)} {money.currency.code}"
