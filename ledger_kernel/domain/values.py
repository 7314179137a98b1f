"""
Values -- Immutable, self-validating monetary value objects.

Responsibility:
    Provides the value types every ledger computation is written in:
    Currency and Money.  Money is a fixed-point integer count of minor
    units (paise for INR, cents for USD) so that repeated additions can
    never drift the way binary floating point does.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every other domain module and by the engines.  No outward
    dependencies except ledger_kernel.domain.currency (CurrencyRegistry).

Invariants enforced:
    - Money.minor_units is always an ``int`` (never float, Decimal or bool)
    - Currency codes are validated against the registry at construction
    - Arithmetic and ordering never mix currencies

Failure modes:
    - TypeError on construction with a non-integer amount
    - InvalidCurrencyError on an unknown currency code
    - CurrencyMismatchError when arithmetic mixes currencies

Audit relevance:
    Ledger totals are sums of these values.  Integer minor units make
    ``total_paid + outstanding == total_amount`` an exact identity rather
    than an approximation.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ledger_kernel.domain.currency import CurrencyRegistry
from ledger_kernel.exceptions import CurrencyMismatchError, InvalidCurrencyError


@dataclass(frozen=True, slots=True)
class Currency:
    """
    ISO 4217 currency code value object.

    Contract:
        Wraps a three-letter ISO 4217 code. Validated and normalized (uppercased)
        on construction. Unknown codes are rejected immediately.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - code is always uppercase and stripped of whitespace
    """

    code: str

    def __post_init__(self) -> None:
        normalized = self.code.upper().strip() if isinstance(self.code, str) else ""
        if not CurrencyRegistry.is_valid(normalized):
            raise InvalidCurrencyError(str(self.code))
        # Override frozen to set normalized value
        object.__setattr__(self, "code", normalized)

    @property
    def decimal_places(self) -> int:
        """Number of minor-unit digits (2 for INR)."""
        return CurrencyRegistry.get_decimal_places(self.code)

    @property
    def minor_unit_factor(self) -> int:
        """Minor units per major unit."""
        return 10 ** self.decimal_places

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount in integer minor units.

    Contract:
        Pairs an integer count of minor units with its Currency -- they are
        NEVER separated.  Conversion to and from decimal display strings
        lives in ``ledger_kernel.domain.presentation`` and nowhere else.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - minor_units is always an int
        - Addition, subtraction and comparison enforce same currency

    Non-goals:
        - Does NOT scale (no multiplication or division); the ledger only
          adds, subtracts and compares.
        - Does NOT perform currency conversion.
    """

    minor_units: int
    currency: Currency

    def __post_init__(self) -> None:
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise TypeError(
                f"minor_units must be int, got {type(self.minor_units).__name__}"
            )
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

    @classmethod
    def of(cls, minor_units: int, currency: str | Currency) -> Money:
        """Create Money from an integer count of minor units."""
        if isinstance(currency, str):
            currency = Currency(currency)
        return cls(minor_units=minor_units, currency=currency)

    @classmethod
    def zero(cls, currency: str | Currency) -> Money:
        """Create a zero amount in the given currency."""
        if isinstance(currency, str):
            currency = Currency(currency)
        return cls(minor_units=0, currency=currency)

    @classmethod
    def sum(cls, amounts: Iterable[Money], currency: str | Currency) -> Money:
        """Sum amounts; an empty iterable yields zero in ``currency``."""
        total = cls.zero(currency)
        for amount in amounts:
            total = total + amount
        return total

    @property
    def is_zero(self) -> bool:
        """Check if amount is zero."""
        return self.minor_units == 0

    @property
    def is_positive(self) -> bool:
        """Check if amount is positive."""
        return self.minor_units > 0

    @property
    def is_negative(self) -> bool:
        """Check if amount is negative."""
        return self.minor_units < 0

    def _check_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency.code, other.currency.code)

    def __add__(self, other: Money) -> Money:
        """Add two Money values. Must be same currency."""
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other)
        return Money(minor_units=self.minor_units + other.minor_units, currency=self.currency)

    def __sub__(self, other: Money) -> Money:
        """Subtract two Money values. Must be same currency."""
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other)
        return Money(minor_units=self.minor_units - other.minor_units, currency=self.currency)

    def __neg__(self) -> Money:
        """Negate the amount."""
        return Money(minor_units=-self.minor_units, currency=self.currency)

    def __abs__(self) -> Money:
        """Absolute value."""
        return Money(minor_units=abs(self.minor_units), currency=self.currency)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other)
        return self.minor_units < other.minor_units

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other)
        return self.minor_units <= other.minor_units

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other)
        return self.minor_units > other.minor_units

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other)
        return self.minor_units >= other.minor_units

    def __str__(self) -> str:
        return f"{self.minor_units} {self.currency.code} minor units"

    def __repr__(self) -> str:
        return f"Money({self.minor_units!r}, {self.currency!r})"
