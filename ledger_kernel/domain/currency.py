"""Currency -- ISO 4217 registry and minor-unit exponents."""

from dataclasses import dataclass
from typing import ClassVar

from ledger_kernel.exceptions import InvalidCurrencyError


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str

    @property
    def minor_unit_factor(self) -> int:
        """Minor units per major unit (100 paise per rupee)."""
        return 10 ** self.decimal_places


class CurrencyRegistry:
    """Registry of ISO 4217 currencies with their minor-unit exponents."""

    # Source: https://www.iso.org/iso-4217-currency-codes.html
    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        "INR": CurrencyInfo("INR", 2, "Indian Rupee"),
        "USD": CurrencyInfo("USD", 2, "US Dollar"),
        "EUR": CurrencyInfo("EUR", 2, "Euro"),
        "GBP": CurrencyInfo("GBP", 2, "Pound Sterling"),
        "AED": CurrencyInfo("AED", 2, "UAE Dirham"),
        "SGD": CurrencyInfo("SGD", 2, "Singapore Dollar"),
        "CNY": CurrencyInfo("CNY", 2, "Chinese Yuan"),
        "BDT": CurrencyInfo("BDT", 2, "Bangladeshi Taka"),
        "LKR": CurrencyInfo("LKR", 2, "Sri Lankan Rupee"),
        "NPR": CurrencyInfo("NPR", 2, "Nepalese Rupee"),
        "AUD": CurrencyInfo("AUD", 2, "Australian Dollar"),
        "CAD": CurrencyInfo("CAD", 2, "Canadian Dollar"),
        "CHF": CurrencyInfo("CHF", 2, "Swiss Franc"),
        # Zero decimal currencies
        "JPY": CurrencyInfo("JPY", 0, "Japanese Yen"),
        "KRW": CurrencyInfo("KRW", 0, "South Korean Won"),
        "VND": CurrencyInfo("VND", 0, "Vietnamese Dong"),
        # Three decimal currencies
        "BHD": CurrencyInfo("BHD", 3, "Bahraini Dinar"),
        "KWD": CurrencyInfo("KWD", 3, "Kuwaiti Dinar"),
        "OMR": CurrencyInfo("OMR", 3, "Omani Rial"),
    }

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is a known ISO 4217 code."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        """Get the minor-unit exponent for a currency."""
        return cls.require(code).decimal_places

    @classmethod
    def require(cls, code: str) -> CurrencyInfo:
        """Get currency information, raising on an unknown code."""
        info = cls.get_info(code)
        if info is None:
            raise InvalidCurrencyError(str(code))
        return info

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        """Get all valid currency codes."""
        return frozenset(cls._CURRENCIES.keys())
