"""
Payment Ledger Configuration Schema.

Defines the structure and defaults for ledger settings.  Actual values
are loaded from YAML at runtime through ``ledger_config.get_active_config()``.
"""

from dataclasses import dataclass
from typing import Any, Self

from ledger_kernel.domain.currency import CurrencyRegistry
from ledger_kernel.logging_config import get_logger

logger = get_logger("config.schema")

VALID_ISOLATION_LEVELS = frozenset({"READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE"})
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass
class LedgerConfig:
    """
    Configuration schema for the payment ledger.

    Override at instantiation with deployment-specific values:

        config = LedgerConfig(
            database_url="postgresql://ledger@db/ledger",
            max_conflict_retries=5,
        )
    """

    # Currency of lump-sum FIFO payments when the request names none
    default_currency: str = "INR"

    # Storage
    database_url: str | None = None
    isolation_level: str = "REPEATABLE READ"

    # Concurrency
    max_conflict_retries: int = 3
    lock_invoice_rows: bool = True

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        self.default_currency = str(self.default_currency).upper().strip()
        if not CurrencyRegistry.is_valid(self.default_currency):
            raise ValueError(
                f"default_currency must be an ISO 4217 code, got '{self.default_currency}'"
            )

        self.isolation_level = str(self.isolation_level).upper().strip()
        if self.isolation_level not in VALID_ISOLATION_LEVELS:
            raise ValueError(
                f"isolation_level must be one of {sorted(VALID_ISOLATION_LEVELS)}, "
                f"got '{self.isolation_level}'"
            )

        if isinstance(self.max_conflict_retries, bool) or not isinstance(
            self.max_conflict_retries, int
        ):
            raise ValueError("max_conflict_retries must be an integer")
        if self.max_conflict_retries < 1:
            raise ValueError("max_conflict_retries must be at least 1")

        self.log_level = str(self.log_level).upper().strip()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got '{self.log_level}'"
            )

        if self.database_url is not None and not str(self.database_url).strip():
            raise ValueError("database_url cannot be empty")

        logger.debug(
            "ledger_config_initialized",
            extra={
                "default_currency": self.default_currency,
                "isolation_level": self.isolation_level,
                "max_conflict_retries": self.max_conflict_retries,
                "lock_invoice_rows": self.lock_invoice_rows,
                "log_level": self.log_level,
                "database_configured": self.database_url is not None,
            },
        )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the built-in defaults."""
        logger.info("ledger_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """
        Create config from a dictionary (e.g., a parsed YAML section).

        Raises:
            ValueError: unknown keys or invalid values.
        """
        logger.info(
            "ledger_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown ledger configuration keys: {sorted(unknown)}")
        return cls(**data)
