"""
ledger_config -- single public entrypoint for payment ledger configuration.

Responsibility:
    Provides the ONLY way to obtain ledger configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    or environment variables directly.

Architecture position:
    Configuration -- sits above ``ledger_kernel.domain`` (it validates the
    default currency against the registry) and is consumed by the kernel's
    services and transaction runner.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - The returned ``LedgerConfig`` has passed validation in ``__post_init__``.

Failure modes:
    - ``FileNotFoundError`` -- an explicit or ``LEDGER_CONFIG_PATH`` path
      does not exist.
    - ``ValueError`` -- invalid or unknown settings.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``LEDGER_CONFIG_TRACE`` log entry with the configuration source and
    checksum.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ledger_config.loader import compute_checksum, load_config
from ledger_config.schema import LedgerConfig

_logger = logging.getLogger("ledger_kernel.config")

CONFIG_PATH_ENV_VAR = "LEDGER_CONFIG_PATH"


def get_active_config(config_path: Path | str | None = None) -> LedgerConfig:
    """The ONLY public configuration entrypoint.

    Resolution order:
        1. ``config_path`` when given.
        2. The file named by the ``LEDGER_CONFIG_PATH`` environment variable.
        3. Built-in defaults.

    Does not cache; callers hold the returned config for as long as they
    need it.

    Raises:
        FileNotFoundError: The configured file does not exist.
        ValueError: The file holds invalid settings.
    """
    path = config_path or os.environ.get(CONFIG_PATH_ENV_VAR)
    if path:
        config = load_config(Path(path))
        source = str(path)
    else:
        config = LedgerConfig.with_defaults()
        source = "defaults"

    _logger.info(
        "LEDGER_CONFIG_TRACE",
        extra={
            "trace_type": "LEDGER_CONFIG_TRACE",
            "source": source,
            "checksum": compute_checksum(config),
            "default_currency": config.default_currency,
            "isolation_level": config.isolation_level,
            "max_conflict_retries": config.max_conflict_retries,
            "lock_invoice_rows": config.lock_invoice_rows,
        },
    )
    return config


__all__ = [
    "CONFIG_PATH_ENV_VAR",
    "LedgerConfig",
    "get_active_config",
]
