"""
Config -> Kernel Bridges.

Functions that turn a ``LedgerConfig`` into configured kernel objects.
These live in ledger_config (the producer) because the kernel must never
import ledger_config.

Usage:
    from ledger_config import get_active_config
    from ledger_config.bridges import build_ledger_service, init_database, run_ledger_operation

    config = get_active_config()
    init_database(config)
    result = run_ledger_operation(
        config,
        lambda session: build_ledger_service(session, config).allocate_fifo(command, actor_id),
    )
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from ledger_config.schema import LedgerConfig
from ledger_kernel.db.engine import get_session_factory, init_engine_from_url
from ledger_kernel.domain.clock import Clock
from ledger_kernel.logging_config import configure_logging
from ledger_kernel.services.payment_ledger_service import PaymentLedgerService
from ledger_kernel.services.transaction import run_atomic

T = TypeVar("T")


def init_database(config: LedgerConfig, echo: bool = False) -> Engine:
    """
    Configure logging and the engine from ``config``.

    Raises:
        ValueError: ``config.database_url`` is not set.
    """
    if not config.database_url:
        raise ValueError("database_url is not configured")
    configure_logging(level=config.log_level)
    return init_engine_from_url(
        config.database_url,
        echo=echo,
        isolation_level=config.isolation_level,
    )


def build_ledger_service(
    session: Session,
    config: LedgerConfig,
    clock: Clock | None = None,
) -> PaymentLedgerService:
    """A PaymentLedgerService carrying the configured currency and locking policy."""
    return PaymentLedgerService(
        session,
        clock,
        default_currency=config.default_currency,
        lock_invoice_rows=config.lock_invoice_rows,
    )


def run_ledger_operation(
    config: LedgerConfig,
    operation: Callable[[Session], T],
    session_factory: Callable[[], Session] | None = None,
) -> T:
    """``run_atomic`` with the configured retry budget."""
    return run_atomic(
        session_factory or get_session_factory(),
        operation,
        max_attempts=config.max_conflict_retries,
    )
