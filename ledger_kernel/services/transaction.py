"""
run_atomic -- execute a ledger operation as one retried transaction.

Responsibility:
    Runs an operation in a fresh session, commits on success, rolls back on
    any error, and re-runs the whole operation when it lost a race on an
    invoice (ConcurrencyConflictError).  Each attempt re-reads invoices and
    payments, so a retry never acts on the stale balance that caused the
    conflict.

Failure modes:
    - ConcurrencyConflictError after ``max_attempts`` consecutive conflicts.
    - Any other exception propagates after the first rollback, unretried.

Usage:
    result = run_atomic(
        get_session_factory(),
        lambda session: PaymentLedgerService(session).allocate_fifo(command, actor_id),
    )
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.orm import Session, sessionmaker

from ledger_kernel.exceptions import ConcurrencyConflictError
from ledger_kernel.logging_config import get_logger

logger = get_logger("services.transaction")

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3


def run_atomic(
    session_factory: sessionmaker[Session] | Callable[[], Session],
    operation: Callable[[Session], T],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> T:
    """
    Run ``operation(session)`` and commit, retrying on concurrency conflicts.

    Args:
        session_factory: Produces a new session per attempt.
        operation: The unit of work.  Must not commit.
        max_attempts: Total attempts, including the first.

    Raises:
        ValueError: ``max_attempts`` is less than 1.
        ConcurrencyConflictError: Every attempt conflicted.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    attempt = 0
    while True:
        attempt += 1
        session = session_factory()
        try:
            result = operation(session)
            session.commit()
        except ConcurrencyConflictError as exc:
            session.rollback()
            if attempt >= max_attempts:
                logger.error(
                    "atomic_operation_conflict_exhausted",
                    extra={
                        "attempts": attempt,
                        "invoice_id": str(exc.invoice_id),
                    },
                )
                raise
            logger.warning(
                "atomic_operation_conflict_retry",
                extra={
                    "attempt": attempt,
                    "max_attempts": max_attempts,
                    "invoice_id": str(exc.invoice_id),
                },
            )
            continue
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        if attempt > 1:
            logger.info("atomic_operation_succeeded_after_retry", extra={"attempts": attempt})
        return result
