"""
Module: ledger_engines
Responsibility:
    Package entrypoint re-exporting the pure ledger engines: the balance
    reader, the single-payment recorder, the FIFO allocator, the
    write-off operator and the void path.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ledger_kernel.domain, ledger_kernel.exceptions and
    ledger_kernel.logging_config.  MUST NOT import services or selectors.

Invariants enforced:
    - Purity: engines never read the clock.  Dates are passed in.
    - Integer money: all amounts are Money in minor units.
    - Determinism: identical inputs always produce identical outputs
      (payment ids aside, which come from an injectable factory).

Audit relevance:
    Every engine entry point is wrapped by ``@traced_engine`` and emits a
    LEDGER_ENGINE_TRACE log record with an input fingerprint.
"""

from ledger_engines.allocation import FifoAllocation, OpenInvoice, allocate_fifo, open_invoices
from ledger_engines.balance import outstanding_balance
from ledger_engines.recorder import prepare_payment
from ledger_engines.tracer import compute_input_fingerprint, traced_engine
from ledger_engines.void import prepare_void
from ledger_engines.write_off import prepare_write_off

__all__ = [
    "FifoAllocation",
    "OpenInvoice",
    "allocate_fifo",
    "open_invoices",
    "outstanding_balance",
    "prepare_payment",
    "prepare_void",
    "prepare_write_off",
    "compute_input_fingerprint",
    "traced_engine",
]
