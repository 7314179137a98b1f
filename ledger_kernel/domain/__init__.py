"""
Pure domain layer.

This package contains the ledger's value types, DTOs, commands and storage
ports with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O

All domain objects are immutable and deterministic.
"""

from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.commands import (
    AllocateFifoCommand,
    LedgerCommand,
    RecordPaymentCommand,
    WriteOffCommand,
    parse_command,
)
from ledger_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from ledger_kernel.domain.dtos import (
    WRITE_OFF_METHOD,
    AllocationLine,
    AllocationLineStatus,
    AllocationResult,
    Invoice,
    InvoiceBalance,
    LedgerBalance,
    Payment,
    PaymentDraft,
    PaymentMetadata,
    PaymentType,
    RecordStatus,
    SettlementStatus,
)
from ledger_kernel.domain.ports import InvoiceSource, PaymentStore
from ledger_kernel.domain.presentation import (
    format_display,
    format_major_amount,
    parse_major_amount,
)
from ledger_kernel.domain.values import Currency, Money

__all__ = [
    "AllocateFifoCommand",
    "AllocationLine",
    "AllocationLineStatus",
    "AllocationResult",
    "Clock",
    "Currency",
    "CurrencyInfo",
    "CurrencyRegistry",
    "DeterministicClock",
    "Invoice",
    "InvoiceBalance",
    "InvoiceSource",
    "LedgerBalance",
    "LedgerCommand",
    "Money",
    "Payment",
    "PaymentDraft",
    "PaymentMetadata",
    "PaymentStore",
    "PaymentType",
    "RecordPaymentCommand",
    "RecordStatus",
    "SettlementStatus",
    "SystemClock",
    "WRITE_OFF_METHOD",
    "WriteOffCommand",
    "format_display",
    "format_major_amount",
    "parse_command",
    "parse_major_amount",
]
