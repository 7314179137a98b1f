"""
Ledger Kernel - invoice payment ledger

Tracks how much of each invoice has been paid, with:
- Integer minor-unit money (no floating point)
- Append-only payment records, voided rather than deleted
- Single-invoice payments that can never overpay
- FIFO allocation of lump-sum payments, oldest invoice first
- Audited write-offs
- Per-invoice optimistic concurrency
"""

__version__ = "0.1.0"
