"""
Module: ledger_kernel.db.types
Responsibility: Annotated column type aliases shared by the ledger models,
    so that every table stores money, currency codes and free text the
    same way.
Architecture position: Kernel > DB.  MUST NOT import from models/, domain/,
    services/, or selectors/.

Invariants enforced:
    - Money columns are BIGINT counts of minor units.  No floats, no
      Numeric: the domain Money type is integral and so is its column.
    - Currency columns are exactly three characters (ISO 4217).
"""

from typing import Annotated

from sqlalchemy import BigInteger, String, Text

# Monetary amount in minor units (paise for INR)
MinorUnits = Annotated[int, BigInteger]

# ISO 4217 currency code (e.g., "INR", "USD")
CurrencyCode = Annotated[str, String(3)]

# Short identifier strings (status values, payment methods)
ShortCode = Annotated[str, String(50)]

# Human-entered references (cheque numbers, UTRs, invoice numbers)
Reference = Annotated[str, String(100)]

# Free text
LongText = Annotated[str, Text]
