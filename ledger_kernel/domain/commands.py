"""
Commands -- validated, strongly-typed inputs for the three ledger operations.

Responsibility:
    Turns the loosely typed request bodies of the HTTP layer into frozen
    command objects before anything reaches the ledger.  There is one
    command per operation kind, tagged by ``kind``:

        single_payment   -> RecordPaymentCommand
        fifo_allocation  -> AllocateFifoCommand
        write_off        -> WriteOffCommand

Failure modes:
    - ValidationError naming the offending field for any malformed value.

Conventions:
    - Amounts are integers in minor units (already converted upstream);
      booleans, floats and numeric strings are rejected.
    - Ids are UUIDs or UUID strings.
    - Dates are ``date`` objects or ISO-8601 strings; a datetime string is
      accepted and truncated to its date.
    - Optional text fields are stripped; blank becomes None.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, ClassVar
from uuid import UUID

from ledger_kernel.domain.dtos import PaymentType
from ledger_kernel.exceptions import ValidationError


# ---------------------------------------------------------------------------
# Field coercion helpers
# ---------------------------------------------------------------------------


def _require(payload: Mapping[str, Any], field: str) -> Any:
    value = payload.get(field)
    if value is None:
        raise ValidationError(field, "field is required")
    return value


def _uuid(value: Any, field: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise ValidationError(field, f"{value!r} is not a valid id") from exc


def _positive_minor_units(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "amount must be an integer number of minor units")
    if value <= 0:
        raise ValidationError(field, "amount must be greater than zero")
    return value


def _date(value: Any, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
        except ValueError as exc:
            raise ValidationError(field, f"{value!r} is not an ISO date") from exc
    raise ValidationError(field, f"{value!r} is not a date")


def _optional_text(value: Any, field: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(field, "must be text")
    value = value.strip()
    return value or None


def _required_text(value: Any, field: str) -> str:
    text = _optional_text(value, field)
    if text is None:
        raise ValidationError(field, "must not be empty")
    return text


def _optional_date(payload: Mapping[str, Any], field: str) -> date | None:
    value = payload.get(field)
    if value is None or value == "":
        return None
    return _date(value, field)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecordPaymentCommand:
    """Record one payment against one invoice."""

    kind: ClassVar[str] = "single_payment"

    invoice_id: UUID
    amount: int
    payment_date: date
    payment_method: str
    payment_type: PaymentType | None = None
    reference_number: str | None = None
    bank_name: str | None = None
    remarks: str | None = None

    def __post_init__(self) -> None:
        _positive_minor_units(self.amount, "amount")
        _required_text(self.payment_method, "payment_method")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> RecordPaymentCommand:
        raw_type = payload.get("payment_type")
        payment_type = None
        if raw_type not in (None, ""):
            try:
                payment_type = PaymentType(str(raw_type).strip().lower())
            except ValueError as exc:
                raise ValidationError(
                    "payment_type", f"{raw_type!r} is not one of advance, partial, full"
                ) from exc
        return cls(
            invoice_id=_uuid(_require(payload, "invoice_id"), "invoice_id"),
            amount=_positive_minor_units(_require(payload, "amount"), "amount"),
            payment_date=_date(_require(payload, "payment_date"), "payment_date"),
            payment_method=_required_text(payload.get("payment_method"), "payment_method"),
            payment_type=payment_type,
            reference_number=_optional_text(payload.get("reference_number"), "reference_number"),
            bank_name=_optional_text(payload.get("bank_name"), "bank_name"),
            remarks=_optional_text(payload.get("remarks"), "remarks"),
        )


@dataclass(frozen=True)
class AllocateFifoCommand:
    """Spread one lump payment over a party's invoices, oldest first."""

    kind: ClassVar[str] = "fifo_allocation"

    party_id: UUID
    amount: int
    payment_date: date
    payment_method: str
    currency: str | None = None
    reference_number: str | None = None
    bank_name: str | None = None
    remarks: str | None = None

    def __post_init__(self) -> None:
        _positive_minor_units(self.amount, "amount")
        _required_text(self.payment_method, "payment_method")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> AllocateFifoCommand:
        # Vendor payment forms post ``vendor_id``.
        party = payload.get("party_id", payload.get("vendor_id"))
        if party is None:
            raise ValidationError("party_id", "field is required")
        return cls(
            party_id=_uuid(party, "party_id"),
            amount=_positive_minor_units(_require(payload, "amount"), "amount"),
            payment_date=_date(_require(payload, "payment_date"), "payment_date"),
            payment_method=_required_text(payload.get("payment_method"), "payment_method"),
            currency=_optional_text(payload.get("currency"), "currency"),
            reference_number=_optional_text(payload.get("reference_number"), "reference_number"),
            bank_name=_optional_text(payload.get("bank_name"), "bank_name"),
            remarks=_optional_text(payload.get("remarks"), "remarks"),
        )


@dataclass(frozen=True)
class WriteOffCommand:
    """Close an invoice's residual balance with an audited write-off entry."""

    kind: ClassVar[str] = "write_off"

    invoice_id: UUID
    remarks: str
    payment_date: date | None = None

    def __post_init__(self) -> None:
        _required_text(self.remarks, "remarks")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> WriteOffCommand:
        return cls(
            invoice_id=_uuid(_require(payload, "invoice_id"), "invoice_id"),
            remarks=_required_text(payload.get("remarks"), "remarks"),
            payment_date=_optional_date(payload, "payment_date"),
        )


LedgerCommand = RecordPaymentCommand | AllocateFifoCommand | WriteOffCommand

_COMMANDS: dict[str, type] = {
    RecordPaymentCommand.kind: RecordPaymentCommand,
    AllocateFifoCommand.kind: AllocateFifoCommand,
    WriteOffCommand.kind: WriteOffCommand,
}


def parse_command(payload: Mapping[str, Any]) -> LedgerCommand:
    """
    Build the command named by ``payload["kind"]``.

    Raises:
        ValidationError: unknown or missing ``kind``, or any invalid field.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("payload", "request body must be an object")
    kind = payload.get("kind")
    command_cls = _COMMANDS.get(kind) if isinstance(kind, str) else None
    if command_cls is None:
        raise ValidationError(
            "kind", f"{kind!r} is not one of {', '.join(sorted(_COMMANDS))}"
        )
    return command_cls.from_payload(payload)
