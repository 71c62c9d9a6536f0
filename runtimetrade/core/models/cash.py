"""
Cash event domain models.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from runtimetrade.core.enums import CashEventKind
from runtimetrade.core.exceptions.portfolio import ValidationError
from runtimetrade.core.models.trade import parse_timestamp, utc_now
from runtimetrade.core.types.financial import to_float
from runtimetrade.core.utils.validation import validate_positive


def _parse_cash_kind(value: Any) -> CashEventKind:
    try:
        return CashEventKind(str(value or "").strip().lower())
    except ValueError as e:
        raise ValidationError(f"kind must be 'deposit' or 'withdrawal', got {value!r}") from e


@dataclass(frozen=True)
class CashEvent:
    """A deposit into or withdrawal from the brokerage account."""

    id: str
    kind: CashEventKind
    amount: float
    description: str = ""
    created_at: datetime = field(default_factory=utc_now)

    @property
    def signed_amount(self) -> float:
        """Amount with its effect on the cash balance applied."""
        return self.kind.sign * self.amount

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "amount": self.amount,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CashEvent":
        """Build a cash event from a loosely typed store row.

        Raises:
            ValidationError: If kind or timestamp is unrecognizable
        """
        created_at = record.get("created_at")
        description = record.get("description")
        return cls(
            id=str(record.get("id", "")),
            kind=_parse_cash_kind(record.get("kind") or record.get("type")),
            amount=to_float(record.get("amount")),
            description="" if description is None else str(description),
            created_at=parse_timestamp(created_at) if created_at is not None else utc_now(),
        )


@dataclass
class CashEventDraft:
    """A new deposit or withdrawal as submitted by a user."""

    kind: CashEventKind | str
    amount: float
    description: str = ""
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate and normalize draft data after initialization."""
        self.kind = _parse_cash_kind(self.kind)
        self.amount = validate_positive(self.amount, "amount")
        self.description = (self.description or "").strip()
        if self.created_at is not None:
            self.created_at = parse_timestamp(self.created_at)
