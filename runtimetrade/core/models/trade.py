"""
Trade domain models.

``TradeEvent`` is the normalized record the engine consumes. ``TradeDraft`` and
``TradeUpdate`` are the strictly validated shapes accepted at the store boundary.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from runtimetrade.core.constants import DEFAULT_DISPLAY_CURRENCY
from runtimetrade.core.enums import TradeKind, TradeSide
from runtimetrade.core.exceptions.portfolio import ValidationError
from runtimetrade.core.types.financial import ZERO, to_float
from runtimetrade.core.utils.validation import (
    normalize_ticker,
    validate_non_negative,
    validate_positive,
    validate_shares,
    validate_ticker,
)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def parse_timestamp(value: Any) -> datetime:
    """Parse a stored timestamp into an aware UTC datetime.

    Accepts datetimes, ISO-8601 strings (with or without ``Z``) and epoch
    seconds. Naive values are taken to be UTC.

    Raises:
        ValidationError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, int | float) and not isinstance(value, bool):
        parsed = datetime.fromtimestamp(value, UTC)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise ValidationError(f"Invalid timestamp: {value!r}") from e
    else:
        raise ValidationError(f"Invalid timestamp: {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _parse_side(value: Any) -> TradeSide:
    try:
        return TradeSide(str(value or "").strip().lower())
    except ValueError as e:
        raise ValidationError(f"side must be 'buy' or 'sell', got {value!r}") from e


def _parse_kind(value: Any) -> TradeKind:
    if value is None or (isinstance(value, str) and not value.strip()):
        return TradeKind.TRADE
    try:
        return TradeKind(str(value).strip().lower())
    except ValueError as e:
        raise ValidationError(f"kind must be 'trade' or 'order', got {value!r}") from e


@dataclass(frozen=True)
class TradeEvent:
    """A recorded buy or sell, executed or pending.

    Numbers are kept exactly as stored: the aggregator, not this class,
    decides whether non-positive shares or prices are usable.
    """

    id: str
    ticker: str
    side: TradeSide
    shares: float
    price: float
    commission: float = ZERO
    kind: TradeKind = TradeKind.TRADE
    created_at: datetime = field(default_factory=utc_now)
    currency: str = DEFAULT_DISPLAY_CURRENCY

    @property
    def is_executed(self) -> bool:
        return self.kind.is_executed

    @property
    def is_pending(self) -> bool:
        return self.kind.is_pending

    def gross_value(self) -> float:
        """Shares times price, before commission."""
        return self.shares * self.price

    def sort_key(self) -> tuple[datetime, str, str, str, float, float, float]:
        """Total ordering used to accumulate trades reproducibly."""
        return (
            self.created_at,
            self.id,
            self.ticker,
            self.side.value,
            self.shares,
            self.price,
            self.commission,
        )

    def to_record(self) -> dict[str, Any]:
        """Serialize into a flat store row."""
        return {
            "id": self.id,
            "ticker": self.ticker,
            "side": self.side.value,
            "shares": self.shares,
            "price": self.price,
            "commission": self.commission,
            "kind": self.kind.value,
            "created_at": self.created_at.isoformat(),
            "currency": self.currency,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "TradeEvent":
        """Build an event from a loosely typed store row.

        Ticker is upper-cased and side lower-cased. Missing or unparseable
        numbers become 0, and a missing kind means an executed trade. The
        legacy ``order_type`` key is accepted in place of ``kind``.

        Raises:
            ValidationError: If side, kind or timestamp is unrecognizable
        """
        kind_value = record.get("kind")
        if kind_value is None:
            kind_value = record.get("order_type")
        created_at = record.get("created_at")
        currency = record.get("currency")
        return cls(
            id=str(record.get("id", "")),
            ticker=normalize_ticker(record.get("ticker")),
            side=_parse_side(record.get("side")),
            shares=to_float(record.get("shares")),
            price=to_float(record.get("price")),
            commission=to_float(record.get("commission")),
            kind=_parse_kind(kind_value),
            created_at=parse_timestamp(created_at) if created_at is not None else utc_now(),
            currency=str(currency).upper() if currency else DEFAULT_DISPLAY_CURRENCY,
        )


@dataclass
class TradeDraft:
    """A new trade or order as submitted by a user.

    ``commission`` of None means "use the commission model".
    """

    ticker: str
    side: TradeSide | str
    shares: float
    price: float
    commission: float | None = None
    kind: TradeKind | str = TradeKind.TRADE
    created_at: datetime | None = None
    currency: str = DEFAULT_DISPLAY_CURRENCY

    def __post_init__(self) -> None:
        """Validate and normalize draft data after initialization."""
        self.ticker = validate_ticker(self.ticker)
        self.side = _parse_side(self.side)
        self.kind = _parse_kind(self.kind)
        self.shares = validate_shares(self.shares)
        self.price = validate_positive(self.price, "price")
        if self.commission is not None:
            self.commission = validate_non_negative(self.commission, "commission")
        if self.created_at is not None:
            self.created_at = parse_timestamp(self.created_at)
        self.currency = str(self.currency or DEFAULT_DISPLAY_CURRENCY).strip().upper()


@dataclass
class TradeUpdate:
    """Replacement values for an existing trade; None leaves a field unchanged."""

    ticker: str | None = None
    side: TradeSide | str | None = None
    shares: float | None = None
    price: float | None = None
    commission: float | None = None
    kind: TradeKind | str | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate provided fields with the same rules as ``TradeDraft``."""
        if self.ticker is not None:
            self.ticker = validate_ticker(self.ticker)
        if self.side is not None:
            self.side = _parse_side(self.side)
        if self.kind is not None:
            self.kind = _parse_kind(self.kind)
        if self.shares is not None:
            self.shares = validate_shares(self.shares)
        if self.price is not None:
            self.price = validate_positive(self.price, "price")
        if self.commission is not None:
            self.commission = validate_non_negative(self.commission, "commission")
        if self.created_at is not None:
            self.created_at = parse_timestamp(self.created_at)

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.ticker,
                self.side,
                self.shares,
                self.price,
                self.commission,
                self.kind,
                self.created_at,
            )
        )

    def changes(self) -> dict[str, Any]:
        """Fields that were provided, ready for ``dataclasses.replace``."""
        candidates = {
            "ticker": self.ticker,
            "side": self.side,
            "shares": self.shares,
            "price": self.price,
            "commission": self.commission,
            "kind": self.kind,
            "created_at": self.created_at,
        }
        return {name: value for name, value in candidates.items() if value is not None}
