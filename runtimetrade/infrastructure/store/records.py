"""
Record normalization shared by the store implementations.

Turns validated drafts into stored events and applies the ingestion rules:
executed trades always carry a positive commission, pending orders carry
whatever was entered (0 when nothing was).
"""

import uuid
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime
from typing import TypeVar

from runtimetrade.core.engine.commission import calculate_commission
from runtimetrade.core.enums import TradeKind
from runtimetrade.core.models.cash import CashEvent, CashEventDraft
from runtimetrade.core.models.trade import (
    TradeDraft,
    TradeEvent,
    TradeUpdate,
    parse_timestamp,
    utc_now,
)
from runtimetrade.core.types.financial import ZERO


def new_record_id() -> str:
    return uuid.uuid4().hex


def _ingested_commission(kind: TradeKind, shares: float, commission: float | None) -> float:
    if commission is not None and commission > ZERO:
        return commission
    if kind.is_executed:
        return calculate_commission(shares)
    return ZERO


def build_trade(draft: TradeDraft) -> TradeEvent:
    """Create a stored trade from a validated draft."""
    kind = TradeKind(draft.kind)
    return TradeEvent(
        id=new_record_id(),
        ticker=draft.ticker,
        side=draft.side,  # type: ignore[arg-type]
        shares=draft.shares,
        price=draft.price,
        commission=_ingested_commission(kind, draft.shares, draft.commission),
        kind=kind,
        created_at=draft.created_at or utc_now(),
        currency=draft.currency,
    )


def apply_trade_update(trade: TradeEvent, update: TradeUpdate) -> TradeEvent:
    """Apply an update, re-deriving the commission when shares or kind change.

    A commission that was never entered explicitly follows the new share
    count; filling an order (kind ``order`` -> ``trade``) assigns the model
    commission when none was recorded.
    """
    changes = update.changes()
    updated = replace(trade, **changes)
    if "commission" not in changes:
        model_before = calculate_commission(trade.shares)
        was_derived = trade.commission <= ZERO or trade.commission == model_before
        if was_derived:
            updated = replace(
                updated,
                commission=_ingested_commission(updated.kind, updated.shares, None),
            )
    elif updated.kind.is_executed and updated.commission <= ZERO:
        updated = replace(updated, commission=calculate_commission(updated.shares))
    return updated


def build_cash_event(draft: CashEventDraft) -> CashEvent:
    """Create a stored cash event from a validated draft."""
    return CashEvent(
        id=new_record_id(),
        kind=draft.kind,  # type: ignore[arg-type]
        amount=draft.amount,
        description=draft.description,
        created_at=draft.created_at or utc_now(),
    )


def within_range(
    created_at: datetime, start: datetime | None = None, end: datetime | None = None
) -> bool:
    """Check if ``created_at`` falls inside the inclusive [start, end] range."""
    if start is not None and created_at < parse_timestamp(start):
        return False
    if end is not None and created_at > parse_timestamp(end):
        return False
    return True


T = TypeVar("T", TradeEvent, CashEvent)


def newest_first(records: Iterable[T]) -> list[T]:
    """Sort records by ``created_at`` descending, id as tie-break."""
    return sorted(records, key=lambda record: (record.created_at, record.id), reverse=True)
