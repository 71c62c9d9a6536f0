"""
CSV-backed trade store.

Keeps every user's trades in ``trades.csv`` and cash events in
``cash_events.csv`` under one data directory. Files are read with pandas,
cached by modification time and rewritten atomically.
"""

import os
import tempfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from threading import RLock
from typing import Any

import pandas as pd
from cachetools import LRUCache
from loguru import logger

from runtimetrade.core.constants import CASH_EVENTS_FILE_NAME, STORE_CACHE_SIZE, TRADES_FILE_NAME
from runtimetrade.core.exceptions.portfolio import RecordNotFoundError, StoreError
from runtimetrade.core.interfaces.store import ITradeStore
from runtimetrade.core.models.cash import CashEvent, CashEventDraft
from runtimetrade.core.models.trade import TradeDraft, TradeEvent, TradeUpdate, parse_timestamp
from runtimetrade.core.utils.decorators import log_operation

from .csv_validator import CASH_EVENT_COLUMNS, TRADE_COLUMNS, StoreCSVValidator
from .records import apply_trade_update, build_cash_event, build_trade, newest_first

# Everything is read as text; numbers are coerced by the record models so a
# malformed cell never fails the whole file.
_TEXT_DTYPES = {column: "string" for column in set(TRADE_COLUMNS) | set(CASH_EVENT_COLUMNS)}


class CSVTradeStore(ITradeStore):
    """Per-user trade and cash-event store persisted as CSV files."""

    def __init__(self, data_dir: Path | str, cache_size: int = STORE_CACHE_SIZE) -> None:
        if cache_size <= 0:
            raise ValueError("Cache size must be positive")
        self.data_dir = Path(data_dir)
        self.trades_path = self.data_dir / TRADES_FILE_NAME
        self.cash_events_path = self.data_dir / CASH_EVENTS_FILE_NAME
        self._cache: LRUCache[str, pd.DataFrame] = LRUCache(maxsize=cache_size)
        self._lock = RLock()
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create data directory {self.data_dir}: {e}") from e

    # Trades

    @log_operation
    def add_trade(self, user_id: str, draft: TradeDraft) -> TradeEvent:
        StoreCSVValidator.validate_user_id(user_id)
        trade = build_trade(draft)
        with self._lock:
            df = self._read_trades()
            row = pd.DataFrame([self._trade_row(user_id, trade)], columns=TRADE_COLUMNS)
            self._write(self.trades_path, pd.concat([df, row], ignore_index=True))
        return trade

    def insert_trades(self, user_id: str, trades: list[TradeEvent]) -> int:
        """Append already built events in one write. Returns the number written."""
        StoreCSVValidator.validate_user_id(user_id)
        if not trades:
            return 0
        with self._lock:
            df = self._read_trades()
            existing = set(df["id"].astype(str))
            rows = [self._trade_row(user_id, t) for t in trades if t.id not in existing]
            if rows:
                new_rows = pd.DataFrame(rows, columns=TRADE_COLUMNS)
                self._write(self.trades_path, pd.concat([df, new_rows], ignore_index=True))
        logger.info(f"Inserted {len(rows)} trades for {user_id} ({len(trades) - len(rows)} duplicates)")
        return len(rows)

    def list_trades(
        self, user_id: str, start: datetime | None = None, end: datetime | None = None
    ) -> list[TradeEvent]:
        df = self._user_rows(self._read_trades(), user_id)
        if not df.empty and (start is not None or end is not None):
            created = pd.to_datetime(df["created_at"], utc=True, format="ISO8601")
            mask = pd.Series(True, index=df.index)
            if start is not None:
                mask &= created >= pd.Timestamp(parse_timestamp(start))
            if end is not None:
                mask &= created <= pd.Timestamp(parse_timestamp(end))
            df = df[mask]
        return newest_first(TradeEvent.from_record(record) for record in self._records(df))

    def get_trade(self, user_id: str, trade_id: str) -> TradeEvent:
        df = self._user_rows(self._read_trades(), user_id)
        match = df[df["id"] == trade_id]
        if match.empty:
            raise RecordNotFoundError("Trade", trade_id)
        return TradeEvent.from_record(self._records(match)[0])

    @log_operation
    def update_trade(self, user_id: str, trade_id: str, update: TradeUpdate) -> TradeEvent:
        with self._lock:
            df = self._read_trades()
            index = self._locate(df, user_id, trade_id, "Trade")
            current = TradeEvent.from_record(self._records(df.loc[[index]])[0])
            updated = apply_trade_update(current, update)
            for column, value in self._trade_row(user_id, updated).items():
                df.at[index, column] = None if value is None else str(value)
            self._write(self.trades_path, df)
        return updated

    @log_operation
    def delete_trade(self, user_id: str, trade_id: str) -> None:
        with self._lock:
            df = self._read_trades()
            index = self._locate(df, user_id, trade_id, "Trade")
            self._write(self.trades_path, df.drop(index=index))

    # Cash events

    @log_operation
    def add_cash_event(self, user_id: str, draft: CashEventDraft) -> CashEvent:
        StoreCSVValidator.validate_user_id(user_id)
        event = build_cash_event(draft)
        with self._lock:
            df = self._read_cash_events()
            row = pd.DataFrame([{"user_id": user_id, **event.to_record()}], columns=CASH_EVENT_COLUMNS)
            self._write(self.cash_events_path, pd.concat([df, row], ignore_index=True))
        return event

    def list_cash_events(self, user_id: str) -> list[CashEvent]:
        df = self._user_rows(self._read_cash_events(), user_id)
        return newest_first(CashEvent.from_record(record) for record in self._records(df))

    @log_operation
    def delete_cash_event(self, user_id: str, event_id: str) -> None:
        with self._lock:
            df = self._read_cash_events()
            index = self._locate(df, user_id, event_id, "Cash event")
            self._write(self.cash_events_path, df.drop(index=index))

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    # File handling

    def _read_trades(self) -> pd.DataFrame:
        return self._read(self.trades_path, TRADE_COLUMNS, StoreCSVValidator.validate_trades_frame)

    def _read_cash_events(self) -> pd.DataFrame:
        return self._read(
            self.cash_events_path, CASH_EVENT_COLUMNS, StoreCSVValidator.validate_cash_events_frame
        )

    def _build_cache_key(self, file_path: Path) -> str:
        """Build cache key including file modification time."""
        stat = file_path.stat()
        return f"{file_path}:{stat.st_mtime_ns}:{stat.st_size}"

    def _read(
        self,
        file_path: Path,
        columns: list[str],
        validate: Callable[[pd.DataFrame, Path], None],
    ) -> pd.DataFrame:
        with self._lock:
            if not file_path.exists():
                return pd.DataFrame(columns=columns).astype("string")

            cache_key = self._build_cache_key(file_path)
            if cache_key in self._cache:
                logger.debug(f"Cache hit for {file_path.name}")
                return self._cache[cache_key].copy()

            try:
                df = pd.read_csv(
                    file_path,
                    dtype={column: _TEXT_DTYPES[column] for column in columns},
                    keep_default_na=False,
                )
            except pd.errors.EmptyDataError:
                df = pd.DataFrame(columns=columns).astype("string")
            except (OSError, pd.errors.ParserError) as e:
                logger.error(f"Failed to read {file_path.name}: {e}")
                raise StoreError(f"Failed to read {file_path.name}") from e

            validate(df, file_path)
            self._cache[cache_key] = df
            logger.debug(f"Loaded {len(df)} rows from {file_path.name}")
            return df.copy()

    def _write(self, file_path: Path, df: pd.DataFrame) -> None:
        """Write a frame atomically and refresh the cache entry."""
        df = df.reset_index(drop=True)
        fd, tmp_name = tempfile.mkstemp(dir=file_path.parent, prefix=f".{file_path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", newline="", encoding="utf-8") as handle:
                df.to_csv(handle, index=False)
            os.replace(tmp_name, file_path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            logger.error(f"Failed to write {file_path.name}: {e}")
            raise StoreError(f"Failed to write {file_path.name}") from e
        self._cache[self._build_cache_key(file_path)] = df.astype("string")

    # Row helpers

    @staticmethod
    def _user_rows(df: pd.DataFrame, user_id: str) -> pd.DataFrame:
        return df[df["user_id"] == user_id]

    @staticmethod
    def _records(df: pd.DataFrame) -> list[dict[str, Any]]:
        return [
            {key: (None if pd.isna(value) or value == "" else value) for key, value in row.items()}
            for row in df.to_dict(orient="records")
        ]

    @staticmethod
    def _locate(df: pd.DataFrame, user_id: str, record_id: str, record_type: str) -> Any:
        match = df.index[(df["user_id"] == user_id) & (df["id"] == record_id)]
        if len(match) == 0:
            raise RecordNotFoundError(record_type, record_id)
        return match[0]

    @staticmethod
    def _trade_row(user_id: str, trade: TradeEvent) -> dict[str, Any]:
        return {"user_id": user_id, **trade.to_record()}
