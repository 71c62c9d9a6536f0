"""
CSV store validation utilities.

Structural checks for the trade and cash-event CSV files. Row-level values
are not rejected here: the position engine skips unusable rows itself.
"""

import re
from pathlib import Path

import pandas as pd

from runtimetrade.core.exceptions.portfolio import StoreError, ValidationError

TRADE_COLUMNS = [
    "id",
    "user_id",
    "ticker",
    "side",
    "shares",
    "price",
    "commission",
    "kind",
    "created_at",
    "currency",
]
CASH_EVENT_COLUMNS = ["id", "user_id", "kind", "amount", "description", "created_at"]

_USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.@-]{1,64}$")


class StoreCSVValidator:
    """Handles validation of store CSV files and identifiers."""

    @staticmethod
    def validate_user_id(user_id: str) -> str:
        """Validate a user id before it is written to disk."""
        if not user_id:
            raise ValidationError("user_id cannot be empty")
        if not _USER_ID_PATTERN.match(user_id):
            raise ValidationError(
                f"Invalid user_id: {user_id!r}. "
                "Only alphanumeric, underscore, dash, dot and @ are allowed."
            )
        return user_id

    @staticmethod
    def validate_trades_frame(df: pd.DataFrame, file_path: Path) -> None:
        """Validate the trades file has the expected structure."""
        StoreCSVValidator._validate_columns(df, file_path, TRADE_COLUMNS)
        StoreCSVValidator._validate_unique_ids(df, file_path)
        StoreCSVValidator._validate_timestamps(df, file_path)

    @staticmethod
    def validate_cash_events_frame(df: pd.DataFrame, file_path: Path) -> None:
        """Validate the cash-events file has the expected structure."""
        StoreCSVValidator._validate_columns(df, file_path, CASH_EVENT_COLUMNS)
        StoreCSVValidator._validate_unique_ids(df, file_path)
        StoreCSVValidator._validate_timestamps(df, file_path)

    @staticmethod
    def _validate_columns(df: pd.DataFrame, file_path: Path, expected: list[str]) -> None:
        missing_columns = set(expected) - set(df.columns)
        if missing_columns:
            raise StoreError(f"CSV file {file_path} missing columns: {sorted(missing_columns)}")

    @staticmethod
    def _validate_unique_ids(df: pd.DataFrame, file_path: Path) -> None:
        if df.empty:
            return
        duplicated = df["id"][df["id"].duplicated()]
        if not duplicated.empty:
            raise StoreError(
                f"CSV file {file_path} has duplicate ids: {sorted(set(duplicated))[:5]}"
            )

    @staticmethod
    def _validate_timestamps(df: pd.DataFrame, file_path: Path) -> None:
        if df.empty:
            return
        parsed = pd.to_datetime(df["created_at"], utc=True, errors="coerce", format="ISO8601")
        if parsed.isna().any():
            bad_rows = list(df.index[parsed.isna()][:5])
            raise StoreError(f"CSV file {file_path} has invalid created_at values in rows {bad_rows}")
