#!/usr/bin/env python3
"""
Broker Trade Importer

Imports a broker trade export (CSV) into the dashboard's CSV store.

Expected columns: ticker (or symbol), side, shares (or quantity), price and
optionally commission, kind (or order_type), created_at (or date), currency.
Rows that fail validation are reported and skipped.
"""

import argparse
import sys
from pathlib import Path
from typing import Any

import pandas as pd
from loguru import logger
from tqdm import tqdm

from runtimetrade.core.exceptions.portfolio import PortfolioException, ValidationError
from runtimetrade.core.models.trade import TradeDraft, TradeEvent
from runtimetrade.core.utils.logging import setup_logging
from runtimetrade.infrastructure.store import CSVTradeStore
from runtimetrade.infrastructure.store.records import build_trade

COLUMN_ALIASES = {
    "symbol": "ticker",
    "quantity": "shares",
    "qty": "shares",
    "fee": "commission",
    "order_type": "kind",
    "date": "created_at",
    "datetime": "created_at",
    "time": "created_at",
}
REQUIRED_COLUMNS = {"ticker", "side", "shares", "price"}


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Lower-case headers and map common broker aliases onto store names."""
    renamed = {column: column.strip().lower() for column in df.columns}
    df = df.rename(columns=renamed)
    aliases = {k: v for k, v in COLUMN_ALIASES.items() if k in df.columns and v not in df.columns}
    return df.rename(columns=aliases)


def _optional(value: Any) -> Any:
    if value is None or (isinstance(value, float) and pd.isna(value)) or value == "":
        return None
    return value


def row_to_draft(row: dict[str, Any]) -> TradeDraft:
    """Convert one CSV row to a validated draft.

    Raises:
        ValidationError: If the row is not a valid trade
    """
    return TradeDraft(
        ticker=row.get("ticker"),  # type: ignore[arg-type]
        side=row.get("side") or "",
        shares=row.get("shares"),  # type: ignore[arg-type]
        price=row.get("price"),  # type: ignore[arg-type]
        commission=_optional(row.get("commission")),
        kind=_optional(row.get("kind")) or "trade",
        created_at=_optional(row.get("created_at")),
        currency=_optional(row.get("currency")) or "USD",
    )


def load_trades(file_path: Path) -> tuple[list[TradeEvent], list[str]]:
    """Read a broker export and build trade events.

    Returns:
        Tuple of (trades, error messages for skipped rows)
    """
    df = normalize_columns(pd.read_csv(file_path, dtype=str, keep_default_na=False))
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValidationError(f"{file_path.name} missing columns: {sorted(missing)}")

    trades: list[TradeEvent] = []
    errors: list[str] = []
    for line_number, row in tqdm(
        enumerate(df.to_dict(orient="records"), start=2),
        total=len(df),
        desc=f"Importing {file_path.name}",
        unit="row",
    ):
        try:
            trades.append(build_trade(row_to_draft(row)))
        except ValidationError as e:
            errors.append(f"line {line_number}: {e}")
    return trades, errors


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Import broker trades into the portfolio CSV store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python import_trades.py --file exports/ibkr_trades.csv
  python import_trades.py --file trades.csv --data-dir data --user alice --dry-run
        """,
    )
    parser.add_argument("--file", type=Path, required=True, help="Broker CSV export to import")
    parser.add_argument("--data-dir", type=Path, default=Path("data"), help="Store directory (default: data)")
    parser.add_argument("--user", type=str, default="local", help="User id to import into (default: local)")
    parser.add_argument("--dry-run", action="store_true", help="Validate rows without writing")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    setup_logging(debug=args.debug)

    if not args.file.exists():
        logger.error(f"File not found: {args.file}")
        return 1

    try:
        trades, errors = load_trades(args.file)
    except (PortfolioException, pd.errors.ParserError) as e:
        logger.error(f"Import failed: {e}")
        return 1

    for message in errors:
        logger.warning(f"Skipped {message}")

    if args.dry_run:
        logger.success(f"Dry run: {len(trades)} valid rows, {len(errors)} skipped")
        return 0

    try:
        written = CSVTradeStore(args.data_dir).insert_trades(args.user, trades)
    except PortfolioException as e:
        logger.error(f"Import failed: {e}")
        return 1

    logger.success(f"Imported {written} trades for {args.user} ({len(errors)} rows skipped)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
