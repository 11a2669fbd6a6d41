"""Price history intake and queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

import pandas as pd
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select

from ..domain.repositories import LedgerStore
from ..errors import Conflict, NotFound, ValidationError
from ..infra.repositories import SQLModelLedgerStore
from ..models import PriceObservation
from ..models.base import ZERO, money_str
from .validation import normalize_symbol, optional_int, parse_timestamp, to_int, to_money

logger = logging.getLogger(__name__)

MAX_HISTORY_LIMIT = 1000
CSV_COLUMNS = ("symbol", "timestamp", "open", "high", "low", "close", "volume")


@dataclass(frozen=True)
class PriceHistoryQuery:
    """Builder over the optional history filters.

    Each predicate is independent: ``conditions()`` emits one clause per set
    filter, and ``statement()`` layers ordering and paging on top.
    """

    symbol: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    limit: Optional[int] = None
    offset: int = 0
    newest_first: bool = False

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValidationError("start must not be after end")
        if self.limit is not None and not 1 <= self.limit <= MAX_HISTORY_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_HISTORY_LIMIT}")
        if self.offset < 0:
            raise ValidationError("offset must not be negative")

    @classmethod
    def from_args(cls, symbol: str, args: Mapping[str, Any]) -> "PriceHistoryQuery":
        """Build a query from request arguments (``start``, ``end``, ``limit``, ``offset``, ``order``)."""

        start = args.get("start") or args.get("start_date")
        end = args.get("end") or args.get("end_date")
        order = (args.get("order") or "asc").strip().lower()
        if order not in {"asc", "desc"}:
            raise ValidationError("order must be 'asc' or 'desc'")
        return cls(
            symbol=normalize_symbol(symbol),
            start=parse_timestamp(start, field="start") if start else None,
            end=parse_timestamp(end, field="end", end_of_day=True) if end else None,
            limit=optional_int(args.get("limit"), field="limit", minimum=1),
            offset=optional_int(args.get("offset"), field="offset") or 0,
            newest_first=order == "desc",
        )

    def between(self, start: Optional[datetime], end: Optional[datetime]) -> "PriceHistoryQuery":
        return replace(self, start=start, end=end)

    def page(self, limit: Optional[int], offset: int = 0) -> "PriceHistoryQuery":
        return replace(self, limit=limit, offset=offset)

    def conditions(self) -> list:
        clauses = [PriceObservation.symbol == self.symbol]
        if self.start is not None:
            clauses.append(col(PriceObservation.timestamp) >= self.start)
        if self.end is not None:
            clauses.append(col(PriceObservation.timestamp) <= self.end)
        return clauses

    def statement(self):
        timestamp = col(PriceObservation.timestamp)
        statement = (
            select(PriceObservation)
            .where(*self.conditions())
            .order_by(timestamp.desc() if self.newest_first else timestamp.asc())
        )
        if self.offset:
            statement = statement.offset(self.offset)
        if self.limit is not None:
            statement = statement.limit(self.limit)
        return statement


def record_observation(
    store: LedgerStore,
    *,
    symbol: Any,
    timestamp: Any,
    open: Any,
    high: Any,
    low: Any,
    close: Any,
    volume: Any = 0,
) -> PriceObservation:
    """Append one price bar, creating the instrument on first sight."""

    observation = _build_observation(
        symbol=symbol, timestamp=timestamp, open=open, high=high, low=low, close=close, volume=volume
    )
    try:
        with store.atomic():
            if store.prices.get_at(observation.symbol, observation.timestamp) is not None:
                raise Conflict("A price for this stock and timestamp already exists")
            store.prices.ensure_stock(observation.symbol)
            store.prices.add(observation)
    except IntegrityError as exc:
        raise Conflict("A price for this stock and timestamp already exists") from exc
    logger.debug("Recorded %s close %s at %s", observation.symbol, observation.close, observation.timestamp)
    return observation


def latest(store: LedgerStore, symbol: Any, *, on: Any = None) -> PriceObservation:
    """Most recent observation, or the last one up to the end of day ``on``."""

    ticker = normalize_symbol(symbol)
    cutoff = parse_timestamp(on, field="date", end_of_day=True) if on not in (None, "") else None
    observation = store.prices.latest(ticker, at=cutoff)
    if observation is None:
        raise NotFound("Stock price not found")
    return observation


def history(store: LedgerStore, query: PriceHistoryQuery) -> list[PriceObservation]:
    if store.prices.get_stock(query.symbol) is None:
        raise NotFound(f"Stock {query.symbol} not found")
    return store.prices.history(query)


def moving_average(store: LedgerStore, query: PriceHistoryQuery, period: Any) -> list[dict]:
    """Rolling mean of the close over ``period`` observations.

    The window runs oldest to newest over the rows ``query`` selects. Rows
    before the first full window carry ``moving_average: None``.
    """

    window = to_int(period, field="period")
    if not 1 <= window <= MAX_HISTORY_LIMIT:
        raise ValidationError(f"period must be between 1 and {MAX_HISTORY_LIMIT}")
    rows = sorted(history(store, query), key=lambda row: row.timestamp)
    if not rows:
        return []

    frame = pd.DataFrame({"close": [float(row.close) for row in rows]})
    frame["moving_average"] = frame["close"].rolling(window).mean()
    points = [
        {
            "timestamp": row.timestamp.isoformat(),
            "close": money_str(row.close),
            "moving_average": None if pd.isna(mean) else money_str(to_money(str(float(mean)))),
        }
        for row, mean in zip(rows, frame["moving_average"])
    ]
    if query.newest_first:
        points.reverse()
    return points


def _build_observation(**fields: Any) -> PriceObservation:
    prices = {name: to_money(fields[name], field=name) for name in ("open", "high", "low", "close")}
    if any(value < ZERO for value in prices.values()):
        raise ValidationError("Prices must not be negative")
    if prices["low"] > prices["high"]:
        raise ValidationError("low must not exceed high")
    raw_volume = fields.get("volume")
    volume = to_int(0 if raw_volume in (None, "") else raw_volume, field="volume")
    if volume < 0:
        raise ValidationError("volume must not be negative")
    return PriceObservation(
        symbol=normalize_symbol(fields["symbol"]),
        timestamp=parse_timestamp(fields["timestamp"]),
        volume=volume,
        **prices,
    )


def load_price_frame(file_path: Path, *, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a price CSV into a DataFrame with normalised column names."""

    frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=False)
    frame.columns = [c.strip().lower() for c in frame.columns]
    aliases = {"code": "symbol", "stock_symbol": "symbol", "date": "timestamp"}
    frame = frame.rename(columns={k: v for k, v in aliases.items() if k in frame.columns})
    missing = [c for c in CSV_COLUMNS if c not in frame.columns]
    if missing:
        raise ValidationError(f"CSV is missing columns: {', '.join(missing)}")
    return frame


def import_price_csv(file_path: Path, session_factory: Callable) -> int:
    """Import a price history CSV; rows already stored are skipped.

    Returns the number of observations inserted.
    """

    frame = load_price_frame(file_path)
    inserted = 0
    skipped = 0
    with session_factory() as session:
        store = SQLModelLedgerStore(session)
        with store.atomic():
            for row in frame.to_dict(orient="records"):
                observation = _build_observation(**{c: row.get(c) for c in CSV_COLUMNS})
                if store.prices.get_at(observation.symbol, observation.timestamp) is not None:
                    skipped += 1
                    continue
                store.prices.ensure_stock(observation.symbol)
                store.prices.add(observation)
                inserted += 1
    logger.info("Imported %d price rows from %s (%d already present)", inserted, file_path, skipped)
    return inserted


__all__ = [
    "PriceHistoryQuery",
    "history",
    "import_price_csv",
    "latest",
    "load_price_frame",
    "moving_average",
    "record_observation",
]
