"""Price intake, history queries and CSV import."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from stockfolio.errors import Conflict, NotFound, ValidationError
from stockfolio.infra.repositories import SQLModelLedgerStore
from stockfolio.services import PriceHistoryQuery
from stockfolio.services import prices


def _bar(**overrides):
    fields = {
        "symbol": "acme",
        "timestamp": "2024-03-01T16:00:00",
        "open": "10",
        "high": "11",
        "low": "9.5",
        "close": "10.5",
        "volume": 1200,
    }
    fields.update(overrides)
    return fields


class TestPriceHistoryQuery:
    def test_from_args_defaults(self):
        query = PriceHistoryQuery.from_args("acme", {})

        assert query == PriceHistoryQuery(symbol="ACME")
        assert len(query.conditions()) == 1

    def test_each_filter_adds_one_clause(self):
        query = PriceHistoryQuery(symbol="ACME")

        assert len(query.between(datetime(2024, 1, 1), None).conditions()) == 2
        assert len(query.between(None, datetime(2024, 1, 1)).conditions()) == 2
        assert len(query.between(datetime(2024, 1, 1), datetime(2024, 2, 1)).conditions()) == 3
        assert len(query.page(10, 5).conditions()) == 1

    def test_date_only_end_covers_whole_day(self):
        query = PriceHistoryQuery.from_args("ACME", {"start": "2024-01-01", "end": "2024-01-31"})

        assert query.start == datetime(2024, 1, 1)
        assert query.end.date() == datetime(2024, 1, 31).date()
        assert query.end.hour == 23 and query.end.minute == 59

    def test_legacy_argument_names_and_order(self):
        query = PriceHistoryQuery.from_args(
            "ACME", {"start_date": "2024-01-01", "end_date": "2024-01-02", "order": "DESC"}
        )

        assert query.newest_first is True
        assert query.start == datetime(2024, 1, 1)

    @pytest.mark.parametrize(
        "args",
        [
            {"start": "2024-02-01", "end": "2024-01-01"},
            {"limit": "0"},
            {"limit": "1001"},
            {"limit": "abc"},
            {"offset": "-1"},
            {"order": "sideways"},
            {"start": "yesterday"},
        ],
    )
    def test_invalid_arguments(self, args):
        with pytest.raises(ValidationError):
            PriceHistoryQuery.from_args("ACME", args)

    def test_statement_orders_and_pages(self):
        sql = str(PriceHistoryQuery(symbol="ACME", limit=5, offset=10, newest_first=True).statement())

        assert "ORDER BY stock_history.timestamp DESC" in sql
        assert "LIMIT" in sql and "OFFSET" in sql


class TestRecordObservation:
    def test_creates_instrument_on_first_observation(self, store):
        observation = prices.record_observation(store, **_bar())

        assert observation.symbol == "ACME"
        assert observation.close == Decimal("10.5")
        assert store.prices.get_stock("ACME") is not None
        assert prices.latest(store, "acme").timestamp == datetime(2024, 3, 1, 16, 0)

    def test_duplicate_timestamp_conflicts(self, store):
        prices.record_observation(store, **_bar())

        with pytest.raises(Conflict):
            prices.record_observation(store, **_bar(close="99"))

        assert prices.latest(store, "ACME").close == Decimal("10.5")

    def test_timezone_aware_timestamps_stored_as_utc(self, store):
        observation = prices.record_observation(store, **_bar(timestamp="2024-03-01T18:00:00+02:00"))

        assert observation.timestamp == datetime(2024, 3, 1, 16, 0)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"close": "-1"},
            {"low": "12"},
            {"volume": -5},
            {"open": "abc"},
            {"symbol": ""},
            {"timestamp": None},
        ],
    )
    def test_invalid_bars(self, store, overrides):
        with pytest.raises(ValidationError):
            prices.record_observation(store, **_bar(**overrides))

        assert store.prices.get_stock("ACME") is None

    def test_latest_unknown_symbol(self, store):
        with pytest.raises(NotFound):
            prices.latest(store, "NOPE")


class TestHistory:
    @pytest.fixture()
    def series(self, store):
        for day in range(1, 8):
            prices.record_observation(
                store, **_bar(timestamp=f"2024-01-0{day}T16:00:00", close=str(day), high="10", low="0")
            )
        return store

    def test_range_is_inclusive(self, series):
        query = PriceHistoryQuery.from_args("ACME", {"start": "2024-01-02", "end": "2024-01-04"})

        rows = prices.history(series, query)

        assert [r.close for r in rows] == [Decimal("2"), Decimal("3"), Decimal("4")]

    def test_newest_first_with_paging(self, series):
        query = PriceHistoryQuery.from_args("ACME", {"order": "desc", "limit": "2", "offset": "1"})

        assert [r.close for r in prices.history(series, query)] == [Decimal("6"), Decimal("5")]

    def test_latest_on_date_covers_that_whole_day(self, series):
        assert prices.latest(series, "ACME", on="2024-01-03").close == Decimal("3")
        assert prices.latest(series, "ACME", on="2024-01-03T12:00:00").close == Decimal("2")
        assert prices.latest(series, "ACME", on="2030-01-01").close == Decimal("7")

        with pytest.raises(NotFound):
            prices.latest(series, "ACME", on="2023-12-31")

    def test_moving_average_waits_for_a_full_window(self, series):
        query = PriceHistoryQuery.from_args("ACME", {"end": "2024-01-05"})

        points = prices.moving_average(series, query, 3)

        assert [p["close"] for p in points] == ["1.0000", "2.0000", "3.0000", "4.0000", "5.0000"]
        assert [p["moving_average"] for p in points] == [None, None, "2.0000", "3.0000", "4.0000"]

    def test_moving_average_of_latest_rows_newest_first(self, series):
        query = PriceHistoryQuery.from_args("ACME", {"order": "desc", "limit": "3"})

        points = prices.moving_average(series, query, "2")

        assert [p["timestamp"][:10] for p in points] == ["2024-01-07", "2024-01-06", "2024-01-05"]
        assert [p["moving_average"] for p in points] == ["6.5000", "5.5000", None]

    @pytest.mark.parametrize("period", [0, "-2", "x", None, 1001])
    def test_moving_average_rejects_bad_period(self, series, period):
        with pytest.raises(ValidationError):
            prices.moving_average(series, PriceHistoryQuery(symbol="ACME"), period)

    def test_unknown_stock(self, store):
        with pytest.raises(NotFound):
            prices.history(store, PriceHistoryQuery(symbol="NOPE"))


class TestCsvImport:
    def test_import_inserts_new_rows_and_skips_existing(self, tmp_path, session_factory):
        csv_path = tmp_path / "prices.csv"
        csv_path.write_text(
            "Code,Date,Open,High,Low,Close,Volume\n"
            "ACME,2024-01-02,10,11,9,10.5,100\n"
            "ACME,2024-01-03,10.5,12,10,11.25,\n"
            "bolt,2024-01-02,3,3,3,3,50\n",
            encoding="utf-8",
        )

        assert prices.import_price_csv(csv_path, session_factory) == 3
        assert prices.import_price_csv(csv_path, session_factory) == 0

        with session_factory() as session:
            store = SQLModelLedgerStore(session)
            latest = prices.latest(store, "ACME")
            assert latest.close == Decimal("11.25")
            assert latest.volume == 0
            assert store.prices.get_stock("BOLT") is not None

    def test_missing_columns_rejected(self, tmp_path, session_factory):
        csv_path = tmp_path / "bad.csv"
        csv_path.write_text("symbol,timestamp,close\nACME,2024-01-02,1\n", encoding="utf-8")

        with pytest.raises(ValidationError, match="open"):
            prices.import_price_csv(csv_path, session_factory)

    def test_bad_row_aborts_whole_import(self, tmp_path, session_factory):
        csv_path = tmp_path / "partial.csv"
        csv_path.write_text(
            "symbol,timestamp,open,high,low,close,volume\n"
            "ACME,2024-01-02,1,1,1,1,1\n"
            "ACME,2024-01-03,1,1,1,oops,1\n",
            encoding="utf-8",
        )

        with pytest.raises(ValidationError):
            prices.import_price_csv(csv_path, session_factory)

        with session_factory() as session:
            assert SQLModelLedgerStore(session).prices.get_stock("ACME") is None
