"""Flask CLI commands."""

from __future__ import annotations

from decimal import Decimal

from stockfolio.extensions import session_scope
from stockfolio.infra.repositories import SQLModelLedgerStore
from stockfolio.services import prices


def test_init_db_command(app):
    result = app.test_cli_runner().invoke(args=["stockfolio-init-db"])

    assert result.exit_code == 0
    assert "Database ready." in result.output


def test_import_prices_command(app, tmp_path):
    csv_path = tmp_path / "prices.csv"
    csv_path.write_text(
        "symbol,timestamp,open,high,low,close,volume\nACME,2024-01-02,1,2,1,1.5,10\n",
        encoding="utf-8",
    )
    runner = app.test_cli_runner()

    result = runner.invoke(args=["stockfolio-import-prices", str(csv_path)])

    assert result.exit_code == 0, result.output
    assert "Imported 1 price rows." in result.output
    with app.app_context(), session_scope() as session:
        assert prices.latest(SQLModelLedgerStore(session), "ACME").close == Decimal("1.5")


def test_import_prices_reports_bad_files(app, tmp_path):
    csv_path = tmp_path / "broken.csv"
    csv_path.write_text("symbol,close\nACME,1\n", encoding="utf-8")

    result = app.test_cli_runner().invoke(args=["stockfolio-import-prices", str(csv_path)])

    assert result.exit_code != 0
    assert "missing columns" in result.output
