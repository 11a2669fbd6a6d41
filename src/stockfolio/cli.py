"""Flask CLI commands for Stockfolio."""

from __future__ import annotations

from pathlib import Path

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("stockfolio-init-db")
    def stockfolio_init_db() -> None:
        """Create any missing tables."""

        from .extensions import get_engine
        from .infra.database import init_database

        init_database(get_engine())
        click.echo("Database ready.")

    @app.cli.command("stockfolio-import-prices")
    @click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
    def stockfolio_import_prices(csv_path: Path) -> None:
        """Import price history rows from a CSV file."""

        from .errors import StockfolioError
        from .extensions import session_factory
        from .services.prices import import_price_csv

        click.echo(f"Importing {csv_path}...")
        try:
            inserted = import_price_csv(csv_path, session_factory)
        except StockfolioError as exc:
            raise click.ClickException(exc.message) from exc
        click.echo(f"Imported {inserted} price rows.")
