"""Holding repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.portfolio import Holding


class HoldingRepository(Protocol):
    """Persistence operations for portfolio holdings."""

    def get(self, portfolio_id: int, symbol: str, *, for_update: bool = False) -> Optional[Holding]:
        ...

    def list_by_portfolio(self, portfolio_id: int) -> list[Holding]:
        ...

    def save(self, holding: Holding) -> Holding:
        ...

    def delete(self, holding: Holding) -> None:
        ...

    def delete_for_portfolio(self, portfolio_id: int) -> int:
        """Remove every holding of a portfolio and return the count."""
        ...
