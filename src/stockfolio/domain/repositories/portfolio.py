"""Portfolio repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.portfolio import Portfolio


class PortfolioRepository(Protocol):
    """Persistence operations for portfolios.

    ``for_update=True`` reads must lock the row until the surrounding
    unit of work ends.
    """

    def get(self, portfolio_id: int, *, for_update: bool = False) -> Optional[Portfolio]:
        ...

    def get_by_name(self, owner_id: int, name: str) -> Optional[Portfolio]:
        ...

    def list_by_owner(self, owner_id: int) -> list[Portfolio]:
        ...

    def save(self, portfolio: Portfolio) -> Portfolio:
        """Insert or update a portfolio; assigns the id on insert."""
        ...

    def delete(self, portfolio: Portfolio) -> None:
        ...
