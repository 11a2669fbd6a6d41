"""Ledger entry repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.record import LedgerEntry


class RecordRepository(Protocol):
    """Append-only audit log of cash movements."""

    def append(self, entry: LedgerEntry) -> LedgerEntry:
        ...

    def list_by_portfolio(self, portfolio_id: int, *, limit: Optional[int] = None) -> list[LedgerEntry]:
        """Entries for a portfolio, newest first."""
        ...

    def delete_for_portfolio(self, portfolio_id: int) -> int:
        ...
