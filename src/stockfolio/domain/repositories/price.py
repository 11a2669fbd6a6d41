"""Instrument and price history repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional, Protocol

from ...models.stock import PriceObservation, Stock

if TYPE_CHECKING:  # pragma: no cover
    from ...services.prices import PriceHistoryQuery


class PriceRepository(Protocol):
    """Read access to instruments and their append-only price history."""

    def get_stock(self, symbol: str) -> Optional[Stock]:
        ...

    def ensure_stock(self, symbol: str) -> Stock:
        """Return the instrument, creating it when it does not exist yet."""
        ...

    def latest(self, symbol: str, *, at: Optional[datetime] = None) -> Optional[PriceObservation]:
        """Observation with the greatest timestamp for ``symbol``, not later than ``at`` when given."""
        ...

    def get_at(self, symbol: str, timestamp) -> Optional[PriceObservation]:
        ...

    def add(self, observation: PriceObservation) -> PriceObservation:
        ...

    def history(self, query: "PriceHistoryQuery") -> list[PriceObservation]:
        ...
