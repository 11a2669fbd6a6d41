"""Portfolio lifecycle and read models."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError

from ..domain.repositories import LedgerStore
from ..errors import Conflict, NotFound, NotOwner, ValidationError
from ..models import Holding, LedgerEntry, Portfolio, RecordKind
from ..models.base import ZERO, money_str
from .validation import to_money

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 128


@dataclass(frozen=True)
class HoldingView:
    """A holding valued at the latest close, if any price is known."""

    holding: Holding
    last_price: Optional[Decimal]

    @property
    def market_value(self) -> Optional[Decimal]:
        if self.last_price is None:
            return None
        return self.last_price * self.holding.quantity

    def to_dict(self) -> dict:
        payload = self.holding.to_dict()
        payload["last_price"] = money_str(self.last_price)
        payload["market_value"] = money_str(self.market_value)
        return payload


@dataclass(frozen=True)
class PortfolioDetail:
    portfolio: Portfolio
    holdings: list[HoldingView] = field(default_factory=list)

    @property
    def holdings_value(self) -> Decimal:
        return sum((h.market_value or ZERO for h in self.holdings), ZERO)

    @property
    def total_value(self) -> Decimal:
        return self.portfolio.cash_dep + self.holdings_value

    def to_dict(self) -> dict:
        payload = self.portfolio.to_dict()
        payload["holdings"] = [h.to_dict() for h in self.holdings]
        payload["holdings_value"] = money_str(self.holdings_value)
        payload["total_value"] = money_str(self.total_value)
        return payload


class PortfolioService:
    """Create, delete and inspect portfolios."""

    def __init__(self, store: LedgerStore):
        self.store = store

    def create(self, owner_id: int, name: Any, cash_dep: Any = 0) -> Portfolio:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Portfolio name is required")
        clean_name = name.strip()
        if len(clean_name) > MAX_NAME_LENGTH:
            raise ValidationError(f"Portfolio name must be at most {MAX_NAME_LENGTH} characters")
        opening = to_money(cash_dep if cash_dep is not None else 0, field="cash_dep")
        if opening < 0:
            raise ValidationError("cash_dep must not be negative")

        try:
            with self.store.atomic():
                if self.store.accounts.get_by_id(owner_id) is None:
                    raise NotFound("User not found")
                if self.store.portfolios.get_by_name(owner_id, clean_name) is not None:
                    raise Conflict("A portfolio with this name already exists")
                portfolio = self.store.portfolios.save(
                    Portfolio(name=clean_name, cash_dep=opening, owner_id=owner_id)
                )
                if opening > 0:
                    self.store.records.append(
                        LedgerEntry(portfolio_id=portfolio.id, kind=RecordKind.DEPOSIT, amount=opening)
                    )
        except IntegrityError as exc:
            # Another request created the same name between the check and the insert
            raise Conflict("A portfolio with this name already exists") from exc
        logger.info("Created portfolio %s (%r) for user %s", portfolio.id, clean_name, owner_id)
        return portfolio

    def delete(self, portfolio_id: int, actor_id: int) -> None:
        with self.store.atomic():
            portfolio = self._owned(portfolio_id, actor_id, for_update=True)
            removed_holdings = self.store.holdings.delete_for_portfolio(portfolio_id)
            self.store.records.delete_for_portfolio(portfolio_id)
            self.store.portfolios.delete(portfolio)
        logger.info(
            "Deleted portfolio %s (%d holdings removed)", portfolio_id, removed_holdings
        )

    def list_for_owner(self, owner_id: int) -> list[Portfolio]:
        if self.store.accounts.get_by_id(owner_id) is None:
            raise NotFound("User not found")
        return self.store.portfolios.list_by_owner(owner_id)

    def detail(self, portfolio_id: int, actor_id: int) -> PortfolioDetail:
        portfolio = self._owned(portfolio_id, actor_id)
        views: list[HoldingView] = []
        for holding in self.store.holdings.list_by_portfolio(portfolio_id):
            latest = self.store.prices.latest(holding.symbol)
            views.append(
                HoldingView(holding=holding, last_price=Decimal(latest.close) if latest else None)
            )
        return PortfolioDetail(portfolio=portfolio, holdings=views)

    def records(self, portfolio_id: int, actor_id: int, *, limit: Optional[int] = None) -> list[LedgerEntry]:
        self._owned(portfolio_id, actor_id)
        return self.store.records.list_by_portfolio(portfolio_id, limit=limit)

    def _owned(self, portfolio_id: int, actor_id: int, *, for_update: bool = False) -> Portfolio:
        portfolio = self.store.portfolios.get(portfolio_id, for_update=for_update)
        if portfolio is None:
            raise NotFound("Portfolio not found")
        if portfolio.owner_id != actor_id:
            raise NotOwner()
        return portfolio


__all__ = ["HoldingView", "PortfolioDetail", "PortfolioService"]
