"""Ledger consistency engine: cash and holdings change together or not at all.

Every operation reads the rows it needs (locked for update), validates, and
only then writes, all inside one ``LedgerStore.atomic()`` block. A failed
validation raises before anything is written, so callers never observe a
partially applied operation. The matching ledger entry is appended in the
same transaction as the balance change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from ..domain.repositories import LedgerStore
from ..errors import InsufficientFunds, InsufficientQuantity, NotFound, NotOwner, ValidationError
from ..models import Holding, LedgerEntry, Portfolio, RecordKind
from .validation import normalize_symbol, positive_amount, positive_quantity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CashResult:
    """Outcome of a deposit or withdrawal."""

    portfolio: Portfolio
    record: LedgerEntry


@dataclass(frozen=True)
class TransferResult:
    source: Portfolio
    destination: Portfolio
    records: tuple[LedgerEntry, LedgerEntry]


@dataclass(frozen=True)
class TradeResult:
    """Outcome of a buy or sell.

    ``holding`` is None after a sale that closed the position.
    """

    portfolio: Portfolio
    holding: Optional[Holding]
    symbol: str
    quantity: int
    unit_price: Decimal
    total: Decimal
    record: LedgerEntry

    @property
    def cash_dep(self) -> Decimal:
        return self.portfolio.cash_dep


class LedgerService:
    """Deposit, withdraw, transfer, buy and sell against a ``LedgerStore``."""

    def __init__(self, store: LedgerStore):
        self.store = store

    # cash --------------------------------------------------------------

    def deposit(self, portfolio_id: int, actor_id: int, amount: Any) -> CashResult:
        value = positive_amount(amount)
        with self.store.atomic():
            portfolio = self._owned_portfolio(portfolio_id, actor_id)
            portfolio.cash_dep = portfolio.cash_dep + value
            self.store.portfolios.save(portfolio)
            record = self._append(portfolio, RecordKind.DEPOSIT, value)
        logger.info(
            "Deposited %s into portfolio %s", value, portfolio_id,
            extra={"portfolio_id": portfolio_id, "kind": RecordKind.DEPOSIT.value},
        )
        return CashResult(portfolio=portfolio, record=record)

    def withdraw(self, portfolio_id: int, actor_id: int, amount: Any) -> CashResult:
        value = positive_amount(amount)
        with self.store.atomic():
            portfolio = self._owned_portfolio(portfolio_id, actor_id)
            if portfolio.cash_dep - value < 0:
                logger.info(
                    "Rejected withdrawal of %s from portfolio %s: balance %s",
                    value, portfolio_id, portfolio.cash_dep,
                )
                raise InsufficientFunds("Insufficient funds in portfolio")
            portfolio.cash_dep = portfolio.cash_dep - value
            self.store.portfolios.save(portfolio)
            record = self._append(portfolio, RecordKind.WITHDRAW, value)
        logger.info(
            "Withdrew %s from portfolio %s", value, portfolio_id,
            extra={"portfolio_id": portfolio_id, "kind": RecordKind.WITHDRAW.value},
        )
        return CashResult(portfolio=portfolio, record=record)

    def transfer(self, from_id: int, to_id: int, actor_id: int, amount: Any) -> TransferResult:
        value = positive_amount(amount)
        if from_id == to_id:
            raise ValidationError("Cannot transfer to the same portfolio")

        with self.store.atomic():
            # Lock both rows in id order so opposing transfers cannot deadlock
            locked = {
                pid: self.store.portfolios.get(pid, for_update=True)
                for pid in sorted((from_id, to_id))
            }
            source = locked[from_id]
            destination = locked[to_id]

            if source is None:
                raise NotFound("Giving portfolio not found")
            if source.owner_id != actor_id:
                raise NotOwner()
            if source.cash_dep - value < 0:
                logger.info(
                    "Rejected transfer of %s from portfolio %s: balance %s",
                    value, from_id, source.cash_dep,
                )
                raise InsufficientFunds("Insufficient funds in the giving portfolio")
            if destination is None:
                raise NotFound("Receiving portfolio not found")
            if destination.owner_id != actor_id:
                raise NotOwner("Receiving portfolio does not belong to this user")

            source.cash_dep = source.cash_dep - value
            destination.cash_dep = destination.cash_dep + value
            self.store.portfolios.save(source)
            self.store.portfolios.save(destination)
            out_record = self._append(source, RecordKind.TRANSFER_OUT, value, counterparty_id=to_id)
            in_record = self._append(destination, RecordKind.TRANSFER_IN, value, counterparty_id=from_id)

        logger.info(
            "Transferred %s from portfolio %s to %s", value, from_id, to_id,
            extra={"portfolio_id": from_id, "counterparty_id": to_id},
        )
        return TransferResult(source=source, destination=destination, records=(out_record, in_record))

    # stock -------------------------------------------------------------

    def buy_stock(self, portfolio_id: int, actor_id: int, symbol: Any, quantity: Any) -> TradeResult:
        ticker = normalize_symbol(symbol)
        shares = positive_quantity(quantity)

        with self.store.atomic():
            portfolio = self._owned_portfolio(portfolio_id, actor_id)
            if self.store.prices.get_stock(ticker) is None:
                raise NotFound(f"Stock {ticker} not found")
            unit_price = self._current_price(ticker)
            total_cost = unit_price * shares
            if portfolio.cash_dep < total_cost:
                logger.info(
                    "Rejected purchase of %d %s for portfolio %s: cost %s, balance %s",
                    shares, ticker, portfolio_id, total_cost, portfolio.cash_dep,
                )
                raise InsufficientFunds("Insufficient cash in portfolio")

            portfolio.cash_dep = portfolio.cash_dep - total_cost
            self.store.portfolios.save(portfolio)

            holding = self.store.holdings.get(portfolio_id, ticker, for_update=True)
            if holding is None:
                holding = Holding(portfolio_id=portfolio_id, symbol=ticker, quantity=shares)
            else:
                holding.quantity = holding.quantity + shares
            holding = self.store.holdings.save(holding)

            record = self._append(
                portfolio, RecordKind.BUY, total_cost, symbol=ticker, quantity=shares
            )

        logger.info(
            "Bought %d %s at %s for portfolio %s", shares, ticker, unit_price, portfolio_id,
            extra={"portfolio_id": portfolio_id, "kind": RecordKind.BUY.value},
        )
        return TradeResult(
            portfolio=portfolio,
            holding=holding,
            symbol=ticker,
            quantity=shares,
            unit_price=unit_price,
            total=total_cost,
            record=record,
        )

    def sell_stock(self, portfolio_id: int, actor_id: int, symbol: Any, quantity: Any) -> TradeResult:
        ticker = normalize_symbol(symbol)
        shares = positive_quantity(quantity)

        with self.store.atomic():
            portfolio = self._owned_portfolio(portfolio_id, actor_id)
            holding = self.store.holdings.get(portfolio_id, ticker, for_update=True)
            if holding is None:
                raise NotFound("Stock not found in portfolio")
            unit_price = self._current_price(ticker)
            if holding.quantity < shares:
                logger.info(
                    "Rejected sale of %d %s for portfolio %s: holding %d",
                    shares, ticker, portfolio_id, holding.quantity,
                )
                raise InsufficientQuantity()

            total_revenue = unit_price * shares
            remaining = holding.quantity - shares
            if remaining == 0:
                self.store.holdings.delete(holding)
                holding = None
            else:
                holding.quantity = remaining
                holding = self.store.holdings.save(holding)

            portfolio.cash_dep = portfolio.cash_dep + total_revenue
            self.store.portfolios.save(portfolio)
            record = self._append(
                portfolio, RecordKind.SELL, total_revenue, symbol=ticker, quantity=shares
            )

        logger.info(
            "Sold %d %s at %s for portfolio %s", shares, ticker, unit_price, portfolio_id,
            extra={"portfolio_id": portfolio_id, "kind": RecordKind.SELL.value},
        )
        return TradeResult(
            portfolio=portfolio,
            holding=holding,
            symbol=ticker,
            quantity=shares,
            unit_price=unit_price,
            total=total_revenue,
            record=record,
        )

    # internal helpers -------------------------------------------------

    def _owned_portfolio(self, portfolio_id: int, actor_id: int) -> Portfolio:
        portfolio = self.store.portfolios.get(portfolio_id, for_update=True)
        if portfolio is None:
            raise NotFound("Portfolio not found")
        if portfolio.owner_id != actor_id:
            raise NotOwner()
        return portfolio

    def _current_price(self, symbol: str) -> Decimal:
        observation = self.store.prices.latest(symbol)
        if observation is None:
            raise NotFound("Stock price not found")
        return Decimal(observation.close)

    def _append(
        self,
        portfolio: Portfolio,
        kind: RecordKind,
        amount: Decimal,
        **context,
    ) -> LedgerEntry:
        entry = LedgerEntry(portfolio_id=portfolio.id, kind=kind, amount=amount, **context)
        return self.store.records.append(entry)


__all__ = ["CashResult", "LedgerService", "TradeResult", "TransferResult"]
