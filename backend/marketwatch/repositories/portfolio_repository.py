from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable
from uuid import UUID

from marketwatch.domain.portfolio import Portfolio
from marketwatch.domain.transaction import Transaction


class PortfolioRepository(ABC):
    @abstractmethod
    def add(self, portfolio: Portfolio) -> None: ...

    @abstractmethod
    def get(self, portfolio_id: UUID) -> Portfolio: ...

    @abstractmethod
    def list_for_owner(self, *, owner_id: str) -> list[Portfolio]: ...

    @abstractmethod
    def add_transaction(self, tx: Transaction) -> None: ...

    @abstractmethod
    def list_transactions(self, *, portfolio_id: UUID) -> list[Transaction]: ...

    @abstractmethod
    def distinct_symbols(self, *, portfolio_ids: Iterable[UUID]) -> list[str]:
        """Distinct transaction symbols across portfolios, in first-seen order."""

    @abstractmethod
    def holders_of(self, *, symbols: Iterable[str]) -> dict[str, list[str]]:
        """{symbol: [owner ids whose portfolios hold a transaction for it]}"""
