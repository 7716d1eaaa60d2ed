from __future__ import annotations

from abc import ABC, abstractmethod

from marketwatch.domain.stock_symbol import StockSymbol


class StockSymbolRepository(ABC):
    @abstractmethod
    def upsert(self, stock: StockSymbol) -> StockSymbol: ...

    @abstractmethod
    def get(self, symbol: str) -> StockSymbol: ...

    @abstractmethod
    def delete(self, symbol: str) -> bool: ...

    @abstractmethod
    def search(self, *, query: str | None = None, limit: int = 50) -> list[StockSymbol]:
        """Match on symbol, name or sector; popular entries first, then by symbol."""
