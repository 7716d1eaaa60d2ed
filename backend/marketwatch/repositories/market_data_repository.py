from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable

from marketwatch.domain.price_point import HistoricalPricePoint
from marketwatch.domain.quote import Quote


class MarketDataRepository(ABC):
    @abstractmethod
    def upsert_quote(self, quote: Quote) -> None: ...

    @abstractmethod
    def get_quote(self, *, symbol: str) -> Quote | None: ...

    @abstractmethod
    def list_quotes(self, *, symbols: Iterable[str] | None = None) -> list[Quote]: ...

    @abstractmethod
    def current_prices(self, *, symbols: Iterable[str]) -> dict[str, Decimal]: ...

    @abstractmethod
    def add_history_point(self, point: HistoricalPricePoint) -> None: ...

    @abstractmethod
    def list_history(self, *, symbol: str, limit: int | None = None) -> list[HistoricalPricePoint]: ...
