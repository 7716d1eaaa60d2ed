from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from marketwatch.domain.quote import normalize_symbol


@dataclass(frozen=True, slots=True)
class StockSymbol:
    """Catalogue entry used by symbol search; not tied to any quote."""

    symbol: str
    name: str
    exchange: Optional[str] = None
    sector: Optional[str] = None
    industry: Optional[str] = None
    market_cap: Optional[int] = None
    is_popular: bool = False

    @classmethod
    def create(
        cls,
        *,
        symbol: str,
        name: str,
        exchange: Optional[str] = None,
        sector: Optional[str] = None,
        industry: Optional[str] = None,
        market_cap: Optional[int] = None,
        is_popular: bool = False,
    ) -> "StockSymbol":
        def clean(v: Optional[str]) -> Optional[str]:
            return v.strip() if isinstance(v, str) and v.strip() else None

        return cls(
            symbol=normalize_symbol(symbol),
            name=name.strip(),
            exchange=clean(exchange),
            sector=clean(sector),
            industry=clean(industry),
            market_cap=market_cap,
            is_popular=is_popular,
        )

    def __post_init__(self) -> None:
        if not self.symbol:
            raise ValueError("stock_symbol.symbol must be non-empty")
        if not self.name or not self.name.strip():
            raise ValueError("stock_symbol.name must be non-empty")
        if self.market_cap is not None and self.market_cap < 0:
            raise ValueError("stock_symbol.market_cap must be >= 0")
