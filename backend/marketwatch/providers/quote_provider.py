from __future__ import annotations

from typing import Protocol

from marketwatch.domain.quote import FetchedQuote


class QuoteProvider(Protocol):
    source: str

    def fetch(self, *, symbol: str) -> FetchedQuote | None:
        """
        One upstream request for one symbol.
        - returns None when the provider answered without usable data
        - raises UpstreamFetchError on request-level failures
        """
        ...
