"""Stock quotes from the Yahoo Finance chart endpoint."""

from __future__ import annotations

import logging

import httpx

from feedtui.feeds import FeedFetchError, HttpFetcher, StockQuote, StocksData

logger = logging.getLogger(__name__)

YAHOO_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{}"


def parse_chart(symbol: str, data: dict) -> StockQuote:
    """Build a quote from a chart response's ``meta`` block."""
    try:
        meta = data["chart"]["result"][0]["meta"]
        price = float(meta["regularMarketPrice"])
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise FeedFetchError(f"No quote data for {symbol}") from e

    previous = meta.get("chartPreviousClose") or meta.get("previousClose") or price
    previous = float(previous)
    change = price - previous
    change_percent = (change / previous * 100) if previous else 0.0

    return StockQuote(
        symbol=meta.get("symbol", symbol),
        price=price,
        change=change,
        change_percent=change_percent,
        name=meta.get("shortName") or meta.get("longName") or symbol,
    )


class StocksFetcher(HttpFetcher):
    def __init__(
        self,
        symbols: list[str],
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(transport)
        self._symbols = list(symbols)

    async def fetch(self) -> StocksData:
        quotes: list[StockQuote] = []
        errors: list[str] = []

        async with self._client() as client:
            for symbol in self._symbols:
                try:
                    resp = await client.get(
                        YAHOO_CHART_URL.format(symbol),
                        params={"range": "1d", "interval": "1d"},
                    )
                    resp.raise_for_status()
                    quotes.append(parse_chart(symbol, resp.json()))
                except (httpx.HTTPError, FeedFetchError) as e:
                    logger.warning("Quote for %s failed: %s", symbol, e)
                    errors.append(symbol)

        if self._symbols and not quotes:
            raise FeedFetchError(f"No quotes available ({', '.join(errors)})")
        return StocksData(tuple(quotes))
