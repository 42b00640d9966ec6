"""
Remote market data sources.

Quotes, price history and symbol search come from Yahoo Finance through
yfinance; headlines come from the Yahoo Finance RSS feed.
"""

import logging
from datetime import date, datetime
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional

import httpx
import yfinance as yf
from defusedxml import ElementTree

from .models import DailyBar, NewsItem, RealTimeQuote, SymbolMatch

logger = logging.getLogger(__name__)


class YahooFinanceProvider:
    """
    Blocking Yahoo Finance adapter.

    Methods return ``None`` or an empty list when Yahoo has no data; transport
    errors propagate.
    """

    def get_quote(self, symbol: str) -> Optional[RealTimeQuote]:
        info: Dict[str, Any] = yf.Ticker(symbol).info or {}
        price = info.get("regularMarketPrice") or info.get("currentPrice")
        if price is None:
            return None

        change = info.get("regularMarketChange")
        change_percent = info.get("regularMarketChangePercent")
        previous_close = info.get("regularMarketPreviousClose") or info.get("previousClose")
        if change is None and previous_close:
            change = price - previous_close
        if change_percent is None and previous_close:
            change_percent = (change or 0.0) / previous_close * 100

        return RealTimeQuote(
            symbol=info.get("symbol", symbol),
            price=float(price),
            change=float(change or 0.0),
            change_percent=float(change_percent or 0.0),
            currency=info.get("currency"),
        )

    def get_history(self, symbol: str, start: date, end: date, interval: str) -> List[DailyBar]:
        frame = yf.Ticker(symbol).history(
            start=start.isoformat(),
            end=end.isoformat(),
            interval=interval,
            auto_adjust=False,
        )
        if frame is None or frame.empty:
            return []

        bars = []
        for timestamp, row in frame.iterrows():
            bars.append(DailyBar(
                date=timestamp.date(),
                open=float(row["Open"]),
                high=float(row["High"]),
                low=float(row["Low"]),
                close=float(row["Close"]),
                volume=int(row["Volume"]),
            ))
        return bars

    def search(self, keywords: str) -> List[SymbolMatch]:
        quotes = yf.Search(keywords).quotes or []
        return [
            SymbolMatch(
                symbol=q["symbol"],
                short_name=q.get("shortname"),
                exchange=q.get("exchDisp"),
                type=q.get("typeDisp"),
            )
            for q in quotes
            if q.get("symbol")
        ]


class RSSNewsFeed:
    """Per-symbol headline feed."""

    def __init__(
        self,
        url_template: str = "https://finance.yahoo.com/rss/headline?s={symbol}",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.url_template = url_template
        self.timeout = timeout
        self._http_client = http_client

    async def _get(self, url: str) -> httpx.Response:
        headers = {"User-Agent": "Mozilla/5.0 (compatible; finchat/1.0)"}
        if self._http_client is not None:
            return await self._http_client.get(url, headers=headers, timeout=self.timeout)
        async with httpx.AsyncClient(follow_redirects=True) as client:
            return await client.get(url, headers=headers, timeout=self.timeout)

    async def fetch(self, symbol: str) -> List[NewsItem]:
        url = self.url_template.format(symbol=symbol)
        response = await self._get(url)
        response.raise_for_status()
        return parse_rss(response.content)


def parse_rss(content: bytes) -> List[NewsItem]:
    """Parse RSS 2.0 ``<item>`` entries."""
    root = ElementTree.fromstring(content)
    items = []
    for node in root.iter("item"):
        title = (node.findtext("title") or "").strip()
        summary = (node.findtext("description") or "").strip()
        items.append(NewsItem(
            title=title,
            summary=summary,
            published_at=_parse_date(node.findtext("pubDate")),
        ))
    return items


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return parsedate_to_datetime(value.strip())
    except (TypeError, ValueError):
        logger.debug(f"Unparseable feed date: {value}")
        return None
