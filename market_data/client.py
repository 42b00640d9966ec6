"""
Market Data Client for the FinChat backend.

Cached access to quotes, daily price history, symbol search and news
sentiment. Every lookup reads the TTL cache first and writes it after a
successful fetch.
"""

import asyncio
import calendar
import logging
from datetime import date
from typing import Callable, List, Optional

from .cache import PendingRequestRegistry, TTLCache
from .models import (
    DailyBar,
    HistoryNotFoundError,
    QuoteNotFoundError,
    RealTimeQuote,
    ScoredArticle,
    StockSentimentRecord,
    SymbolMatch,
    SymbolNotFoundError,
)
from .providers import RSSNewsFeed, YahooFinanceProvider
from .sentiment import SentimentScorer

logger = logging.getLogger(__name__)


# Look-back applied to "now" for each supported history period.
PERIOD_MONTHS = {
    "1mo": 1,
    "6mo": 6,
    "1y": 12,
}


def _shift_months(day: date, months: int) -> date:
    """Move ``day`` back by ``months``, clamping to the end of the month."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day.day, last_day))


def period_start(period: str, today: date) -> date:
    """Translate a period code into an absolute start date; unknown codes mean one month."""
    return _shift_months(today, PERIOD_MONTHS.get(period, 1))


class MarketDataClient:
    """
    Client for market data lookups.

    Quote and history lookups fail hard; news sentiment is fail-soft and
    returns a neutral record on any error.
    """

    def __init__(
        self,
        provider: Optional[YahooFinanceProvider] = None,
        news_feed: Optional[RSSNewsFeed] = None,
        sentiment_scorer: Optional[SentimentScorer] = None,
        cache: Optional[TTLCache] = None,
        pending: Optional[PendingRequestRegistry] = None,
        news_limit: int = 10,
        today: Callable[[], date] = date.today,
    ):
        """
        Initialize the market data client.

        Args:
            provider: Quote/history/search source
            news_feed: Per-symbol headline feed
            sentiment_scorer: Scorer for headline text
            cache: Shared TTL cache
            pending: Registry de-duplicating in-flight news fetches
            news_limit: Maximum articles scored per symbol
            today: Date source for history ranges
        """
        self.cache = cache if cache is not None else TTLCache()
        self.provider = provider or YahooFinanceProvider()
        self.news_feed = news_feed or RSSNewsFeed()
        self.sentiment_scorer = sentiment_scorer or SentimentScorer(cache=self.cache)
        self.pending = pending if pending is not None else PendingRequestRegistry()
        self.news_limit = news_limit
        self._today = today

    async def quote(self, symbol: str) -> RealTimeQuote:
        """
        Fetch a real-time quote.

        Raises:
            QuoteNotFoundError: if the provider has no data for ``symbol``
        """
        cache_key = f"real_time_quote_{symbol}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for real-time quote: {symbol}")
            return cached

        try:
            quote = await asyncio.to_thread(self.provider.get_quote, symbol)
        except Exception as e:
            logger.error(f"Error fetching real-time quote for {symbol}: {e}")
            raise

        if quote is None:
            logger.error(f"Error fetching real-time quote for {symbol}: no data")
            raise QuoteNotFoundError(f"No real-time data found for symbol: {symbol}")

        self.cache.set(cache_key, quote)
        logger.info(f"Cache set for real-time quote: {symbol}")
        return quote

    async def history(self, symbol: str, period: str = "1mo", interval: str = "1d") -> List[DailyBar]:
        """
        Fetch daily bars for ``period``, most recent first.

        Raises:
            HistoryNotFoundError: if the provider returns no bars
        """
        cache_key = f"daily_time_series_{symbol}_{period}_{interval}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for daily time series: {symbol}, {period}, {interval}")
            return cached

        end = self._today()
        start = period_start(period, end)

        try:
            bars = await asyncio.to_thread(self.provider.get_history, symbol, start, end, interval)
        except Exception as e:
            logger.error(f"Error fetching daily time series for {symbol}: {e}")
            raise

        if not bars:
            logger.error(f"Error fetching daily time series for {symbol}: no data")
            raise HistoryNotFoundError(f"No historical data found for symbol: {symbol}")

        bars = sorted(bars, key=lambda b: b.date, reverse=True)
        self.cache.set(cache_key, bars)
        logger.info(f"Cache set for daily time series: {symbol}, {period}, {interval}")
        return bars

    async def search_symbol(self, keywords: str) -> List[SymbolMatch]:
        """
        Find listed symbols matching free-text keywords.

        Raises:
            SymbolNotFoundError: if nothing matches
        """
        cache_key = f"symbol_search_{keywords.upper()}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for symbol search: {keywords}")
            return cached

        try:
            matches = await asyncio.to_thread(self.provider.search, keywords)
        except Exception as e:
            logger.error(f"Error searching symbols for \"{keywords}\": {e}")
            raise

        if not matches:
            raise SymbolNotFoundError(f"No matching symbols found for keywords: {keywords}")

        self.cache.set(cache_key, matches)
        logger.info(f"Cache set for symbol search: {keywords}")
        return matches

    async def news_sentiment(self, symbol: str) -> StockSentimentRecord:
        """
        Score recent headlines for ``symbol`` and aggregate them.

        Concurrent calls for the same symbol share one feed fetch. Any failure
        yields a neutral record with no articles, which is not cached.
        """
        cache_key = f"news_sentiment_{symbol}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for news sentiment: {symbol}")
            return cached

        if cache_key in self.pending:
            logger.info(f"Awaiting existing request for news sentiment: {symbol}")
        else:
            logger.info(f"Cache miss for news sentiment: {symbol}. Fetching from feed...")

        try:
            return await self.pending.run(cache_key, lambda: self._fetch_news_sentiment(symbol, cache_key))
        except Exception as e:
            logger.error(f"Error fetching news sentiment for {symbol}: {e}")
            return StockSentimentRecord.neutral(symbol)

    async def _fetch_news_sentiment(self, symbol: str, cache_key: str) -> StockSentimentRecord:
        items = await self.news_feed.fetch(symbol)
        if not items:
            raise ValueError(f"No news articles found for symbol: {symbol}")

        latest = items[:self.news_limit]
        scores = await asyncio.gather(*[
            self.sentiment_scorer.score(item.summary or item.title)
            for item in latest
        ])

        articles = [
            ScoredArticle(
                title=item.title,
                published_at=item.published_at,
                sentiment_label=score.label,
                sentiment_score=score.score,
            )
            for item, score in zip(latest, scores)
        ]

        record = StockSentimentRecord.from_articles(symbol, articles)
        self.cache.set(cache_key, record)
        logger.info(
            f"Cache set for news sentiment: {symbol} "
            f"({len(articles)} articles, avg={record.average_score:.2f} {record.average_label})"
        )
        return record
