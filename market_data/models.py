"""
Market data records returned by the market data client.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional


class MarketDataError(Exception):
    """Base class for market data lookup failures."""


class QuoteNotFoundError(MarketDataError):
    """The provider returned no real-time quote for a symbol."""


class HistoryNotFoundError(MarketDataError):
    """The provider returned no price history for a symbol."""


class SymbolNotFoundError(MarketDataError):
    """No listed symbol matched the search keywords."""


@dataclass(frozen=True)
class RealTimeQuote:
    symbol: str
    price: float
    change: float
    change_percent: float
    currency: Optional[str] = None


@dataclass(frozen=True)
class DailyBar:
    date: date
    open: float
    high: float
    low: float
    close: float
    volume: int


@dataclass(frozen=True)
class SymbolMatch:
    symbol: str
    short_name: Optional[str] = None
    exchange: Optional[str] = None
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "shortName": self.short_name,
            "exchange": self.exchange,
            "type": self.type,
        }


@dataclass(frozen=True)
class NewsItem:
    """One entry of a per-symbol headline feed."""
    title: str
    summary: str
    published_at: Optional[datetime] = None


@dataclass(frozen=True)
class ScoredArticle:
    title: str
    published_at: Optional[datetime]
    sentiment_label: str
    sentiment_score: float


# Label to signed value used when aggregating article sentiment.
SENTIMENT_VALUES = {"positive": 1, "neutral": 0, "negative": -1}


@dataclass
class StockSentimentRecord:
    symbol: str
    articles: List[ScoredArticle] = field(default_factory=list)
    average_score: float = 0.0
    average_label: str = "Neutral"

    @classmethod
    def neutral(cls, symbol: str) -> "StockSentimentRecord":
        return cls(symbol=symbol)

    @classmethod
    def from_articles(cls, symbol: str, articles: List[ScoredArticle]) -> "StockSentimentRecord":
        """
        Aggregate article sentiment into one score and label.

        Each article contributes its signed label value weighted by its
        confidence. The mean is labelled Positive above 0.1, Negative below
        -0.1, Neutral otherwise.
        """
        if not articles:
            return cls.neutral(symbol)

        weighted = [
            SENTIMENT_VALUES.get(a.sentiment_label.lower(), 0) * a.sentiment_score
            for a in articles
        ]
        average = sum(weighted) / len(articles)

        label = "Neutral"
        if average > 0.1:
            label = "Positive"
        elif average < -0.1:
            label = "Negative"

        return cls(symbol=symbol, articles=list(articles), average_score=average, average_label=label)
