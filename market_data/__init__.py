"""
Market Data Module for the FinChat backend.

This module provides:
- Real-time quotes and daily history (Yahoo Finance)
- Headline sentiment scoring (Hugging Face)
- TTL caching with in-flight request de-duplication
"""

from .cache import PendingRequestRegistry, TTLCache
from .client import MarketDataClient
from .models import (
    DailyBar,
    HistoryNotFoundError,
    MarketDataError,
    QuoteNotFoundError,
    RealTimeQuote,
    StockSentimentRecord,
    SymbolNotFoundError,
)
from .sentiment import SentimentScore, SentimentScorer

__all__ = [
    "PendingRequestRegistry",
    "TTLCache",
    "MarketDataClient",
    "DailyBar",
    "HistoryNotFoundError",
    "MarketDataError",
    "QuoteNotFoundError",
    "RealTimeQuote",
    "StockSentimentRecord",
    "SymbolNotFoundError",
    "SentimentScore",
    "SentimentScorer",
]
