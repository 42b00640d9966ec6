"""Shared fixtures for FinChat tests."""

import asyncio
import os
from datetime import date, datetime, timezone

import pytest
from fastapi.testclient import TestClient

# Ensure we use test/mock settings
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("PINECONE_API_KEY", "")
os.environ.setdefault("HUGGINGFACE_API_TOKEN", "test-token")

from market_data.models import DailyBar, NewsItem, RealTimeQuote, StockSentimentRecord, SymbolMatch
from market_data.sentiment import SentimentScore


# ── Fakes ─────────────────────────────────────────────────────────

class FakeLLM:
    """Returns queued responses in order; queued exceptions are raised."""

    def __init__(self, responses=None, always_fail=False):
        self.responses = list(responses or [])
        self.always_fail = always_fail
        self.calls = []

    async def agenerate(self, prompt, system=None, max_tokens=None, temperature=None):
        self.calls.append({
            "prompt": prompt,
            "system": system,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        if self.always_fail or not self.responses:
            raise RuntimeError("provider unavailable")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


class FakeQuoteProvider:
    """Blocking provider stub in the shape of YahooFinanceProvider."""

    def __init__(self, quotes=None, bars=None, matches=None):
        self.quotes = quotes or {}
        self.bars = bars or {}
        self.matches = matches or {}
        self.quote_calls = 0
        self.history_calls = []
        self.search_calls = 0

    def get_quote(self, symbol):
        self.quote_calls += 1
        return self.quotes.get(symbol)

    def get_history(self, symbol, start, end, interval):
        self.history_calls.append((symbol, start, end, interval))
        return list(self.bars.get(symbol, []))

    def search(self, keywords):
        self.search_calls += 1
        return list(self.matches.get(keywords.lower(), []))


class FakeNewsFeed:
    def __init__(self, items=None, error=None, delay=0.01):
        self.items = items or []
        self.error = error
        self.delay = delay
        self.calls = 0

    async def fetch(self, symbol):
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.items)


class FakeScorer:
    """Scores text by looking it up in a table."""

    def __init__(self, table=None):
        self.table = table or {}
        self.calls = []

    async def score(self, text):
        self.calls.append(text)
        return self.table.get(text, SentimentScore(label="neutral", score=0.5))


class FakeMarketData:
    """Async market data stub in the shape of MarketDataClient."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.quote_calls = []

    async def quote(self, symbol):
        self.quote_calls.append(symbol)
        if symbol in self.failing:
            from market_data.models import QuoteNotFoundError
            raise QuoteNotFoundError(f"No real-time data found for symbol: {symbol}")
        return make_quote(symbol)

    async def history(self, symbol, period="1mo", interval="1d"):
        return make_bars()

    async def news_sentiment(self, symbol):
        return StockSentimentRecord.neutral(symbol)


def make_quote(symbol="MSFT", price=410.5, change=2.25, change_percent=0.55):
    return RealTimeQuote(symbol=symbol, price=price, change=change, change_percent=change_percent)


def make_bars():
    return [
        DailyBar(date=date(2024, 5, 1), open=400.0, high=405.0, low=398.0, close=402.0, volume=1000000),
        DailyBar(date=date(2024, 5, 2), open=402.0, high=412.0, low=401.5, close=410.5, volume=1234567),
    ]


def make_news(n=3):
    return [
        NewsItem(
            title=f"Headline {i}",
            summary=f"Summary {i}",
            published_at=datetime(2024, 5, 2, 12, i, tzinfo=timezone.utc),
        )
        for i in range(n)
    ]


# ── Fixtures ──────────────────────────────────────────────────────

@pytest.fixture
def fake_llm():
    return FakeLLM


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def fake_market_data():
    return FakeMarketData


@pytest.fixture
def fake_quote_provider():
    return FakeQuoteProvider


@pytest.fixture
def fake_news_feed():
    return FakeNewsFeed


@pytest.fixture
def fake_scorer():
    return FakeScorer


@pytest.fixture
def quote_factory():
    return make_quote


@pytest.fixture
def bars_factory():
    return make_bars


@pytest.fixture
def news_factory():
    return make_news


@pytest.fixture
def symbol_matches():
    return {
        "apple": [SymbolMatch(symbol="AAPL", short_name="Apple Inc.", exchange="NASDAQ", type="Equity")],
    }


@pytest.fixture
def services(monkeypatch, symbol_matches):
    """Services container wired with fakes and installed as the API singleton."""
    from api import services as services_module
    from llm.orchestrator import ChatOrchestrator
    from llm.suggestions import SuggestionGenerator
    from market_data.cache import TTLCache
    from market_data.client import MarketDataClient
    from retrieval.context_enricher import ContextEnricher

    svc = services_module.Services()
    svc.primary_llm = FakeLLM()
    svc.secondary_llm = FakeLLM()
    svc.market_data = MarketDataClient(
        provider=FakeQuoteProvider(matches=symbol_matches),
        news_feed=FakeNewsFeed(),
        sentiment_scorer=FakeScorer(),
        cache=TTLCache(),
    )
    svc.context_enricher = ContextEnricher(market_data=FakeMarketData())
    svc.orchestrator = ChatOrchestrator(
        primary_llm=svc.primary_llm,
        secondary_llm=svc.secondary_llm,
        context_enricher=svc.context_enricher,
        sleep=RecordingSleep(),
    )
    svc.suggestion_generator = SuggestionGenerator(llm=svc.primary_llm)
    svc._initialized = True

    monkeypatch.setattr(services_module, "_services", svc)
    return svc


@pytest.fixture
def client(services):
    """Create a FastAPI test client backed by fake services."""
    from api.main import app
    return TestClient(app)
