"""
Context Enricher for the FinChat backend.

Gathers persona-specific supporting context before generation:
- support: nearest bank intents for the prompt
- stock-market: quote, history and news sentiment per ticker in the prompt
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from llm.conversation import mentions
from llm.prompt_templates import describe
from market_data.models import DailyBar, RealTimeQuote, StockSentimentRecord

logger = logging.getLogger(__name__)


# Uppercase tokens of 1-5 letters with an optional exchange suffix (BRK.B, SHOP.TO).
# Ordinary capitalised words such as "I" or "USA" also match.
SYMBOL_PATTERN = re.compile(r"\b[A-Z]{1,5}(?:\.[A-Z]{1,4})?\b")

QUOTE_HEADER = "Real-Time Stock Quote for {symbol}:"


@dataclass
class EnrichmentResult:
    """Context produced for one request."""
    updated_history_text: str
    intentions_text: str = ""
    market_text: str = ""


def extract_symbols(prompt: str) -> List[str]:
    """Candidate ticker symbols in order of first appearance."""
    seen = []
    for match in SYMBOL_PATTERN.findall(prompt or ""):
        if match not in seen:
            seen.append(match)
    return seen


def format_stock_quote(symbol: str, quote: RealTimeQuote, bars: List[DailyBar]) -> str:
    latest = bars[0]
    return (
        f"**{QUOTE_HEADER.format(symbol=symbol)}**\n"
        f"- **Price:** ${quote.price:.2f}\n"
        f"- **Change:** {quote.change:.2f} ({quote.change_percent:.2f}%)\n"
        f"- **Last Trading Day:** {latest.date.isoformat()}\n"
        f"- **Open:** ${latest.open:.2f}\n"
        f"- **High:** ${latest.high:.2f}\n"
        f"- **Low:** ${latest.low:.2f}\n"
        f"- **Close:** ${latest.close:.2f}\n"
        f"- **Volume:** {latest.volume:,}"
    )


def format_news_sentiment(symbol: str, record: StockSentimentRecord) -> str:
    if not record.articles:
        return "No recent news sentiment data available for this stock."
    return (
        f"**News Sentiment for {symbol}:**\n"
        f"- **Average Sentiment Score:** {record.average_score:.2f} ({record.average_label})\n"
        f"- **Number of Articles Analyzed:** {len(record.articles)}"
    )


def symbol_unavailable(symbol: str) -> str:
    return (
        f"Sorry, I couldn't retrieve complete data for the stock symbol \"{symbol}\". "
        "Please ensure it's correct and try again."
    )


class ContextEnricher:
    """
    Produces the enrichment for a request.

    Stock data already present in the history is reused, never refetched.
    """

    def __init__(
        self,
        embedding_service: Optional[Any] = None,
        search_client: Optional[Any] = None,
        market_data: Optional[Any] = None,
        history_period: str = "1mo",
        history_interval: str = "1d"
    ):
        """
        Initialize the enricher.

        Args:
            embedding_service: Text embedder (support persona)
            search_client: Intent similarity search (support persona)
            market_data: Market data client (stock-market persona)
            history_period: Price history window for stock blocks
            history_interval: Bar interval for stock blocks
        """
        self.embedding_service = embedding_service
        self.search_client = search_client
        self.market_data = market_data
        self.history_period = history_period
        self.history_interval = history_interval

    async def enrich(self, prompt: str, history_text: str, persona: Any) -> EnrichmentResult:
        """
        Build the enrichment for ``prompt``.

        Args:
            prompt: Raw user prompt
            history_text: Flattened conversation history (not modified)
            persona: Persona or chatbot tag

        Returns:
            EnrichmentResult with the working copy of the history
        """
        history_text = history_text or ""
        descriptor = describe(persona)

        if descriptor.requires_semantic_context:
            intentions = await self._intentions(prompt)
            return EnrichmentResult(updated_history_text=history_text, intentions_text=intentions)

        if descriptor.requires_market_context:
            market_text = await self._market_context(prompt, history_text)
            updated = f"{history_text}\n{market_text}" if market_text else history_text
            return EnrichmentResult(updated_history_text=updated, market_text=market_text)

        return EnrichmentResult(updated_history_text=history_text)

    async def _intentions(self, prompt: str) -> str:
        if self.embedding_service is None or self.search_client is None:
            raise RuntimeError("Semantic search is not configured")

        # Embedding and search errors are terminal for the request
        embedding = await self.embedding_service.embed_text(prompt)
        ids = await self.search_client.search(embedding)
        logger.info(f"Matched {len(ids)} intents")
        return f"Relevant intentions: {', '.join(ids)}"

    async def _market_context(self, prompt: str, history_text: str) -> str:
        symbols = extract_symbols(prompt)
        if not symbols:
            return ""

        to_fetch = []
        for symbol in symbols:
            if mentions(history_text, QUOTE_HEADER.format(symbol=symbol)):
                logger.info(f"Stock data for {symbol} is already in the context.")
                continue
            to_fetch.append(symbol)

        if not to_fetch:
            return ""

        logger.info(f"Fetching stock data for symbols: {to_fetch}")
        blocks = await asyncio.gather(*[self._stock_block(s) for s in to_fetch])
        return "\n\n".join(b for b in blocks if b)

    async def _stock_block(self, symbol: str) -> str:
        try:
            results = await asyncio.gather(
                self.market_data.quote(symbol),
                self.market_data.history(symbol, self.history_period, self.history_interval),
                self.market_data.news_sentiment(symbol),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, Exception):
                    raise result
            quote, bars, sentiment = results
            return f"{format_stock_quote(symbol, quote, bars)}\n\n{format_news_sentiment(symbol, sentiment)}"
        except Exception as e:
            logger.error(f"Error fetching stock data for {symbol}: {e}")
            return symbol_unavailable(symbol)
