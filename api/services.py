"""
Service initialization and dependency injection for the FinChat API.

Creates and manages all service instances used by the API.
"""

import logging
from typing import Optional

from config.settings import get_settings, Settings
from retrieval.embedder import EmbeddingService, EmbeddingConfig
from retrieval.pinecone_client import PineconeClient, PineconeConfig
from retrieval.context_enricher import ContextEnricher
from market_data.cache import TTLCache, PendingRequestRegistry
from market_data.client import MarketDataClient
from market_data.providers import RSSNewsFeed, YahooFinanceProvider
from market_data.sentiment import SentimentScorer
from llm.providers import BedrockProvider, OpenAIProvider
from llm.orchestrator import ChatOrchestrator
from llm.suggestions import SuggestionGenerator

logger = logging.getLogger(__name__)


class Services:
    """Container for all application services."""

    def __init__(self):
        self.settings: Optional[Settings] = None
        self.embedding_service: Optional[EmbeddingService] = None
        self.pinecone_client: Optional[PineconeClient] = None
        self.market_data: Optional[MarketDataClient] = None
        self.context_enricher: Optional[ContextEnricher] = None
        self.primary_llm: Optional[OpenAIProvider] = None
        self.secondary_llm: Optional[BedrockProvider] = None
        self.orchestrator: Optional[ChatOrchestrator] = None
        self.suggestion_generator: Optional[SuggestionGenerator] = None
        self._initialized = False

    def initialize(self):
        """Initialize all services."""
        if self._initialized:
            return

        self.settings = get_settings()
        logger.info(f"Initializing services with model: {self.settings.openai_llm_model}")

        steps = (
            self._init_embedding,
            self._init_pinecone,
            self._init_market_data,
            self._init_llm,
            self._init_orchestrator,
        )
        for step in steps:
            try:
                step()
            except Exception as e:
                # Allow API to start even if some services fail
                logger.error(f"Service initialization step {step.__name__} failed: {e}")

        self._initialized = True
        if self.is_ready:
            logger.info("All services initialized successfully")
        else:
            logger.warning("API starting in degraded mode")

    def _init_embedding(self):
        """Initialize embedding service."""
        s = self.settings

        if not s.huggingface_api_token:
            logger.warning("HUGGINGFACE_API_TOKEN not set, embeddings will be unauthenticated")

        config = EmbeddingConfig(
            endpoint_url=s.hf_embedding_url,
            api_token=s.huggingface_api_token,
            dimension=s.embedding_dimension,
            timeout=s.http_timeout_seconds,
        )
        self.embedding_service = EmbeddingService(config)
        logger.info("Embedding service ready")

    def _init_pinecone(self):
        """Initialize Pinecone client."""
        s = self.settings

        if not s.pinecone_api_key:
            logger.warning("PINECONE_API_KEY not set, intent search disabled")
            return

        config = PineconeConfig(
            api_key=s.pinecone_api_key,
            index_name=s.pinecone_index_name,
            dimension=s.embedding_dimension,
            top_k=s.top_k,
            nprobe=s.search_nprobe,
            consistency=s.search_consistency,
        )
        self.pinecone_client = PineconeClient(config)
        logger.info("Pinecone client ready")

    def _init_market_data(self):
        """Initialize market data client and its sentiment scorer."""
        s = self.settings

        cache = TTLCache(ttl_seconds=s.cache_ttl_seconds, maxsize=s.cache_max_entries)
        scorer = SentimentScorer(
            cache=cache,
            api_token=s.huggingface_api_token,
            endpoint_url=s.hf_sentiment_url,
            timeout=s.http_timeout_seconds,
        )
        self.market_data = MarketDataClient(
            provider=YahooFinanceProvider(),
            news_feed=RSSNewsFeed(url_template=s.news_feed_url, timeout=s.http_timeout_seconds),
            sentiment_scorer=scorer,
            cache=cache,
            pending=PendingRequestRegistry(),
            news_limit=s.news_limit,
        )
        logger.info("Market data client ready")

    def _init_llm(self):
        """Initialize primary and secondary LLM providers."""
        s = self.settings

        self.primary_llm = OpenAIProvider(
            api_key=s.openai_api_key,
            model_id=s.openai_llm_model,
            max_tokens=s.max_tokens,
            temperature=s.temperature,
        )

        try:
            self.secondary_llm = BedrockProvider(
                model_id=s.bedrock_llm_model_id,
                region=s.aws_region,
                max_tokens=s.max_tokens,
                temperature=s.temperature,
            )
        except Exception as e:
            logger.warning(f"Bedrock unavailable, running without a fallback provider: {e}")

    def _init_orchestrator(self):
        """Initialize the enricher, chat orchestrator and suggestion generator."""
        s = self.settings

        self.context_enricher = ContextEnricher(
            embedding_service=self.embedding_service,
            search_client=self.pinecone_client,
            market_data=self.market_data,
        )

        self.orchestrator = ChatOrchestrator(
            primary_llm=self.primary_llm,
            secondary_llm=self.secondary_llm,
            context_enricher=self.context_enricher,
            max_tokens=s.max_tokens,
            title_max_tokens=s.title_max_tokens,
            temperature=s.temperature,
            retry_attempts=s.retry_max_attempts,
            retry_initial_delay_ms=s.retry_initial_delay_ms,
        )

        self.suggestion_generator = SuggestionGenerator(
            llm=self.primary_llm,
            max_tokens=s.max_tokens,
            temperature=s.temperature,
        )
        logger.info("Chat orchestrator ready")

    @property
    def is_ready(self) -> bool:
        return self._initialized and self.orchestrator is not None and self.primary_llm is not None

    def health(self) -> dict:
        """Return health status of all services."""
        return {
            "initialized": self._initialized,
            "embedding": self.embedding_service is not None,
            "pinecone": self.pinecone_client is not None,
            "market_data": self.market_data is not None,
            "primary_llm": self.primary_llm is not None,
            "secondary_llm": self.secondary_llm is not None,
            "orchestrator": self.orchestrator is not None,
        }


# Singleton
_services = Services()


def get_services() -> Services:
    """Get the global services instance."""
    return _services


def initialize_services():
    """Initialize all services (called at startup)."""
    _services.initialize()
