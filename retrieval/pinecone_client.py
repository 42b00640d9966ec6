"""
Pinecone Client for the FinChat backend.

Looks up the bank-intent labels closest to a query embedding.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from pinecone import Pinecone

logger = logging.getLogger(__name__)


class InvalidQueryError(ValueError):
    """Raised when a query vector is empty or has the wrong dimension."""


class SearchError(Exception):
    """Raised when the vector index query fails."""


@dataclass
class PineconeConfig:
    """Configuration for Pinecone client."""
    api_key: str
    index_name: str = "banking77_embeddings"
    dimension: int = 768
    metric: str = "dotproduct"  # inner product
    top_k: int = 5
    output_field: str = "intent"
    nprobe: int = 16
    consistency: str = "bounded"


@dataclass
class IntentMatch:
    """One nearest-neighbour hit."""
    id: str
    score: float
    intent: Optional[str] = None


class PineconeClient:
    """
    Read-only client for the intent index.

    The index itself is populated out of band.
    """

    def __init__(self, config: PineconeConfig, index: Optional[Any] = None):
        """
        Initialize the Pinecone client.

        Args:
            config: Pinecone configuration
            index: Pre-built index handle (skips connecting)
        """
        self.config = config
        self._index = index

        if self._index is None:
            self._initialize()

    def _initialize(self):
        """Connect to the existing index."""
        try:
            client = Pinecone(api_key=self.config.api_key)
            self._index = client.Index(self.config.index_name)
            logger.info(
                f"Using Pinecone index '{self.config.index_name}' "
                f"(metric={self.config.metric}, consistency={self.config.consistency})"
            )
        except Exception as e:
            logger.error(f"Failed to initialize Pinecone: {e}")
            raise

    def _validate(self, vector: Sequence[float]) -> List[float]:
        if not isinstance(vector, (list, tuple)) or len(vector) != self.config.dimension:
            raise InvalidQueryError(
                f"Query embedding is invalid or does not have {self.config.dimension} dimensions."
            )
        return list(vector)

    def query(self, vector: Sequence[float]) -> List[IntentMatch]:
        """
        Query for the nearest intents.

        Args:
            vector: Query embedding

        Returns:
            Matches ordered by rank
        """
        values = self._validate(vector)

        try:
            response = self._index.query(
                vector=values,
                top_k=self.config.top_k,
                include_metadata=True,
            )
        except Exception as e:
            logger.error(f"Error searching index '{self.config.index_name}': {e}")
            raise SearchError(f"Vector search failed: {e}") from e

        results = []
        for match in response.matches:
            metadata: Dict[str, Any] = match.metadata or {}
            results.append(IntentMatch(
                id=match.id,
                score=match.score,
                intent=metadata.get(self.config.output_field),
            ))

        logger.debug(f"Query returned {len(results)} results")
        return results

    async def search(self, vector: Sequence[float]) -> List[str]:
        """
        Return the ids of the top matches for ``vector``.

        Raises:
            InvalidQueryError: if the vector is empty or mis-sized
            SearchError: if the remote query fails
        """
        self._validate(vector)
        matches = await asyncio.to_thread(self.query, vector)
        return [m.id for m in matches]

    async def health_check(self) -> bool:
        """
        Check if Pinecone is reachable.

        Returns:
            True if operational
        """
        try:
            await asyncio.to_thread(self._index.describe_index_stats)
            return True
        except Exception as e:
            logger.warning(f"Pinecone health check failed: {e}")
            return False
