"""
Embedding Service for the FinChat backend.

Turns query text into sentence embeddings via the Hugging Face
feature-extraction pipeline.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import httpx

logger = logging.getLogger(__name__)


class EmbeddingError(Exception):
    """Raised when an embedding cannot be produced or has the wrong size."""


@dataclass
class EmbeddingConfig:
    """Configuration for embedding service."""
    endpoint_url: str = (
        "https://api-inference.huggingface.co/pipeline/feature-extraction/"
        "sentence-transformers/all-mpnet-base-v2"
    )
    api_token: Optional[str] = None
    dimension: int = 768  # all-mpnet-base-v2
    timeout: float = 30.0


class EmbeddingService:
    """
    Service for generating text embeddings.

    Every call goes to the remote pipeline; retries are the caller's concern.
    """

    def __init__(
        self,
        config: Optional[EmbeddingConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the embedding service.

        Args:
            config: Embedding configuration
            http_client: Shared async HTTP client (one is created per call if omitted)
        """
        self.config = config or EmbeddingConfig()
        self._http_client = http_client

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        return headers

    async def _post(self, payload: dict) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(
                self.config.endpoint_url,
                json=payload,
                headers=self._headers(),
                timeout=self.config.timeout,
            )
        async with httpx.AsyncClient() as client:
            return await client.post(
                self.config.endpoint_url,
                json=payload,
                headers=self._headers(),
                timeout=self.config.timeout,
            )

    async def embed_text(self, text: str) -> List[float]:
        """
        Generate embedding for a single text.

        Args:
            text: Input text

        Returns:
            Embedding vector of exactly ``config.dimension`` floats

        Raises:
            EmbeddingError: on transport failure or unexpected vector size
        """
        try:
            response = await self._post({"inputs": text})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Embedding request failed: {e}")
            raise EmbeddingError(f"Embedding request failed: {e}") from e

        if not isinstance(data, list) or len(data) != self.config.dimension:
            size = len(data) if isinstance(data, list) else type(data).__name__
            logger.error(f"Unexpected embedding size: {size}. Expected {self.config.dimension}.")
            raise EmbeddingError(
                f"Unexpected embedding size: {size}. Expected {self.config.dimension}."
            )

        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in data):
            raise EmbeddingError("Embedding response contains non-numeric values")

        logger.debug(f"Generated embedding, dim={len(data)}")
        return [float(v) for v in data]

    def get_dimension(self) -> int:
        """Get the embedding dimension for the configured model."""
        return self.config.dimension

    async def health_check(self) -> bool:
        """
        Check if the embedding service is healthy.

        Returns:
            True if service is operational
        """
        try:
            embedding = await self.embed_text("test")
            return len(embedding) > 0
        except EmbeddingError as e:
            logger.warning(f"Embedding health check failed: {e}")
            return False
