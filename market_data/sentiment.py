"""
Financial news sentiment scoring via Hugging Face inference.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .cache import TTLCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SentimentScore:
    label: str
    score: float


NEUTRAL_SENTIMENT = SentimentScore(label="NEUTRAL", score=0.0)


class SentimentScorer:
    """
    Classifies short text into a sentiment label and confidence.

    Never raises: failures score as ``NEUTRAL`` with confidence 0.
    """

    DEFAULT_URL = (
        "https://api-inference.huggingface.co/models/"
        "mrm8488/distilroberta-finetuned-financial-news-sentiment-analysis"
    )

    def __init__(
        self,
        cache: TTLCache,
        api_token: Optional[str] = None,
        endpoint_url: str = DEFAULT_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.cache = cache
        self.api_token = api_token
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self._http_client = http_client

    async def _post(self, text: str) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }
        if self._http_client is not None:
            return await self._http_client.post(
                self.endpoint_url, json={"inputs": text}, headers=headers, timeout=self.timeout
            )
        async with httpx.AsyncClient() as client:
            return await client.post(
                self.endpoint_url, json={"inputs": text}, headers=headers, timeout=self.timeout
            )

    async def score(self, text: str) -> SentimentScore:
        """
        Score ``text``; results are cached per exact input.

        Args:
            text: Text to classify

        Returns:
            The top label and its confidence
        """
        cache_key = f"sentiment_{text}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit for sentiment analysis.")
            return cached

        if not self.api_token:
            logger.error("Error performing sentiment analysis: Hugging Face API token is not defined.")
            return NEUTRAL_SENTIMENT

        try:
            response = await self._post(text)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error performing sentiment analysis: {e}")
            return NEUTRAL_SENTIMENT

        # Expected shape: [[{"label": ..., "score": ...}, ...]]
        if not (isinstance(data, list) and data and isinstance(data[0], list) and data[0]):
            logger.error("Error performing sentiment analysis: invalid response structure")
            return NEUTRAL_SENTIMENT

        first = data[0][0]
        try:
            result = SentimentScore(label=str(first["label"]), score=float(first["score"]))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Error performing sentiment analysis: {e}")
            return NEUTRAL_SENTIMENT

        self.cache.set(cache_key, result)
        logger.debug("Cache set for sentiment analysis.")
        return result
