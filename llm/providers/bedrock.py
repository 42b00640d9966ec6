"""
AWS Bedrock LLM Provider (secondary).
"""

import asyncio
import json
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class BedrockProvider:
    """
    AWS Bedrock provider for Claude models.

    Used as the fallback provider: it takes one combined prompt string with no
    separate system message.
    """

    DEFAULT_MODEL = "us.anthropic.claude-sonnet-4-20250514-v1:0"

    def __init__(
        self,
        model_id: str = DEFAULT_MODEL,
        region: str = "us-east-1",
        max_tokens: int = 1024,
        temperature: float = 0.7,
        client: Optional[Any] = None
    ):
        """
        Initialize Bedrock provider.

        Args:
            model_id: Bedrock model ID
            region: AWS region
            max_tokens: Maximum tokens for response
            temperature: Generation temperature
            client: Pre-built bedrock-runtime client
        """
        self.model_id = model_id
        self.region = region
        self.max_tokens = max_tokens
        self.temperature = temperature

        self._client = client or boto3.client("bedrock-runtime", region_name=region)
        logger.info(f"Bedrock provider initialized: {model_id} in {region}")

    def generate(self, prompt: str) -> str:
        """
        Generate response from a single combined prompt.

        Args:
            prompt: Full prompt text

        Returns:
            Generated response
        """
        body = {
            "anthropic_version": "bedrock-2023-05-31",
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": prompt}]
                }
            ]
        }

        try:
            response = self._client.invoke_model(
                modelId=self.model_id,
                body=json.dumps(body),
                contentType="application/json",
                accept="application/json",
            )
        except ClientError as e:
            logger.error(f"Bedrock API error: {e}")
            raise

        response_body = json.loads(response["body"].read())

        if "content" in response_body and response_body["content"]:
            return response_body["content"][0]["text"].strip()

        raise ValueError("Empty response from Bedrock")

    async def agenerate(self, prompt: str) -> str:
        """Async wrapper for generate."""
        # boto3 is blocking; keep the event loop free
        return await asyncio.to_thread(self.generate, prompt)
