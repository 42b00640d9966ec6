"""
Chat Orchestrator for the FinChat backend.

Runs the pipeline from a chatbot request to a response: enrichment, prompt
assembly, primary generation with retry, secondary fallback and title
generation.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional

from .prompt_templates import PersonaDescriptor, PromptTemplates, describe
from .providers.base import ChatProvider, CompletionProvider
from .retry import retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Chat"


class BothProvidersFailedError(Exception):
    """Raised when the primary and the secondary LLM provider both fail."""


@dataclass
class GenerationResult:
    """Generated answer and optional title."""
    response_text: str
    title: Optional[str] = None
    provider: str = "primary"


@dataclass
class ChatRequest:
    """Request for chat completion."""
    prompt: str
    chatbot: str
    context: str = ""
    generate_title: bool = False
    interest_rate: Optional[float] = None


@dataclass
class ChatResponse:
    """Response from chat completion."""
    message: str
    title: Optional[str] = None
    persona: str = "default"
    provider: str = "primary"
    processing_time_ms: float = 0.0
    timestamp: str = field(default_factory=lambda: datetime.utcnow().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "message": self.message,
            "title": self.title,
            "persona": self.persona,
            "provider": self.provider,
            "processing_time_ms": self.processing_time_ms,
            "timestamp": self.timestamp,
        }


class ChatOrchestrator:
    """
    Orchestrates the chat pipeline.

    Pipeline:
    1. Resolve persona
    2. Enrich context (intents or market data)
    3. Build prompt
    4. Generate with the primary provider, retrying with backoff
    5. Fall back to the secondary provider once retries are exhausted
    6. Generate a title when requested (primary path only)
    7. Return response
    """

    def __init__(
        self,
        primary_llm: ChatProvider,
        secondary_llm: Optional[CompletionProvider] = None,
        context_enricher: Optional[Any] = None,
        max_tokens: int = 150,
        title_max_tokens: int = 50,
        temperature: float = 0.7,
        retry_attempts: int = 3,
        retry_initial_delay_ms: int = 1000,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            primary_llm: Chat provider with system/user messages
            secondary_llm: Fallback provider taking one combined prompt
            context_enricher: Enricher for persona context
            max_tokens: Max tokens for the response
            title_max_tokens: Max tokens for the title
            temperature: Temperature for generation
            retry_attempts: Retries for the primary response call
            retry_initial_delay_ms: First backoff delay
            sleep: Awaitable sleep used between retries
        """
        self.primary_llm = primary_llm
        self.secondary_llm = secondary_llm
        self.context_enricher = context_enricher
        self.max_tokens = max_tokens
        self.title_max_tokens = title_max_tokens
        self.temperature = temperature
        self.retry_attempts = retry_attempts
        self.retry_initial_delay_ms = retry_initial_delay_ms
        self._sleep = sleep or asyncio.sleep

    async def process(self, request: ChatRequest) -> ChatResponse:
        """
        Process a chat request through the full pipeline.

        Args:
            request: Chat request

        Returns:
            Chat response; fetched market data is prepended to the message
        """
        start_time = time.time()
        descriptor = describe(request.chatbot)

        intentions = ""
        history_text = request.context or ""
        market_text = ""
        if self.context_enricher is not None:
            enrichment = await self.context_enricher.enrich(
                request.prompt, history_text, descriptor.persona
            )
            intentions = enrichment.intentions_text
            history_text = enrichment.updated_history_text
            market_text = enrichment.market_text

        result = await self.generate(
            prompt=request.prompt,
            history_text=history_text,
            intentions=intentions,
            want_title=request.generate_title,
            persona=descriptor.persona,
            interest_rate=request.interest_rate,
        )

        message = result.response_text
        if market_text:
            message = f"{market_text}\n\n{result.response_text}".strip()

        processing_time = (time.time() - start_time) * 1000
        return ChatResponse(
            message=message,
            title=result.title,
            persona=descriptor.persona.value,
            provider=result.provider,
            processing_time_ms=round(processing_time, 2),
        )

    async def generate(
        self,
        prompt: str,
        history_text: str,
        intentions: str,
        want_title: bool,
        persona: Any,
        interest_rate: Optional[float] = None
    ) -> GenerationResult:
        """
        Generate the answer for an enriched request.

        Args:
            prompt: Raw user prompt
            history_text: Conversation transcript including enrichment
            intentions: Retrieved intent text
            want_title: Also generate a conversation title
            persona: Persona or chatbot tag
            interest_rate: Required interest rate (financial planning)

        Returns:
            GenerationResult; ``title`` is None on the fallback path

        Raises:
            BothProvidersFailedError: if the secondary provider fails too
        """
        descriptor = describe(persona)
        base_prompt = PromptTemplates.build_response_prompt(
            descriptor, query=prompt, history=history_text, intentions=intentions
        )
        user_prompt = PromptTemplates.add_interest_rate(descriptor, base_prompt, interest_rate)
        system_prompt = PromptTemplates.get_system_prompt(descriptor)

        try:
            response_text = await retry_with_backoff(
                lambda: self.primary_llm.agenerate(
                    user_prompt,
                    system=system_prompt,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                ),
                max_attempts=self.retry_attempts,
                initial_delay_ms=self.retry_initial_delay_ms,
                sleep=self._sleep,
            )
        except Exception as e:
            logger.error(f"Error connecting to primary provider, falling back to secondary: {e}")
            return await self._generate_fallback(base_prompt)

        title = None
        if want_title:
            title = await self.generate_title(prompt, descriptor)

        return GenerationResult(response_text=response_text.strip(), title=title)

    async def _generate_fallback(self, prompt: str) -> GenerationResult:
        """Single unretried call to the secondary provider, without a title."""
        if self.secondary_llm is None:
            raise BothProvidersFailedError("Primary provider failed and no secondary provider is configured.")

        try:
            text = await self.secondary_llm.agenerate(prompt)
        except Exception as e:
            logger.error(f"Error connecting to secondary provider: {e}")
            raise BothProvidersFailedError("Both primary and secondary LLM providers failed.") from e

        return GenerationResult(response_text=text.strip(), title=None, provider="secondary")

    async def generate_title(self, prompt: str, descriptor: PersonaDescriptor) -> str:
        """
        Generate a short conversation title from the raw user prompt.

        Any failure yields ``"New Chat"``.
        """
        logger.info(f"Generating chat title for: {prompt[:80]}")
        try:
            title = await self.primary_llm.agenerate(
                PromptTemplates.build_title_prompt(descriptor, prompt),
                system=PromptTemplates.TITLE_SYSTEM_PROMPT,
                max_tokens=self.title_max_tokens,
            )
        except Exception as e:
            logger.error(f"Error generating chat title: {e}")
            return DEFAULT_TITLE

        title = (title or "").strip()
        return title or DEFAULT_TITLE
