"""
Suggested follow-up prompts for the chat widget.
"""

import logging
import re
from typing import Any, List

from .prompt_templates import PromptTemplates, describe
from .providers.base import ChatProvider

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5

# "1.", "2)", "-", "*" or "•" list markers
_LIST_MARKER = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s+")
_QUOTES = "\"'“”"


def normalize_suggestions(raw: str, limit: int = MAX_SUGGESTIONS) -> List[str]:
    """Split model output into clean, unnumbered, unquoted prompts."""
    prompts = []
    for line in (raw or "").splitlines():
        line = _LIST_MARKER.sub("", line.strip()).strip().strip(_QUOTES).strip()
        if line:
            prompts.append(line)
    return prompts[:limit]


class SuggestionGenerator:
    """
    Asks the primary LLM for follow-up prompts.

    One call, no retry and no fallback: any failure yields an empty list.
    """

    def __init__(self, llm: ChatProvider, max_tokens: int = 150, temperature: float = 0.7):
        self.llm = llm
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def suggest(self, history_text: str, persona: Any) -> List[str]:
        descriptor = describe(persona)
        prompt = PromptTemplates.build_suggestion_prompt(descriptor, history_text or "")

        try:
            raw = await self.llm.agenerate(
                prompt,
                system=PromptTemplates.SUGGESTION_SYSTEM_PROMPT,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            logger.error(f"Error generating suggested prompts: {e}")
            return []

        prompts = normalize_suggestions(raw)
        logger.info(f"Generated {len(prompts)} suggested prompts")
        return prompts
