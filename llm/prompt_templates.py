"""
Prompt Templates for the FinChat backend.

Each chatbot persona carries its own role text and prompt templates.
Persona lookup is total: unknown tags resolve to the default persona.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class Persona(Enum):
    """Chatbot personas."""
    SUPPORT = "support"
    FINANCIAL_PLANNING = "financial-planning"
    STOCK_MARKET = "stock-market"
    DEFAULT = "default"


@dataclass(frozen=True)
class PersonaDescriptor:
    """Everything the pipeline needs to know about a persona."""
    persona: Persona
    role_text: str
    title_template: str
    response_template: str
    suggestion_template: str
    requires_semantic_context: bool = False
    requires_market_context: bool = False


_TITLE_TEMPLATE = """Based on the following user query, generate a brief and meaningful title for the {topic}:
"{{query}}".
Please make sure the title is engaging and relevant to the user query.
Please make sure the title is not more than 40 characters long."""

_SUGGESTION_TEMPLATE = """Based on the following conversation context, suggest up to 5 {topic}. The prompts should be concise, relevant, and formatted as standalone sentences without numbering or quotes.

Conversation Context:
"{{history}}"

Suggested Prompts:"""


PERSONAS: Dict[Persona, PersonaDescriptor] = {
    Persona.SUPPORT: PersonaDescriptor(
        persona=Persona.SUPPORT,
        role_text="customer support assistant for a bank",
        title_template=_TITLE_TEMPLATE.format(topic="customer support conversation"),
        response_template="""You are a helpful banking customer support assistant.
User asked: "{query}"
Historical context: "{history}"
Predicted intentions: "{intentions}"
Based on this, provide a helpful response.""",
        suggestion_template=_SUGGESTION_TEMPLATE.format(
            topic="helpful questions or topics that the user might be interested in regarding customer support"
        ),
        requires_semantic_context=True,
    ),
    Persona.FINANCIAL_PLANNING: PersonaDescriptor(
        persona=Persona.FINANCIAL_PLANNING,
        role_text="financial planning assistant",
        title_template=_TITLE_TEMPLATE.format(topic="financial planning conversation"),
        response_template="""You are a financial planning assistant.
User asked: "{query}"
Historical context: "{history}"
Based on this, provide a comprehensive financial advice response.""",
        suggestion_template=_SUGGESTION_TEMPLATE.format(
            topic="helpful financial planning questions or topics that the user might be interested in"
        ),
    ),
    Persona.STOCK_MARKET: PersonaDescriptor(
        persona=Persona.STOCK_MARKET,
        role_text="stock market assistant",
        title_template=_TITLE_TEMPLATE.format(topic="stock market assistance conversation"),
        response_template="""You are a stock market assistant.
User asked: "{query}"
Historical context: "{history}"
Based on this, provide an insightful stock market analysis or advice.""",
        suggestion_template=_SUGGESTION_TEMPLATE.format(
            topic="insightful stock market questions or topics that the user might be interested in"
        ),
        requires_market_context=True,
    ),
    Persona.DEFAULT: PersonaDescriptor(
        persona=Persona.DEFAULT,
        role_text="helpful assistant",
        title_template=_TITLE_TEMPLATE.format(topic="conversation"),
        response_template="""You are a helpful assistant.
User asked: "{query}"
Historical context: "{history}"
Predicted intentions: "{intentions}"
Based on this, provide a helpful response.""",
        suggestion_template=_SUGGESTION_TEMPLATE.format(
            topic="helpful questions or topics that the user might be interested in"
        ),
    ),
}

# Tags sent by the chat widget.
PERSONA_TAGS: Dict[str, Persona] = {
    "ai-customer-support": Persona.SUPPORT,
    "support": Persona.SUPPORT,
    "financial-planning": Persona.FINANCIAL_PLANNING,
    "stock-market": Persona.STOCK_MARKET,
    "default": Persona.DEFAULT,
}


def resolve_persona(tag: Optional[str]) -> Persona:
    """Map a chatbot tag to a persona, defaulting for unknown tags."""
    if isinstance(tag, Persona):
        return tag
    return PERSONA_TAGS.get((tag or "").strip().lower(), Persona.DEFAULT)


def describe(tag: Optional[str]) -> PersonaDescriptor:
    """Look up the descriptor for a chatbot tag."""
    return PERSONAS[resolve_persona(tag)]


class PromptTemplates:
    """Renders persona prompts."""

    TITLE_SYSTEM_PROMPT = "You are a helpful assistant that generates conversation titles."
    SUGGESTION_SYSTEM_PROMPT = "You are an assistant that suggests helpful prompts to users in a chat."

    @classmethod
    def get_system_prompt(cls, descriptor: PersonaDescriptor) -> str:
        return f"You are a {descriptor.role_text}."

    @classmethod
    def build_response_prompt(
        cls,
        descriptor: PersonaDescriptor,
        query: str,
        history: str,
        intentions: str = ""
    ) -> str:
        """
        Build the user prompt for the main response.

        Args:
            descriptor: Persona descriptor
            query: Raw user prompt
            history: Flattened conversation transcript
            intentions: Retrieved intent text (support persona)

        Returns:
            Formatted prompt
        """
        return descriptor.response_template.format(
            query=query,
            history=history,
            intentions=intentions,
        )

    @classmethod
    def add_interest_rate(
        cls,
        descriptor: PersonaDescriptor,
        prompt: str,
        interest_rate: Optional[float] = None
    ) -> str:
        """Append the required interest rate for financial planning prompts."""
        if descriptor.persona == Persona.FINANCIAL_PLANNING and interest_rate is not None:
            return prompt + f"\n\nCalculated Required Interest Rate: {interest_rate:.2f}%"
        return prompt

    @classmethod
    def build_title_prompt(cls, descriptor: PersonaDescriptor, query: str) -> str:
        return descriptor.title_template.format(query=query)

    @classmethod
    def build_suggestion_prompt(cls, descriptor: PersonaDescriptor, history: str) -> str:
        return descriptor.suggestion_template.format(history=history)
