"""
LLM Orchestration Module for the FinChat backend.

This module handles:
- Persona prompt templates
- Primary/secondary provider orchestration with retry
- Title and follow-up prompt generation
"""

from .orchestrator import BothProvidersFailedError, ChatOrchestrator, ChatRequest, ChatResponse
from .prompt_templates import Persona, PersonaDescriptor, PromptTemplates, describe
from .suggestions import SuggestionGenerator

__all__ = [
    "BothProvidersFailedError",
    "ChatOrchestrator",
    "ChatRequest",
    "ChatResponse",
    "Persona",
    "PersonaDescriptor",
    "PromptTemplates",
    "describe",
    "SuggestionGenerator",
]
