"""
Suggested prompt routes.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, status
from pydantic import BaseModel

from ..errors import CHATBOT_REQUIRED, error_response
from ..services import get_services
from .chat import HistoryItem, history_text

logger = logging.getLogger(__name__)

router = APIRouter()


class SuggestionRequest(BaseModel):
    context: str = ""
    chatbot: Optional[str] = None
    history: Optional[List[HistoryItem]] = None


class SuggestionResponse(BaseModel):
    prompts: List[str] = []


@router.post("/suggested-prompts", response_model=SuggestionResponse)
async def suggested_prompts(request: SuggestionRequest):
    """Follow-up prompts for the conversation; empty when generation fails."""
    if not request.chatbot:
        return error_response(status.HTTP_400_BAD_REQUEST, CHATBOT_REQUIRED)

    services = get_services()
    if services.suggestion_generator is None:
        logger.warning("Suggestion generator not initialized")
        return SuggestionResponse(prompts=[])

    prompts = await services.suggestion_generator.suggest(
        history_text(request.context, request.history), request.chatbot
    )
    return SuggestionResponse(prompts=prompts)
