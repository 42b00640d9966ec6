"""
Chat API Routes for FinChat.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from ..errors import CHATBOT_REQUIRED, GENERIC_ERROR, error_response
from ..services import get_services
from llm.conversation import ConversationTurn, Sender, format_transcript
from llm.orchestrator import ChatRequest as OrchestratorRequest

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request / Response Models ─────────────────────────────────────

class HistoryItem(BaseModel):
    sender: Sender
    text: str


class ChatRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000)
    context: str = ""
    generate_title: bool = Field(default=False, alias="generateTitle")
    chatbot: Optional[str] = None
    interest_rate: Optional[float] = Field(default=None, alias="interestRate")
    history: Optional[List[HistoryItem]] = None

    class Config:
        populate_by_name = True


class ChatResponse(BaseModel):
    message: str
    title: Optional[str] = None


def history_text(context: str, history: Optional[List[HistoryItem]]) -> str:
    """Use the flattened context, or flatten structured history when only that is sent."""
    if context or not history:
        return context
    return format_transcript(ConversationTurn(sender=h.sender, text=h.text) for h in history)


# ── Endpoints ─────────────────────────────────────────────────────

@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest):
    """
    Answer a chat prompt with the requested chatbot persona.

    1. Enrich context  2. Build persona prompt  3. Generate with
    retry and fallback  4. Optionally title the conversation
    """
    if not request.chatbot:
        return error_response(status.HTTP_400_BAD_REQUEST, CHATBOT_REQUIRED)

    services = get_services()
    if not services.is_ready:
        logger.error("Chat requested while services are not ready")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)

    logger.info(f"Received {request.chatbot} prompt: {request.prompt[:80]}")
    try:
        result = await services.orchestrator.process(
            OrchestratorRequest(
                prompt=request.prompt,
                chatbot=request.chatbot,
                context=history_text(request.context, request.history),
                generate_title=request.generate_title,
                interest_rate=request.interest_rate,
            )
        )
    except Exception as e:
        logger.error(f"Error in chat pipeline: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)

    logger.info(
        f"Chat answered by {result.provider} provider in {result.processing_time_ms}ms"
    )
    return ChatResponse(message=result.message, title=result.title)
