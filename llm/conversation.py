"""
Conversation turns and transcript formatting.

History is owned by the caller; these helpers only read it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional


class Sender(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class ConversationTurn:
    """One message of a conversation."""
    sender: Sender
    text: str
    timestamp: Optional[datetime] = field(default=None, compare=False)


def format_transcript(turns: Iterable[ConversationTurn]) -> str:
    """Flatten turns into ``sender: text`` lines."""
    return "\n".join(f"{turn.sender.value}: {turn.text}" for turn in turns)


def mentions(history_text: str, marker: str) -> bool:
    """True when ``marker`` already appears verbatim in the transcript."""
    return bool(history_text) and marker in history_text
