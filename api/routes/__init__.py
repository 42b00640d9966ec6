"""
API Routes for FinChat.
"""

from . import chat, suggestions, planning, stocks

__all__ = ["chat", "suggestions", "planning", "stocks"]
