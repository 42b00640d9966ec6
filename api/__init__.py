"""
API Module for FinChat.

FastAPI application with routes for:
- Persona chat and suggested prompts
- Financial plan interest rates
- Stock symbol lookup
"""

from .main import create_app, app

__all__ = ["create_app", "app"]
