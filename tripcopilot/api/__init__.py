# api/__init__.py
"""
API Endpoints Package

Contains the FastAPI routers for the copilot service:
- chat: /v1/ai chat, planner, history and refresh
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .chat import router as chat_router, register_exception_handlers

__all__ = [
    "chat_router",
    "register_exception_handlers",
]
