"""
Schemas Package

Pydantic models for requests, responses and stored records.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ai_schemas import (
        ChatMessage,
        ChatRequest,
        ChatResponse,
        ContextPayload,
        PlannerChatRequest,
        PlannerChatResponse,
        PlannerDraft,
        PlannerDraftItem,
        Source,
        SourceStatus,
    )

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ContextPayload",
    "PlannerChatRequest",
    "PlannerChatResponse",
    "PlannerDraft",
    "PlannerDraftItem",
    "Source",
    "SourceStatus",
]
