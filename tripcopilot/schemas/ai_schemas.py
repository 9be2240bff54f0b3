# schemas/ai_schemas.py
"""
Pydantic v2 schemas for the Trip Copilot service
Wire names are camelCase; Python attributes are snake_case.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase, still constructible by field name"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ============================================
# Enums
# ============================================

class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class SourceStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
    SKIPPED_MISSING_INPUTS = "skipped_missing_inputs"


# ============================================
# Chat
# ============================================

class ChatMessage(CamelModel):
    """Single chat turn. Any role other than exactly "assistant" is the user."""
    role: ChatRole = ChatRole.USER
    content: str = ""

    @field_validator("role", mode="before")
    @classmethod
    def coerce_role(cls, value: Any) -> ChatRole:
        if isinstance(value, ChatRole):
            return value
        if value == ChatRole.ASSISTANT.value:
            return ChatRole.ASSISTANT
        return ChatRole.USER


class Source(CamelModel):
    """One context-gathering attempt and its outcome"""
    name: str
    status: SourceStatus
    fetched_at: str
    detail: Optional[str] = None


class ChatRequest(CamelModel):
    trip_id: str = ""
    page_key: str = ""
    page_context: Dict[str, Any] = Field(default_factory=dict)
    messages: List[ChatMessage] = Field(default_factory=list)
    refresh: bool = False


class ChatResponse(CamelModel):
    conversation_id: str
    answer: str
    highlights: List[str] = Field(default_factory=list)
    suggested_actions: List[str] = Field(default_factory=list)
    sources: List[Source] = Field(default_factory=list)
    degraded: bool = False


# ============================================
# Planner
# ============================================

class PlannerChatRequest(CamelModel):
    messages: List[ChatMessage] = Field(default_factory=list)
    planner_context: Dict[str, Any] = Field(default_factory=dict)


class PlannerDraftItem(CamelModel):
    day_index: int
    title: str
    time_block: str = "afternoon"
    category: str = "activities"
    notes: str = ""


class PlannerDraft(CamelModel):
    """Best-effort trip skeleton inferred from conversation"""
    destination: Optional[str] = None
    country: Optional[str] = None
    cities: List[str] = Field(default_factory=list)
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    travelers: Optional[int] = None
    budget_total: Optional[float] = None
    activities: List[str] = Field(default_factory=list)
    itinerary: List[PlannerDraftItem] = Field(default_factory=list)


class PlannerChatResponse(CamelModel):
    answer: str
    sources: List[Source] = Field(default_factory=list)
    degraded: bool = False
    planner_draft: Optional[PlannerDraft] = None


# ============================================
# Context refresh
# ============================================

class RefreshContextRequest(CamelModel):
    trip_id: str = ""
    page_key: str = ""


class RefreshContextResponse(CamelModel):
    updated_at: str
    page_key: str


# ============================================
# Context payload
# ============================================

class TripContext(CamelModel):
    id: str
    destination: str
    start_date: str
    end_date: str
    timezone: str


class ContextPayload(BaseModel):
    """
    Per-request context handed to the model

    Frozen once built. Live-data fragments go into ``extra`` through
    ``with_extra``, which returns a new payload. ``to_dict`` flattens
    everything into the ordered JSON object the prompt embeds.
    """
    model_config = ConfigDict(frozen=True)

    page_key: str
    trip: Optional[TripContext] = None
    user_id: Optional[str] = None
    page_context: Dict[str, Any] = Field(default_factory=dict)
    planner_context: Dict[str, Any] = Field(default_factory=dict)
    extra: Dict[str, Any] = Field(default_factory=dict)

    def with_extra(self, fragment: Dict[str, Any]) -> "ContextPayload":
        if not fragment:
            return self
        return self.model_copy(update={"extra": {**self.extra, **fragment}})

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.trip is not None:
            data["trip"] = self.trip.model_dump(by_alias=True)
        data["pageKey"] = self.page_key
        if self.user_id:
            data["userID"] = self.user_id
        if self.page_context:
            data["pageContext"] = dict(self.page_context)
        if self.planner_context:
            data["plannerContext"] = dict(self.planner_context)
        data.update(self.extra)
        return data


# ============================================
# Stored records
# ============================================

class Trip(CamelModel):
    id: str
    destination: str
    start_date: date
    end_date: date
    timezone: str = "UTC"


class Conversation(CamelModel):
    id: str
    trip_id: str
    user_id: str
    title: str
    created_at: datetime
    updated_at: datetime


class Message(CamelModel):
    id: str
    conversation_id: str
    role: str
    content: str
    model: str = ""
    token_usage: Optional[Dict[str, Any]] = Field(default=None, alias="tokenUsageJson")
    created_at: datetime


class ModelResult(BaseModel):
    """Text and raw token usage returned by the model collaborator"""
    text: str = ""
    token_usage: Dict[str, Any] = Field(default_factory=dict)
