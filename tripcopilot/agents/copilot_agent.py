"""
Copilot Agent
Page-aware chat over a single trip, plus the trip planner chat.

Chat turn:
1. Validate input and trip membership (before any write)
2. Reuse or open the (trip, user) conversation
3. Assemble the context payload, optionally with live data
4. Ask the model; fall back to a local answer when it has nothing useful
5. Store both turns, then source snapshots and an audit entry

The agent never modifies bookings, itinerary or finance records.
"""

from typing import List, Optional, Protocol, Sequence

from loguru import logger

from ..errors import InvalidInputError, UnauthorizedTripError
from ..interfaces.ai_repository import AIRepository
from ..llm.fallback import (
    PLANNER_FALLBACK_ANSWER,
    is_unusable_answer,
    suggest_actions_for_page,
    synthesize,
)
from ..llm.model_selector import ModelSelector
from ..llm.planner_draft import build_planner_draft
from ..llm.prompts import build_planner_system_prompt, build_system_prompt
from ..schemas.ai_schemas import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ChatRole,
    ContextPayload,
    Conversation,
    Message,
    ModelResult,
    PlannerChatRequest,
    PlannerChatResponse,
    RefreshContextRequest,
    RefreshContextResponse,
    Source,
    SourceStatus,
    TripContext,
)
from ..utils.ai_helpers import best_effort, rfc3339, title_case
from .realtime_dispatcher import JSONBridge, RealtimeDispatcher

PLANNER_PAGE_KEY = "agent"


class ChatModel(Protocol):
    async def respond(self, model: str, system_prompt: str, messages: Sequence[ChatMessage]) -> ModelResult:
        ...


def _highlights(page_key: str) -> List[str]:
    return [
        "Read-only guidance generated from current trip context",
        f"Page-aware reasoning for {page_key}",
    ]


def _default_source(name: str) -> Source:
    return Source(name=name, status=SourceStatus.OK, fetched_at=rfc3339())


class CopilotAgent:
    """
    Orchestrates context, model call and persistence for chat requests

    Args:
        repository: Conversation/message storage
        model_client: Model collaborator with async ``respond``
        dispatcher: Live-data dispatcher used when a chat asks for refresh
        selector: Picks the model per turn
    """

    def __init__(
        self,
        repository: AIRepository,
        model_client: ChatModel,
        dispatcher: RealtimeDispatcher,
        selector: ModelSelector
    ):
        self.repository = repository
        self.model_client = model_client
        self.dispatcher = dispatcher
        self.selector = selector

    async def _require_member(self, trip_id: str, user_id: str) -> None:
        if not await self.repository.is_trip_member(trip_id, user_id):
            logger.warning(f"User {user_id} is not a member of trip {trip_id}")
            raise UnauthorizedTripError()

    # ============================================
    # Copilot chat
    # ============================================

    async def chat(self, user_id: str, request: ChatRequest) -> ChatResponse:
        """
        Answer one page-aware chat turn

        Args:
            user_id: Authenticated caller
            request: Trip, page, page context, messages, refresh flag

        Returns:
            ChatResponse

        Raises:
            InvalidInputError: trip id, page key or messages missing
            UnauthorizedTripError: caller is not a trip member
            ModelProviderError: the model call failed
        """
        trip_id = request.trip_id.strip()
        page_key = request.page_key.strip()
        if not trip_id or not page_key or not request.messages:
            raise InvalidInputError()

        await self._require_member(trip_id, user_id)

        trip = await self.repository.get_trip_by_id(trip_id)
        conversation_id = await self.repository.upsert_conversation(
            trip_id, user_id, f"{title_case(page_key)} assistant"
        )

        context = ContextPayload(
            page_key=page_key,
            trip=TripContext(
                id=trip.id,
                destination=trip.destination,
                start_date=trip.start_date.isoformat(),
                end_date=trip.end_date.isoformat(),
                timezone=trip.timezone,
            ),
            page_context=request.page_context,
        )

        sources: List[Source] = []
        degraded = False
        if request.refresh:
            sources, degraded, fragment = await self.dispatcher.fetch(page_key, request.messages)
            context = context.with_extra(fragment)
        if not sources:
            sources = [_default_source("trip_db_context")]

        context_data = context.to_dict()
        await best_effort(
            "context_snapshot",
            self.repository.insert_context_snapshot(trip_id, page_key, context_data),
        )

        user_prompt = request.messages[-1].content
        model = self.selector.select(user_prompt, request.messages)
        system_prompt = build_system_prompt(page_key, context_data, degraded)

        result = await self.model_client.respond(model, system_prompt, request.messages)
        answer = result.text
        if is_unusable_answer(answer):
            logger.info(f"Model returned no usable answer, using local fallback for page={page_key}")
            answer = synthesize(page_key, request.messages, degraded)

        await self.repository.insert_message(conversation_id, ChatRole.USER.value, user_prompt, "", None)
        await self.repository.insert_message(
            conversation_id, ChatRole.ASSISTANT.value, answer, model, result.token_usage
        )

        for source in sources:
            await best_effort(
                f"tool_snapshot:{source.name}",
                self.repository.insert_tool_snapshot(
                    conversation_id,
                    page_key,
                    source.name,
                    source.status.value,
                    {"detail": source.detail or "", "fetchedAt": source.fetched_at},
                ),
            )
        await best_effort(
            "audit_log",
            self.repository.insert_audit_log(
                user_id, trip_id, "ai_chat", {"pageKey": page_key, "model": model, "degraded": degraded}
            ),
        )

        logger.info(
            f"Chat answered: trip={trip_id} page={page_key} model={model} "
            f"sources={len(sources)} degraded={degraded}"
        )
        return ChatResponse(
            conversation_id=conversation_id,
            answer=answer,
            highlights=_highlights(page_key),
            suggested_actions=suggest_actions_for_page(page_key),
            sources=sources,
            degraded=degraded,
        )

    # ============================================
    # Planner chat
    # ============================================

    async def planner_chat(self, user_id: str, request: PlannerChatRequest) -> PlannerChatResponse:
        """
        Answer a planner turn and infer a trip draft from the conversation

        No live data is fetched and nothing is persisted.
        """
        if not request.messages:
            raise InvalidInputError()

        context = ContextPayload(
            page_key=PLANNER_PAGE_KEY,
            user_id=user_id,
            planner_context=request.planner_context,
        )
        sources = [_default_source("planner_context")]
        degraded = False

        user_prompt = request.messages[-1].content
        model = self.selector.select(user_prompt, request.messages)
        system_prompt = build_planner_system_prompt(context.to_dict(), degraded)

        result = await self.model_client.respond(model, system_prompt, request.messages)
        answer = result.text
        if is_unusable_answer(answer):
            answer = PLANNER_FALLBACK_ANSWER

        draft = build_planner_draft(request.planner_context, request.messages, answer)
        logger.info(f"Planner answered: user={user_id} model={model} draft={'yes' if draft else 'no'}")
        return PlannerChatResponse(answer=answer, sources=sources, degraded=degraded, planner_draft=draft)

    # ============================================
    # History and refresh
    # ============================================

    async def list_conversations(self, user_id: str, trip_id: str) -> List[Conversation]:
        trip_id = trip_id.strip()
        if not trip_id:
            raise InvalidInputError()
        await self._require_member(trip_id, user_id)
        return await self.repository.list_conversations(trip_id, user_id)

    async def list_messages(self, user_id: str, conversation_id: str, limit: int) -> List[Message]:
        """
        Newest-first messages of a conversation the caller owns

        Raises:
            UnauthorizedTripError: the conversation belongs to someone else
        """
        if not await self.repository.conversation_belongs_to_user(conversation_id, user_id):
            raise UnauthorizedTripError()
        return await self.repository.list_messages(conversation_id, limit)

    async def refresh_context(self, user_id: str, request: RefreshContextRequest) -> RefreshContextResponse:
        trip_id = request.trip_id.strip()
        page_key = request.page_key.strip()
        if not trip_id or not page_key:
            raise InvalidInputError()

        await self._require_member(trip_id, user_id)
        await self.repository.insert_context_snapshot(
            trip_id, page_key, {"pageKey": page_key, "refreshedBy": user_id}
        )
        return RefreshContextResponse(updated_at=rfc3339(), page_key=page_key)


def build_copilot_agent(
    repository: AIRepository,
    model_client: ChatModel,
    bridge: JSONBridge,
    default_model: str,
    selector: Optional[ModelSelector] = None
) -> CopilotAgent:
    """Wire an agent from its collaborators"""
    return CopilotAgent(
        repository=repository,
        model_client=model_client,
        dispatcher=RealtimeDispatcher(bridge),
        selector=selector or ModelSelector(default_model),
    )
