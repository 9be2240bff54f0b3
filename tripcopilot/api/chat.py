# api/chat.py
"""
Copilot Chat API
Trip-scoped chat, planner chat, history and context refresh under /v1/ai.

Every response uses the envelope {"ok": true, "data": ...} or
{"ok": false, "error": "..."}.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from ..agents.copilot_agent import CopilotAgent
from ..config import settings
from ..errors import CopilotError, InvalidInputError, UnauthorizedTripError
from ..schemas.ai_schemas import ChatRequest, PlannerChatRequest, RefreshContextRequest

DEFAULT_MESSAGE_LIMIT = 50
MAX_MESSAGE_LIMIT = 200

router = APIRouter(prefix="/v1/ai", tags=["copilot"])


# ============================================
# Dependencies
# ============================================

def get_agent(request: Request) -> CopilotAgent:
    return request.app.state.agent


def get_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Caller id from X-User-Id, falling back to the local test user"""
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return settings.DEFAULT_USER_ID


def bound_limit(raw: Optional[str]) -> int:
    """Parse ?limit=; anything missing, invalid or outside (0, 200] becomes 50"""
    try:
        limit = int(raw) if raw is not None else DEFAULT_MESSAGE_LIMIT
    except ValueError:
        return DEFAULT_MESSAGE_LIMIT
    if limit <= 0 or limit > MAX_MESSAGE_LIMIT:
        return DEFAULT_MESSAGE_LIMIT
    return limit


def ok(data: Any) -> Dict[str, Any]:
    return {"ok": True, "data": data}


def fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


# ============================================
# Routes
# ============================================

@router.post("/chat")
async def chat(
    body: ChatRequest,
    user_id: str = Depends(get_user_id),
    agent: CopilotAgent = Depends(get_agent)
):
    response = await agent.chat(user_id, body)
    return ok(response.to_wire())


@router.post("/planner/chat")
async def planner_chat(
    body: PlannerChatRequest,
    user_id: str = Depends(get_user_id),
    agent: CopilotAgent = Depends(get_agent)
):
    response = await agent.planner_chat(user_id, body)
    return ok(response.to_wire())


@router.get("/conversations/{trip_id}")
async def list_conversations(
    trip_id: str,
    user_id: str = Depends(get_user_id),
    agent: CopilotAgent = Depends(get_agent)
):
    conversations = await agent.list_conversations(user_id, trip_id)
    return ok([c.to_wire() for c in conversations])


@router.get("/conversations/{conversation_id}/messages")
async def list_messages(
    conversation_id: str,
    limit: Optional[str] = Query(None),
    user_id: str = Depends(get_user_id),
    agent: CopilotAgent = Depends(get_agent)
):
    messages = await agent.list_messages(user_id, conversation_id, bound_limit(limit))
    return ok([m.to_wire() for m in messages])


@router.post("/context/refresh")
async def refresh_context(
    body: RefreshContextRequest,
    user_id: str = Depends(get_user_id),
    agent: CopilotAgent = Depends(get_agent)
):
    response = await agent.refresh_context(user_id, body)
    return ok(response.to_wire())


# ============================================
# Error mapping
# ============================================

def register_exception_handlers(app: FastAPI) -> None:
    """Map service errors onto the envelope and status codes"""

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        logger.warning(f"{request.method} {request.url.path}: invalid request body")
        return fail(400, "invalid request body")

    @app.exception_handler(InvalidInputError)
    async def invalid_input(request: Request, exc: InvalidInputError):
        return fail(400, str(exc))

    @app.exception_handler(UnauthorizedTripError)
    async def unauthorized(request: Request, exc: UnauthorizedTripError):
        return fail(403, str(exc))

    @app.exception_handler(CopilotError)
    async def copilot_error(request: Request, exc: CopilotError):
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return fail(500, str(exc))

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} crashed: {exc}")
        return fail(500, str(exc))
