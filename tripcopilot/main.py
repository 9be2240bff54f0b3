"""
Trip Copilot AI Service - FastAPI Application

Collaborators are built once in the lifespan and shared through
app.state:
- Repository: Redis when REDIS_URL is set, otherwise in-memory
- Model: OpenAI Responses API (OPENAI_MODEL_DEFAULT)
- Bridge: web app at NEXT_API_BASE_URL for live flight/transit data
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .agents.copilot_agent import CopilotAgent, build_copilot_agent
from .api.chat import register_exception_handlers, router as chat_router
from .config import settings
from .interfaces.ai_repository import build_repository
from .interfaces.bridge_client import BridgeClient
from .llm.model_client import ModelClient


def _build_agent() -> CopilotAgent:
    settings.validate()
    return build_copilot_agent(
        repository=build_repository(settings.REDIS_URL),
        model_client=ModelClient(),
        bridge=BridgeClient(),
        default_model=settings.OPENAI_MODEL_DEFAULT,
    )


def create_app(agent: Optional[CopilotAgent] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        agent: Pre-wired agent (tests); built from settings when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler"""
        logger.info("=" * 50)
        logger.info("Starting Trip Copilot AI Service")
        logger.info("=" * 50)
        app.state.agent = agent or _build_agent()

        logger.info(f"Environment: {settings.API_ENV}")
        logger.info(f"Store: {app.state.agent.repository.mode()}")
        logger.info(f"Default model: {settings.OPENAI_MODEL_DEFAULT}")
        logger.info(f"Bridge: {settings.NEXT_API_BASE_URL}")
        logger.info(f"Allowed origins: {', '.join(settings.allowed_origins_list)}")
        logger.info("Auth mode: test user passthrough (set X-User-Id to override the default user)")

        yield

        close = getattr(app.state.agent.repository, "close", None)
        if close is not None:
            await close()
        logger.info("Trip Copilot shutdown complete")

    app = FastAPI(
        title="Trip Copilot AI Service",
        description="Read-only, page-aware travel copilot with live-data fallbacks and a trip planner.",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization", "X-User-Id"],
    )

    register_exception_handlers(app)
    app.include_router(chat_router)

    @app.get("/healthz")
    async def healthz(request: Request):
        agent_state = getattr(request.app.state, "agent", None)
        return {
            "ok": True,
            "origins": settings.allowed_origins_list,
            "store": agent_state.repository.mode() if agent_state else "uninitialized",
        }

    return app


app = create_app()


# ============================================
# Main
# ============================================

def run() -> None:
    import uvicorn
    uvicorn.run(
        "tripcopilot.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_ENV == "development"
    )


if __name__ == "__main__":
    run()
