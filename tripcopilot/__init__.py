# tripcopilot/__init__.py
"""
Trip Copilot AI Service Package

Read-only travel assistant for a trip-planning app:
- Page-aware chat over the current trip (Copilot Agent)
- Optional live signals from the web app bridge (flight status, transit)
- Deterministic local answers when the model has nothing useful to say
- Planner chat that drafts a structured itinerary from free text
"""

__version__ = "1.0.0"
__author__ = "TripLoom Team"

# Package structure:
# tripcopilot/
# ├── __init__.py           <- This file
# ├── main.py               <- FastAPI application entry
# ├── config.py             <- Configuration settings
# ├── errors.py             <- Service exception hierarchy
# │
# ├── agents/
# │   ├── copilot_agent.py        <- Chat / planner pipeline
# │   └── realtime_dispatcher.py  <- Page-keyed live data fetches
# │
# ├── api/
# │   └── chat.py           <- /v1/ai/*
# │
# ├── interfaces/
# │   ├── ai_repository.py  <- Conversations, messages, snapshots
# │   └── bridge_client.py  <- JSON calls to the web app
# │
# ├── llm/
# │   ├── entity_extractors.py  <- Flight / route extraction
# │   ├── fallback.py           <- Local answers + suggested actions
# │   ├── planner_draft.py      <- Free text to PlannerDraft
# │   ├── prompts.py            <- System prompt templates
# │   ├── model_client.py       <- OpenAI Responses wrapper
# │   └── model_selector.py     <- Model routing
# │
# ├── schemas/
# │   └── ai_schemas.py     <- All schemas
# │
# └── utils/
#     └── ai_helpers.py
