"""
Local Fallback Synthesizer
Deterministic, page-aware answers used when the model returns nothing
useful, plus the suggested follow-up actions attached to every chat reply.
"""

from typing import List, Sequence

from .entity_extractors import extract_transit_inputs
from ..schemas.ai_schemas import ChatMessage

# Placeholder the model client returns when the provider produced no text
EMPTY_MODEL_ANSWER = "I could not generate a response."

PLANNER_FALLBACK_ANSWER = (
    "I can help build this trip plan. Share destination, dates (or month), "
    "traveler count, and top experiences, then I’ll draft a practical plan you can apply."
)

GENERIC_DEGRADED_ANSWER = (
    "I can still help, but live data is currently unavailable. Share the key details "
    "and I’ll give a best-available recommendation with clear assumptions."
)

GENERIC_ANSWER = "Share a bit more detail and I’ll give a concrete next-step recommendation."

TRANSIT_NO_ROUTE_DEGRADED_ANSWER = (
    "Live transit data is unavailable right now. Share route in the format "
    "'from <origin> to <destination>' and I’ll provide a structured bus-vs-rail recommendation."
)

SUGGESTED_ACTIONS = {
    "flights": [
        "Share exact flight number and date for live status",
        "Compare price-time tradeoff before selecting",
    ],
    "transit": [
        "Provide 'from X to Y' for route options",
        "Save top route to itinerary notes",
    ],
    "finance": [
        "Review highest-spend category",
        "Set per-day budget target",
    ],
}

DEFAULT_SUGGESTED_ACTIONS = [
    "Ask for next best step",
    "Request a prioritized checklist",
]


def is_unusable_answer(text: str) -> bool:
    """True when the model text is blank or the empty-output placeholder"""
    return not text.strip() or text == EMPTY_MODEL_ANSWER


def _last_content(messages: Sequence[ChatMessage]) -> str:
    if not messages:
        return ""
    return messages[-1].content.strip()


def _transit_answer(origin: str, destination: str, degraded: bool) -> str:
    if degraded:
        return (
            f"I can’t fetch live transit suggestions right now, but I can still guide you. "
            f"For {origin} to {destination}, FlixBus is commonly an option on this corridor. "
            f"Next actions: 1) check FlixBus for your exact date/time, "
            f"2) compare against rail duration/price, "
            f"3) pick the best reliability-cost tradeoff."
        )
    return (
        f"For {origin} to {destination}, I can help compare bus vs rail "
        f"if you share your target departure date/time."
    )


def synthesize(page_key: str, messages: Sequence[ChatMessage], degraded: bool) -> str:
    """
    Build a local answer from the page and the latest message

    Args:
        page_key: Page the user is chatting from
        messages: Conversation so far; only the last turn is read
        degraded: Whether a live-data fetch failed for this request

    Returns:
        Answer text, never empty
    """
    if page_key == "transit":
        origin, destination = extract_transit_inputs(_last_content(messages))
        if origin and destination:
            return _transit_answer(origin, destination, degraded)
        if degraded:
            return TRANSIT_NO_ROUTE_DEGRADED_ANSWER

    if degraded:
        return GENERIC_DEGRADED_ANSWER
    return GENERIC_ANSWER


def suggest_actions_for_page(page_key: str) -> List[str]:
    return list(SUGGESTED_ACTIONS.get(page_key, DEFAULT_SUGGESTED_ACTIONS))
