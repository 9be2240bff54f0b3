"""
Realtime Source Dispatcher
Routes a refresh request to the live-data source that matches the page:

- flights:   flight status via the web app bridge
- transit:   route suggestions via the web app bridge
- finance:   budget guardrail placeholder
- itinerary: itinerary risk placeholder
- other:     overview only

Each lookup reports a Source. A failed bridge call marks the response
degraded but never raises.
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from loguru import logger

from ..llm.entity_extractors import extract_flight_inputs, extract_transit_inputs
from ..schemas.ai_schemas import ChatMessage, Source, SourceStatus
from ..utils.ai_helpers import rfc3339

FLIGHT_STATUS_PATH = "/api/flights/status"
TRANSIT_SUGGEST_PATH = "/api/transit/suggest"

DispatchResult = Tuple[List[Source], bool, Dict[str, Any]]


class JSONBridge(Protocol):
    async def post_json(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        ...


def _source(name: str, status: SourceStatus, detail: Optional[str] = None) -> Source:
    return Source(name=name, status=status, fetched_at=rfc3339(), detail=detail)


class RealtimeDispatcher:
    """
    Fetches optional live signals for a chat turn

    Args:
        bridge: Anything with an async ``post_json(path, body)``
    """

    def __init__(self, bridge: JSONBridge):
        self.bridge = bridge

    async def fetch(self, page_key: str, messages: Sequence[ChatMessage]) -> DispatchResult:
        """
        Look up live data for the page, reading only the latest message

        Returns:
            (sources, degraded, context fragment)
        """
        text = messages[-1].content if messages else ""

        if page_key == "flights":
            return await self._fetch_flight_status(text)
        if page_key == "transit":
            return await self._fetch_transit(text)
        if page_key == "finance":
            return (
                [_source("finance_guardrail", SourceStatus.OK, "Computed from DB trip totals in this phase.")],
                False,
                {"financeGuardrail": {
                    "status": "watch",
                    "note": "Placeholder until full finance tables are integrated.",
                }},
            )
        if page_key == "itinerary":
            return (
                [_source("itinerary_risk", SourceStatus.OK, "Derived from current snapshot in this phase.")],
                False,
                {"itineraryRisk": {
                    "status": "unknown",
                    "note": "Placeholder until itinerary rows are persisted in backend.",
                }},
            )
        return [_source("overview_context", SourceStatus.OK)], False, {}

    async def _fetch_flight_status(self, text: str) -> DispatchResult:
        flight_number, departure_date = extract_flight_inputs(text)
        if not flight_number or not departure_date:
            return [_source(
                "next_flight_status",
                SourceStatus.SKIPPED_MISSING_INPUTS,
                "Include flight number and YYYY-MM-DD for live status.",
            )], False, {}

        return await self._call_bridge(
            "next_flight_status",
            FLIGHT_STATUS_PATH,
            {"flight_number": flight_number, "departure_date": departure_date},
            "flightStatus",
        )

    async def _fetch_transit(self, text: str) -> DispatchResult:
        origin, destination = extract_transit_inputs(text)
        if not origin or not destination:
            return [_source(
                "next_transit_suggest",
                SourceStatus.SKIPPED_MISSING_INPUTS,
                "Use phrasing: from <origin> to <destination>.",
            )], False, {}

        return await self._call_bridge(
            "next_transit_suggest",
            TRANSIT_SUGGEST_PATH,
            {"origin": origin, "destination": destination},
            "transitOptions",
        )

    async def _call_bridge(
        self,
        source_name: str,
        path: str,
        body: Dict[str, Any],
        data_key: str
    ) -> DispatchResult:
        try:
            data = await self.bridge.post_json(path, body)
        except Exception as e:
            logger.warning(f"{source_name} unavailable, continuing degraded: {e}")
            return [_source(source_name, SourceStatus.ERROR, str(e))], True, {}

        logger.info(f"{source_name} fetched from {path}")
        return [_source(source_name, SourceStatus.OK)], False, {data_key: data}
