"""
Planner Draft Builder
Turns planner chat text plus optional structured hints into a PlannerDraft:
- Destination, country, cities
- Date range, travelers, budget
- Activities and a day-by-day itinerary skeleton

Every field has its own matcher. Structured hints from the planner form
win over anything found in free text. Nothing here calls the model, and
a conversation with no usable signal yields no draft at all.
"""

import math
import re
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..schemas.ai_schemas import ChatMessage, ChatRole, PlannerDraft, PlannerDraftItem
from ..utils.ai_helpers import as_string_list, dedupe_case_insensitive, split_delimited

# Keywords match in any case, the captured place must be title case
_PLACE = r"([A-Z][a-zA-Z]+(?:\s+[A-Z][a-zA-Z]+){0,2})"
DESTINATION_PATTERN = re.compile(r"\b(?i:to|in|for)\s+" + _PLACE + r"\b")
COUNTRY_PATTERN = re.compile(r"\b(?i:in|to)\s+" + _PLACE + r"\b")
CITY_PATTERN = re.compile(r"\b(?i:in|to|via)\s+" + _PLACE)

TRIP_DATE_PATTERN = re.compile(r"\b(20\d{2}-\d{2}-\d{2})\b", re.ASCII)
DIGITS_PATTERN = re.compile(r"\d+", re.ASCII)
TRAVELERS_PATTERN = re.compile(r"\b(\d{1,2})\s+(?:travelers?|people|adults?)\b", re.IGNORECASE | re.ASCII)
BUDGET_PATTERN = re.compile(r"(?:budget|spend|cost)[^\d]{0,20}(\d{2,6})", re.IGNORECASE | re.ASCII)

MAX_CITIES = 6
MAX_ACTIVITIES = 8
MAX_HINT_DIGITS = 4

SKELETON_TIME_BLOCK = "afternoon"
SKELETON_CATEGORY = "activities"
SKELETON_NOTES = "Drafted by Agent planner conversation."


def _hint(planner_context: Optional[Dict[str, Any]], key: str) -> str:
    """String hint from the planner form, trimmed; "" for anything else"""
    if not planner_context:
        return ""
    value = planner_context.get(key)
    if isinstance(value, str):
        return value.strip()
    return ""


def collect_user_text(messages: Sequence[ChatMessage]) -> str:
    parts = [m.content.strip() for m in messages if m.role != ChatRole.ASSISTANT]
    return "\n".join(part for part in parts if part)


def combine_planner_text(
    planner_context: Optional[Dict[str, Any]],
    messages: Sequence[ChatMessage],
    answer: str
) -> str:
    """
    Join the text the matchers scan

    Order: must-do experiences hint, concerns hint, model answer,
    then every non-assistant message. Empty parts are skipped.
    """
    parts = [
        _hint(planner_context, "mustDoExperiences"),
        _hint(planner_context, "concerns"),
        answer.strip(),
        collect_user_text(messages),
    ]
    return "\n".join(part for part in parts if part)


# ============================================
# Field matchers
# ============================================

def infer_destination(planner_context: Optional[Dict[str, Any]], text: str) -> str:
    hint = _hint(planner_context, "destination")
    if hint:
        return hint
    match = DESTINATION_PATTERN.search(text)
    return match.group(1).strip() if match else ""


def infer_country(planner_context: Optional[Dict[str, Any]], text: str) -> str:
    hint = _hint(planner_context, "country")
    if hint:
        return hint
    match = COUNTRY_PATTERN.search(text)
    return match.group(1).strip() if match else ""


def infer_cities(planner_context: Optional[Dict[str, Any]], text: str) -> List[str]:
    """
    Cities from the planner form, else places named after in/to/via

    The form value may be a list or a delimited string. Free-text results
    are capped at six. Duplicates are dropped ignoring case.
    """
    if planner_context and "cities" in planner_context:
        cities = dedupe_case_insensitive(as_string_list(planner_context["cities"]))
        if cities:
            return cities

    found = (match.group(1) for match in CITY_PATTERN.finditer(text))
    return dedupe_case_insensitive(found, limit=MAX_CITIES)


def infer_date_range(text: str) -> Tuple[str, str]:
    """First two ISO dates become start and end, in the order written"""
    found = TRIP_DATE_PATTERN.findall(text)
    if len(found) >= 2:
        return found[0], found[1]
    if found:
        return found[0], ""
    return "", ""


def infer_travelers(planner_context: Optional[Dict[str, Any]], text: str) -> int:
    """
    Traveler count, or 0 when unknown

    Precedence: form hint (number, or first digit run of a string),
    "<n> travelers/people/adults" in text, the word "solo". Non-finite
    numbers and digit runs longer than four are not usable hints.
    """
    raw = (planner_context or {}).get("travelers")
    hinted = 0
    if isinstance(raw, int) and not isinstance(raw, bool):
        hinted = raw
    elif isinstance(raw, float) and math.isfinite(raw):
        hinted = int(raw)
    elif isinstance(raw, str):
        digits = DIGITS_PATTERN.search(raw)
        if digits and len(digits.group(0)) <= MAX_HINT_DIGITS:
            hinted = int(digits.group(0))
    if hinted > 0:
        return hinted

    match = TRAVELERS_PATTERN.search(text)
    if match and int(match.group(1)) > 0:
        return int(match.group(1))

    if "solo" in text.lower():
        return 1
    return 0


def infer_budget(text: str) -> float:
    match = BUDGET_PATTERN.search(text)
    if match:
        return float(match.group(1))
    return 0.0


def infer_activities(planner_context: Optional[Dict[str, Any]], text: str) -> List[str]:
    base = _hint(planner_context, "mustDoExperiences") or text
    return dedupe_case_insensitive(split_delimited(base), limit=MAX_ACTIVITIES)


def _parse_iso(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def build_itinerary_skeleton(
    activities: Sequence[str],
    start_date: str,
    end_date: str
) -> List[PlannerDraftItem]:
    """
    One activity per day, as many days as the trip spans

    Without a usable date range the day count is the activity count.
    The day count never exceeds the activity count.

    Example:
        >>> items = build_itinerary_skeleton(["Museum", "Beach", "Market"], "2025-06-01", "2025-06-02")
        >>> [(i.day_index, i.title) for i in items]
        [(1, 'Museum'), (2, 'Beach')]
    """
    if not activities:
        return []

    days = len(activities)
    if start_date and end_date:
        start = _parse_iso(start_date)
        end = _parse_iso(end_date)
        if start and end and end >= start:
            days = max((end - start).days + 1, 1)
    days = min(days, len(activities))

    return [
        PlannerDraftItem(
            day_index=i + 1,
            title=activities[i],
            time_block=SKELETON_TIME_BLOCK,
            category=SKELETON_CATEGORY,
            notes=SKELETON_NOTES,
        )
        for i in range(days)
    ]


# ============================================
# Aggregate
# ============================================

def build_planner_draft(
    planner_context: Optional[Dict[str, Any]],
    messages: Sequence[ChatMessage],
    answer: str
) -> Optional[PlannerDraft]:
    """
    Infer a PlannerDraft from the planner conversation

    Args:
        planner_context: Structured hints from the planner form (may be empty)
        messages: Conversation turns
        answer: The model (or fallback) answer for this turn

    Returns:
        PlannerDraft, or None when nothing at all could be inferred
    """
    text = combine_planner_text(planner_context, messages, answer)

    destination = infer_destination(planner_context, text)
    country = infer_country(planner_context, text)
    cities = infer_cities(planner_context, text)
    start_date, end_date = infer_date_range(text)
    travelers = infer_travelers(planner_context, text)
    budget = infer_budget(text)
    activities = infer_activities(planner_context, text)

    if not any([destination, country, cities, start_date, end_date, travelers, activities]):
        return None

    return PlannerDraft(
        destination=destination or None,
        country=country or None,
        cities=cities,
        start_date=start_date or None,
        end_date=end_date or None,
        travelers=travelers or None,
        budget_total=budget or None,
        activities=activities,
        itinerary=build_itinerary_skeleton(activities, start_date, end_date),
    )
