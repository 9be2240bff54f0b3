"""
AI Helper Utilities
Common utility functions for the copilot service
"""

import re
from datetime import datetime, timezone
from typing import Any, Awaitable, Iterable, List, Optional, TypeVar

from loguru import logger

T = TypeVar("T")

_DELIMITERS = re.compile(r"[,;\n]")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def rfc3339(moment: Optional[datetime] = None) -> str:
    """
    Format a timestamp as RFC 3339 UTC with seconds precision

    Example:
        >>> rfc3339(datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc))
        '2025-06-01T12:00:00Z'
    """
    moment = (moment or utc_now()).astimezone(timezone.utc)
    return moment.replace(microsecond=0).strftime("%Y-%m-%dT%H:%M:%SZ")


async def best_effort(label: str, awaitable: Awaitable[T]) -> Optional[T]:
    """
    Await a write whose failure must not fail the request

    Failures are logged and discarded. Cancellation is not caught.

    Args:
        label: Short name of the write, used in the log line
        awaitable: The pending write

    Returns:
        The write's result, or None if it raised
    """
    try:
        return await awaitable
    except Exception as e:
        logger.warning(f"best-effort write '{label}' failed: {e}")
        return None


def dedupe_case_insensitive(values: Iterable[str], limit: Optional[int] = None) -> List[str]:
    """
    Trim values and drop empty or case-insensitive duplicates

    The first-seen casing wins and order is preserved.

    Args:
        values: Candidate strings
        limit: Maximum number of results (None = unbounded)

    Returns:
        List[str]: Unique values
    """
    seen = set()
    unique = []
    for value in values:
        cleaned = value.strip()
        key = cleaned.lower()
        if not cleaned or key in seen:
            continue
        seen.add(key)
        unique.append(cleaned)
        if limit is not None and len(unique) >= limit:
            break
    return unique


def split_delimited(text: str) -> List[str]:
    """Split on commas, semicolons and newlines"""
    return _DELIMITERS.split(text)


def as_string_list(value: Any) -> List[str]:
    """
    Normalize a structured hint that may be a list or a delimited string

    Non-string list entries are ignored.
    """
    if isinstance(value, str):
        return split_delimited(value)
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str)]
    return []


def title_case(word: str) -> str:
    """Upper-case the first letter only ("flights" -> "Flights")"""
    if not word:
        return word
    return word[0].upper() + word[1:]
