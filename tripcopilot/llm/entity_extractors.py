"""
Entity Extractors
Pulls the inputs live-data lookups need out of a single chat message:
- Flight number + departure date (flight status)
- Origin + destination (transit suggestions)

Both are pure regex matchers. A missing part comes back as "".
"""

import re
from typing import Tuple

FLIGHT_NUMBER_PATTERN = re.compile(r"\b([A-Z0-9]{2,3}\s?\d{1,4}[A-Z]?)\b", re.IGNORECASE)
ISO_DATE_PATTERN = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b", re.ASCII)
ROUTE_PATTERN = re.compile(r"from\s+(.+?)\s+to\s+(.+)$", re.IGNORECASE)


def extract_flight_inputs(text: str) -> Tuple[str, str]:
    """
    Find the first flight-number-like token and the first ISO date

    Args:
        text: Raw message text

    Returns:
        (flight_number, date) with spaces removed from the flight number

    Example:
        >>> extract_flight_inputs("AA 123 on 2025-07-04")
        ('AA123', '2025-07-04')
    """
    flight_number = ""
    departure_date = ""

    match = FLIGHT_NUMBER_PATTERN.search(text.upper())
    if match:
        flight_number = match.group(1).replace(" ", "")

    match = ISO_DATE_PATTERN.search(text)
    if match:
        departure_date = match.group(1)

    return flight_number, departure_date


def extract_transit_inputs(text: str) -> Tuple[str, str]:
    """
    Match "from <origin> to <destination>" anywhere in the message

    The origin is the shortest run before " to ", the destination runs
    to the end of the text. Either both parts are returned or neither.

    Example:
        >>> extract_transit_inputs("From Paris to Lyon")
        ('Paris', 'Lyon')
    """
    match = ROUTE_PATTERN.search(text.strip())
    if not match:
        return "", ""
    return match.group(1).strip(), match.group(2).strip()
