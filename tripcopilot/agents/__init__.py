# agents/__init__.py
"""
Agents Package

- copilot_agent: Chat and planner pipeline
- realtime_dispatcher: Page-keyed live data lookups
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .copilot_agent import CopilotAgent, build_copilot_agent
    from .realtime_dispatcher import RealtimeDispatcher

__all__ = [
    "CopilotAgent",
    "build_copilot_agent",
    "RealtimeDispatcher",
]
