# interfaces/__init__.py
"""
Interfaces Package

Contains external collaborators:
- ai_repository: Conversations, messages, snapshots, audit log
- bridge_client: JSON calls to the web app for live data
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ai_repository import AIRepository, InMemoryAIRepository, RedisAIRepository, build_repository
    from .bridge_client import BridgeClient

__all__ = [
    "AIRepository",
    "InMemoryAIRepository",
    "RedisAIRepository",
    "build_repository",
    "BridgeClient",
]
