"""
Model Selector
Picks the model for a chat turn. Every request currently goes to the
configured default.
"""

from typing import Sequence

from ..schemas.ai_schemas import ChatMessage


class ModelSelector:
    def __init__(self, default_model: str):
        self.default_model = default_model

    def select(self, prompt: str, messages: Sequence[ChatMessage]) -> str:
        """
        Args:
            prompt: Latest user message
            messages: Full conversation

        Returns:
            Model name
        """
        return self.default_model
