# llm/__init__.py
"""
LLM Components Package

Contains model-facing and text heuristics components:
- entity_extractors: Flight and route inputs from a message
- fallback: Local answers when the model returns nothing useful
- planner_draft: Free-text trip planning to a structured draft
- prompts: System prompt templates
- model_client: OpenAI Responses wrapper
- model_selector: Model routing
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .entity_extractors import extract_flight_inputs, extract_transit_inputs
    from .fallback import synthesize, suggest_actions_for_page, is_unusable_answer
    from .planner_draft import build_planner_draft, build_itinerary_skeleton
    from .prompts import build_system_prompt, build_planner_system_prompt
    from .model_client import ModelClient
    from .model_selector import ModelSelector

__all__ = [
    "extract_flight_inputs",
    "extract_transit_inputs",
    "synthesize",
    "suggest_actions_for_page",
    "is_unusable_answer",
    "build_planner_draft",
    "build_itinerary_skeleton",
    "build_system_prompt",
    "build_planner_system_prompt",
    "ModelClient",
    "ModelSelector",
]
