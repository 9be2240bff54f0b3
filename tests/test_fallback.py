"""
Unit tests for llm/fallback.py
"""
import pytest

from tripcopilot.llm.fallback import (
    DEFAULT_SUGGESTED_ACTIONS,
    EMPTY_MODEL_ANSWER,
    GENERIC_ANSWER,
    GENERIC_DEGRADED_ANSWER,
    TRANSIT_NO_ROUTE_DEGRADED_ANSWER,
    is_unusable_answer,
    suggest_actions_for_page,
    synthesize,
)


class TestIsUnusableAnswer:

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", EMPTY_MODEL_ANSWER])
    def test_unusable(self, text):
        assert is_unusable_answer(text)

    @pytest.mark.parametrize("text", ["Sure, here is a plan.", EMPTY_MODEL_ANSWER + " Sorry."])
    def test_usable(self, text):
        assert not is_unusable_answer(text)


class TestSynthesizeTransit:

    def test_degraded_route_mentions_both_ends_and_flixbus(self, make_messages):
        answer = synthesize("transit", make_messages("from Munich to Vienna"), degraded=True)
        assert "For Munich to Vienna" in answer
        assert "FlixBus" in answer
        assert "3) pick the best reliability-cost tradeoff." in answer

    def test_route_not_degraded_offers_comparison(self, make_messages):
        answer = synthesize("transit", make_messages("from Munich to Vienna"), degraded=False)
        assert answer.startswith("For Munich to Vienna, I can help compare bus vs rail")

    def test_no_route_degraded_asks_for_route(self, make_messages):
        answer = synthesize("transit", make_messages("bus or train?"), degraded=True)
        assert answer == TRANSIT_NO_ROUTE_DEGRADED_ANSWER

    def test_no_route_not_degraded_is_generic(self, make_messages):
        assert synthesize("transit", make_messages("bus or train?"), degraded=False) == GENERIC_ANSWER

    def test_only_last_message_is_read(self, make_messages):
        messages = make_messages("from Munich to Vienna", "thanks")
        assert synthesize("transit", messages, degraded=False) == GENERIC_ANSWER


class TestSynthesizeOtherPages:

    def test_degraded(self, make_messages):
        assert synthesize("flights", make_messages("AA 1"), degraded=True) == GENERIC_DEGRADED_ANSWER

    def test_not_degraded(self, make_messages):
        assert synthesize("hotels", make_messages("where to stay"), degraded=False) == GENERIC_ANSWER

    def test_empty_messages(self):
        assert synthesize("transit", [], degraded=True) == TRANSIT_NO_ROUTE_DEGRADED_ANSWER


class TestSuggestedActions:

    def test_flights(self):
        assert suggest_actions_for_page("flights") == [
            "Share exact flight number and date for live status",
            "Compare price-time tradeoff before selecting",
        ]

    def test_transit(self):
        assert suggest_actions_for_page("transit")[0] == "Provide 'from X to Y' for route options"

    def test_finance(self):
        assert suggest_actions_for_page("finance") == [
            "Review highest-spend category",
            "Set per-day budget target",
        ]

    @pytest.mark.parametrize("page_key", ["overview", "hotels", "docs", ""])
    def test_default(self, page_key):
        assert suggest_actions_for_page(page_key) == DEFAULT_SUGGESTED_ACTIONS

    def test_returns_a_copy(self):
        suggest_actions_for_page("overview").append("mutated")
        assert "mutated" not in suggest_actions_for_page("overview")
