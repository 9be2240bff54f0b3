"""
Unit tests for llm/entity_extractors.py
"""
from tripcopilot.llm.entity_extractors import extract_flight_inputs, extract_transit_inputs


class TestExtractFlightInputs:

    def test_flight_number_and_date(self):
        assert extract_flight_inputs("AA 123 on 2025-07-04") == ("AA123", "2025-07-04")

    def test_lowercase_flight_number_is_upper_cased(self):
        assert extract_flight_inputs("status of ua930 please") == ("UA930", "")

    def test_trailing_letter_kept(self):
        flight, _ = extract_flight_inputs("Is LH 400A delayed?")
        assert flight == "LH400A"

    def test_nothing_found(self):
        assert extract_flight_inputs("When does my flight land?") == ("", "")

    def test_date_must_be_iso(self):
        _, departure = extract_flight_inputs("BA 287 on 07/04/2025")
        assert departure == ""


class TestExtractTransitInputs:

    def test_simple_route(self):
        assert extract_transit_inputs("From Paris to Lyon") == ("Paris", "Lyon")

    def test_no_route(self):
        assert extract_transit_inputs("Paris or Lyon") == ("", "")

    def test_route_inside_sentence_is_trimmed(self):
        text = "  how do I get from Berlin Hbf to Prague main station  "
        assert extract_transit_inputs(text) == ("Berlin Hbf", "Prague main station")

    def test_origin_is_shortest_and_destination_greedy(self):
        assert extract_transit_inputs("from A to B to C") == ("A", "B to C")

    def test_missing_destination_yields_nothing(self):
        assert extract_transit_inputs("from Paris") == ("", "")
