"""Tests for the hypothesis id grammar."""

import pytest

from hypodex.core.exceptions import InvalidHypothesisIdError
from hypodex.core.ids import (
    HypothesisId,
    format_hypothesis_id,
    generate_hypothesis_id,
    is_valid_hypothesis_id,
    parse_hypothesis_id,
    session_for_hypothesis_id,
)


class TestParse:
    def test_simple_id(self):
        assert parse_hypothesis_id("H-TEST-001") == HypothesisId("TEST", 1)

    def test_session_with_hyphens_and_digits(self):
        parsed = parse_hypothesis_id("H-RS-2025-001-042")
        assert parsed.session_id == "RS-2025-001"
        assert parsed.sequence == 42

    @pytest.mark.parametrize(
        "bad",
        [
            "",
            "H-TEST-1",
            "H-TEST-0001",
            "X-TEST-001",
            "H--001",
            "H-TEST-001\n",
            "h-TEST-001",
            "H-TE ST-001",
            "H-Ré-001",
            "H-TEST-١٢٣",
        ],
    )
    def test_malformed(self, bad):
        assert parse_hypothesis_id(bad) is None
        assert not is_valid_hypothesis_id(bad)
        assert session_for_hypothesis_id(bad) is None

    def test_non_string(self):
        assert parse_hypothesis_id(None) is None

    def test_str_round_trip(self):
        assert str(HypothesisId("A", 7)) == "H-A-007"
        assert format_hypothesis_id("RS-1", 12) == "H-RS-1-012"


class TestGenerate:
    def test_first_id(self):
        assert generate_hypothesis_id("TEST", []) == "H-TEST-001"

    def test_one_past_highest(self):
        existing = ["H-TEST-001", "H-TEST-003"]
        assert generate_hypothesis_id("TEST", existing) == "H-TEST-004"

    def test_other_sessions_ignored(self):
        existing = ["H-OTHER-009", "H-TEST-002", "garbage"]
        assert generate_hypothesis_id("TEST", existing) == "H-TEST-003"

    def test_exhausted_sequence(self):
        with pytest.raises(InvalidHypothesisIdError):
            generate_hypothesis_id("TEST", ["H-TEST-999"])

    @pytest.mark.parametrize("session", ["bad id", "-lead", "", "Ré"])
    def test_session_that_cannot_form_an_id(self, session):
        with pytest.raises(InvalidHypothesisIdError):
            generate_hypothesis_id(session, [])
