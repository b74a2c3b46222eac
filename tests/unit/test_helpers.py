"""
Unit tests for identifier validation and rounding
"""

import pytest
from impact_engine.helpers import parse_assessment_id, round_half_up
from core.exceptions import InvalidIdentifierError


class TestParseAssessmentId:
    
    @pytest.mark.parametrize("raw,expected", [
        (5, 5),
        ("5", 5),
        (" 42 ", 42),
        ("0007", 7),
    ])
    def test_valid_identifiers(self, raw, expected):
        assert parse_assessment_id(raw) == expected
    
    @pytest.mark.parametrize("raw", [None, "", "abc", "12abc", "1.5", 3.0, True, 0, -1, "-4", "0", "\u00b2", "\u2460", "\u0663"])
    def test_invalid_identifiers(self, raw):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            parse_assessment_id(raw)
        
        assert exc_info.value.code == "INVALID_ID"
        assert exc_info.value.status_code == 400


class TestRoundHalfUp:
    
    @pytest.mark.parametrize("value,places,expected", [
        (0.125, 2, 0.13),
        (0.375, 2, 0.38),
        (2.5, 0, 3.0),
        (2040.0, 2, 2040.0),
        (0.5, 0, 1.0),
        (6552.000000000001, 2, 6552.0),
        (0.7000000000000001, 2, 0.7),
    ])
    def test_rounding(self, value, places, expected):
        assert round_half_up(value, places) == pytest.approx(expected)
