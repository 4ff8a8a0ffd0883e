import math
from datetime import date, timedelta

import pytest

from conftest import NOW
from leadscore.services.condition_evaluator import evaluate_condition, parse_number


class TestParseNumber:
    """Numeric prefix parsing used by the comparison operators."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (42, 42.0),
            (12.5, 12.5),
            ("1001+", 1001.0),
            ("12.5 crore", 12.5),
            ("  -3", -3.0),
        ],
    )
    def test_parses_leading_number(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "", None, True, "crore 12"])
    def test_non_numeric_is_nan(self, raw):
        assert math.isnan(parse_number(raw))


class TestStringOperators:
    """equals / not_equals / contains / in / not_in."""

    def test_equals_is_case_insensitive(self):
        assert evaluate_condition("Technology", "equals", "technology") is True
        assert evaluate_condition("Technology", "EQUALS", "Technology") is True

    def test_equals_mismatch(self):
        assert evaluate_condition("Retail", "equals", "Technology") is False

    def test_not_equals(self):
        assert evaluate_condition("Retail", "not_equals", "Technology") is True
        assert evaluate_condition("retail", "not_equals", "Retail") is False

    def test_contains_any_comma_separated_needle(self):
        assert evaluate_condition("jane@edu.example.org", "contains", "@student,@edu.") is True
        assert evaluate_condition("jane@acme.com", "contains", "@student,@edu.") is False

    def test_in_list_trims_entries(self):
        assert evaluate_condition("Noida", "in", "Delhi, Noida ,Gurgaon") is True
        assert evaluate_condition("Pune", "in", "Delhi,Noida,Gurgaon") is False

    def test_not_in(self):
        assert evaluate_condition("Pune", "not_in", "Delhi,Noida") is True
        assert evaluate_condition("delhi", "not_in", "Delhi,Noida") is False

    def test_boolean_flag_string(self):
        assert evaluate_condition("true", "equals", "true") is True
        assert evaluate_condition("false", "equals", "true") is False


class TestNumericOperators:
    """greater_than / less_than / between / in_range."""

    def test_greater_than(self):
        assert evaluate_condition(1500, "greater_than", "1000") is True
        assert evaluate_condition(1000, "greater_than", "1000") is False

    def test_less_than(self):
        assert evaluate_condition(3, "less_than", "5") is True
        assert evaluate_condition(5, "less_than", "5") is False

    def test_between_is_inclusive(self):
        assert evaluate_condition(250, "between", "250,999") is True
        assert evaluate_condition(999, "between", "250,999") is True
        assert evaluate_condition(1000, "between", "250,999") is False

    def test_in_range_is_alias_of_between(self):
        assert evaluate_condition(50, "in_range", "10,100") is True

    @pytest.mark.parametrize("comparand", ["10", "10,20,30", "a,b", ""])
    def test_malformed_range_is_false(self, comparand):
        assert evaluate_condition(15, "between", comparand) is False

    def test_unparseable_value_is_false(self):
        assert evaluate_condition("lots", "greater_than", "10") is False
        assert evaluate_condition("lots", "less_than", "10") is False

    def test_numeric_prefix_of_text_value(self):
        assert evaluate_condition("1001+", "greater_than", "1000") is True


class TestDaysSince:
    """days_since compares whole elapsed days against the threshold."""

    def test_exactly_threshold_days_matches(self):
        assert evaluate_condition(NOW - timedelta(days=30), "days_since", "30", now=NOW) is True

    def test_partial_day_is_floored(self):
        when = NOW - timedelta(days=29, hours=23)
        assert evaluate_condition(when, "days_since", "30", now=NOW) is False

    def test_iso_string_and_naive_datetime_treated_as_utc(self):
        assert evaluate_condition("2026-01-01T12:00:00", "days_since", "60", now=NOW) is True
        naive = (NOW - timedelta(days=91)).replace(tzinfo=None)
        assert evaluate_condition(naive, "days_since", "90", now=NOW) is True

    def test_iso_string_with_zulu_suffix(self):
        assert evaluate_condition("2026-01-01T12:00:00Z", "days_since", "60", now=NOW) is True
        assert evaluate_condition("2026-01-01T12:00:01Z", "days_since", "60", now=NOW) is False

    def test_iso_string_with_offset(self):
        assert evaluate_condition("2026-01-01T17:30:00+05:30", "days_since", "60", now=NOW) is True

    def test_plain_date(self):
        assert evaluate_condition(date(2025, 12, 1), "days_since", "90", now=NOW) is True

    def test_bad_date_is_false(self):
        assert evaluate_condition("not-a-date", "days_since", "30", now=NOW) is False


class TestTotality:
    """Evaluation never raises; anything unusable is simply no match."""

    def test_none_value_never_matches(self):
        assert evaluate_condition(None, "equals", "x") is False
        assert evaluate_condition(None, "not_equals", "x") is False

    def test_none_comparand_never_matches(self):
        assert evaluate_condition("x", "equals", None) is False

    def test_unknown_operator_is_false(self):
        assert evaluate_condition("x", "matches_regex", "x") is False
        assert evaluate_condition("x", None, "x") is False
