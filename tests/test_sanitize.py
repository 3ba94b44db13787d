"""Tests for coercion of loosely-typed model output."""

import pytest

from resolver.utils.sanitize import coerce_bool, coerce_number, coerce_text, is_unknown
from resolver.utils.timestamps import ensure_utc, utc_now


class TestIsUnknown:
    @pytest.mark.parametrize("value", [None, "unknown", "Unknown", " N/A ", "null", "-", ""])
    def test_placeholders_are_unknown(self, value):
        assert is_unknown(value) is True

    @pytest.mark.parametrize("value", ["Naukri", 0, False, [], "none of the above"])
    def test_real_values_are_known(self, value):
        assert is_unknown(value) is False


class TestCoerceNumber:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (1200000, 1200000.0),
            (3.5, 3.5),
            ("$1,200,000", 1200000.0),
            ("₹ 5000", 5000.0),
            ("42", 42.0),
        ],
    )
    def test_parses_numbers(self, value, expected):
        assert coerce_number(value) == expected

    @pytest.mark.parametrize("value", ["unknown", "1.2B", "", None, True, float("nan"), float("inf"), {}])
    def test_unparseable_values_become_none(self, value):
        assert coerce_number(value) is None

    def test_integer_too_large_for_float(self):
        assert coerce_number(10 ** 400) is None


class TestCoerceBool:
    @pytest.mark.parametrize("value", [True, "true", "Yes", "public", 1])
    def test_truthy(self, value):
        assert coerce_bool(value) is True

    @pytest.mark.parametrize("value", [False, "false", "no", "Private", 0])
    def test_falsy(self, value):
        assert coerce_bool(value) is False

    @pytest.mark.parametrize("value", ["unknown", "maybe", 2, None, []])
    def test_other_values_become_none(self, value):
        assert coerce_bool(value) is None


class TestCoerceText:
    def test_strips_strings(self):
        assert coerce_text("  Noida ") == "Noida"

    def test_numbers_rendered_as_text(self):
        assert coerce_text(250) == "250"
        assert coerce_text(2.5) == "2.5"

    def test_placeholders_and_non_strings(self):
        assert coerce_text("N/A") is None
        assert coerce_text(True) is None
        assert coerce_text(["a"]) is None

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_floats_become_none(self, value):
        assert coerce_text(value) is None

    def test_huge_integer_rendered_as_digits(self):
        assert coerce_text(10 ** 400) == "1" + "0" * 400


class TestTimestamps:
    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is not None

    def test_ensure_utc_treats_naive_as_utc(self):
        from datetime import datetime, timezone

        naive = datetime(2025, 1, 1, 12, 0, 0)
        assert ensure_utc(naive) == datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert ensure_utc(None) is None
