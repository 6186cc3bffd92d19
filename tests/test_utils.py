"""
Test input normalization helpers
"""
import pytest
from datetime import date, datetime

from app.utils.validators import normalize_date_string, parse_date, parse_optional_int, is_truthy


class TestNormalizeDateString:
    """Test canonical YYYY-MM-DD normalization"""

    def test_canonical_is_unchanged(self):
        assert normalize_date_string("2024-01-05") == "2024-01-05"

    def test_idempotent(self):
        once = normalize_date_string("05-01-2024")
        assert normalize_date_string(once) == once

    def test_day_first_and_iso_agree(self):
        assert normalize_date_string("31-12-2023") == normalize_date_string("2023-12-31") == "2023-12-31"

    def test_iso_with_time(self):
        assert normalize_date_string("2024-03-10T08:15:00.000Z") == "2024-03-10"

    def test_date_objects(self):
        assert normalize_date_string(date(2024, 2, 29)) == "2024-02-29"
        assert normalize_date_string(datetime(2024, 2, 29, 13, 45)) == "2024-02-29"

    def test_empty_values(self):
        assert normalize_date_string(None) is None
        assert normalize_date_string("") is None
        assert normalize_date_string("   ") is None

    @pytest.mark.parametrize("value", ["2024/01/01", "32-13-2024", "2023-02-29", "01-01-24", "yesterday"])
    def test_malformed_rejected(self, value):
        with pytest.raises(ValueError):
            normalize_date_string(value)

    def test_parse_date_returns_date(self):
        assert parse_date("01-02-2024") == date(2024, 2, 1)


class TestFormHelpers:
    """Test helpers for multipart form values"""

    @pytest.mark.parametrize("value", [None, "", "null", "undefined", "  "])
    def test_optional_int_empty(self, value):
        assert parse_optional_int(value) is None

    def test_optional_int_numeric(self):
        assert parse_optional_int("12") == 12
        assert parse_optional_int(7) == 7

    def test_optional_int_text_raises(self):
        with pytest.raises(ValueError):
            parse_optional_int("Surat Masuk")

    @pytest.mark.parametrize("value,expected", [
        ("true", True), ("1", True), ("on", True), (True, True),
        ("false", False), ("0", False), (None, False), ("", False),
    ])
    def test_is_truthy(self, value, expected):
        assert is_truthy(value) is expected
