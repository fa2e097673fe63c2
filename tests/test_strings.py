"""Tests for utils/strings.py — row coercion helpers."""
from utils.strings import first_present, optional_str, safe_int


class TestSafeInt:
    def test_plain_integers(self):
        assert safe_int("10") == 10
        assert safe_int(" 7 ") == 7
        assert safe_int(42) == 42

    def test_zero_and_negative_kept(self):
        assert safe_int("0") == 0
        assert safe_int("-3") == -3

    def test_thousands_separator(self):
        assert safe_int("1,204") == 1204

    def test_float_strings_truncate(self):
        assert safe_int("12.0") == 12
        assert safe_int(3.9) == 3

    def test_missing_and_invalid_use_default(self):
        assert safe_int(None) == 0
        assert safe_int("") == 0
        assert safe_int("n/a") == 0
        assert safe_int("nan") == 0
        assert safe_int("abc", default=None) is None
        assert safe_int(float("nan"), default=-1) == -1


class TestFirstPresent:
    def test_first_key_wins(self):
        row = {"CTOTALT": "5", "CTOTAL": "9"}
        assert first_present(row, ("CTOTALT", "CTOTAL")) == "5"

    def test_falls_back_to_later_key(self):
        row = {"ctotalt": "4"}
        assert first_present(row, ("CTOTALT", "ctotalt")) == "4"

    def test_present_but_empty_still_wins(self):
        row = {"UNITID": "", "unitid": "100654"}
        assert first_present(row, ("UNITID", "unitid")) == ""

    def test_none_value_and_absent(self):
        assert first_present({"UNITID": None}, ("UNITID",)) == ""
        assert first_present({}, ("UNITID",)) == ""

    def test_strips_whitespace(self):
        assert first_present({"INSTNM": "  Acme  "}, ("INSTNM",)) == "Acme"


class TestOptionalStr:
    def test_blank_is_none(self):
        assert optional_str("") is None
        assert optional_str("   ") is None
        assert optional_str(None) is None

    def test_value_stripped(self):
        assert optional_str(" www.acme.edu ") == "www.acme.edu"
