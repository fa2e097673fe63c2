"""Tests for ipeds/cip.py — CIP code normalization."""
import pytest

from ipeds.cip import normalize_cip


class TestNormalizeCip:
    @pytest.mark.parametrize("raw, expected", [
        ("512001", "51.2001"),
        ("51.2", "51.2000"),
        ("51.2001", "51.2001"),
        ("", ""),
        ("51.20", "51.2000"),
        ("11.07", "11.0700"),
        ('="51.2001"', "51.2001"),
        (" 51.2001 ", "51.2001"),
        ("5120", "51.2000"),
        ("51.200199", "51.2001"),
    ])
    def test_examples(self, raw, expected):
        assert normalize_cip(raw) == expected

    def test_none_is_empty(self):
        assert normalize_cip(None) == ""

    def test_unmatched_returns_cleaned_string(self):
        # Too short to canonicalize: digits only, returned as-is
        assert normalize_cip("5") == "5"
        assert normalize_cip("CIP 99") == "99"
        assert normalize_cip("1.2") == "1.2"

    def test_letters_and_punctuation_stripped(self):
        assert normalize_cip("51-2001") == "51.2001"
        assert normalize_cip("cip:51.2001") == "51.2001"

    @pytest.mark.parametrize("raw", [
        "512001", "51.2", "51.2001", "", "5", "1.2", "12..3", "12.3.4",
        "1234567", "abc", "99", ".5", "51.", '="11.0701"', "00.0000",
    ])
    def test_idempotent(self, raw):
        once = normalize_cip(raw)
        assert normalize_cip(once) == once

    def test_query_and_row_forms_agree(self):
        assert normalize_cip("512001") == normalize_cip("51.2001") == normalize_cip("51.2001 ")
