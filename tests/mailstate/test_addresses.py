"""Unit tests for address-list parsing and validation."""

import pytest

from mailstate.addresses import (
    AddressValidation,
    is_valid_address,
    join_address_list,
    normalize_address_list,
    split_address_list,
    validate_address_list,
)


class TestSplitAddressList:
    """Tests for split_address_list()."""

    def test_trims_tokens(self):
        """Tokens are trimmed of surrounding whitespace."""
        assert split_address_list(" a@b.com ;c@d.com ") == ["a@b.com", "c@d.com"]

    def test_drops_empty_tokens(self):
        """Repeated and trailing delimiters produce no tokens."""
        assert split_address_list("a@b.com;;; ;c@d.com;") == ["a@b.com", "c@d.com"]

    def test_empty_text(self):
        """Empty and delimiter-only text yield no tokens."""
        assert split_address_list("") == []
        assert split_address_list(" ; ;  ") == []


class TestJoinAddressList:
    """Tests for join_address_list() and normalize_address_list()."""

    def test_join(self):
        assert join_address_list(["a@b.com", "c@d.com"]) == "a@b.com; c@d.com"

    def test_join_skips_blank(self):
        assert join_address_list(["a@b.com", " ", ""]) == "a@b.com"

    def test_normalize(self):
        assert normalize_address_list("a@b.com; ;  c@d.com;") == "a@b.com; c@d.com"


class TestIsValidAddress:
    """Tests for the single-address rule."""

    @pytest.mark.parametrize(
        "address",
        ["a@b.com", "first.last+tag@mail.example.org", "x@y.z"],
    )
    def test_valid(self, address):
        assert is_valid_address(address)

    @pytest.mark.parametrize(
        "address",
        [
            "bad-address",
            "no-domain@",
            "@example.com",
            "user@localhost",
            "two@@example.com",
            "a@b@c.com",
            "spa ce@example.com",
            "user@exa mple.com",
        ],
    )
    def test_invalid(self, address):
        assert not is_valid_address(address)


class TestValidateAddressList:
    """Tests for validate_address_list()."""

    def test_returns_address_validation(self):
        result = validate_address_list("a@b.com")
        assert isinstance(result, AddressValidation)
        assert result.is_valid is True
        assert result.invalid_tokens == []

    def test_mixed_list_reports_invalid_tokens(self):
        """Blank tokens are skipped; only malformed tokens are reported."""
        result = validate_address_list("a@b.com; ; bad-address ; c@d.com")

        assert result.is_valid is False
        assert result.invalid_tokens == ["bad-address"]

    def test_invalid_tokens_keep_original_order(self):
        result = validate_address_list("zed;;a@b.com; alpha ;x@y.com;mid@")

        assert result.invalid_tokens == ["zed", "alpha", "mid@"]

    def test_duplicates_reported_each_time(self):
        result = validate_address_list("oops; a@b.com; oops")

        assert result.invalid_tokens == ["oops", "oops"]

    @pytest.mark.parametrize("text", ["", "   ", ";", " ; ;; "])
    def test_blank_field_is_valid(self, text):
        """Optional cc/bcc fields may be left blank."""
        result = validate_address_list(text)

        assert result.is_valid is True
        assert result.invalid_tokens == []

    def test_is_valid_iff_no_invalid_tokens(self):
        samples = ["a@b.com;c@d.com", "a@b.com;nope", ";;", "nope;;also nope"]
        for text in samples:
            result = validate_address_list(text)
            assert result.is_valid == (result.invalid_tokens == [])
