"""
Tests for the masking strategy.

Tests cover:
- Full masks with fixed and variable length
- Partial mask thresholds (front only, front and back, out of range)
- Symbol resolution
- Empty values
"""

import pytest

from scrub import FieldPolicy, PartialMaskConfig, ScrubConfig
from scrub.masking import full_mask, mask_value, partial_mask, resolve_symbol

PARTIAL = PartialMaskConfig(
    enabled=True,
    min_field_len=10,
    max_field_len=19,
    visible_front_len=6,
    visible_back_only_if_len_greater_than=16,
    visible_back_len=4,
)


class TestFullMask:
    """Test suite for full masks."""

    def test_fixed_length(self, fixed_config):
        """Should use the configured fixed length regardless of the value."""
        assert full_mask("nutanix/4u", "*", fixed_config) == "********"
        assert full_mask("ab", "*", fixed_config) == "********"

    def test_variable_length(self, vary_config):
        """Should match the original length when mask_len_vary is set."""
        assert full_mask("nutanix/4u", "*", vary_config) == "*" * 10

    def test_custom_fixed_length(self):
        """Should honour a configured mask length."""
        assert full_mask("secret", "#", ScrubConfig(mask_len=3)) == "###"

    def test_policy_without_partial_is_full(self, vary_config):
        """A policy with partial masking disabled always masks fully."""
        policy = FieldPolicy(symbol="*", partial=PartialMaskConfig(enabled=False, max_field_len=100))
        assert mask_value("1234567891111111111", policy, vary_config) == "*" * 19


class TestPartialMask:
    """Test suite for partial mask boundaries."""

    def test_shorter_than_min_is_full(self, vary_config):
        """Length 9 is below the minimum of 10."""
        assert partial_mask("123456789", "*", PARTIAL, vary_config) == "*" * 9

    def test_front_visible(self, vary_config):
        """Length 15 is below the back-visibility threshold: only the front stays."""
        assert partial_mask("123456789111111", "*", PARTIAL, vary_config) == "123456*********"

    def test_middle_visible_at_max(self, vary_config):
        """Length 19 (the maximum) keeps 6 front and 4 back characters."""
        assert partial_mask("1234567891111111111", "*", PARTIAL, vary_config) == "123456*********1111"

    def test_middle_visible_at_threshold(self, vary_config):
        """Length 16 equals the threshold, so the back becomes visible."""
        assert partial_mask("1234567890abcdef", "*", PARTIAL, vary_config) == "123456******cdef"

    def test_longer_than_max_is_full(self, vary_config):
        """Length 20 is above the maximum of 19."""
        assert partial_mask("12345678911111111110", "*", PARTIAL, vary_config) == "*" * 20

    def test_out_of_range_uses_fixed_length(self, fixed_config):
        """Full-mask fallbacks follow the fixed/variable length switch."""
        assert partial_mask("123456789", "*", PARTIAL, fixed_config) == "********"

    def test_partial_keeps_length_with_fixed_config(self, fixed_config):
        """Partial masks always keep the original length."""
        assert partial_mask("123456789111111", "*", PARTIAL, fixed_config) == "123456*********"

    def test_visible_spans_larger_than_value(self, vary_config):
        """Falls back to a full mask when front and back would overlap."""
        overlapping = PartialMaskConfig(True, 1, 10, 6, 0, 4)
        assert partial_mask("abcdefgh", "*", overlapping, vary_config) == "*" * 8

    def test_custom_symbol(self, vary_config):
        """Should fill with the policy's symbol."""
        policy = FieldPolicy(symbol=".", partial=PARTIAL)
        assert mask_value("1234567891111111111", policy, vary_config) == "123456.........1111"


class TestMaskValue:
    """Test suite for symbol resolution and empty values."""

    def test_empty_value_untouched(self, fixed_config):
        """Empty strings are never masked."""
        assert mask_value("", None, fixed_config) == ""
        assert mask_value("", FieldPolicy(partial=PARTIAL), fixed_config) == ""

    def test_none_policy_uses_default_symbol(self):
        """A None policy masks with the configured default symbol."""
        config = ScrubConfig(default_symbol="#")
        assert mask_value("secret", None, config) == "########"

    @pytest.mark.parametrize("symbol", ["", "ab", None])
    def test_invalid_symbol_falls_back(self, symbol):
        """Missing or multi-character symbols fall back to the default."""
        assert resolve_symbol(FieldPolicy(symbol=symbol), ScrubConfig()) == "*"

    def test_single_character_symbol(self):
        """A single-character symbol is used as is."""
        assert resolve_symbol(FieldPolicy(symbol="."), ScrubConfig()) == "."
