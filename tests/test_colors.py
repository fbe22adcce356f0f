"""Tests for renumber.ui.colors – palette, blending and success colors."""

from __future__ import annotations

import pytest

from renumber.ui.colors import AppColors, blend_hex, success_color


# ===========================================================================
# AppColors – constants exist
# ===========================================================================

class TestAppColors:
    @pytest.mark.parametrize("name", ["BG", "PRIMARY", "CORRECT", "INCORRECT", "TEXT_PRIMARY"])
    def test_is_hex(self, name: str):
        value = getattr(AppColors, name)
        assert value.startswith("#")
        assert len(value) == 7


# ===========================================================================
# success_color
# ===========================================================================

class TestSuccessColor:
    def test_zero_is_incorrect_red(self):
        assert success_color(0).lower() == AppColors.INCORRECT.lower()

    def test_hundred_is_correct_green(self):
        assert success_color(100).lower() == AppColors.CORRECT.lower()

    def test_midpoint_between(self):
        mid = success_color(50)
        assert mid.lower() not in (AppColors.INCORRECT.lower(), AppColors.CORRECT.lower())
        assert len(mid) == 7

    def test_rates_outside_range_are_clamped(self):
        assert success_color(-20) == success_color(0)
        assert success_color(150) == success_color(100)


# ===========================================================================
# blend_hex – happy paths
# ===========================================================================

class TestBlendHexHappy:
    def test_t_zero_returns_a(self):
        assert blend_hex("#FF0000", "#0000FF", 0.0) == "#ff0000"

    def test_t_one_returns_b(self):
        assert blend_hex("#FF0000", "#0000FF", 1.0) == "#0000ff"

    def test_midpoint(self):
        result = blend_hex("#000000", "#FFFFFF", 0.5)
        r = int(result[1:3], 16)
        g = int(result[3:5], 16)
        b = int(result[5:7], 16)
        assert r == g == b == 128

    def test_same_color(self):
        assert blend_hex("#ABCDEF", "#ABCDEF", 0.5) == "#abcdef"

    def test_quarter_blend(self):
        result = blend_hex("#000000", "#FF0000", 0.25)
        # 255 * 0.25 = 63.75 rounds to 64
        assert result == "#400000"

    def test_preserves_hash_prefix(self):
        result = blend_hex("#123456", "#654321", 0.5)
        assert result.startswith("#")
        assert len(result) == 7


# ===========================================================================
# blend_hex – clamping
# ===========================================================================

class TestBlendHexClamping:
    def test_t_negative_clamped_to_zero(self):
        assert blend_hex("#FF0000", "#0000FF", -1.0) == "#ff0000"

    def test_t_greater_than_one_clamped(self):
        assert blend_hex("#FF0000", "#0000FF", 2.0) == "#0000ff"


# ===========================================================================
# blend_hex – invalid inputs
# ===========================================================================

class TestBlendHexInvalid:
    def test_a_missing_hash(self):
        result = blend_hex("FF0000", "#0000FF", 0.5)
        assert result == "FF0000"  # returns a

    def test_b_missing_hash(self):
        result = blend_hex("#FF0000", "0000FF", 0.5)
        assert result == "#FF0000"  # returns a

    def test_a_wrong_length(self):
        result = blend_hex("#FFF", "#000000", 0.5)
        assert result == "#FFF"

    def test_b_wrong_length(self):
        result = blend_hex("#FF0000", "#FFF", 0.5)
        assert result == "#FF0000"

    def test_invalid_hex_chars(self):
        result = blend_hex("#GGHHII", "#000000", 0.5)
        assert result == "#GGHHII"  # exception caught, returns a

    def test_both_invalid(self):
        result = blend_hex("bad", "worse", 0.5)
        assert result == "bad"

    def test_empty_strings(self):
        result = blend_hex("", "", 0.5)
        assert result == ""

    def test_whitespace_padding(self):
        # blend_hex strips whitespace
        result = blend_hex("  #FF0000  ", "  #0000FF  ", 0.0)
        assert result == "#ff0000"

    def test_non_numeric_t(self):
        assert blend_hex("#FF0000", "#0000FF", "half") == "#FF0000"  # type: ignore[arg-type]
