"""Tests for 16-bit color arithmetic."""

import numpy as np
import pytest

from ditherio.core.color import (
    BLACK,
    MAX_CHANNEL,
    WHITE,
    Color,
    ErrorVector,
    clamp,
    color_diff,
    make_color,
    parse_hex,
    scale_16_to_8,
    scale_8_to_16,
)


class TestClamp:
    def test_inside_range(self):
        assert clamp(5, 0, 10) == 5

    def test_below(self):
        assert clamp(-3, 0, 10) == 0

    def test_above(self):
        assert clamp(11, 0, 10) == 10

    def test_bounds_inclusive(self):
        assert clamp(0, 0, 10) == 0
        assert clamp(10, 0, 10) == 10


class TestMakeColor:
    def test_in_range_unchanged(self):
        assert make_color(1, 2, 3, 4) == Color(1, 2, 3, 4)

    def test_saturates_instead_of_wrapping(self):
        c = make_color(-1, 70000, MAX_CHANNEL + 1, -70000)
        assert c == Color(0, MAX_CHANNEL, MAX_CHANNEL, 0)

    def test_returns_color(self):
        assert isinstance(make_color(0, 0, 0, 0), Color)


class TestColorDiff:
    def test_signed_difference(self):
        diff = color_diff(Color(100, 0, 500, MAX_CHANNEL), Color(0, 300, 500, 0))
        assert diff == ErrorVector(100, -300, 0, MAX_CHANNEL)

    def test_full_range(self):
        diff = color_diff(BLACK, WHITE)
        assert diff == ErrorVector(-MAX_CHANNEL, -MAX_CHANNEL, -MAX_CHANNEL, 0)

    def test_identical_colors(self):
        assert color_diff(WHITE, WHITE) == ErrorVector(0, 0, 0, 0)


class TestScaling:
    def test_8_to_16_extremes(self):
        assert scale_8_to_16(0) == 0
        assert scale_8_to_16(255) == MAX_CHANNEL

    def test_16_to_8_inverts_widening(self):
        for v in range(256):
            assert scale_16_to_8(scale_8_to_16(v)) == v

    def test_16_to_8_rounds(self):
        assert scale_16_to_8(257 + 200) == 2

    def test_arrays(self):
        arr = np.array([0, 1, 128, 255], dtype=np.uint32)
        wide = scale_8_to_16(arr)
        assert wide.tolist() == [0, 257, 128 * 257, MAX_CHANNEL]
        assert scale_16_to_8(wide).tolist() == [0, 1, 128, 255]


class TestParseHex:
    def test_six_digits(self):
        assert parse_hex("#ff0000") == Color(MAX_CHANNEL, 0, 0, MAX_CHANNEL)

    def test_without_hash(self):
        assert parse_hex("00ff00") == Color(0, MAX_CHANNEL, 0, MAX_CHANNEL)

    def test_short_form(self):
        assert parse_hex("#fff") == WHITE

    def test_with_alpha(self):
        assert parse_hex("#00000000") == Color(0, 0, 0, 0)

    @pytest.mark.parametrize("bad", ["", "#12", "#12345", "#gg0000"])
    def test_invalid(self, bad):
        with pytest.raises(ValueError, match="Invalid hex"):
            parse_hex(bad)
