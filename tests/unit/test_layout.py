"""Tests for monospace layout measurement."""

import pytest

from sibylline_richtext.rendering.layout import LayoutMeasurer, LayoutResult, MonospaceLayout


class TestLines:
    def test_wraps_at_width(self):
        assert MonospaceLayout(5).lines("abcdefgh") == [(0, 5), (5, 8)]

    def test_newline_ends_line(self):
        assert MonospaceLayout(10).lines("ab\ncd") == [(0, 3), (3, 5)]

    def test_trailing_newline_adds_empty_line(self):
        assert MonospaceLayout(10).line_count("ab\n") == 2

    def test_empty_text_is_one_line(self):
        assert MonospaceLayout(10).lines("") == [(0, 0)]

    def test_wide_characters_take_two_cells(self):
        assert MonospaceLayout(4).lines("日本語") == [(0, 2), (2, 3)]

    def test_width_must_be_positive(self):
        with pytest.raises(ValueError):
            MonospaceLayout(0)


class TestMeasure:
    def test_fits(self):
        assert MonospaceLayout(10).measure("short", 1) == LayoutResult(exceeded=False)

    def test_cut_reserves_room(self):
        result = MonospaceLayout(10).measure("hello world foo", 1, reserve="…")
        assert result == LayoutResult(exceeded=True, cut=9)

    def test_cut_on_later_line(self):
        result = MonospaceLayout(5).measure("abcdefghijklmnop", 2, reserve=" more")
        assert result == LayoutResult(exceeded=True, cut=5)

    def test_cut_stops_at_newline(self):
        result = MonospaceLayout(10).measure("abc\ndef\nghi", 1)
        assert result == LayoutResult(exceeded=True, cut=3)

    def test_reserve_wider_than_line(self):
        result = MonospaceLayout(4).measure("abcdefghijklmnop", 2, reserve=" more")
        assert result == LayoutResult(exceeded=True, cut=4)

    def test_zero_lines(self):
        assert MonospaceLayout(10).measure("abc", 0) == LayoutResult(exceeded=True, cut=0)

    def test_satisfies_protocol(self):
        assert isinstance(MonospaceLayout(10), LayoutMeasurer)
