"""Tests for text segmentation."""

import re

from sibylline_richtext.models import PatternDefinition
from sibylline_richtext.registry import PatternRegistry
from sibylline_richtext.rendering.scanner import Segment, scan


def _pairs(segments):
    return [(s.text, s.matched) for s in segments]


class TestScan:
    def test_no_matcher_yields_single_unmatched_segment(self):
        assert scan("just text", None) == [Segment("just text", 0, 9, matched=False)]

    def test_no_matches_yields_single_unmatched_segment(self, social_registry):
        segments = scan("nothing to see", social_registry.matcher())
        assert _pairs(segments) == [("nothing to see", False)]

    def test_empty_text_has_no_segments(self, social_registry):
        assert scan("", social_registry.matcher()) == []

    def test_alternates_gaps_and_matches(self, social_registry):
        segments = scan("hi @bob #x", social_registry.matcher())
        assert _pairs(segments) == [
            ("hi ", False),
            ("@bob", True),
            (" ", False),
            ("#x", True),
        ]

    def test_segments_cover_text_exactly(self, social_registry):
        text = "#a@b  trailing @c #d end"
        segments = scan(text, social_registry.matcher())
        assert "".join(s.text for s in segments) == text
        pos = 0
        for segment in segments:
            assert segment.start == pos
            assert text[segment.start : segment.end] == segment.text
            pos = segment.end
        assert pos == len(text)

    def test_adjacent_matches(self, social_registry):
        segments = scan("#a#b", social_registry.matcher())
        assert _pairs(segments) == [("#a", True), ("#b", True)]

    def test_first_alternative_wins(self):
        registry = PatternRegistry([PatternDefinition("ab"), PatternDefinition("abc")])
        segments = scan("abc", registry.matcher())
        assert _pairs(segments) == [("ab", True), ("c", False)]

    def test_zero_width_matches_are_skipped(self):
        segments = scan("axb", re.compile("x*"))
        assert _pairs(segments) == [("a", False), ("x", True), ("b", False)]
