"""Single-pass segmentation of text into matched and unmatched runs."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Segment:
    """A maximal run of the input, matched by some pattern or not."""

    text: str
    start: int
    end: int
    matched: bool


def scan(text: str, matcher: re.Pattern[str] | None) -> list[Segment]:
    """Split *text* into segments covering it exactly once, in order.

    Matches follow the regex engine's leftmost, first-alternative semantics.
    Zero-width matches never become segments.
    """
    segments: list[Segment] = []
    pos = 0

    if matcher is not None:
        for match in matcher.finditer(text):
            start, end = match.span()
            if start == end:
                continue
            if start > pos:
                segments.append(Segment(text[pos:start], pos, start, matched=False))
            segments.append(Segment(match.group(0), start, end, matched=True))
            pos = end

    if pos < len(text):
        segments.append(Segment(text[pos:], pos, len(text), matched=False))

    return segments
