"""Layout measurement.

The truncation controller only needs to know whether rendered text fits in
a number of lines and, if not, the first rendered position that does not.
Hosts with a real paragraph layout implement :class:`LayoutMeasurer`;
:class:`MonospaceLayout` covers terminals and other cell grids.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from rich.cells import cell_len


@dataclass(frozen=True, slots=True)
class LayoutResult:
    """Outcome of measuring rendered text against a line budget."""

    exceeded: bool
    cut: int | None = None
    """First rendered index that does not fit once ``reserve`` is placed."""


@runtime_checkable
class LayoutMeasurer(Protocol):
    """Measures rendered text against a maximum line count."""

    def measure(self, text: str, max_lines: int, reserve: str = "") -> LayoutResult: ...


class MonospaceLayout:
    """Character-wrapped layout on a grid ``width`` cells wide.

    Explicit newlines end a line. Wide characters (CJK, emoji) take two
    cells, as measured by rich.
    """

    def __init__(self, width: int) -> None:
        if width < 1:
            raise ValueError(f"Layout width must be positive, got {width}")
        self.width = width

    def lines(self, text: str) -> list[tuple[int, int]]:
        """``(start, end)`` index pairs of each visual line.

        A line ended by a newline includes it; text ending in a newline has a
        trailing empty line.
        """
        lines: list[tuple[int, int]] = []
        start = 0
        col = 0
        for i, char in enumerate(text):
            if char == "\n":
                lines.append((start, i + 1))
                start = i + 1
                col = 0
                continue
            width = cell_len(char)
            if col + width > self.width and col > 0:
                lines.append((start, i))
                start = i
                col = 0
            col += width
        lines.append((start, len(text)))
        return lines

    def line_count(self, text: str) -> int:
        return len(self.lines(text))

    def measure(self, text: str, max_lines: int, reserve: str = "") -> LayoutResult:
        """Check *text* against *max_lines* and find where to cut it.

        The cut leaves room for *reserve* on the last allowed line. A reserve
        wider than the layout cannot fit; the cut then falls at the start of
        the last line and the reserve wraps.
        """
        lines = self.lines(text)
        if len(lines) <= max_lines:
            return LayoutResult(exceeded=False)
        if max_lines < 1:
            return LayoutResult(exceeded=True, cut=0)

        last_start, last_end = lines[max_lines - 1]
        budget = max(self.width - cell_len(reserve), 0)
        col = 0
        cut = last_start
        for i in range(last_start, last_end):
            char = text[i]
            if char == "\n":
                break
            width = cell_len(char)
            if col + width > budget:
                break
            col += width
            cut = i + 1
        return LayoutResult(exceeded=True, cut=cut)
