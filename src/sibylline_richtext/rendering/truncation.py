"""Truncation to a line budget with a continuation marker.

Pass 1 renders the full text so the layout measurer can decide whether it
overflows. When it does and the view is collapsed, pass 2 renders only the
prefix of the original text that fits and appends either an ellipsis or an
interactive "more" marker. Pass 2's offset map replaces pass 1's.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from rich.style import StyleType

from ..models import RenderedSpan
from .dispatcher import RenderDispatcher, RenderResult
from .layout import LayoutMeasurer

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINES = 2


@dataclass(frozen=True, slots=True)
class TruncationState:
    """Collapsed/expanded flag plus the continuation marker configuration."""

    max_lines: int | None = DEFAULT_MAX_LINES
    expanded: bool = False
    toggle_truncate: bool = False
    """Show an interactive "more"/"less" marker instead of an ellipsis."""

    view_more_text: str = "more"
    view_less_text: str | None = None
    """Collapse marker shown when expanded; None shows no marker."""

    marker_style: StyleType | None = None
    ellipsis: str = "…"

    @classmethod
    def for_view(cls, truncate: bool, max_lines: int | None = None, **kwargs) -> TruncationState:
        """State for a view that starts collapsed when *truncate* is set."""
        if truncate:
            max_lines = max_lines if max_lines is not None else DEFAULT_MAX_LINES
        return cls(max_lines=max_lines, expanded=not truncate, **kwargs)

    @property
    def marker_text(self) -> str | None:
        return self.view_less_text if self.expanded else self.view_more_text

    def toggled(self) -> TruncationState:
        return replace(self, expanded=not self.expanded)


class TruncationController:
    """Runs the render pipeline against a line budget.

    Args:
        dispatcher: Renders text into spans and offset maps.
        measurer: Decides whether rendered text fits and where to cut it.
        state: Initial truncation state.
        on_more: Called instead of expanding when the "more" marker is tapped.
    """

    def __init__(
        self,
        dispatcher: RenderDispatcher,
        measurer: LayoutMeasurer,
        state: TruncationState | None = None,
        on_more: Callable[[], None] | None = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.measurer = measurer
        self.state = state or TruncationState()
        self.on_more = on_more

    @property
    def expanded(self) -> bool:
        return self.state.expanded

    def toggle(self) -> None:
        self.state = self.state.toggled()

    def tap_marker(self) -> None:
        if not self.state.expanded and self.on_more is not None:
            self.on_more()
        else:
            self.toggle()

    def render(self, text: str) -> RenderResult:
        full = self.dispatcher.render(text)
        state = self.state
        if state.max_lines is None:
            return full

        if state.toggle_truncate:
            reserve = " " + (state.marker_text or "")
        else:
            reserve = state.ellipsis
        layout = self.measurer.measure(full.plain_text, state.max_lines, reserve)
        if not layout.exceeded:
            return full

        if state.expanded:
            if state.toggle_truncate and state.view_less_text:
                return self._append_marker(full, state.view_less_text, len(text))
            return full

        cut = self._original_cut(full, layout.cut)
        if self.measurer.measure(reserve, 1).exceeded:
            logger.warning("Continuation marker %r is wider than one line", reserve.strip())
            return self._truncated(text, cut)
        while True:
            truncated = self._truncated(text, cut)
            if cut == 0 or not self.measurer.measure(
                truncated.plain_text, state.max_lines
            ).exceeded:
                break
            # The prefix rendered wider than it did inside the full text.
            cut = self._shrink_cut(full, truncated, cut)
        logger.debug("Truncated %d chars to %d at line budget %d", len(text), cut, state.max_lines)
        return truncated

    def _truncated(self, text: str, cut: int) -> RenderResult:
        """Render the first *cut* characters plus the continuation marker."""
        truncated = self.dispatcher.render(text, limit=cut)
        truncated.truncated = True
        if self.state.toggle_truncate:
            return self._append_marker(truncated, self.state.view_more_text, cut)

        ellipsis = self.state.ellipsis
        truncated.spans.append(RenderedSpan(text=ellipsis, style=self.dispatcher.style))
        truncated.offset_map = truncated.offset_map.extended(cut, len(ellipsis))
        return truncated

    def _shrink_cut(self, full: RenderResult, truncated: RenderResult, cut: int) -> int:
        """A smaller cut for a prefix that overflowed once re-rendered.

        A cut inside a segment matched in the full text moves to that
        segment's start. Otherwise the last segment of the prefix that did
        not render 1:1 is dropped, and failing that one character.
        """
        for record in full.records:
            segment = record.segment
            if segment.matched and segment.start < cut < segment.end:
                return segment.start
        for record in reversed(truncated.records):
            if not record.linear:
                return record.segment.start
        return cut - 1

    def _original_cut(self, full: RenderResult, rendered_cut: int | None) -> int:
        """Translate a rendered cut position into an original one.

        A cut inside a segment that did not render 1:1 moves back to the
        segment start so the segment is never re-rendered from a fragment.
        """
        rendered_cut = min(max(rendered_cut or 0, 0), len(full.offset_map))
        record = full.record_at(rendered_cut)
        if record is not None and not record.linear:
            return record.segment.start
        return full.offset_map.lookup(rendered_cut)

    def _append_marker(self, result: RenderResult, marker: str, cut: int) -> RenderResult:
        appended = 0
        if not _ends_with_newline(result):
            result.spans.append(RenderedSpan(text=" ", style=self.dispatcher.style))
            appended += 1
        result.spans.append(
            RenderedSpan(
                text=marker,
                style=self.state.marker_style or self.dispatcher.link_style,
                on_tap=self.tap_marker,
            )
        )
        appended += len(marker)
        result.offset_map = result.offset_map.extended(cut, appended)
        return result


def _ends_with_newline(result: RenderResult) -> bool:
    leaves = [leaf for span in result.spans for leaf in span.leaves()]
    return bool(leaves) and leaves[-1].text.endswith("\n")
