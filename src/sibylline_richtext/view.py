"""Hosting component for rich text.

:class:`RichTextView` wires the registry, dispatcher and truncation
controller together and keeps the state a UI host needs between renders:
the expanded flag and the latest render result, whose offset map is the
only one valid for selections.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from rich.style import StyleType
from rich.text import Text

from .errors import ConfigurationError
from .models import DEFAULT_LINK_STYLE, DEFAULT_TEXT_STYLE, PatternDefinition, RegexOptions
from .registry import PatternRegistry
from .rendering.dispatcher import RenderDispatcher, RenderResult
from .rendering.layout import LayoutMeasurer
from .rendering.spans import UnmappedPolicy
from .rendering.truncation import TruncationController, TruncationState

logger = logging.getLogger(__name__)


def copy_selection(
    result: RenderResult,
    start: int,
    end: int,
    clipboard: Callable[[str], None] | None = None,
    policy: UnmappedPolicy = UnmappedPolicy.START_OF_TEXT,
) -> str | None:
    """Copy the original text behind a rendered selection.

    A collapsed selection copies nothing and returns None. Reversed
    selections are normalized.
    """
    if start == end:
        return None
    if start > end:
        start, end = end, start
    selected = result.offset_map.substring(start, end, policy)
    if clipboard is not None:
        clipboard(selected)
    return selected


class RichTextView:
    """Renders text with recognized entities, truncation and exact copy.

    Args:
        text: The original text.
        patterns: Pattern definitions, in priority order.
        layout: Measures rendered text; required for truncation.
        truncate: Start collapsed to ``max_lines`` (2 when not given).
        max_lines: Line budget.
        toggle_truncate: Show a "more"/"less" marker instead of an ellipsis.
        view_more_text: Expand marker text.
        view_less_text: Collapse marker text; None hides it when expanded.
        view_more_less_style: Marker style; defaults to ``link_style``.
        style: Ambient text style.
        link_style: Default style for matches.
        regex_options: Options applied to every pattern.
        on_more: Called instead of expanding when "more" is tapped.
        clipboard: Receives copied text.
        unmapped_policy: How selections outside the rendered text resolve.
    """

    def __init__(
        self,
        text: str,
        patterns: Iterable[PatternDefinition] | PatternRegistry,
        *,
        layout: LayoutMeasurer | None = None,
        truncate: bool = False,
        max_lines: int | None = None,
        toggle_truncate: bool = False,
        view_more_text: str = "more",
        view_less_text: str | None = None,
        view_more_less_style: StyleType | None = None,
        style: StyleType = DEFAULT_TEXT_STYLE,
        link_style: StyleType = DEFAULT_LINK_STYLE,
        regex_options: RegexOptions | None = None,
        on_more: Callable[[], None] | None = None,
        clipboard: Callable[[str], None] | None = None,
        unmapped_policy: UnmappedPolicy = UnmappedPolicy.START_OF_TEXT,
    ) -> None:
        if not isinstance(patterns, PatternRegistry):
            patterns = PatternRegistry(patterns)
        if (truncate or max_lines is not None) and layout is None:
            raise ConfigurationError("A layout measurer is required when truncating")

        self.text = text
        self.registry = patterns
        self.dispatcher = RenderDispatcher(
            patterns, options=regex_options, style=style, link_style=link_style
        )
        state = TruncationState.for_view(
            truncate,
            max_lines,
            toggle_truncate=toggle_truncate,
            view_more_text=view_more_text,
            view_less_text=view_less_text,
            marker_style=view_more_less_style,
        )
        self._controller = (
            TruncationController(self.dispatcher, layout, state, on_more=on_more)
            if layout is not None
            else None
        )
        self.clipboard = clipboard
        self.unmapped_policy = unmapped_policy
        self._result: RenderResult | None = None

    @property
    def expanded(self) -> bool:
        return self._controller is None or self._controller.expanded

    @property
    def result(self) -> RenderResult:
        """The latest render, rendering first if needed."""
        if self._result is None:
            return self.render()
        return self._result

    def render(self) -> RenderResult:
        """Run a fresh render pass, discarding the previous result."""
        if self._controller is None:
            self._result = self.dispatcher.render(self.text)
        else:
            self._result = self._controller.render(self.text)
        return self._result

    def toggle(self) -> RenderResult:
        if self._controller is not None:
            self._controller.toggle()
        return self.render()

    def tap(self, index: int) -> bool:
        """Invoke the tap handler of the leaf at rendered *index*.

        Returns True when a handler ran. Tapping the continuation marker
        re-renders with the new expanded state.
        """
        leaf = self.result.leaf_at(index)
        if leaf is None or leaf.on_tap is None:
            return False
        expanded = self.expanded
        leaf.on_tap()
        if self.expanded != expanded:
            self.render()
        return True

    def copy(self, start: int, end: int) -> str | None:
        """Copy the original text behind the rendered selection ``[start, end)``."""
        copied = copy_selection(self.result, start, end, self.clipboard, self.unmapped_policy)
        if copied is not None:
            logger.debug("Copied %d chars from rendered [%d, %d)", len(copied), start, end)
        return copied

    def to_rich_text(self) -> Text:
        return self.result.to_rich_text(self.dispatcher.style)

    def __rich__(self) -> Text:
        return self.to_rich_text()
