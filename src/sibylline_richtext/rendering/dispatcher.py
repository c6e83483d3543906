"""Per-segment render dispatch.

Walks the scanner's segments once, renders each with the strategy of the
pattern that matched it and feeds the offset map builder before moving on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial

from rich.style import StyleType
from rich.text import Text

from ..models import (
    DEFAULT_LINK_STYLE,
    DEFAULT_TEXT_STYLE,
    MatchResult,
    PatternDefinition,
    RegexOptions,
    RenderedSpan,
    SpanRenderer,
    TapHandler,
    TextRenderer,
    join_plain_text,
)
from ..registry import PatternRegistry
from .scanner import Segment, scan
from .spans import (
    OffsetMap,
    OffsetMapBuilder,
    is_valid_offsets,
    linear_offsets,
    replacement_offsets,
    shortened_link_offsets,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SegmentRecord:
    """Where a segment landed in the rendered text."""

    segment: Segment
    rendered_start: int
    rendered_end: int
    linear: bool
    """True when the segment rendered 1:1 with its original text."""


@dataclass(slots=True)
class RenderResult:
    """Output of one render pass: spans plus the offset map built alongside."""

    spans: list[RenderedSpan]
    offset_map: OffsetMap
    records: list[SegmentRecord] = field(default_factory=list)
    truncated: bool = False

    @property
    def source(self) -> str:
        return self.offset_map.source

    @property
    def plain_text(self) -> str:
        return join_plain_text(self.spans)

    def leaf_at(self, index: int) -> RenderedSpan | None:
        """The rendered leaf covering rendered character *index*."""
        if index < 0:
            return None
        pos = 0
        for span in self.spans:
            for leaf in span.leaves():
                pos += len(leaf.text)
                if index < pos:
                    return leaf
        return None

    def record_at(self, index: int) -> SegmentRecord | None:
        for record in self.records:
            if record.rendered_start <= index < record.rendered_end:
                return record
        return None

    def to_rich_text(self, base_style: StyleType = "") -> Text:
        text = Text(style=base_style)
        for span in self.spans:
            text.append_text(span.to_rich_text())
        return text


class RenderDispatcher:
    """Renders text with a pattern registry.

    Args:
        registry: The pattern definitions to recognize.
        options: Regex options applied to every pattern.
        style: Ambient style for unmatched text.
        link_style: Default style for matches whose definition has none.
    """

    def __init__(
        self,
        registry: PatternRegistry,
        options: RegexOptions | None = None,
        style: StyleType = DEFAULT_TEXT_STYLE,
        link_style: StyleType = DEFAULT_LINK_STYLE,
    ) -> None:
        self.registry = registry
        self.options = options or RegexOptions()
        self.style = style
        self.link_style = link_style

    def render(self, text: str, limit: int | None = None) -> RenderResult:
        """Render *text*, or only its first *limit* characters.

        The offset map always refers to the full *text* so selections can be
        resolved against it.
        """
        body = text if limit is None else text[: max(limit, 0)]
        builder = OffsetMapBuilder(text)
        spans: list[RenderedSpan] = []
        records: list[SegmentRecord] = []

        for segment in scan(body, self.registry.matcher(self.options)):
            if segment.matched:
                span, offsets = self._render_match(segment)
            else:
                span, offsets = self._render_literal(segment)

            rendered_start = builder.rendered_length
            builder.add(segment.start, offsets)
            spans.append(span)
            records.append(
                SegmentRecord(
                    segment=segment,
                    rendered_start=rendered_start,
                    rendered_end=builder.rendered_length,
                    linear=list(offsets) == list(range(len(segment.text))),
                )
            )

        logger.debug(
            "Rendered %d segments: %d -> %d chars",
            len(records),
            len(body),
            builder.rendered_length,
        )
        return RenderResult(spans=spans, offset_map=builder.build(len(body)), records=records)

    def _render_literal(self, segment: Segment) -> tuple[RenderedSpan, list[int]]:
        span = RenderedSpan(text=segment.text, style=self.style)
        return span, linear_offsets(segment.text, segment.text)

    def _render_match(self, segment: Segment) -> tuple[RenderedSpan, list[int]]:
        definition = self.registry.resolve(segment.text, self.options)
        if definition is None:
            return self._render_literal(segment)

        renderer = definition.renderer
        try:
            if isinstance(renderer, SpanRenderer):
                return self._render_span(segment, definition, renderer)
            if isinstance(renderer, TextRenderer):
                return self._render_text(segment, definition, renderer)
            return self._render_plain(segment, definition)
        except Exception:
            logger.warning(
                "Renderer for pattern %r failed on %r; rendering as literal text",
                definition.pattern,
                segment.text,
                exc_info=True,
            )
            return self._render_literal(segment)

    def _render_span(
        self,
        segment: Segment,
        definition: PatternDefinition,
        renderer: SpanRenderer,
    ) -> tuple[RenderedSpan, list[int]]:
        matched = _match_result(segment, definition)
        span = renderer.render(
            text=segment.text,
            matched=matched,
            style=self.style,
            link_style=self.link_style,
        )
        rendered = span.to_plain_text()
        map_offsets = renderer.map_offsets or shortened_link_offsets
        offsets = list(map_offsets(segment.text, rendered))
        if not is_valid_offsets(offsets, segment.text, rendered):
            logger.warning(
                "Offset mapping for pattern %r returned invalid offsets for %r; "
                "falling back to linear mapping",
                definition.pattern,
                segment.text,
            )
            offsets = linear_offsets(segment.text, rendered)
        return span, offsets

    def _render_text(
        self,
        segment: Segment,
        definition: PatternDefinition,
        renderer: TextRenderer,
    ) -> tuple[RenderedSpan, list[int]]:
        result = renderer.render(segment.text)
        if isinstance(result, MatchResult):
            matched = result
            matched.start = segment.start
            matched.end = segment.end
            matched.pattern = definition.pattern
        else:
            matched = _match_result(segment, definition, display=str(result))

        span = RenderedSpan(
            text=matched.display,
            style=self._link_style(renderer.style),
            on_tap=_bind(renderer.on_tap, matched),
        )
        return span, replacement_offsets(segment.text, matched.display)

    def _render_plain(
        self,
        segment: Segment,
        definition: PatternDefinition,
    ) -> tuple[RenderedSpan, list[int]]:
        renderer = definition.renderer
        matched = _match_result(segment, definition)
        span = RenderedSpan(
            text=segment.text,
            style=self._link_style(renderer.style),
            on_tap=_bind(renderer.on_tap, matched),
        )
        return span, linear_offsets(segment.text, segment.text)

    def _link_style(self, style: StyleType | None) -> StyleType:
        return style if style is not None else self.link_style


def _match_result(
    segment: Segment,
    definition: PatternDefinition,
    display: str | None = None,
) -> MatchResult:
    return MatchResult(
        value=segment.text,
        display=segment.text if display is None else display,
        start=segment.start,
        end=segment.end,
        pattern=definition.pattern,
    )


def _bind(on_tap: TapHandler | None, matched: MatchResult) -> Callable[[], None] | None:
    if on_tap is None:
        return None
    return partial(on_tap, matched)
