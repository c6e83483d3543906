"""Core value types: pattern definitions, match results and rendered spans."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field

from rich.style import StyleType
from rich.text import Text

from .errors import ConfigurationError

DEFAULT_TEXT_STYLE: StyleType = "none"
DEFAULT_LINK_STYLE: StyleType = "underline bright_blue"


@dataclass(frozen=True, slots=True)
class RegexOptions:
    """Matching mode shared by every pattern compiled in a pass."""

    multiline: bool = False
    case_sensitive: bool = True
    dot_all: bool = False
    unicode: bool = True

    @property
    def flags(self) -> int:
        """Equivalent ``re`` module flags."""
        flags = 0
        if self.multiline:
            flags |= re.MULTILINE
        if not self.case_sensitive:
            flags |= re.IGNORECASE
        if self.dot_all:
            flags |= re.DOTALL
        if not self.unicode:
            flags |= re.ASCII
        return flags


@dataclass(slots=True)
class MatchResult:
    """A recognized entity in the original text."""

    value: str
    """The matched substring (or the value a text renderer chose to expose)."""

    display: str
    """What the entity is displayed as."""

    start: int
    """Start offset in the original text."""

    end: int
    """End offset in the original text."""

    pattern: str | None = None
    """Source of the pattern definition that produced the match."""


TapHandler = Callable[[MatchResult], None]


@dataclass(slots=True)
class RenderedSpan:
    """A node of the rendered output.

    Leaves carry ``text``; a leaf with ``on_tap`` is interactive. Span
    renderers may return composite spans whose ``children`` are rendered in
    order after the node's own text, inheriting its style and tap handler.
    """

    text: str = ""
    style: StyleType | None = None
    on_tap: Callable[[], None] | None = None
    children: list[RenderedSpan] = field(default_factory=list)

    @property
    def interactive(self) -> bool:
        return self.on_tap is not None

    def to_plain_text(self) -> str:
        return self.text + "".join(child.to_plain_text() for child in self.children)

    def leaves(self) -> Iterator[RenderedSpan]:
        """Yield flattened leaves with inherited style and tap handler resolved."""
        yield from self._leaves(None, None)

    def _leaves(
        self,
        style: StyleType | None,
        on_tap: Callable[[], None] | None,
    ) -> Iterator[RenderedSpan]:
        style = self.style if self.style is not None else style
        on_tap = self.on_tap if self.on_tap is not None else on_tap
        if self.text:
            yield RenderedSpan(text=self.text, style=style, on_tap=on_tap)
        for child in self.children:
            yield from child._leaves(style, on_tap)

    def to_rich_text(self, base_style: StyleType = "") -> Text:
        text = Text(style=base_style)
        for leaf in self.leaves():
            text.append(leaf.text, style=leaf.style)
        return text


def join_plain_text(spans: Sequence[RenderedSpan]) -> str:
    return "".join(span.to_plain_text() for span in spans)


# Offset functions return one original offset per rendered character,
# relative to the start of the match.
OffsetFunction = Callable[[str, str], Sequence[int]]


@dataclass(frozen=True, slots=True)
class SpanRenderer:
    """Fully custom rendering.

    ``render`` is called with ``text``, ``matched``, ``style`` and
    ``link_style`` keyword arguments and returns a :class:`RenderedSpan`.
    ``map_offsets`` maps the rendered characters back into the match; when
    omitted the shortened-link mapping applies.
    """

    render: Callable[..., RenderedSpan]
    map_offsets: OffsetFunction | None = None


@dataclass(frozen=True, slots=True)
class TextRenderer:
    """Replaces the matched text with a display string.

    ``render`` receives the matched text and returns the display string, or a
    :class:`MatchResult` when the tap value should differ from the match.
    """

    render: Callable[[str], str | MatchResult]
    style: StyleType | None = None
    on_tap: TapHandler | None = None


@dataclass(frozen=True, slots=True)
class PlainRenderer:
    """Renders the matched text verbatim with a link style."""

    style: StyleType | None = None
    on_tap: TapHandler | None = None


Renderer = SpanRenderer | TextRenderer | PlainRenderer


@dataclass(frozen=True)
class PatternDefinition:
    """A regular expression and the strategy that renders its matches."""

    pattern: str
    renderer: Renderer = field(default_factory=PlainRenderer)
    name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.pattern, str) or not self.pattern:
            raise ConfigurationError("Pattern source must be a non-empty string")
        if not isinstance(self.renderer, (SpanRenderer, TextRenderer, PlainRenderer)):
            raise ConfigurationError(
                f"Pattern {self.pattern!r} needs a SpanRenderer, TextRenderer or "
                f"PlainRenderer, got {type(self.renderer).__name__}"
            )
