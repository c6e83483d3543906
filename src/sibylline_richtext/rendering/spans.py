"""Rendered-to-original offset mapping.

Rendering can shrink a match (a long link shown as an icon and a short
label) or pass it through unchanged. Every rendered character is mapped to
the original character it derives from, so a selection over the rendered
text can be turned back into the exact original substring.

Offset functions in this module return offsets *relative to the start of a
match*, one per rendered character. :class:`OffsetMapBuilder` turns them
into absolute offsets while a pass walks the segments.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from ..errors import UnmappedOffsetError

LINK_ICON_WIDTH = 2
ELLIPSIS_MARKER = "..."

_SCHEME_PREFIXES = (("https://", 8), ("http://", 7))
_WWW_PREFIXES = ("www.", "http://www.", "https://www.")


class UnmappedPolicy(Enum):
    """What a lookup returns for a rendered index outside the map.

    ``START_OF_TEXT`` keeps the historical behaviour: a missing start edge
    resolves to offset 0 and a missing end edge to the end of the source
    text. It can silently select from the beginning of the text, so hosts
    that care should pick ``NEAREST`` or ``STRICT``.
    """

    START_OF_TEXT = "start_of_text"
    NEAREST = "nearest"
    STRICT = "strict"


def linear_offsets(original: str, rendered: str) -> list[int]:
    """1:1 advance, clamped to the end of the original run."""
    limit = len(original)
    return [min(i, limit) for i in range(len(rendered))]


def replacement_offsets(original: str, display: str) -> list[int]:
    """Offsets for a display string substituted for *original*.

    The first rendered character maps to the match start so a selection
    starting on it includes any leading markup; the rest skip the markup
    that precedes the display string inside the match.
    """
    if not display:
        return []
    prefix = original.find(display)
    if prefix < 0:
        prefix = 0
    limit = len(original)
    return [0] + [min(prefix + i, limit) for i in range(1, len(display))]


def shortened_link_offsets(original: str, rendered: str) -> list[int]:
    """Default mapping for span renderers that shorten web links.

    Assumes the rendered form is an icon glyph plus a space, then the link
    with its scheme and ``www.`` prefix dropped, optionally cut short and
    terminated by ``...``.
    """
    lower = original.lower()
    limit = len(original)

    skip = 0
    for prefix, length in _SCHEME_PREFIXES:
        if lower.startswith(prefix):
            skip += length
            break
    if lower.startswith(_WWW_PREFIXES):
        skip += 4

    head = min(LINK_ICON_WIDTH, len(rendered))
    tail = 0
    if len(rendered) - head >= len(ELLIPSIS_MARKER) and rendered.endswith(ELLIPSIS_MARKER):
        tail = len(ELLIPSIS_MARKER)
    body = len(rendered) - head - tail

    offsets = [0] * head
    offsets.extend(min(skip + i, limit) for i in range(body))
    offsets.extend([limit] * tail)
    return offsets


def is_valid_offsets(offsets: Sequence[int], original: str, rendered: str) -> bool:
    """Check a custom mapping: one offset per rendered char, in range, non-decreasing."""
    if len(offsets) != len(rendered):
        return False
    previous = 0
    for offset in offsets:
        if not isinstance(offset, int) or offset < previous or offset > len(original):
            return False
        previous = offset
    return True


class OffsetMap:
    """Immutable map from rendered character indices to original indices.

    Keys are dense from 0 to ``len(self) - 1``. Index ``len(self)`` is the end
    sentinel: the original offset just past everything the pass consumed.
    """

    __slots__ = ("_targets", "_end", "source")

    def __init__(self, targets: Sequence[int], end: int, source: str) -> None:
        self._targets = tuple(targets)
        self._end = end
        self.source = source

    def __len__(self) -> int:
        return len(self._targets)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OffsetMap):
            return NotImplemented
        return (self._targets, self._end, self.source) == (
            other._targets,
            other._end,
            other.source,
        )

    def __repr__(self) -> str:
        return f"OffsetMap(len={len(self._targets)}, end={self._end})"

    @property
    def end(self) -> int:
        return self._end

    def as_dict(self) -> dict[int, int]:
        mapping = dict(enumerate(self._targets))
        mapping[len(self._targets)] = self._end
        return mapping

    def extended(self, original_offset: int, count: int) -> OffsetMap:
        """Append *count* rendered characters mapped to *original_offset*.

        The appended offset also becomes the end sentinel.
        """
        targets = self._targets + (original_offset,) * count
        return OffsetMap(targets, original_offset, self.source)

    def _get(self, index: int) -> int | None:
        if 0 <= index < len(self._targets):
            return self._targets[index]
        if index == len(self._targets):
            return self._end
        return None

    def lookup(self, index: int, policy: UnmappedPolicy = UnmappedPolicy.START_OF_TEXT) -> int:
        """Original offset for rendered *index*."""
        target = self._get(index)
        if target is not None:
            return target
        if policy is UnmappedPolicy.STRICT:
            raise UnmappedOffsetError(index, len(self._targets))
        if policy is UnmappedPolicy.NEAREST:
            return self._get(min(max(index, 0), len(self._targets)))
        return 0

    def original_range(
        self,
        start: int,
        end: int,
        policy: UnmappedPolicy = UnmappedPolicy.START_OF_TEXT,
    ) -> tuple[int, int]:
        """Original ``(start, end)`` for the rendered range ``[start, end)``."""
        original_start = self.lookup(start, policy)
        original_end = self._get(end)
        if original_end is None:
            if policy is UnmappedPolicy.START_OF_TEXT:
                original_end = len(self.source)
            else:
                original_end = self.lookup(end, policy)
        if original_end < original_start:
            original_start, original_end = original_end, original_start
        return original_start, original_end

    def substring(
        self,
        start: int,
        end: int,
        policy: UnmappedPolicy = UnmappedPolicy.START_OF_TEXT,
    ) -> str:
        """The original text behind the rendered range ``[start, end)``."""
        original_start, original_end = self.original_range(start, end, policy)
        return self.source[original_start:original_end]


class OffsetMapBuilder:
    """Accumulates offsets for one render pass. Never reused across passes."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._targets: list[int] = []

    @property
    def rendered_length(self) -> int:
        return len(self._targets)

    def add(self, original_start: int, offsets: Sequence[int]) -> None:
        self._targets.extend(original_start + offset for offset in offsets)

    def add_constant(self, original_offset: int, count: int) -> None:
        self._targets.extend([original_offset] * count)

    def build(self, end: int) -> OffsetMap:
        return OffsetMap(self._targets, end, self._source)
