"""sibylline-richtext: entity-aware rich text rendering with exact copy offsets."""

from .errors import ConfigurationError, RichTextError, UnmappedOffsetError
from .models import (
    MatchResult,
    PatternDefinition,
    PlainRenderer,
    RegexOptions,
    RenderedSpan,
    SpanRenderer,
    TextRenderer,
)
from .patterns import (
    bold_pattern,
    default_patterns,
    email_pattern,
    hashtag_pattern,
    mention_pattern,
    phone_pattern,
    url_pattern,
)
from .registry import PatternRegistry
from .rendering import (
    MonospaceLayout,
    OffsetMap,
    RenderDispatcher,
    RenderResult,
    TruncationController,
    TruncationState,
    UnmappedPolicy,
)
from .view import RichTextView, copy_selection

__all__ = [
    "RichTextView",
    "copy_selection",
    "PatternRegistry",
    "PatternDefinition",
    "SpanRenderer",
    "TextRenderer",
    "PlainRenderer",
    "MatchResult",
    "RenderedSpan",
    "RegexOptions",
    "RenderDispatcher",
    "RenderResult",
    "OffsetMap",
    "UnmappedPolicy",
    "TruncationController",
    "TruncationState",
    "MonospaceLayout",
    "RichTextError",
    "ConfigurationError",
    "UnmappedOffsetError",
    "url_pattern",
    "email_pattern",
    "phone_pattern",
    "mention_pattern",
    "hashtag_pattern",
    "bold_pattern",
    "default_patterns",
    "PatternConfig",
]


def __getattr__(name: str):
    if name == "PatternConfig":
        # Cache on module to avoid repeated imports
        import sys

        from .config import PatternConfig

        setattr(sys.modules[__name__], name, PatternConfig)
        return PatternConfig
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
