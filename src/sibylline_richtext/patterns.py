"""Built-in pattern definitions for common entities.

Links render as an icon and a shortened label; e-mail addresses, phone
numbers, mentions and hashtags render verbatim with the link style; bold
markup (``**text**``) renders its inner text.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial

from rich.style import StyleType

from .errors import ConfigurationError
from .models import (
    MatchResult,
    PatternDefinition,
    PlainRenderer,
    RenderedSpan,
    SpanRenderer,
    TapHandler,
    TextRenderer,
)
from .rendering.spans import ELLIPSIS_MARKER

LINK_ICON = "\U0001f517"
DEFAULT_LINK_LABEL_LENGTH = 20

# Ordered by priority: earlier alternatives win at the same position.
PATTERN_SOURCES: dict[str, str] = {
    "url": r"(?:https?://|www\.)[\w\-.~:/?#\[\]@!$&'()*+,;=%]*[\w/#=&%~\-]",
    "email": r"[\w.+\-]+@[\w\-]+(?:\.[\w\-]+)+",
    "phone": r"(?:\+\d{1,3}[\-. ]?)?\(?\d{3}\)?[\-. ]?\d{3}[\-. ]?\d{4}",
    "mention": r"@\w+",
    "hashtag": r"#\w+",
    "bold": r"\*\*[^*\n]+\*\*",
}

_SCHEMES = ("https://", "http://")


def shorten_link(url: str, max_length: int = DEFAULT_LINK_LABEL_LENGTH) -> str:
    """Drop the scheme and ``www.`` prefix and cut the rest to *max_length*."""
    label = url
    lower = label.lower()
    for scheme in _SCHEMES:
        if lower.startswith(scheme):
            label = label[len(scheme) :]
            break
    if label.lower().startswith("www."):
        label = label[4:]
    if len(label) > max_length:
        label = label[:max_length] + ELLIPSIS_MARKER
    return label


def render_link(
    *,
    text: str,
    matched: MatchResult,
    style: StyleType,
    link_style: StyleType,
    max_length: int = DEFAULT_LINK_LABEL_LENGTH,
    icon: str = LINK_ICON,
    link_style_override: StyleType | None = None,
    on_tap: TapHandler | None = None,
) -> RenderedSpan:
    label = shorten_link(text, max_length)
    matched.display = f"{icon} {label}"
    return RenderedSpan(
        text=matched.display,
        style=link_style_override if link_style_override is not None else link_style,
        on_tap=partial(on_tap, matched) if on_tap is not None else None,
    )


def strip_bold(text: str) -> str:
    return text[2:-2] if text.startswith("**") and text.endswith("**") else text


def url_pattern(
    style: StyleType | None = None,
    on_tap: TapHandler | None = None,
    max_length: int = DEFAULT_LINK_LABEL_LENGTH,
    icon: str = LINK_ICON,
) -> PatternDefinition:
    """Web links shown as ``<icon> <shortened label>``."""
    render = partial(
        render_link,
        max_length=max_length,
        icon=icon,
        link_style_override=style,
        on_tap=on_tap,
    )
    return PatternDefinition(PATTERN_SOURCES["url"], SpanRenderer(render=render), name="url")


def email_pattern(
    style: StyleType | None = None, on_tap: TapHandler | None = None
) -> PatternDefinition:
    return PatternDefinition(PATTERN_SOURCES["email"], PlainRenderer(style, on_tap), name="email")


def phone_pattern(
    style: StyleType | None = None, on_tap: TapHandler | None = None
) -> PatternDefinition:
    return PatternDefinition(PATTERN_SOURCES["phone"], PlainRenderer(style, on_tap), name="phone")


def mention_pattern(
    style: StyleType | None = None, on_tap: TapHandler | None = None
) -> PatternDefinition:
    return PatternDefinition(
        PATTERN_SOURCES["mention"], PlainRenderer(style, on_tap), name="mention"
    )


def hashtag_pattern(
    style: StyleType | None = None, on_tap: TapHandler | None = None
) -> PatternDefinition:
    return PatternDefinition(
        PATTERN_SOURCES["hashtag"], PlainRenderer(style, on_tap), name="hashtag"
    )


def bold_pattern(
    style: StyleType | None = "bold", on_tap: TapHandler | None = None
) -> PatternDefinition:
    """``**text**`` shown as ``text``."""
    return PatternDefinition(
        PATTERN_SOURCES["bold"], TextRenderer(strip_bold, style, on_tap), name="bold"
    )


def default_patterns(on_tap: TapHandler | None = None) -> list[PatternDefinition]:
    """All built-in patterns, in priority order, sharing one tap handler."""
    return [
        url_pattern(on_tap=on_tap),
        email_pattern(on_tap=on_tap),
        phone_pattern(on_tap=on_tap),
        mention_pattern(on_tap=on_tap),
        hashtag_pattern(on_tap=on_tap),
        bold_pattern(on_tap=on_tap),
    ]


_RENDERER_FACTORIES: dict[str, Callable[..., PatternDefinition]] = {
    "plain": lambda source, name, style, on_tap: PatternDefinition(
        source, PlainRenderer(style, on_tap), name=name
    ),
    "link": lambda source, name, style, on_tap: PatternDefinition(
        source,
        SpanRenderer(render=partial(render_link, link_style_override=style, on_tap=on_tap)),
        name=name,
    ),
    "bold": lambda source, name, style, on_tap: PatternDefinition(
        source, TextRenderer(strip_bold, style, on_tap), name=name
    ),
}


def renderer_names() -> list[str]:
    return sorted(_RENDERER_FACTORIES)


def build_definition(
    source: str,
    renderer: str = "plain",
    name: str = "",
    style: StyleType | None = None,
    on_tap: TapHandler | None = None,
) -> PatternDefinition:
    """Build a definition from a renderer name (``plain``, ``link`` or ``bold``).

    Raises:
        ConfigurationError: If the renderer name is unknown.
    """
    factory = _RENDERER_FACTORIES.get(renderer)
    if factory is None:
        available = ", ".join(renderer_names())
        raise ConfigurationError(f"Unknown renderer {renderer!r}. Available renderers: {available}")
    return factory(source, name, style, on_tap)
