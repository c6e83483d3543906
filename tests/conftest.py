"""Shared test fixtures for sibylline-richtext."""

import pytest

from sibylline_richtext.models import PatternDefinition, PlainRenderer
from sibylline_richtext.registry import PatternRegistry
from sibylline_richtext.rendering import MonospaceLayout, RenderDispatcher

HASHTAG = r"#\w+"
MENTION = r"@\w+"


@pytest.fixture
def taps():
    """Collects MatchResults passed to tap handlers."""
    return []


@pytest.fixture
def social_registry(taps):
    """Hashtag and mention patterns rendered as plain links."""
    return PatternRegistry(
        [
            PatternDefinition(HASHTAG, PlainRenderer(on_tap=taps.append), name="hashtag"),
            PatternDefinition(MENTION, PlainRenderer(on_tap=taps.append), name="mention"),
        ]
    )


@pytest.fixture
def dispatcher(social_registry):
    return RenderDispatcher(social_registry)


@pytest.fixture
def narrow_layout():
    """A ten-cell wide monospace layout."""
    return MonospaceLayout(width=10)
