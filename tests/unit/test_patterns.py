"""Tests for the built-in entity patterns."""

import pytest

from sibylline_richtext.errors import ConfigurationError
from sibylline_richtext.models import PlainRenderer, SpanRenderer, TextRenderer
from sibylline_richtext.patterns import (
    PATTERN_SOURCES,
    build_definition,
    default_patterns,
    renderer_names,
    shorten_link,
    strip_bold,
)
from sibylline_richtext.registry import PatternRegistry
from sibylline_richtext.rendering import scan


class TestDefaultPatterns:
    """Tests for entity detection with the default pattern set."""

    def setup_method(self):
        self.registry = PatternRegistry(default_patterns())
        self.matcher = self.registry.matcher()

    def _entities(self, text):
        return [
            (s.text, self.registry.resolve(s.text).name)
            for s in scan(text, self.matcher)
            if s.matched
        ]

    def test_url_detection(self):
        texts = [
            "see https://example.com/path?q=1",
            "see http://example.com",
            "see www.example.com/docs",
        ]
        for text in texts:
            entities = self._entities(text)
            assert entities and entities[0][1] == "url", f"Failed to detect: {text}"
            assert entities[0][0] == text[4:]

    def test_url_excludes_trailing_punctuation(self):
        assert self._entities("go to https://x.io/a.") == [("https://x.io/a", "url")]

    def test_email_detection(self):
        assert self._entities("mail bob.smith+tag@example.co.uk now") == [
            ("bob.smith+tag@example.co.uk", "email")
        ]

    def test_phone_detection(self):
        texts = ["call +1 555-123-4567 today", "call 555.123.4567", "call (555) 123-4567"]
        for text in texts:
            entities = self._entities(text)
            assert entities and entities[0][1] == "phone", f"Failed to detect: {text}"

    def test_short_numbers_are_not_phones(self):
        assert self._entities("in 2024 we sold 12345 units") == []

    def test_mention_and_hashtag(self):
        assert self._entities("ping @alice_1! #release") == [
            ("@alice_1", "mention"),
            ("#release", "hashtag"),
        ]

    def test_bold(self):
        assert self._entities("a **b c** d") == [("**b c**", "bold")]

    def test_email_is_not_split_into_mention(self):
        names = [name for _, name in self._entities("bob@example.com")]
        assert names == ["email"]

    def test_no_duplicate_sources(self):
        assert len(self.registry) == len(PATTERN_SOURCES)


class TestHelpers:
    def test_shorten_link(self):
        assert shorten_link("https://www.example.com") == "example.com"
        assert shorten_link("http://example.com/path", max_length=7) == "example..."
        assert shorten_link("WWW.Example.com") == "Example.com"

    def test_strip_bold(self):
        assert strip_bold("**x**") == "x"
        assert strip_bold("x") == "x"

    def test_build_definition(self):
        assert isinstance(build_definition(r"#\w+").renderer, PlainRenderer)
        assert isinstance(build_definition(r"https?://\S+", "link").renderer, SpanRenderer)
        assert isinstance(build_definition(r"\*\*.+?\*\*", "bold").renderer, TextRenderer)
        assert renderer_names() == ["bold", "link", "plain"]

    def test_build_definition_unknown_renderer(self):
        with pytest.raises(ConfigurationError, match="Unknown renderer"):
            build_definition(r"#\w+", "sparkle")
