"""Pattern registry.

Definitions are keyed by their regular-expression source and compiled into
a single alternation ``(p1|p2|...)``. Compiled matchers are cached per
:class:`RegexOptions` value so scanning never recompiles.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from .errors import ConfigurationError
from .models import PatternDefinition, RegexOptions

logger = logging.getLogger(__name__)


class PatternRegistry:
    """Ordered, immutable set of pattern definitions."""

    def __init__(self, definitions: Iterable[PatternDefinition] = ()) -> None:
        self._definitions: dict[str, PatternDefinition] = {}
        for definition in definitions:
            if definition.pattern in self._definitions:
                raise ConfigurationError(
                    f"Duplicate pattern source {definition.pattern!r}; "
                    "each definition must use a distinct pattern"
                )
            self._definitions[definition.pattern] = definition

        self._combined: dict[RegexOptions, re.Pattern[str] | None] = {}
        self._individual: dict[RegexOptions, list[tuple[re.Pattern[str], PatternDefinition]]] = {}

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self):
        return iter(self._definitions.values())

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._definitions

    @property
    def combined_source(self) -> str:
        return "(" + "|".join(self._definitions) + ")"

    def get(self, pattern: str) -> PatternDefinition | None:
        return self._definitions.get(pattern)

    def matcher(self, options: RegexOptions | None = None) -> re.Pattern[str] | None:
        """Return the combined matcher for *options*, or None when empty."""
        options = options or RegexOptions()
        if options not in self._combined:
            if not self._definitions:
                self._combined[options] = None
            else:
                self._combined[options] = _compile(self.combined_source, options)
                logger.debug(
                    "Compiled %d patterns for %s", len(self._definitions), options
                )
        return self._combined[options]

    def _individual_patterns(
        self, options: RegexOptions
    ) -> list[tuple[re.Pattern[str], PatternDefinition]]:
        if options not in self._individual:
            self._individual[options] = [
                (_compile(source, options), definition)
                for source, definition in self._definitions.items()
            ]
        return self._individual[options]

    def resolve(
        self, matched_text: str, options: RegexOptions | None = None
    ) -> PatternDefinition | None:
        """Find the definition responsible for *matched_text*.

        Exact source lookup first, then the first definition (in registration
        order) whose pattern matches the whole text, then the first whose
        pattern matches anywhere in it. Returns None when nothing matches.
        """
        definition = self._definitions.get(matched_text)
        if definition is not None:
            return definition

        compiled = self._individual_patterns(options or RegexOptions())
        for pattern, definition in compiled:
            if pattern.fullmatch(matched_text):
                return definition
        for pattern, definition in compiled:
            if pattern.search(matched_text):
                return definition
        return None


def _compile(source: str, options: RegexOptions) -> re.Pattern[str]:
    try:
        return re.compile(source, options.flags)
    except re.error as exc:
        raise ConfigurationError(f"Invalid pattern {source!r}: {exc}") from exc
