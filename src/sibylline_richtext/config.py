"""Configuration loader for pattern sets.

Loads pattern definitions from YAML files with priority resolution:
1. User config: ~/.config/{app_name}/patterns/ (highest priority)
2. Project config: .{app_name}/patterns/ in current directory
3. Package defaults: shipped with sibylline-richtext (fallback)
"""

import logging
import re
from pathlib import Path

from .errors import ConfigurationError
from .models import PatternDefinition, RegexOptions, TapHandler
from .patterns import build_definition

logger = logging.getLogger(__name__)

# Lazy import yaml to avoid startup cost
_yaml = None


def _get_yaml():
    """Lazy-load PyYAML."""
    global _yaml
    if _yaml is None:
        import yaml

        _yaml = yaml
    return _yaml


def _get_package_defaults_path() -> Path:
    """Get path to package default pattern sets using importlib.resources."""
    try:
        from importlib.resources import files

        return files("sibylline_richtext.pattern_data") / "_defaults"
    except (ImportError, TypeError):
        # Fallback for editable installs
        return Path(__file__).parent / "pattern_data" / "_defaults"


class PatternConfig:
    """Load pattern sets from config files with priority resolution.

    Config locations are checked in priority order:
    1. ~/.config/{app_name}/patterns/ - User overrides
    2. .{app_name}/patterns/ - Project-specific patterns
    3. Package defaults - Shipped with sibylline-richtext

    A set file looks like::

        settings:
          regex_options:
            case_sensitive: false
        patterns:
          mention:
            pattern: '@\\w+'
            renderer: plain
            style: bold cyan

    Later sets override same-named patterns from earlier ones.
    """

    # Sets shipped in package defaults
    AVAILABLE_SETS = ["social", "markup"]

    def __init__(self, sets: list[str] | None = None, app_name: str = "richtext"):
        """Initialize with specified pattern sets.

        Args:
            sets: Names of pattern sets to load. Use ["all"] for every
                  shipped set. Defaults to ["social"].
            app_name: Application name for config directory resolution.
        """
        if sets is None:
            sets = ["social"]

        if "all" in sets:
            self.sets = self.AVAILABLE_SETS.copy()
        else:
            self.sets = sets

        self._app_name = app_name
        self._config_locations = [
            Path.home() / ".config" / app_name / "patterns",  # User overrides
            Path.cwd() / f".{app_name}" / "patterns",  # Project config
        ]

        self._patterns: dict[str, dict] = {}
        self._regex_options: dict[str, bool] = {}
        self._load_all()

    def _load_all(self) -> None:
        for name in self.sets:
            self._load_set(name)

    def _find_config_file(self, name: str) -> Path | None:
        """Find the file for a pattern set, checking locations in priority order."""
        filename = f"{name}.yaml"

        for config_dir in self._config_locations:
            config_file = config_dir / filename
            if config_file.exists():
                return config_file

        default_file = _get_package_defaults_path() / filename
        if default_file.is_file():
            return default_file
        return None

    def _load_set(self, name: str) -> None:
        config_file = self._find_config_file(name)
        if config_file is None:
            logger.warning("Pattern set %r not found", name)
            return

        yaml = _get_yaml()
        content = config_file.read_text(encoding="utf-8")

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            logger.warning("Skipping unreadable pattern set %s: %s", config_file, exc)
            return

        if not data:
            return
        if not isinstance(data, dict):
            logger.warning("Skipping pattern set %s: expected a mapping", config_file)
            return

        if "settings" in data:
            settings = data["settings"] or {}
            options = settings.get("regex_options") if isinstance(settings, dict) else None
            if isinstance(options, dict):
                self._regex_options.update(options)
            elif options is not None:
                logger.warning("Ignoring regex_options in %s: expected a mapping", config_file)

        patterns = data.get("patterns") or {}
        if not isinstance(patterns, dict):
            logger.warning("Skipping patterns in %s: expected a mapping", config_file)
            return

        for pattern_name, entry in patterns.items():
            if isinstance(entry, str):
                entry = {"pattern": entry}
            if not isinstance(entry, dict):
                logger.warning(
                    "Skipping pattern %r in %s: invalid entry", pattern_name, config_file
                )
                continue
            self._patterns[pattern_name] = entry

    def get_regex_options(self) -> RegexOptions:
        """Regex options merged from the loaded sets.

        Raises:
            ConfigurationError: If a set names an unknown option.
        """
        try:
            return RegexOptions(**self._regex_options)
        except TypeError as exc:
            raise ConfigurationError(f"Invalid regex_options: {exc}") from exc

    def get_definitions(self, on_tap: TapHandler | None = None) -> list[PatternDefinition]:
        """Build pattern definitions in load order.

        Patterns that fail to compile are skipped.

        Raises:
            ConfigurationError: If an entry names an unknown renderer.
        """
        flags = self.get_regex_options().flags
        definitions = []
        for name, entry in self._patterns.items():
            source = entry.get("pattern")
            if not source or not isinstance(source, str):
                logger.warning("Pattern %r has no pattern source; skipping", name)
                continue
            try:
                re.compile(source, flags)
            except re.error as exc:
                logger.warning("Skipping invalid pattern %r: %s", name, exc)
                continue
            definitions.append(
                build_definition(
                    source,
                    renderer=entry.get("renderer", "plain"),
                    name=name,
                    style=entry.get("style"),
                    on_tap=on_tap,
                )
            )
        return definitions

    def get_raw_patterns(self) -> dict[str, str]:
        """Pattern sources by name."""
        return {name: entry.get("pattern", "") for name, entry in self._patterns.items()}

    @classmethod
    def list_available_sets(cls) -> list[str]:
        return cls.AVAILABLE_SETS.copy()
