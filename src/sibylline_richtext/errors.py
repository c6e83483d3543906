"""Exception types raised by sibylline-richtext."""


class RichTextError(Exception):
    """Base class for all library errors."""


class ConfigurationError(RichTextError, ValueError):
    """Raised for invalid pattern definitions or pattern configuration."""


class UnmappedOffsetError(RichTextError, LookupError):
    """Raised by the strict lookup policy for a rendered index with no mapping."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"Rendered index {index} is outside the offset map (0..{length})")
        self.index = index
        self.length = length
