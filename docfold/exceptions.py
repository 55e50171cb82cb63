"""Exception types shared across the corpus reader, decoder and cross-validation driver."""

from __future__ import annotations

from typing import Optional


class MalformedTagError(ValueError):
    """A tag is not one of ``O``, ``B-<type>`` or ``I-<type>``."""

    def __init__(self, tag: str, index: int) -> None:
        super().__init__(f"Invalid tag {tag!r} at token index {index}")
        self.tag = tag
        self.index = index


class CorpusFormatError(ValueError):
    """The corpus text violates the two-column tabulated format."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class ConfigurationError(RuntimeError):
    """Training was requested without a usable sequence labeler factory."""


__all__ = ["ConfigurationError", "CorpusFormatError", "MalformedTagError"]
