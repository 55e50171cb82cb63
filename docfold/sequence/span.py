"""Labeled token spans and the BIO2 tag-sequence decoder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from docfold.exceptions import MalformedTagError

OUTSIDE = "O"
BEGIN_PREFIX = "B-"
INSIDE_PREFIX = "I-"


@dataclass(frozen=True)
class Span:
    """Half-open ``[start, end)`` token range carrying a single label."""

    start: int
    end: int
    type: str

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Span start must be non-negative, got {self.start}")
        if self.end <= self.start:
            raise ValueError(f"Span end ({self.end}) must be greater than start ({self.start})")

    def __len__(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and other.start < self.end


def decode_tags(tags: Sequence[str]) -> List[Span]:
    """Convert a BIO2 tag sequence into ordered, non-overlapping spans.

    ``B-`` always opens a new span, so two adjacent ``B-ORG`` tokens become two
    one-token spans. ``I-`` without an open span of the same type starts a new
    span instead of failing.

    Args:
        tags: One tag per token.

    Returns:
        Spans in left-to-right order.

    Raises:
        MalformedTagError: If a tag is not ``O``, ``B-<type>`` or ``I-<type>``.
    """
    spans: List[Span] = []
    open_start: Optional[int] = None
    open_end = -1
    open_type = ""

    for index, tag in enumerate(tags):
        if tag == OUTSIDE:
            if open_start is not None:
                spans.append(Span(open_start, open_end, open_type))
                open_start = None
            continue

        label = _label_of(tag, index)
        if tag.startswith(BEGIN_PREFIX):
            if open_start is not None:
                spans.append(Span(open_start, open_end, open_type))
            open_start, open_end, open_type = index, index + 1, label
        elif open_start is None:
            open_start, open_end, open_type = index, index + 1, label
        elif label == open_type:
            open_end += 1
        else:
            spans.append(Span(open_start, open_end, open_type))
            open_start, open_end, open_type = index, index + 1, label

    if open_start is not None:
        spans.append(Span(open_start, open_end, open_type))
    return spans


def encode_spans(spans: Sequence[Span], length: int) -> List[str]:
    """Render spans back into a BIO2 tag sequence of ``length`` tokens."""
    tags = [OUTSIDE] * length
    for span in spans:
        if span.end > length:
            raise ValueError(f"Span {span} exceeds sequence length {length}")
        tags[span.start] = BEGIN_PREFIX + span.type
        for index in range(span.start + 1, span.end):
            tags[index] = INSIDE_PREFIX + span.type
    return tags


def _label_of(tag: str, index: int) -> str:
    if not tag.startswith((BEGIN_PREFIX, INSIDE_PREFIX)) or len(tag) <= 2:
        raise MalformedTagError(tag, index)
    return tag[2:]


__all__ = ["BEGIN_PREFIX", "INSIDE_PREFIX", "OUTSIDE", "Span", "decode_tags", "encode_spans"]
