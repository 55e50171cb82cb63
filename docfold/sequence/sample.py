from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .span import Span


@dataclass(frozen=True)
class SequenceLabelSample:
    """One sentence of tokens with its gold spans and adaptive-state reset flag."""

    tokens: Tuple[str, ...]
    spans: Tuple[Span, ...] = field(default_factory=tuple)
    reset_adaptive_state: bool = False

    def __post_init__(self) -> None:
        # Accept lists from callers but store immutable tuples.
        object.__setattr__(self, "tokens", tuple(self.tokens))
        object.__setattr__(self, "spans", tuple(self.spans))

        previous_end = 0
        for span in sorted(self.spans, key=lambda item: item.start):
            if span.end > len(self.tokens):
                raise ValueError(f"{span} exceeds sentence length {len(self.tokens)}")
            if span.start < previous_end:
                raise ValueError(f"{span} overlaps a preceding span")
            previous_end = span.end

    def __len__(self) -> int:
        return len(self.tokens)

    def span_texts(self) -> Tuple[str, ...]:
        """Return the space-joined surface string of every span."""
        return tuple(" ".join(self.tokens[span.start : span.end]) for span in self.spans)
