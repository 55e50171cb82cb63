"""Span-level counts that merge across folds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Sequence

from docfold.sequence.span import Span


@dataclass
class SpanCounts:
    """True/false positive and false negative counts for exact span matches."""

    true_positives: int = 0
    false_positives: int = 0
    false_negatives: int = 0

    def update(self, gold: Sequence[Span], predicted: Sequence[Span]) -> None:
        """Count one sentence: a prediction is correct when start, end and type all match."""
        matched = len(set(gold) & set(predicted))
        self.true_positives += matched
        self.false_positives += len(predicted) - matched
        self.false_negatives += len(gold) - matched

    def merge_into(self, other: "SpanCounts") -> "SpanCounts":
        """Add ``other`` into these counts in place and return self."""
        self.true_positives += other.true_positives
        self.false_positives += other.false_positives
        self.false_negatives += other.false_negatives
        return self

    def __add__(self, other: "SpanCounts") -> "SpanCounts":
        return SpanCounts().merge_into(self).merge_into(other)

    @classmethod
    def merged(cls, counts: Iterable["SpanCounts"]) -> "SpanCounts":
        total = cls()
        for item in counts:
            total.merge_into(item)
        return total

    @property
    def gold_count(self) -> int:
        return self.true_positives + self.false_negatives

    @property
    def predicted_count(self) -> int:
        return self.true_positives + self.false_positives

    @property
    def precision(self) -> float:
        if self.predicted_count == 0:
            return 0.0
        return self.true_positives / self.predicted_count

    @property
    def recall(self) -> float:
        if self.gold_count == 0:
            return 0.0
        return self.true_positives / self.gold_count

    @property
    def f1(self) -> float:
        p, r = self.precision, self.recall
        if p + r == 0.0:
            return 0.0
        return 2 * p * r / (p + r)

    def as_dict(self) -> Dict[str, float]:
        return {
            "true_positives": self.true_positives,
            "false_positives": self.false_positives,
            "false_negatives": self.false_negatives,
            "precision": self.precision,
            "recall": self.recall,
            "f1": self.f1,
        }


__all__ = ["SpanCounts"]
