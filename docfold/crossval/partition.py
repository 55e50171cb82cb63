"""Deterministic document-to-fold assignment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

import numpy as np

from docfold.sequence.documents import Document, flatten_documents
from docfold.sequence.sample import SequenceLabelSample


@dataclass(frozen=True)
class FoldSplit:
    """Training and held-out documents for one fold, each in stream order."""

    fold: int
    training: Tuple[Document, ...]
    test: Tuple[Document, ...]

    def training_samples(self) -> Iterator[SequenceLabelSample]:
        return flatten_documents(self.training)

    def test_samples(self) -> Iterator[SequenceLabelSample]:
        return flatten_documents(self.test)


def assign_folds(n_documents: int, n_folds: int) -> np.ndarray:
    """Return the fold index of every document position (round-robin)."""
    if n_folds < 1:
        raise ValueError(f"n_folds must be at least 1, got {n_folds}")
    if n_documents < 0:
        raise ValueError(f"n_documents cannot be negative, got {n_documents}")
    return np.arange(n_documents, dtype=np.int64) % n_folds


def split_fold(documents: Sequence[Document], assignment: np.ndarray, fold: int) -> FoldSplit:
    """Partition ``documents`` into the training and test side of ``fold``."""
    if len(documents) != assignment.shape[0]:
        raise ValueError("Documents and fold assignment must be aligned.")
    held_out = assignment == fold
    training = tuple(doc for doc, is_test in zip(documents, held_out) if not is_test)
    test = tuple(doc for doc, is_test in zip(documents, held_out) if is_test)
    return FoldSplit(fold=fold, training=training, test=test)


def iter_folds(documents: Sequence[Document], n_folds: int) -> Iterator[FoldSplit]:
    assignment = assign_folds(len(documents), n_folds)
    for fold in range(n_folds):
        yield split_fold(documents, assignment, fold)


__all__ = ["FoldSplit", "assign_folds", "iter_folds", "split_fold"]
