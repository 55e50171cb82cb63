"""Fold partitioning and the cross-validation driver."""

from .partition import FoldSplit, assign_folds, iter_folds, split_fold
from .validator import CrossValidationResult, SequenceLabelerCrossValidator

__all__ = [
    "CrossValidationResult",
    "FoldSplit",
    "SequenceLabelerCrossValidator",
    "assign_folds",
    "iter_folds",
    "split_fold",
]
