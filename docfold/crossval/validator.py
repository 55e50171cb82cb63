"""Document-aware k-fold cross-validation of sequence labelers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from tqdm import tqdm

from docfold.evaluation.evaluator import EvaluationMonitor, evaluate
from docfold.evaluation.metrics import SpanCounts
from docfold.exceptions import ConfigurationError
from docfold.sequence.documents import group_documents
from docfold.sequence.sample import SequenceLabelSample
from docfold.training.base import SequenceLabelerFactory, TrainingParams, train

from .partition import iter_folds


@dataclass(frozen=True)
class CrossValidationResult:
    """Outcome of a cross-validation run: merged counts on success, the error otherwise."""

    counts: Optional[SpanCounts]
    fold_counts: Sequence[SpanCounts] = field(default_factory=tuple)
    error: Optional[ConfigurationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SequenceLabelerCrossValidator:
    """Train and evaluate one model per fold, moving whole documents between folds.

    Sentences are grouped into documents first so that adaptive, document-scoped
    state learned from training sentences never covers sentences of a test document.
    """

    def __init__(
        self,
        language: str,
        label_type: Optional[str],
        params: TrainingParams,
        factory: Optional[SequenceLabelerFactory],
        listeners: Sequence[EvaluationMonitor] = (),
        verbose: bool = True,
    ) -> None:
        self.language = language
        self.label_type = label_type
        self.params = params
        self.factory = factory
        self.listeners = list(listeners)
        self.verbose = verbose
        self.counts = SpanCounts()
        self.fold_counts: List[SpanCounts] = []

    def evaluate(self, samples: Iterable[SequenceLabelSample], n_folds: int) -> SpanCounts:
        """Run ``n_folds``-fold cross-validation over ``samples``.

        Raises:
            ValueError: If ``n_folds`` is smaller than one.
            ConfigurationError: If no labeler factory was configured.
        """
        if n_folds < 1:
            raise ValueError(f"n_folds must be at least 1, got {n_folds}")
        if self.factory is None:
            raise ConfigurationError("You need to provide a SequenceLabelerFactory to run cross-validation.")

        documents = list(group_documents(samples))
        self._log(f"Grouped corpus into {len(documents)} documents; running {n_folds} folds.")

        self.counts = SpanCounts()
        self.fold_counts = []
        folds = iter_folds(documents, n_folds)
        for split in tqdm(folds, total=n_folds, desc="Cross-validation", leave=False, disable=not self.verbose):
            model = train(self.language, self.label_type, split.training_samples(), self.params, self.factory)
            fold_counts = evaluate(model, split.test_samples(), self.listeners)
            self.fold_counts.append(fold_counts)
            self.counts.merge_into(fold_counts)
            self._log(
                f"Fold {split.fold}: {len(split.training)} train / {len(split.test)} test documents, "
                f"P={fold_counts.precision:.4f} R={fold_counts.recall:.4f} F1={fold_counts.f1:.4f}"
            )
        return self.counts

    def try_evaluate(self, samples: Iterable[SequenceLabelSample], n_folds: int) -> CrossValidationResult:
        """Like ``evaluate`` but report a missing factory as a failed result."""
        try:
            counts = self.evaluate(samples, n_folds)
        except ConfigurationError as exc:
            return CrossValidationResult(counts=None, error=exc)
        return CrossValidationResult(counts=counts, fold_counts=tuple(self.fold_counts))

    def _log(self, message: str) -> None:
        if self.verbose:
            print(f"[crossval] {message}")


__all__ = ["CrossValidationResult", "SequenceLabelerCrossValidator"]
