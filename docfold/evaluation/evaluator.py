"""Score a trained sequence labeler against gold spans."""

from __future__ import annotations

from typing import Iterable, List, Protocol, Sequence

from docfold.sequence.sample import SequenceLabelSample
from docfold.sequence.span import Span
from docfold.training.base import SequenceLabelerModel, restrict_to_type

from .metrics import SpanCounts


class EvaluationMonitor(Protocol):
    """Listener notified once per evaluated sentence."""

    def correctly_classified(self, gold: SequenceLabelSample, predicted: Sequence[Span]) -> None: ...

    def misclassified(self, gold: SequenceLabelSample, predicted: Sequence[Span]) -> None: ...


class SequenceLabelerEvaluator:
    """Accumulate span counts for a model over a sample stream."""

    def __init__(self, model: SequenceLabelerModel, listeners: Sequence[EvaluationMonitor] = ()) -> None:
        self.model = model
        self.listeners: List[EvaluationMonitor] = list(listeners)
        self.counts = SpanCounts()

    def evaluate_sample(self, sample: SequenceLabelSample) -> List[Span]:
        """Tag one sentence and score it, ignoring span types the model was not trained on."""
        label_type = self.model.label_type
        gold = next(restrict_to_type([sample], label_type))
        labeler = self.model.labeler
        if gold.reset_adaptive_state:
            labeler.clear_adaptive_data()
        predicted = labeler.tag(gold.tokens)
        if label_type is not None:
            predicted = [span for span in predicted if span.type == label_type]
        self.counts.update(gold.spans, predicted)

        correct = set(predicted) == set(gold.spans)
        for listener in self.listeners:
            if correct:
                listener.correctly_classified(gold, predicted)
            else:
                listener.misclassified(gold, predicted)
        return predicted

    def evaluate(self, samples: Iterable[SequenceLabelSample]) -> SpanCounts:
        for sample in samples:
            self.evaluate_sample(sample)
        return self.counts


def evaluate(
    model: SequenceLabelerModel,
    samples: Iterable[SequenceLabelSample],
    listeners: Sequence[EvaluationMonitor] = (),
) -> SpanCounts:
    """Evaluate ``model`` on ``samples`` and return fresh span counts."""
    return SequenceLabelerEvaluator(model, listeners).evaluate(samples)


__all__ = ["EvaluationMonitor", "SequenceLabelerEvaluator", "evaluate"]
