"""Common sequence labeler interfaces and the training entry point."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Protocol, Sequence

from docfold.exceptions import ConfigurationError
from docfold.sequence.sample import SequenceLabelSample
from docfold.sequence.span import Span

TrainingParams = Mapping[str, Any]


class SequenceLabeler(Protocol):
    """Protocol describing a trained tagger that predicts spans for one sentence."""

    def tag(self, tokens: Sequence[str]) -> List[Span]: ...

    def clear_adaptive_data(self) -> None:
        """Forget document-scoped state before the next document starts."""


class SequenceLabelerFactory(Protocol):
    """Builds a labeler from a stream of training samples."""

    def fit(self, samples: Iterable[SequenceLabelSample], params: TrainingParams) -> SequenceLabeler: ...


@dataclass(frozen=True)
class SequenceLabelerModel:
    """Trained labeler together with the language and label type it was built for."""

    language: str
    label_type: Optional[str]
    labeler: SequenceLabeler


def restrict_to_type(
    samples: Iterable[SequenceLabelSample], label_type: Optional[str]
) -> Iterator[SequenceLabelSample]:
    """Drop spans whose type differs from ``label_type``; pass samples through when None."""
    for sample in samples:
        if label_type is None:
            yield sample
            continue
        kept = tuple(span for span in sample.spans if span.type == label_type)
        yield SequenceLabelSample(sample.tokens, kept, sample.reset_adaptive_state)


def train(
    language: str,
    label_type: Optional[str],
    samples: Iterable[SequenceLabelSample],
    params: TrainingParams,
    factory: Optional[SequenceLabelerFactory],
) -> SequenceLabelerModel:
    """Train a labeler on ``samples`` with ``factory``.

    Raises:
        ConfigurationError: If no factory was supplied.
    """
    if factory is None:
        raise ConfigurationError("A SequenceLabelerFactory is required to train a sequence labeler.")
    labeler = factory.fit(restrict_to_type(samples, label_type), params)
    return SequenceLabelerModel(language=language, label_type=label_type, labeler=labeler)


__all__ = [
    "SequenceLabeler",
    "SequenceLabelerFactory",
    "SequenceLabelerModel",
    "TrainingParams",
    "restrict_to_type",
    "train",
]
