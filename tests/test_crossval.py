"""Tests for fold partitioning and the cross-validation driver."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Any, Iterable, List, Mapping, Sequence, Set, Tuple

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from docfold.crossval.partition import assign_folds, iter_folds, split_fold
from docfold.crossval.validator import SequenceLabelerCrossValidator
from docfold.evaluation.metrics import SpanCounts
from docfold.exceptions import ConfigurationError
from docfold.formats.config import CorpusConfig
from docfold.formats.conll03 import CoNLL03Reader
from docfold.formats.lines import ListLineStream
from docfold.sequence.documents import Document, group_documents
from docfold.sequence.sample import SequenceLabelSample
from docfold.sequence.span import Span
from docfold.training.logistic import LogisticTaggerFactory


def _documents(sizes: Sequence[int]) -> List[SequenceLabelSample]:
    """Build a flat sample stream whose documents have the given sentence counts."""
    samples: List[SequenceLabelSample] = []
    for doc_idx, size in enumerate(sizes):
        for sent_idx in range(size):
            tokens = (f"d{doc_idx}", f"s{sent_idx}")
            samples.append(SequenceLabelSample(tokens, (Span(0, 1, "DOC"),), sent_idx == 0))
    return samples


class MemorizingLabeler:
    """Predicts the gold span only for sentences seen during training."""

    def __init__(self, seen: Set[Tuple[str, ...]]) -> None:
        self.seen = seen
        self.clears = 0

    def tag(self, tokens: Sequence[str]) -> List[Span]:
        return [Span(0, 1, "DOC")] if tuple(tokens) in self.seen else [Span(1, 2, "DOC")]

    def clear_adaptive_data(self) -> None:
        self.clears += 1


class RecordingFactory:
    def __init__(self) -> None:
        self.training_runs: List[List[SequenceLabelSample]] = []

    def fit(self, samples: Iterable[SequenceLabelSample], params: Mapping[str, Any]) -> MemorizingLabeler:
        collected = list(samples)
        self.training_runs.append(collected)
        return MemorizingLabeler({sample.tokens for sample in collected})


# ---------------------------------------------------------------------------
# Partition tests


def test_assign_folds_is_round_robin() -> None:
    assert assign_folds(7, 3).tolist() == [0, 1, 2, 0, 1, 2, 0]
    assert assign_folds(0, 4).tolist() == []


def test_assign_folds_rejects_invalid_fold_count() -> None:
    with pytest.raises(ValueError):
        assign_folds(3, 0)


def test_split_fold_keeps_order() -> None:
    documents = list(group_documents(_documents([1, 2, 1, 3, 1])))
    split = split_fold(documents, assign_folds(len(documents), 2), 1)
    assert split.test == (documents[1], documents[3])
    assert split.training == (documents[0], documents[2], documents[4])
    assert list(split.training_samples()) == [s for d in split.training for s in d.samples]


def test_split_fold_requires_aligned_assignment() -> None:
    documents = list(group_documents(_documents([1, 1])))
    with pytest.raises(ValueError):
        split_fold(documents, np.zeros(3, dtype=np.int64), 0)


@pytest.mark.parametrize("n_folds", [1, 2, 3, 5])
def test_every_document_is_tested_exactly_once(n_folds: int) -> None:
    documents = list(group_documents(_documents([2, 1, 3, 1, 2])))
    tested: List[Document] = []
    for split in iter_folds(documents, n_folds):
        assert not set(split.training) & set(split.test)
        assert len(split.training) + len(split.test) == len(documents)
        tested.extend(split.test)
    assert sorted(map(id, tested)) == sorted(map(id, documents))


# ---------------------------------------------------------------------------
# Driver tests


def test_missing_factory_raises_configuration_error() -> None:
    validator = SequenceLabelerCrossValidator("en", None, {}, None, verbose=False)
    with pytest.raises(ConfigurationError):
        validator.evaluate(_documents([1, 1]), 2)


def test_missing_factory_is_reported_as_failed_result() -> None:
    validator = SequenceLabelerCrossValidator("en", None, {}, None, verbose=False)
    result = validator.try_evaluate(_documents([1, 1]), 2)
    assert result.ok is False
    assert result.counts is None
    assert isinstance(result.error, ConfigurationError)


def test_invalid_fold_count_raises() -> None:
    validator = SequenceLabelerCrossValidator("en", None, {}, RecordingFactory(), verbose=False)
    with pytest.raises(ValueError):
        validator.evaluate(_documents([1]), 0)


def test_documents_never_split_between_train_and_test() -> None:
    samples = _documents([3, 2, 4, 1, 2, 3])
    factory = RecordingFactory()
    validator = SequenceLabelerCrossValidator("en", None, {}, factory, verbose=False)

    counts = validator.evaluate(samples, 3)

    # A memorizing labeler scores nothing when no test sentence leaked into training.
    assert counts.true_positives == 0
    assert counts.false_negatives == len(samples)
    assert len(factory.training_runs) == 3
    for run in factory.training_runs:
        trained_docs = {sample.tokens[0] for sample in run}
        assert len(run) == sum(1 for sample in samples if sample.tokens[0] in trained_docs)


def test_training_stream_preserves_stream_order() -> None:
    samples = _documents([2, 1, 2, 1])
    factory = RecordingFactory()
    SequenceLabelerCrossValidator("en", None, {}, factory, verbose=False).evaluate(samples, 2)
    assert factory.training_runs[0] == samples[2:3] + samples[5:6]
    assert factory.training_runs[1] == samples[0:2] + samples[3:5]


def test_aggregate_equals_merged_fold_counts() -> None:
    samples = _documents([1, 2, 1, 2, 1, 1])
    validator = SequenceLabelerCrossValidator("en", None, {}, RecordingFactory(), verbose=False)
    result = validator.try_evaluate(samples, 3)

    assert result.ok
    assert len(result.fold_counts) == 3
    reversed_total = SpanCounts.merged(reversed(list(result.fold_counts)))
    assert result.counts == reversed_total
    assert result.counts is not None and result.counts.gold_count == len(samples)


def test_end_to_end_with_reader_and_logistic_tagger() -> None:
    lines: List[str] = []
    for _ in range(4):
        lines += [
            "-DOCSTART-\tO",
            "",
            "EU\tB-ORG",
            "rejects\tO",
            "German\tB-MISC",
            "call\tO",
            "",
            "Peter\tB-PER",
            "Blackburn\tI-PER",
            "",
        ]
    reader = CoNLL03Reader(ListLineStream(lines), CorpusConfig(reset_mode="docstart"))
    validator = SequenceLabelerCrossValidator("en", None, {"C": 10.0}, LogisticTaggerFactory(), verbose=False)

    counts = validator.evaluate(reader, 2)

    assert counts.gold_count == 12
    assert counts.f1 == pytest.approx(1.0)
