"""Tests for the training entry point and the logistic reference tagger."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Any, Iterable, List, Mapping

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from docfold.exceptions import ConfigurationError
from docfold.sequence.sample import SequenceLabelSample
from docfold.sequence.span import Span
from docfold.training.base import restrict_to_type, train
from docfold.training.logistic import (
    AdaptiveMemory,
    LogisticTaggerConfig,
    LogisticTaggerFactory,
    token_features,
    word_shape,
)


class CollectingFactory:
    def __init__(self) -> None:
        self.seen: List[SequenceLabelSample] = []
        self.params: Mapping[str, Any] = {}

    def fit(self, samples: Iterable[SequenceLabelSample], params: Mapping[str, Any]) -> "CollectingFactory":
        self.seen = list(samples)
        self.params = params
        return self

    def tag(self, tokens):  # pragma: no cover - never called here
        return []

    def clear_adaptive_data(self) -> None:  # pragma: no cover - never called here
        pass


def _corpus() -> List[SequenceLabelSample]:
    return [
        SequenceLabelSample(("Paris", "is", "nice"), (Span(0, 1, "LOC"),), True),
        SequenceLabelSample(("John", "visited", "Berlin"), (Span(0, 1, "PER"), Span(2, 3, "LOC")), False),
        SequenceLabelSample(("Mary", "likes", "Rome"), (Span(0, 1, "PER"), Span(2, 3, "LOC")), True),
        SequenceLabelSample(("the", "cat", "sleeps"), (), False),
        SequenceLabelSample(("John", "Smith", "left"), (Span(0, 2, "PER"),), True),
    ]


# ---------------------------------------------------------------------------
# train() tests


def test_train_without_factory_raises_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        train("en", None, _corpus(), {}, None)


def test_train_wraps_labeler_with_metadata() -> None:
    factory = CollectingFactory()
    model = train("en", None, _corpus(), {"C": 0.5}, factory)
    assert model.language == "en"
    assert model.label_type is None
    assert model.labeler is factory
    assert factory.seen == _corpus()
    assert factory.params == {"C": 0.5}


def test_train_restricts_spans_to_label_type() -> None:
    factory = CollectingFactory()
    train("en", "LOC", _corpus(), {}, factory)
    types = {span.type for sample in factory.seen for span in sample.spans}
    assert types == {"LOC"}
    assert [s.reset_adaptive_state for s in factory.seen] == [s.reset_adaptive_state for s in _corpus()]


def test_restrict_to_type_passthrough() -> None:
    corpus = _corpus()
    assert list(restrict_to_type(corpus, None)) == corpus


# ---------------------------------------------------------------------------
# Feature helpers


def test_word_shape_collapses_runs() -> None:
    assert word_shape("Berlin") == "Xx"
    assert word_shape("U.S.") == "X.X."
    assert word_shape("1999") == "d"


def test_token_features_include_context_and_memory() -> None:
    memory = AdaptiveMemory()
    memory.remember(["Berlin"], ["B-LOC"])
    feats = token_features(["in", "berlin"], 1, "O", memory, LogisticTaggerConfig())
    assert feats["word"] == "berlin"
    assert feats["word[-1]"] == "in"
    assert feats["word[+1]"] == "</s>"
    assert feats["doc_tag"] == "B-LOC"
    memory.clear()
    assert len(memory) == 0
    assert "doc_tag" not in token_features(["in", "berlin"], 1, "O", memory, LogisticTaggerConfig())


def test_config_overrides_reject_unknown_keys() -> None:
    config = LogisticTaggerConfig()
    assert config.with_overrides({"C": 2.0}).C == 2.0
    with pytest.raises(ValueError):
        config.with_overrides({"learning_rate": 0.1})


# ---------------------------------------------------------------------------
# LogisticTaggerFactory tests


def test_logistic_tagger_learns_separable_corpus() -> None:
    corpus = _corpus() * 3
    tagger = LogisticTaggerFactory(LogisticTaggerConfig(C=10.0, random_state=0)).fit(corpus, {})
    tagger.clear_adaptive_data()
    assert tagger.tag(["Paris", "is", "nice"]) == [Span(0, 1, "LOC")]
    assert tagger.tag(["the", "cat", "sleeps"]) == []


def test_logistic_tagger_memory_cleared_between_documents() -> None:
    tagger = LogisticTaggerFactory().fit(_corpus(), {})
    assert tagger.memory is not None
    tagger.tag(["Paris", "is", "nice"])
    assert len(tagger.memory) == 3
    tagger.clear_adaptive_data()
    assert len(tagger.memory) == 0


def test_logistic_tagger_without_adaptive_features() -> None:
    tagger = LogisticTaggerFactory().fit(_corpus(), {"adaptive": False})
    assert tagger.memory is None
    assert isinstance(tagger.tag(["John", "left"]), list)


def test_single_class_corpus_yields_constant_tagger() -> None:
    corpus = [SequenceLabelSample(("the", "cat"), (), True)]
    tagger = LogisticTaggerFactory().fit(corpus, {})
    assert tagger.constant_tag == "O"
    assert tagger.tag(["anything", "here"]) == []


def test_empty_training_stream_raises() -> None:
    with pytest.raises(ValueError):
        LogisticTaggerFactory().fit([], {})
