"""Scikit-learn backed greedy BIO tagger used as the default labeler factory."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
from sklearn.feature_extraction import DictVectorizer
from sklearn.linear_model import LogisticRegression

from docfold.sequence.sample import SequenceLabelSample
from docfold.sequence.span import OUTSIDE, Span, decode_tags, encode_spans

Features = Dict[str, Union[str, float]]
SENTENCE_START = "<s>"
SENTENCE_END = "</s>"


@dataclass
class LogisticTaggerConfig:
    """Feature switches plus hyper-parameters forwarded to LogisticRegression."""

    C: float = 1.0
    solver: str = "lbfgs"
    max_iter: int = 1000
    class_weight: Optional[Union[str, Dict[str, float]]] = None
    random_state: Optional[int] = None
    tol: float = 1e-4
    window: int = 1
    affix_length: int = 3
    # Remember each word's last tag within the current document.
    adaptive: bool = True

    def with_overrides(self, params: Mapping[str, Any]) -> "LogisticTaggerConfig":
        """Return a copy with ``params`` applied; unknown keys are rejected."""
        known = {item.name for item in fields(self)}
        unknown = sorted(set(params) - known)
        if unknown:
            raise ValueError(f"Unknown training parameters: {', '.join(unknown)}")
        return replace(self, **dict(params))

    def to_classifier_kwargs(self) -> Dict[str, Any]:
        return dict(
            C=self.C,
            solver=self.solver,
            max_iter=self.max_iter,
            class_weight=self.class_weight,
            random_state=self.random_state,
            tol=self.tol,
        )


class AdaptiveMemory:
    """Document-scoped map from lowercased word to the tag it last received."""

    def __init__(self) -> None:
        self._tags: Dict[str, str] = {}

    def lookup(self, word: str) -> Optional[str]:
        return self._tags.get(word.lower())

    def remember(self, tokens: Sequence[str], tags: Sequence[str]) -> None:
        for token, tag in zip(tokens, tags):
            self._tags[token.lower()] = tag

    def clear(self) -> None:
        self._tags.clear()

    def __len__(self) -> int:
        return len(self._tags)


def word_shape(token: str) -> str:
    """Collapse a token into a coarse character-class pattern, e.g. ``Xx`` or ``d.d``."""
    shape: List[str] = []
    for char in token:
        if char.isupper():
            code = "X"
        elif char.islower():
            code = "x"
        elif char.isdigit():
            code = "d"
        else:
            code = char
        if not shape or shape[-1] != code:
            shape.append(code)
    return "".join(shape)


def token_features(
    tokens: Sequence[str],
    index: int,
    previous_tag: str,
    memory: Optional[AdaptiveMemory],
    config: LogisticTaggerConfig,
) -> Features:
    token = tokens[index]
    feats: Features = {
        "bias": 1.0,
        "word": token.lower(),
        "suffix": token[-config.affix_length :].lower(),
        "prefix": token[: config.affix_length].lower(),
        "shape": word_shape(token),
        "is_title": float(token.istitle()),
        "is_upper": float(token.isupper()),
        "prev_tag": previous_tag,
    }
    for offset in range(1, config.window + 1):
        left = index - offset
        right = index + offset
        feats[f"word[-{offset}]"] = tokens[left].lower() if left >= 0 else SENTENCE_START
        feats[f"word[+{offset}]"] = tokens[right].lower() if right < len(tokens) else SENTENCE_END
    if memory is not None:
        remembered = memory.lookup(token)
        if remembered is not None:
            feats["doc_tag"] = remembered
    return feats


class LogisticTagger:
    """Greedy left-to-right tagger over BIO2 labels."""

    def __init__(
        self,
        config: LogisticTaggerConfig,
        vectorizer: Optional[DictVectorizer],
        model: Optional[LogisticRegression],
        constant_tag: Optional[str] = None,
    ) -> None:
        if model is None and constant_tag is None:
            raise ValueError("LogisticTagger needs either a fitted model or a constant tag.")
        self.config = config
        self.vectorizer = vectorizer
        self.model = model
        self.constant_tag = constant_tag
        self.memory = AdaptiveMemory() if config.adaptive else None

    def tag(self, tokens: Sequence[str]) -> List[Span]:
        tags = self.predict_tags(tokens)
        if self.memory is not None:
            self.memory.remember(tokens, tags)
        return decode_tags(tags)

    def predict_tags(self, tokens: Sequence[str]) -> List[str]:
        if self.constant_tag is not None:
            return [self.constant_tag] * len(tokens)

        model, vectorizer = self._require_model()
        tags: List[str] = []
        previous = OUTSIDE
        for index in range(len(tokens)):
            feats = token_features(tokens, index, previous, self.memory, self.config)
            previous = str(model.predict(vectorizer.transform([feats]))[0])
            tags.append(previous)
        return tags

    def clear_adaptive_data(self) -> None:
        if self.memory is not None:
            self.memory.clear()

    def _require_model(self) -> Tuple[LogisticRegression, DictVectorizer]:
        if self.model is None or self.vectorizer is None:
            raise RuntimeError("LogisticTagger has not been fitted yet.")
        return self.model, self.vectorizer


class LogisticTaggerFactory:
    """Fit a ``LogisticTagger`` from a sample stream."""

    def __init__(self, config: Optional[LogisticTaggerConfig] = None) -> None:
        self.config = config or LogisticTaggerConfig()

    def fit(self, samples: Iterable[SequenceLabelSample], params: Mapping[str, Any]) -> LogisticTagger:
        config = self.config.with_overrides(params)
        memory = AdaptiveMemory() if config.adaptive else None

        rows: List[Features] = []
        labels: List[str] = []
        for sample in samples:
            if memory is not None and sample.reset_adaptive_state:
                memory.clear()
            gold = encode_spans(sample.spans, len(sample.tokens))
            previous = OUTSIDE
            for index, tag in enumerate(gold):
                rows.append(token_features(sample.tokens, index, previous, memory, config))
                labels.append(tag)
                previous = tag
            if memory is not None:
                memory.remember(sample.tokens, gold)

        if not rows:
            raise ValueError("Cannot train a tagger without any training tokens.")

        y = np.asarray(labels)
        classes = np.unique(y)
        if classes.size < 2:
            return LogisticTagger(config, None, None, constant_tag=str(classes[0]))

        vectorizer = DictVectorizer(sparse=True)
        X = vectorizer.fit_transform(rows)
        model = LogisticRegression(**config.to_classifier_kwargs())
        model.fit(X, y)
        return LogisticTagger(config, vectorizer, model)


__all__ = [
    "AdaptiveMemory",
    "LogisticTagger",
    "LogisticTaggerConfig",
    "LogisticTaggerFactory",
    "token_features",
    "word_shape",
]
