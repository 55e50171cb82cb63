"""Sequence labeler interfaces and the scikit-learn reference tagger."""

from .base import (
    SequenceLabeler,
    SequenceLabelerFactory,
    SequenceLabelerModel,
    TrainingParams,
    restrict_to_type,
    train,
)
from .logistic import LogisticTagger, LogisticTaggerConfig, LogisticTaggerFactory

__all__ = [
    "LogisticTagger",
    "LogisticTaggerConfig",
    "LogisticTaggerFactory",
    "SequenceLabeler",
    "SequenceLabelerFactory",
    "SequenceLabelerModel",
    "TrainingParams",
    "restrict_to_type",
    "train",
]
