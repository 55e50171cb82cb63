"""Span-level evaluation of sequence labelers."""

from .evaluator import EvaluationMonitor, SequenceLabelerEvaluator, evaluate
from .metrics import SpanCounts

__all__ = ["EvaluationMonitor", "SequenceLabelerEvaluator", "SpanCounts", "evaluate"]
