"""Corpus readers and their line sources."""

from .config import DOCSTART, RESET_MODES, CorpusConfig, ResetMode
from .conll03 import CoNLL03Reader
from .lines import LineSource, ListLineStream, PlainTextLineStream

__all__ = [
    "DOCSTART",
    "RESET_MODES",
    "CoNLL03Reader",
    "CorpusConfig",
    "LineSource",
    "ListLineStream",
    "PlainTextLineStream",
    "ResetMode",
]
