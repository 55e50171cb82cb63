"""Static configuration for reading tabulated CoNLL-style corpora."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple, cast

ResetMode = Literal["docstart", "yes", "no"]
RESET_MODES: Tuple[ResetMode, ...] = ("docstart", "yes", "no")

# Document mark present in CoNLL 2003 datasets.
DOCSTART = "-DOCSTART-"
DEFAULT_ENCODING = "utf-8"


@dataclass(frozen=True)
class CorpusConfig:
    """How the reader interprets document marks and decodes the corpus file.

    ``reset_mode`` selects when samples are flagged to clear adaptive features:
    ``docstart`` only after a document mark, ``yes`` before every sentence,
    ``no`` never.
    """

    reset_mode: ResetMode = "docstart"
    encoding: str = DEFAULT_ENCODING
    doc_marker: str = DOCSTART

    def __post_init__(self) -> None:
        mode = str(self.reset_mode).lower()
        if mode not in RESET_MODES:
            raise ValueError(f"reset_mode must be one of {', '.join(RESET_MODES)}; got {self.reset_mode!r}")
        object.__setattr__(self, "reset_mode", cast(ResetMode, mode))
        if not self.doc_marker:
            raise ValueError("doc_marker cannot be empty.")


__all__ = ["DEFAULT_ENCODING", "DOCSTART", "RESET_MODES", "CorpusConfig", "ResetMode"]
