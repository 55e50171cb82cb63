"""
Reader for the two-column CoNLL 2003 tabulated format.

Each non-blank line holds ``token<TAB>tag``; a blank line ends the sentence.
Tags follow BIO2: ``B-`` begins a chunk, ``I-`` continues (or starts) one and
``O`` is outside any chunk. ``-DOCSTART-`` lines mark document boundaries.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional, Union

from docfold.exceptions import CorpusFormatError, MalformedTagError
from docfold.sequence.sample import SequenceLabelSample
from docfold.sequence.span import decode_tags

from .config import CorpusConfig
from .lines import LineSource, PlainTextLineStream


class CoNLL03Reader:
    """Turn a line source into one ``SequenceLabelSample`` per sentence."""

    def __init__(self, lines: LineSource, config: Optional[CorpusConfig] = None) -> None:
        self.lines = lines
        self.config = config or CorpusConfig()

    @classmethod
    def from_path(cls, path: Union[str, Path], config: Optional[CorpusConfig] = None) -> "CoNLL03Reader":
        cfg = config or CorpusConfig()
        return cls(PlainTextLineStream(path, encoding=cfg.encoding), cfg)

    def read(self) -> Optional[SequenceLabelSample]:
        """Return the next sentence, or None once the line source is exhausted.

        Raises:
            CorpusFormatError: On a line without exactly two fields, a document
                mark not followed by a blank line, or an invalid tag.
        """
        docstart_seen = False
        while True:
            tokens: List[str] = []
            tags: List[str] = []
            tag_lines: List[int] = []

            line = self.lines.read()
            while line is not None and line.strip():
                if line.startswith(self.config.doc_marker):
                    if self.config.reset_mode == "docstart":
                        docstart_seen = True
                        self._expect_blank_after_marker()
                    line = self.lines.read()
                    continue

                fields = line.rstrip("\t").split("\t")
                if len(fields) != 2:
                    raise CorpusFormatError(
                        f"Expected two fields per line in training data, got {len(fields)} for line {line!r}",
                        self.lines.line_number,
                    )
                tokens.append(fields[0])
                tags.append(fields[1])
                tag_lines.append(self.lines.line_number)
                line = self.lines.read()

            if tokens:
                return self._build_sample(tokens, tags, tag_lines, docstart_seen)
            if line is None:
                return None
            # Consecutive blank lines: try the next block.

    def reset(self) -> None:
        self.lines.reset()

    def close(self) -> None:
        self.lines.close()

    def __iter__(self) -> Iterator[SequenceLabelSample]:
        return iter(self.read, None)

    def __enter__(self) -> "CoNLL03Reader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- internals -----------------------------------------------------

    def _expect_blank_after_marker(self) -> None:
        following = self.lines.read()
        if following is not None and following.strip():
            raise CorpusFormatError(
                f"Line after {self.config.doc_marker} is not empty: {following!r}",
                self.lines.line_number,
            )

    def _build_sample(
        self,
        tokens: List[str],
        tags: List[str],
        tag_lines: List[int],
        docstart_seen: bool,
    ) -> SequenceLabelSample:
        try:
            spans = decode_tags(tags)
        except MalformedTagError as exc:
            raise CorpusFormatError(str(exc), tag_lines[exc.index]) from exc

        mode = self.config.reset_mode
        if mode == "yes":
            reset = True
        elif mode == "no":
            reset = False
        else:
            reset = docstart_seen
        return SequenceLabelSample(tuple(tokens), tuple(spans), reset)


__all__ = ["CoNLL03Reader"]
