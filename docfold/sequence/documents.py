"""Group sentence samples into documents and flatten them back.

A document starts at every sample whose ``reset_adaptive_state`` flag is set,
so cross-validation can move whole documents between folds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Protocol, Tuple

from .sample import SequenceLabelSample


@dataclass(frozen=True)
class Document:
    """Ordered run of samples between two adaptive-state resets."""

    samples: Tuple[SequenceLabelSample, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples", tuple(self.samples))
        if not self.samples:
            raise ValueError("A document needs at least one sample.")

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[SequenceLabelSample]:
        return iter(self.samples)


class SampleSource(Protocol):
    """Pull-style sample stream, e.g. ``CoNLL03Reader``."""

    def read(self) -> Optional[SequenceLabelSample]: ...

    def reset(self) -> None: ...


def read_document(
    samples: Iterator[SequenceLabelSample],
    pending: Optional[SequenceLabelSample] = None,
) -> Tuple[Optional[Document], Optional[SequenceLabelSample]]:
    """Pull one document from ``samples``.

    Args:
        samples: Cursor over the flat sample stream.
        pending: First sample of the next document, read ahead by the previous call.

    Returns:
        ``(document, pending)`` where ``pending`` is the look-ahead sample that
        opens the following document, or ``(None, None)`` once the stream is exhausted.
    """
    first = pending if pending is not None else next(samples, None)
    if first is None:
        return None, None

    collected = [first]
    for sample in samples:
        if sample.reset_adaptive_state:
            return Document(tuple(collected)), sample
        collected.append(sample)
    return Document(tuple(collected)), None


def group_documents(samples: Iterable[SequenceLabelSample]) -> Iterator[Document]:
    """Yield documents from a flat sample stream, preserving order."""
    cursor = iter(samples)
    pending: Optional[SequenceLabelSample] = None
    while True:
        document, pending = read_document(cursor, pending)
        if document is None:
            return
        yield document


def flatten_documents(documents: Iterable[Document]) -> Iterator[SequenceLabelSample]:
    """Yield every sample of every document in order; empty documents are skipped."""
    for document in documents:
        yield from document.samples


class DocumentStream:
    """Pull-style document stream over a resettable sample source."""

    def __init__(self, source: SampleSource) -> None:
        self.source = source
        self._pending: Optional[SequenceLabelSample] = None

    def read(self) -> Optional[Document]:
        document, self._pending = read_document(iter(self.source.read, None), self._pending)
        return document

    def reset(self) -> None:
        self.source.reset()
        self._pending = None

    def close(self) -> None:
        close = getattr(self.source, "close", None)
        if close is not None:
            close()

    def __iter__(self) -> Iterator[Document]:
        return iter(self.read, None)

    def __enter__(self) -> "DocumentStream":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = [
    "Document",
    "DocumentStream",
    "SampleSource",
    "flatten_documents",
    "group_documents",
    "read_document",
]
