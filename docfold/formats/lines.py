"""Resettable line sources feeding the corpus readers."""

from __future__ import annotations

from pathlib import Path
from typing import IO, Iterable, List, Optional, Protocol, Union

from .config import DEFAULT_ENCODING


class LineSource(Protocol):
    """Minimal pull interface over a line-oriented corpus."""

    line_number: int

    def read(self) -> Optional[str]:
        """Return the next line without its terminator, or None at end of input."""

    def reset(self) -> None: ...

    def close(self) -> None: ...


class PlainTextLineStream:
    """Read a text file line by line with an explicit encoding.

    The file is opened lazily and ``reset()`` seeks back to the start, so the
    same corpus can be re-read without reopening it.
    """

    def __init__(self, path: Union[str, Path], encoding: str = DEFAULT_ENCODING) -> None:
        self.path = Path(path)
        self.encoding = encoding
        self.line_number = 0
        self._handle: Optional[IO[str]] = None
        self.closed = False

    def read(self) -> Optional[str]:
        if self.closed:
            raise ValueError("Line stream is closed.")
        handle = self._open()
        line = handle.readline()
        if not line:
            return None
        self.line_number += 1
        return line.rstrip("\r\n")

    def reset(self) -> None:
        if self._handle is not None:
            self._handle.seek(0)
        self.line_number = 0

    def close(self) -> None:
        self.closed = True
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def _open(self) -> IO[str]:
        if self._handle is None:
            self._handle = self.path.open("r", encoding=self.encoding, newline="")
        return self._handle

    def __enter__(self) -> "PlainTextLineStream":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ListLineStream:
    """In-memory line source, mostly for tests and already-loaded corpora."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: List[str] = [line.rstrip("\r\n") for line in lines]
        self.line_number = 0
        self.closed = False

    @classmethod
    def from_text(cls, text: str) -> "ListLineStream":
        return cls(text.splitlines())

    def read(self) -> Optional[str]:
        if self.closed:
            raise ValueError("Line stream is closed.")
        if self.line_number >= len(self._lines):
            return None
        line = self._lines[self.line_number]
        self.line_number += 1
        return line

    def reset(self) -> None:
        self.line_number = 0

    def close(self) -> None:
        self.closed = True


__all__ = ["LineSource", "ListLineStream", "PlainTextLineStream"]
