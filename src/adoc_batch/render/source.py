"""Source references accepted by the document loader.

A source is one of four kinds, each normalizing to an ordered list of
lines with their line endings preserved:

* :class:`FileSource` - a document on disk (also yields derived attributes)
* :class:`StreamSource` - any readable object exposing ``readlines``
* :class:`TextSource` - raw text
* :class:`LinesSource` - a pre-split sequence of lines
"""

from __future__ import annotations

import io
import os
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Sequence, Union

from .errors import UnsupportedInputError


@dataclass(frozen=True)
class FileSource:
    path: Path

    def read_lines(self) -> list[str]:
        with self.path.open("r", encoding="utf-8", newline="") as handle:
            return handle.readlines()


@dataclass(frozen=True)
class StreamSource:
    stream: IO[Any]

    def read_lines(self) -> list[str]:
        try:
            self.stream.seek(0)
        except (AttributeError, OSError, io.UnsupportedOperation):
            pass
        return list(self.stream.readlines())


@dataclass(frozen=True)
class TextSource:
    text: str

    def read_lines(self) -> list[str]:
        return self.text.splitlines(keepends=True)


@dataclass(frozen=True)
class LinesSource:
    lines: Sequence[str]

    def read_lines(self) -> list[str]:
        return list(self.lines)


SourceReference = Union[FileSource, StreamSource, TextSource, LinesSource]

_SOURCE_TYPES = (FileSource, StreamSource, TextSource, LinesSource)


def as_source(value: object) -> SourceReference:
    """Coerce ``value`` into a :data:`SourceReference`.

    Paths and open file objects backed by a real file become
    :class:`FileSource`; other readable objects become
    :class:`StreamSource`. Raises :class:`UnsupportedInputError` for
    anything else.
    """

    if isinstance(value, _SOURCE_TYPES):
        return value
    if isinstance(value, os.PathLike):
        return FileSource(Path(value))
    if hasattr(value, "readlines"):
        name = getattr(value, "name", None)
        if isinstance(name, (str, os.PathLike)) and Path(name).is_file():
            return FileSource(Path(name))
        return StreamSource(value)  # type: ignore[arg-type]
    if isinstance(value, str):
        return TextSource(value)
    if isinstance(value, (list, tuple)):
        return LinesSource(tuple(value))
    raise UnsupportedInputError(value)


__all__ = [
    "FileSource",
    "LinesSource",
    "SourceReference",
    "StreamSource",
    "TextSource",
    "as_source",
]
