from __future__ import annotations

import io
from pathlib import Path

import pytest

from adoc_batch.render import source as source_mod
from adoc_batch.render.errors import UnsupportedInputError


def test_path_becomes_file_source(tmp_path):
    doc = tmp_path / "guide.adoc"
    doc.write_text("= Guide\n", encoding="utf-8")

    reference = source_mod.as_source(doc)

    assert reference == source_mod.FileSource(doc)


def test_open_file_handle_becomes_file_source(tmp_path):
    doc = tmp_path / "guide.adoc"
    doc.write_text("= Guide\n", encoding="utf-8")

    with doc.open("r", encoding="utf-8") as handle:
        reference = source_mod.as_source(handle)

    assert isinstance(reference, source_mod.FileSource)
    assert reference.path == doc


def test_string_is_text_not_a_path(tmp_path):
    reference = source_mod.as_source("= Title\n\nBody\n")

    assert isinstance(reference, source_mod.TextSource)
    assert reference.read_lines() == ["= Title\n", "\n", "Body\n"]


def test_stream_is_rewound_before_reading():
    stream = io.StringIO("first\nsecond\n")
    stream.read()

    reference = source_mod.as_source(stream)

    assert isinstance(reference, source_mod.StreamSource)
    assert reference.read_lines() == ["first\n", "second\n"]


def test_stream_without_seek_is_read_from_current_position():
    class Unseekable:
        def __init__(self) -> None:
            self._lines = ["only\n"]

        def seek(self, _offset):
            raise io.UnsupportedOperation("not seekable")

        def readlines(self):
            return list(self._lines)

    reference = source_mod.as_source(Unseekable())

    assert reference.read_lines() == ["only\n"]


def test_line_sequence_is_copied():
    lines = ["a\n", "b\n"]

    reference = source_mod.as_source(lines)
    lines.append("c\n")

    assert reference.read_lines() == ["a\n", "b\n"]


def test_existing_reference_is_returned_unchanged():
    reference = source_mod.TextSource("x")

    assert source_mod.as_source(reference) is reference


@pytest.mark.parametrize("value", [42, 3.5, object(), {"a": 1}])
def test_unsupported_input_names_the_type(value):
    with pytest.raises(UnsupportedInputError) as exc_info:
        source_mod.as_source(value)

    assert type(value).__name__ in str(exc_info.value)
    assert exc_info.value.input_type is type(value)


def test_file_source_preserves_line_endings(tmp_path):
    doc = tmp_path / "crlf.adoc"
    doc.write_bytes(b"one\r\ntwo\n")

    lines = source_mod.FileSource(Path(doc)).read_lines()

    assert lines == ["one\r\n", "two\n"]
