"""Render a single document to text or to a file."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Optional

from .document import Document, load_document
from .engine import RenderEngine
from .errors import RenderError
from .options import RenderOptions
from .source import FileSource, as_source


def render_document(
    source: object,
    options: RenderOptions | None = None,
    *,
    engine: RenderEngine,
) -> Optional[str]:
    """Render ``source`` and either write it out or return the text.

    Output goes next to the source when ``in_place`` is set for a file
    source, into ``to_file`` (a directory or a file path) when given, and is
    returned otherwise. Returns ``None`` whenever a file was written.
    """

    options = options or RenderOptions()
    in_place = options.in_place
    to_file = options.to_file

    header_footer = options.header_footer
    if header_footer is None:
        header_footer = bool(in_place or to_file)

    reference = as_source(source)
    document = load_document(
        reference,
        replace(
            options,
            in_place=False,
            to_file=None,
            header_footer=header_footer,
        ),
        engine=engine,
    )

    target = resolve_output_path(
        document, reference, in_place=in_place, to_file=to_file
    )
    if target is None:
        return document.render()

    rendered = document.render()
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        handle.write(rendered)
    return None


def resolve_output_path(
    document: Document,
    reference: object,
    *,
    in_place: bool,
    to_file: Optional[Path],
) -> Optional[Path]:
    if in_place and isinstance(reference, FileSource):
        return reference.path.parent / _output_name(document)
    if to_file is None:
        return None
    to_file = Path(to_file)
    if to_file.is_dir():
        return to_file / _output_name(document)
    return to_file


def _output_name(document: Document) -> str:
    docname = document.docname
    if docname is None:
        raise RenderError(
            "Cannot derive an output file name for a document that was not "
            "loaded from a file; pass a file path as to_file instead."
        )
    return f"{docname}{document.outfilesuffix}"


__all__ = ["render_document", "resolve_output_path"]
