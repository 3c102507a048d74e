"""Document model and loader."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional

from .engine import RenderEngine, RenderRequest
from .options import RenderOptions, outfilesuffix_for
from .source import FileSource, as_source


@dataclass
class Document:
    """A loaded document: its lines, effective options and attributes."""

    lines: list[str]
    options: RenderOptions
    engine: RenderEngine
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def backend(self) -> str:
        return str(self.attributes["backend"])

    @property
    def docname(self) -> Optional[str]:
        value = self.attributes.get("docname")
        return str(value) if value else None

    @property
    def outfilesuffix(self) -> str:
        return str(self.attributes["outfilesuffix"])

    def render(self) -> str:
        return self.engine.render(
            RenderRequest(
                lines=tuple(self.lines),
                backend=self.backend,
                attributes=dict(self.attributes),
                header_footer=bool(self.options.header_footer),
                safe=self.options.safe,
                base_dir=self.options.base_dir,
            )
        )


def load_document(
    source: object,
    options: RenderOptions,
    *,
    engine: RenderEngine,
) -> Document:
    """Load ``source`` into a :class:`Document`.

    File sources also receive the ``doc*`` attributes derived from their
    path and modification time. Every source gets ``backend`` and
    ``outfilesuffix`` for the requested backend.
    """

    reference = as_source(source)
    attributes = dict(options.attributes)
    lines = reference.read_lines()

    if isinstance(reference, FileSource):
        attributes.update(derived_attributes(reference.path))

    backend = options.requested_backend()
    attributes["backend"] = backend
    attributes["outfilesuffix"] = outfilesuffix_for(backend)

    return Document(
        lines=lines,
        options=replace(options, attributes=attributes),
        engine=engine,
        attributes=attributes,
    )


def derived_attributes(path: Path) -> Mapping[str, str]:
    """Return ``docfile``/``docdir``/``docname`` and the mtime stamps."""

    absolute = path.expanduser().absolute()
    modified = datetime.fromtimestamp(absolute.stat().st_mtime).astimezone()
    docdate = modified.strftime("%Y-%m-%d")
    doctime = modified.strftime("%H:%M:%S %Z")
    return {
        "docfile": str(absolute),
        "docdir": str(absolute.parent),
        "docname": absolute.stem,
        "docdate": docdate,
        "doctime": doctime,
        "docdatetime": f"{docdate} {doctime}",
    }


__all__ = ["Document", "derived_attributes", "load_document"]
