"""Public APIs for rendering AsciiDoc documents, singly or in batches."""

from __future__ import annotations

from .config import (
    BaseDirStrategy,
    ConfigOverrides,
    LoadResult,
    RenderConfig,
    RenderConfigError,
    load_config,
)
from .dispatcher import BatchSummary, RenderOutcome, RenderStatus, run_batch
from .document import Document, derived_attributes, load_document
from .engine import RenderEngine, RenderRequest, build_asciidoc_engine
from .errors import DependencyError, RenderError, UnsupportedInputError
from .options import (
    BACKEND_SUFFIXES,
    DEFAULT_BACKEND,
    RenderOptions,
    SafeMode,
    outfilesuffix_for,
)
from .renderer import render_document
from .source import (
    FileSource,
    LinesSource,
    SourceReference,
    StreamSource,
    TextSource,
    as_source,
)

__all__ = [
    "BaseDirStrategy",
    "ConfigOverrides",
    "LoadResult",
    "RenderConfig",
    "RenderConfigError",
    "load_config",
    "BatchSummary",
    "RenderOutcome",
    "RenderStatus",
    "run_batch",
    "Document",
    "derived_attributes",
    "load_document",
    "RenderEngine",
    "RenderRequest",
    "build_asciidoc_engine",
    "DependencyError",
    "RenderError",
    "UnsupportedInputError",
    "BACKEND_SUFFIXES",
    "DEFAULT_BACKEND",
    "RenderOptions",
    "SafeMode",
    "outfilesuffix_for",
    "render_document",
    "FileSource",
    "LinesSource",
    "SourceReference",
    "StreamSource",
    "TextSource",
    "as_source",
]
