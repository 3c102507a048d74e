"""Seam around the external AsciiDoc engine.

The pipeline only depends on :class:`RenderEngine`, a named callable that
turns a :class:`RenderRequest` into text. :func:`build_asciidoc_engine`
binds it to asciidoc-py; tests substitute their own callables.
"""

from __future__ import annotations

import contextlib
import importlib
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence

from .errors import DependencyError, RenderError
from .options import SafeMode

# Attributes the engine derives from its own options rather than from the
# attribute mapping.
_ENGINE_MANAGED_ATTRIBUTES = frozenset({"backend"})

# Backend names accepted on the command line that asciidoc-py only knows
# under another name.
BACKEND_ALIASES = {
    "html": "xhtml11",
    "xhtml": "xhtml11",
    "docbook": "docbook45",
}


@dataclass(frozen=True)
class RenderRequest:
    """Everything the engine needs to render one loaded document."""

    lines: Sequence[str]
    backend: str
    attributes: Mapping[str, Any]
    header_footer: bool
    safe: SafeMode
    base_dir: Optional[Path] = None


@dataclass(frozen=True)
class RenderEngine:
    name: str
    convert: Callable[[RenderRequest], str]

    def render(self, request: RenderRequest) -> str:
        return self.convert(request)


def build_asciidoc_engine(
    logger: Optional[logging.Logger] = None,
) -> RenderEngine:
    """Return an engine backed by ``asciidoc.api.AsciiDocAPI``."""

    module = _import_module("asciidoc.api", "AsciiDocAPI")
    api_factory = getattr(module, "AsciiDocAPI")
    engine_error = getattr(module, "AsciiDocError", RuntimeError)
    log = logger or logging.getLogger(__name__)

    def convert(request: RenderRequest) -> str:
        api = api_factory()
        if not request.header_footer:
            api.options("--no-header-footer")
        if request.safe is not SafeMode.UNSAFE:
            api.options("--safe")
        api.attributes.update(_engine_attributes(request.attributes))

        infile = io.StringIO("".join(request.lines))
        outfile = io.StringIO()
        backend = engine_backend(request.backend)
        with _working_dir(request.base_dir):
            try:
                api.execute(infile, outfile, backend=backend)
            except engine_error as exc:
                raise RenderError(f"asciidoc failed: {exc}") from exc
            except Exception as exc:
                # asciidoc-py crashes rather than reporting some problems,
                # e.g. an unknown backend raises IndexError.
                raise RenderError(
                    f"asciidoc failed on backend '{backend}': "
                    f"{type(exc).__name__}: {exc}"
                ) from exc
            finally:
                for message in getattr(api, "messages", ()):
                    log.warning(
                        "asciidoc reported a problem",
                        extra={"engine_message": str(message)},
                    )
        return outfile.getvalue()

    return RenderEngine(name="asciidoc", convert=convert)


def engine_backend(backend: str) -> str:
    """Return the asciidoc-py name for ``backend``."""

    return BACKEND_ALIASES.get(backend, backend)


def _engine_attributes(attributes: Mapping[str, Any]) -> dict[str, Any]:
    """Map attribute values onto asciidoc-py's define/undefine convention.

    asciidoc-py defines a name for ``""`` and undefines it for ``None``;
    any other value is passed as ``name=value``.
    """

    result: dict[str, Any] = {}
    for name, value in attributes.items():
        if name in _ENGINE_MANAGED_ATTRIBUTES:
            continue
        if value is None or value is False:
            result[name] = None
        elif value is True:
            result[name] = ""
        else:
            result[name] = str(value)
    return result


def _working_dir(base_dir: Optional[Path]):
    if base_dir is None:
        return contextlib.nullcontext()
    return contextlib.chdir(base_dir)


def _import_module(module: str, required_attribute: str):
    try:
        imported = importlib.import_module(module)
    except ImportError as exc:
        raise DependencyError(
            "The 'asciidoc' package is required for rendering. Install it "
            "with `pip install asciidoc`."
        ) from exc

    if not hasattr(imported, required_attribute):
        raise DependencyError(
            (
                f"Dependency '{module}' is installed but missing the "
                f"'{required_attribute}' attribute. Upgrade or reinstall the "
                "package."
            )
        )
    return imported


__all__ = [
    "BACKEND_ALIASES",
    "RenderEngine",
    "RenderRequest",
    "build_asciidoc_engine",
    "engine_backend",
]
