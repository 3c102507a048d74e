"""Render options, safe mode levels and the backend suffix table."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

DEFAULT_BACKEND = "html5"

# Output file suffix per backend identifier. Unknown backends fall back to
# ``.<backend>`` (see :func:`outfilesuffix_for`).
BACKEND_SUFFIXES: Mapping[str, str] = MappingProxyType(
    {
        "html": ".html",
        "html4": ".html",
        "html5": ".html",
        "xhtml": ".html",
        "xhtml11": ".html",
        "docbook": ".xml",
        "docbook45": ".xml",
        "docbook5": ".xml",
    }
)


class SafeMode(Enum):
    """Safety levels constraining what the engine may touch on disk."""

    UNSAFE = 0
    SAFE = 1
    SERVER = 10
    SECURE = 20

    @classmethod
    def from_value(cls, value: "str | int | SafeMode") -> "SafeMode":
        if isinstance(value, SafeMode):
            return value
        if isinstance(value, int):
            for member in cls:
                if member.value == value:
                    return member
        else:
            normalized = str(value).strip().upper()
            if normalized in cls.__members__:
                return cls[normalized]
        expected = ", ".join(member.name.lower() for member in cls)
        raise ValueError(
            f"Unknown safe mode '{value}'. Expected one of: {expected}."
        )


def outfilesuffix_for(backend: str) -> str:
    return BACKEND_SUFFIXES.get(backend, f".{backend}")


@dataclass(frozen=True)
class RenderOptions:
    """Options for loading and rendering a single document.

    ``header_footer`` is tri-state: ``None`` means it was not set explicitly
    and the renderer decides (full documents when output is persisted).
    ``in_place`` and ``to_file`` are render-time directives and are
    stripped before the document is loaded.
    """

    attributes: Mapping[str, Any] = field(default_factory=dict)
    header_footer: Optional[bool] = None
    in_place: bool = False
    to_file: Optional[Path] = None
    backend: Optional[str] = None
    safe: SafeMode = SafeMode.SECURE
    base_dir: Optional[Path] = None

    def requested_backend(self) -> str:
        """Backend named by the options, then the attributes, then default."""

        if self.backend:
            return self.backend
        candidate = self.attributes.get("backend")
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
        return DEFAULT_BACKEND


__all__ = [
    "BACKEND_SUFFIXES",
    "DEFAULT_BACKEND",
    "RenderOptions",
    "SafeMode",
    "outfilesuffix_for",
]
