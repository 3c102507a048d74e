"""Shared TOML configuration helpers for adoc-batch commands."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Collection, Mapping, MutableMapping

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "parse_assignment",
    "write_toml_template",
]


class TomlConfigError(RuntimeError):
    """Raised when TOML config IO or validation fails."""


def load_toml(path: Path) -> Mapping[str, Any]:
    """Load a TOML document from ``path``.

    Errors are surfaced as :class:`TomlConfigError` instances so callers can
    translate them into domain-specific exceptions.
    """

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    open_tables: Collection[str] = (),
    path: str = "",
) -> None:
    """Recursively merge ``override`` into ``base`` enforcing known keys.

    Tables named in ``open_tables`` (dotted paths) accept arbitrary keys,
    which is how free-form sections such as ``[attributes]`` are loaded.
    """

    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        base_value = base[key]
        if isinstance(base_value, MutableMapping):
            if not isinstance(value, Mapping):
                raise TomlConfigError(
                    "Expected table for '{0}', found {1}.".format(
                        dotted,
                        type(value).__name__,
                    )
                )
            if dotted in open_tables:
                base_value.update(value)
                continue
            merge_defaults(
                base_value,
                value,
                open_tables=open_tables,
                path=f"{dotted}.",
            )
            continue
        base[key] = value


def parse_assignment(raw: str) -> tuple[str, str]:
    """Split a ``NAME=VALUE`` string; a bare ``NAME`` maps to ``""``."""

    name, sep, value = raw.partition("=")
    name = name.strip()
    if not name:
        raise TomlConfigError(f"Invalid assignment '{raw}': missing name.")
    return name, value.strip() if sep else ""


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Write ``template`` to ``path`` honouring ``overwrite`` semantics."""

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    with path.open("w", encoding="utf-8") as handle:
        handle.write(template)
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path
