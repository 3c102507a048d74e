"""Configuration loader for batch rendering runs."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, MutableMapping, Optional, Sequence

from adoc_batch.core import config as core_config
from adoc_batch.core import files as files_mod
from adoc_batch.core import workspace as workspace_mod

from .options import DEFAULT_BACKEND, SafeMode

CONFIG_FILENAME = "render.toml"
CONFIG_ENV = "ADOC_BATCH_RENDER_CONFIG"
ENV_PREFIX = "ADOC_BATCH_RENDER_"

DEFAULT_EXTENSIONS: tuple[str, ...] = ("adoc", "asciidoc", "ad", "asc")
_DEFAULT_SAFE_MODE = "unsafe"
_DEFAULT_LOG_LEVEL = "INFO"
_OPEN_TABLES = ("attributes",)


class RenderConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


class BaseDirStrategy(Enum):
    """Where the engine resolves relative includes from."""

    SOURCE_DIR = "source-dir"
    SOURCE_FILE = "source-file"
    EXPLICIT = "explicit"


@dataclass(frozen=True)
class RenderConfig:
    """Fully resolved configuration for a batch rendering run."""

    source_dir: Path
    output_dir: Path
    backends: tuple[str, ...] = (DEFAULT_BACKEND,)
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    attributes: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    safe_mode: SafeMode = SafeMode.UNSAFE
    base_dir_strategy: BaseDirStrategy = BaseDirStrategy.SOURCE_DIR
    base_dir: Optional[Path] = None
    sources: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    separate_output_dirs: bool = False
    fail_fast: bool = True
    log_documents: bool = False
    resources: tuple[str, ...] = ()
    resource_backends: tuple[str, ...] = ()
    log_level: str = _DEFAULT_LOG_LEVEL

    def source_root_for(self, language: Optional[str] = None) -> Path:
        """Directory walked for ``language`` (``source_dir/<language>``)."""

        if language is None:
            return self.source_dir
        return self.source_dir / language

    def output_dir_for(
        self, backend: str, language: Optional[str] = None
    ) -> Path:
        """Output directory for ``backend`` and, optionally, ``language``.

        Each backend gets its own subdirectory once more than one backend is
        configured, or when ``separate_output_dirs`` asks for it. Language
        output nests below that as ``<language>``.
        """

        root = self.output_dir
        if self.separate_output_dirs or len(self.backends) > 1:
            root = root / backend
        if language is not None:
            root = root / language
        return root

    def base_dir_for(
        self, source: Path, language: Optional[str] = None
    ) -> Path:
        if self.base_dir_strategy is BaseDirStrategy.SOURCE_FILE:
            return source.parent
        if self.base_dir is not None:
            return self.base_dir
        return self.source_root_for(language)

    def copies_resources_for(self, backend: str) -> bool:
        if not self.resources:
            return False
        return not self.resource_backends or backend in self.resource_backends


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of file/env options."""

    source_dir: Optional[Path] = None
    output_dir: Optional[Path] = None
    backends: Optional[Sequence[str]] = None
    attributes: Optional[Mapping[str, Any]] = None
    safe_mode: Optional[SafeMode] = None
    sources: Optional[Sequence[str]] = None
    languages: Optional[Sequence[str]] = None
    fail_fast: Optional[bool] = None
    log_documents: Optional[bool] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    """Result of loading configuration, including workspace context."""

    config: RenderConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
    cwd: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults.

    Relative paths given on the command line or in the environment resolve
    against ``cwd``; relative paths in the TOML file resolve against the
    directory holding that file.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env
    cwd = cwd or Path.cwd()

    try:
        layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    except workspace_mod.WorkspaceError as exc:
        raise RenderConfigError(str(exc)) from exc
    default_path = layout.path_for("config") / CONFIG_FILENAME

    requested_path = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=default_path,
    )

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested_path.exists():
        loaded_path = requested_path
        try:
            core_config.merge_defaults(
                table,
                core_config.load_toml(requested_path),
                open_tables=_OPEN_TABLES,
            )
        except core_config.TomlConfigError as exc:
            raise RenderConfigError(str(exc)) from exc
    elif config_path is not None or env_map.get(CONFIG_ENV, "").strip():
        raise RenderConfigError(f"Config file not found: {requested_path}")

    file_root = loaded_path.parent if loaded_path is not None else cwd
    paths = table["paths"]
    render = table["render"]
    resources = table["resources"]

    source_dir = _pick_first(
        _absolute(overrides.source_dir, cwd),
        _absolute(_env_path(env_map, "SOURCE_DIR"), cwd),
        _absolute(
            _coerce_optional_path(paths["source_dir"], "paths.source_dir"),
            file_root,
        ),
    )
    if source_dir is None:
        raise RenderConfigError(
            "A source directory is required (argument, "
            f"{ENV_PREFIX}SOURCE_DIR, or paths.source_dir)."
        )

    output_dir = _pick_first(
        _absolute(overrides.output_dir, cwd),
        _absolute(_env_path(env_map, "OUTPUT_DIR"), cwd),
        _absolute(
            _coerce_optional_path(paths["output_dir"], "paths.output_dir"),
            file_root,
        ),
        layout.path_for("rendered"),
    )

    backends = _normalize_names(
        _pick_first(
            overrides.backends,
            _env_list(env_map, "BACKENDS"),
            render["backends"],
        ),
        key="render.backends",
    )

    extensions = files_mod.normalize_extensions(
        _require_strings(
            _pick_first(_env_list(env_map, "EXTENSIONS"), render["extensions"]),
            key="render.extensions",
        )
    )
    if not extensions:
        raise RenderConfigError("At least one extension must be configured.")

    safe_mode = _resolve_safe_mode(
        _pick_first(
            overrides.safe_mode,
            _env_string(env_map, "SAFE_MODE"),
            render["safe_mode"],
        )
    )

    strategy, base_dir = _resolve_base_dir(render["base_dir"], file_root)

    attributes: dict[str, Any] = dict(table["attributes"])
    attributes.update(overrides.attributes or {})

    sources = tuple(
        _require_strings(
            _pick_first(overrides.sources, render["sources"]),
            key="render.sources",
        )
    )

    languages = _normalize_languages(
        _pick_first(
            overrides.languages,
            _env_list(env_map, "LANGUAGES"),
            render["languages"],
        )
    )

    config = RenderConfig(
        source_dir=source_dir,
        output_dir=output_dir,
        backends=backends,
        extensions=extensions,
        attributes=MappingProxyType(attributes),
        safe_mode=safe_mode,
        base_dir_strategy=strategy,
        base_dir=base_dir,
        sources=sources,
        languages=languages,
        separate_output_dirs=_require_bool(
            render["separate_output_dirs"], "render.separate_output_dirs"
        ),
        fail_fast=_require_bool(
            _pick_first(overrides.fail_fast, render["fail_fast"]),
            "render.fail_fast",
        ),
        log_documents=_require_bool(
            _pick_first(overrides.log_documents, render["log_documents"]),
            "render.log_documents",
        ),
        resources=tuple(
            _require_strings(resources["include"], key="resources.include")
        ),
        resource_backends=tuple(
            _require_strings(resources["backends"], key="resources.backends")
        ),
        log_level=_resolve_log_level(
            _pick_first(
                overrides.log_level,
                _env_string(env_map, "LOG_LEVEL"),
                table["logging"]["level"],
            )
        ),
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def _default_table() -> MutableMapping[str, MutableMapping[str, Any]]:
    return {
        "paths": {"source_dir": None, "output_dir": None},
        "render": {
            "backends": [DEFAULT_BACKEND],
            "extensions": list(DEFAULT_EXTENSIONS),
            "safe_mode": _DEFAULT_SAFE_MODE,
            "base_dir": BaseDirStrategy.SOURCE_DIR.value,
            "sources": [],
            "languages": [],
            "separate_output_dirs": False,
            "fail_fast": True,
            "log_documents": False,
        },
        "attributes": {},
        "resources": {"include": [], "backends": []},
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = env_map.get(CONFIG_ENV, "").strip()
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _coerce_optional_path(value: object, key: str) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, str):
        raw = value.strip()
        return Path(raw).expanduser() if raw else None
    raise RenderConfigError(f"{key} must be a string when provided.")


def _absolute(candidate: Optional[Path], root: Path) -> Optional[Path]:
    if candidate is None:
        return None
    if not candidate.is_absolute():
        candidate = root / candidate
    return candidate.resolve()


def _resolve_base_dir(
    value: object, file_root: Path
) -> tuple[BaseDirStrategy, Optional[Path]]:
    if not isinstance(value, str) or not value.strip():
        raise RenderConfigError(
            "render.base_dir must be 'source-dir', 'source-file' or a path."
        )
    normalized = value.strip()
    for strategy in (BaseDirStrategy.SOURCE_DIR, BaseDirStrategy.SOURCE_FILE):
        if normalized.lower() == strategy.value:
            return strategy, None
    return BaseDirStrategy.EXPLICIT, _absolute(
        Path(normalized).expanduser(), file_root
    )


def _normalize_names(value: object, *, key: str) -> tuple[str, ...]:
    seen: set[str] = set()
    result: list[str] = []
    for item in _require_strings(value, key=key):
        name = item.strip().lower()
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    if not result:
        raise RenderConfigError(f"{key} must name at least one entry.")
    return tuple(result)


def _normalize_languages(value: object) -> tuple[str, ...]:
    seen: set[str] = set()
    result: list[str] = []
    for item in _require_strings(value, key="render.languages"):
        name = item.strip()
        if not name or name in seen:
            continue
        if name in (".", "..") or "/" in name or "\\" in name:
            raise RenderConfigError(
                f"render.languages entry '{name}' must be a plain directory "
                "name."
            )
        seen.add(name)
        result.append(name)
    return tuple(result)


def _require_strings(value: object, *, key: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise RenderConfigError(f"{key} must be a list of strings.")
    if not all(isinstance(item, str) for item in value):
        raise RenderConfigError(f"{key} must be a list of strings.")
    return list(value)


def _require_bool(value: object, key: str) -> bool:
    if not isinstance(value, bool):
        raise RenderConfigError(f"{key} must be true or false.")
    return value


def _resolve_safe_mode(value: object) -> SafeMode:
    try:
        return SafeMode.from_value(value)  # type: ignore[arg-type]
    except ValueError as exc:
        raise RenderConfigError(str(exc)) from exc


def _resolve_log_level(candidate: object) -> str:
    if not isinstance(candidate, str):
        raise RenderConfigError("logging.level must be a string.")
    level = candidate.strip()
    if not level:
        raise RenderConfigError("logging.level must be a non-empty string.")
    return level.upper()


def _env_list(env_map: Mapping[str, str], key: str) -> Optional[list[str]]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    parts = [part for part in raw.replace(",", " ").split() if part]
    return parts or None


def _env_path(env_map: Mapping[str, str], key: str) -> Optional[Path]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    return Path(raw).expanduser()


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    value = env_map.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return None
    return value.strip() or None


def _pick_first(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


__all__ = [
    "BaseDirStrategy",
    "CONFIG_FILENAME",
    "ConfigOverrides",
    "DEFAULT_EXTENSIONS",
    "LoadResult",
    "RenderConfig",
    "RenderConfigError",
    "load_config",
]
