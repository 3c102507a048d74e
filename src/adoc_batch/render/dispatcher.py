"""Sequential batch dispatcher for rendering a source tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from adoc_batch.core import files as files_mod

from .config import RenderConfig
from .engine import RenderEngine
from .options import RenderOptions, outfilesuffix_for
from .renderer import render_document
from .resources import copy_resources

Echo = Callable[[str], None]


class RenderStatus(Enum):
    """Outcome status for a single source file."""

    RENDERED = "rendered"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RenderOutcome:
    """Result of rendering (or skipping) one source file for one backend."""

    source: Path
    status: RenderStatus
    backend: Optional[str] = None
    language: Optional[str] = None
    output_path: Optional[Path] = None
    reason: Optional[str] = None
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class BatchSummary:
    """Aggregated results for a batch run."""

    source_dir: Path
    outcomes: tuple[RenderOutcome, ...]
    resources: tuple[Path, ...] = ()

    @property
    def rendered_count(self) -> int:
        return self._count(RenderStatus.RENDERED)

    @property
    def skipped_count(self) -> int:
        return self._count(RenderStatus.SKIPPED)

    @property
    def failure_count(self) -> int:
        return self._count(RenderStatus.FAILED)

    @property
    def exit_code(self) -> int:
        return 1 if self.failure_count else 0

    def _count(self, status: RenderStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)


def run_batch(
    config: RenderConfig,
    *,
    engine: RenderEngine,
    logger: logging.Logger,
    echo: Optional[Echo] = None,
) -> BatchSummary:
    """Render every matching file under ``config.source_dir``.

    With ``config.languages`` set, each ``source_dir/<language>`` tree is
    walked instead and rendered into ``<output>[/<backend>]/<language>``.
    Non-matching files are recorded as skipped. With ``config.fail_fast``
    the first failure is logged and re-raised, leaving files written so
    far in place; otherwise failures are recorded and the walk continues.
    """

    extensions = set(config.extensions)
    logger.info(
        "Starting render run",
        extra={
            "source_dir": str(config.source_dir),
            "output_dir": str(config.output_dir),
            "backends": list(config.backends),
            "languages": list(config.languages),
            "extensions": sorted(extensions),
            "engine": engine.name,
        },
    )

    outcomes: list[RenderOutcome] = []
    copied: list[Path] = []
    for language in config.languages or (None,):
        source_root = config.source_root_for(language)
        candidates = _collect_candidates(
            source_root,
            language=language,
            config=config,
            extensions=extensions,
            outcomes=outcomes,
            logger=logger,
        )
        logger.info(
            "Prepared render candidates",
            extra={
                "source_root": str(source_root),
                "language": language,
                "candidate_count": len(candidates),
            },
        )

        for backend in config.backends:
            output_dir = config.output_dir_for(backend, language)
            output_dir.mkdir(parents=True, exist_ok=True)
            for source in candidates:
                outcomes.append(
                    _render_one(
                        source,
                        backend=backend,
                        language=language,
                        output_dir=output_dir,
                        config=config,
                        engine=engine,
                        logger=logger,
                        echo=echo,
                    )
                )
            if config.copies_resources_for(backend):
                copied.extend(
                    copy_resources(source_root, output_dir, config.resources)
                )
                logger.info(
                    "Copied resources",
                    extra={
                        "backend": backend,
                        "language": language,
                        "output_dir": str(output_dir),
                    },
                )

    summary = BatchSummary(
        source_dir=config.source_dir,
        outcomes=tuple(outcomes),
        resources=tuple(copied),
    )
    logger.info(
        "Completed render run",
        extra={
            "rendered_count": summary.rendered_count,
            "skipped_count": summary.skipped_count,
            "failure_count": summary.failure_count,
        },
    )
    return summary


def _render_one(
    source: Path,
    *,
    backend: str,
    language: Optional[str],
    output_dir: Path,
    config: RenderConfig,
    engine: RenderEngine,
    logger: logging.Logger,
    echo: Optional[Echo],
) -> RenderOutcome:
    if config.log_documents and echo is not None:
        echo(f"Rendering {source.relative_to(config.source_dir)} ({backend})")

    attributes = dict(config.attributes)
    attributes["backend"] = backend
    options = RenderOptions(
        attributes=attributes,
        header_footer=True,
        to_file=output_dir,
        backend=backend,
        safe=config.safe_mode,
        base_dir=config.base_dir_for(source, language),
    )

    try:
        result = render_document(source, options, engine=engine)
    except Exception as exc:
        logger.error(
            "Failed to render document",
            exc_info=True,
            extra={"source": str(source), "backend": backend},
        )
        if config.fail_fast:
            raise
        return RenderOutcome(
            source=source,
            status=RenderStatus.FAILED,
            backend=backend,
            language=language,
            reason=str(exc),
            error=exc,
        )

    if result is not None and echo is not None:
        echo(result)

    output_path = output_dir / f"{source.stem}{outfilesuffix_for(backend)}"
    logger.info(
        "Rendered document",
        extra={
            "source": str(source),
            "backend": backend,
            "language": language,
            "output_path": str(output_path),
        },
    )
    return RenderOutcome(
        source=source,
        status=RenderStatus.RENDERED,
        backend=backend,
        language=language,
        output_path=output_path,
    )


def _collect_candidates(
    source_root: Path,
    *,
    language: Optional[str],
    config: RenderConfig,
    extensions: set[str],
    outcomes: list[RenderOutcome],
    logger: logging.Logger,
) -> list[Path]:
    """Return renderable files under ``source_root``; record the rest."""

    candidates: list[Path] = []
    for path in files_mod.iter_files(source_root):
        reason = _skip_reason(path, source_root, config, extensions)
        if reason is None:
            candidates.append(path)
            continue
        outcomes.append(
            RenderOutcome(
                source=path,
                status=RenderStatus.SKIPPED,
                language=language,
                reason=reason,
            )
        )
        logger.debug(
            "Skipped source", extra={"source": str(path), "reason": reason}
        )
    return candidates


def _skip_reason(
    path: Path,
    source_root: Path,
    config: RenderConfig,
    extensions: set[str],
) -> Optional[str]:
    extension = files_mod.extension_for(path)
    if extension is None or extension not in extensions:
        return "Not a recognized AsciiDoc file."
    if not files_mod.matches_patterns(path, source_root, config.sources):
        return "Not selected by the configured source patterns."
    return None


__all__ = [
    "BatchSummary",
    "RenderOutcome",
    "RenderStatus",
    "run_batch",
]
