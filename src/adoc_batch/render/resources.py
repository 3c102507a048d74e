"""Copy non-document resources (images, stylesheets) next to the output."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Sequence

from adoc_batch.core import files as files_mod


def copy_resources(
    source_dir: Path,
    output_dir: Path,
    patterns: Sequence[str],
) -> tuple[Path, ...]:
    """Copy files under ``source_dir`` matching ``patterns`` into
    ``output_dir``, keeping their relative layout. Returns the copies."""

    if not patterns:
        return ()
    copied: list[Path] = []
    for candidate in files_mod.iter_files(source_dir):
        if not files_mod.matches_patterns(candidate, source_dir, patterns):
            continue
        target = output_dir / candidate.relative_to(source_dir)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(candidate, target)
        copied.append(target)
    return tuple(copied)


__all__ = ["copy_resources"]
