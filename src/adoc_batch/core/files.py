"""Filesystem walking helpers shared across adoc-batch modules."""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, Optional, Sequence

__all__ = [
    "extension_for",
    "iter_files",
    "matches_patterns",
    "normalize_extensions",
]


def normalize_extensions(values: Iterable[str]) -> tuple[str, ...]:
    """Lowercase extensions, strip leading dots and drop duplicates.

    Order is preserved so configuration round-trips predictably.
    """
    seen: set[str] = set()
    result: list[str] = []
    for item in values:
        candidate = item.strip().lower().lstrip(".")
        if candidate and candidate not in seen:
            seen.add(candidate)
            result.append(candidate)
    return tuple(result)


def iter_files(root: Path) -> Iterator[Path]:
    """Yield every regular file under ``root`` exactly once, sorted."""
    if not root.exists():
        raise FileNotFoundError(f"Source directory not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Source path is not a directory: {root}")
    yield from sorted(
        candidate for candidate in root.rglob("*") if candidate.is_file()
    )


def extension_for(path: Path) -> Optional[str]:
    suffix = path.suffix
    if not suffix:
        return None
    return suffix.lstrip(".").lower()


def matches_patterns(
    path: Path, root: Path, patterns: Sequence[str]
) -> bool:
    """Return ``True`` when ``path`` (relative to ``root``) matches a glob.

    Patterns are anchored at ``root`` and compared segment by segment. ``**``
    spans any number of directories, as in the Gradle ``PatternSet`` syntax.
    An empty ``patterns`` sequence matches everything.
    """
    if not patterns:
        return True
    parts = PurePosixPath(path.relative_to(root).as_posix()).parts
    return any(
        _match_parts(parts, PurePosixPath(pattern).parts)
        for pattern in patterns
    )


def _match_parts(parts: Sequence[str], pattern: Sequence[str]) -> bool:
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        return any(
            _match_parts(parts[index:], rest)
            for index in range(len(parts) + 1)
        )
    if not parts or not fnmatchcase(parts[0], head):
        return False
    return _match_parts(parts[1:], rest)
