"""Shared testing fixtures for the adoc_batch test suite."""

from .engine import RecordingEngine  # noqa: F401
from .workspace import WorkspaceBuilder, build_tree  # noqa: F401

__all__ = [
    "RecordingEngine",
    "WorkspaceBuilder",
    "build_tree",
]
