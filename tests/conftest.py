from __future__ import annotations

import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import RecordingEngine, WorkspaceBuilder  # noqa: E402


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def recording_engine() -> RecordingEngine:
    """Engine double that records render requests."""

    return RecordingEngine()


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ADOC_BATCH_HOME", str(tmp_path / "adoc-home"))
    for key in (
        "ADOC_BATCH_RENDER_CONFIG",
        "ADOC_BATCH_RENDER_SOURCE_DIR",
        "ADOC_BATCH_RENDER_OUTPUT_DIR",
        "ADOC_BATCH_RENDER_BACKENDS",
        "ADOC_BATCH_RENDER_EXTENSIONS",
        "ADOC_BATCH_RENDER_SAFE_MODE",
        "ADOC_BATCH_RENDER_LOG_LEVEL",
        "ADOC_BATCH_RENDER_LANGUAGES",
    ):
        monkeypatch.delenv(key, raising=False)
