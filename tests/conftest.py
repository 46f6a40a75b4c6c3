"""
Shared fixtures for dupe-sweep tests.
"""

import os
from datetime import datetime, timezone
from pathlib import Path

import pytest
from ds_app.core.config import get_settings
from ds_app.modules.dedup.schemas import FileEntry

BASE_TS = 1_700_000_000  # 2023-11-14, arbitrary fixed mtime


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from default settings, whatever the host env says."""
    for key in list(os.environ):
        if key.startswith("DS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("DS_SCAN_WORKERS", "2")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_file(tmp_path):
    """Create `name` under tmp_path with `size` bytes and mtime BASE_TS + `age`."""

    def _make(name: str, size: int = 10, age: int = 0, content: bytes | None = None) -> Path:
        p = tmp_path / name
        p.write_bytes(content if content is not None else b"x" * size)
        ts = BASE_TS + age
        os.utime(p, (ts, ts))
        return p

    return _make


@pytest.fixture
def entry():
    """Build an in-memory FileEntry without touching the disk."""

    def _entry(name: str, size: int = 10, age: int = 0, folder: str = "/data") -> FileEntry:
        return FileEntry(
            absolute_path=f"{folder}/{name}",
            filename=name,
            size=size,
            modified_at=datetime.fromtimestamp(BASE_TS + age, tz=timezone.utc),
        )

    return _entry


@pytest.fixture
def base_ts():
    return BASE_TS
