"""Shared test fixtures for LifeAreas tests."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

from lifeareas.store import MemoryStore


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with a profile and a seeded store."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    # Profile
    profile = {
        "timezone": "UTC",
        "search_debounce_ms": 300,
        "removal_delay_ms": 300,
    }
    (root / "profile.yaml").write_text(
        yaml.dump(profile, default_flow_style=False), encoding="utf-8"
    )

    # Store
    store = {
        "fisica-goals": [
            {"id": "g1", "text": "Correr 5km", "completed": False, "time": "07:00"},
            {"id": "g2", "text": "Alongar", "completed": True},
        ],
        "unified-reflections": [
            {
                "id": "1700000000000",
                "category": "Mental",
                "title": "Foco",
                "text": "Dia produtivo.",
                "date": "2023-11-14",
                "timestamp": 1700000000000,
            }
        ],
    }
    (root / "store.json").write_text(json.dumps(store, indent=2), encoding="utf-8")

    # Set env var
    os.environ["LIFEAREAS_ROOT"] = str(root)
    yield root
    # Cleanup
    if "LIFEAREAS_ROOT" in os.environ:
        del os.environ["LIFEAREAS_ROOT"]


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


class _ManualHandle:
    def __init__(self, clock: ManualScheduler, due: float, callback) -> None:
        self.clock = clock
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose time only moves when a test calls advance()."""

    def __init__(self) -> None:
        self.now = 0.0
        self.handles: list[_ManualHandle] = []

    def schedule(self, delay: float, callback) -> _ManualHandle:
        handle = _ManualHandle(self, self.now + delay, callback)
        self.handles.append(handle)
        return handle

    def pending(self) -> int:
        return sum(1 for h in self.handles if not h.cancelled)

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = sorted(
            (h for h in self.handles if not h.cancelled and h.due <= self.now),
            key=lambda h: h.due,
        )
        for handle in due:
            if handle.cancelled:
                continue
            self.handles.remove(handle)
            handle.callback()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def fixed_now() -> datetime:
    """2026-10-17 14:05 UTC."""
    return datetime(2026, 10, 17, 14, 5, tzinfo=timezone.utc)
