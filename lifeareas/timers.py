"""Cancellable timers: search debouncing and two-phase deferred removal.

Both take a Scheduler so the surface decides how time passes
(threading.Timer by default, the Textual event loop in the TUI, a manual
clock in tests).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ThreadingScheduler:
    """Runs callbacks on daemon threading.Timer threads."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


# ── Debounce ──────────────────────────────────────────────────


class Debouncer:
    """Coalesces bursts of triggers into one call after a quiet period."""

    def __init__(self, scheduler: Scheduler, delay: float, callback: Callable[[], None]) -> None:
        self.scheduler = scheduler
        self.delay = delay
        self.callback = callback
        self._pending: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def trigger(self) -> None:
        self.cancel()
        self._pending = self.scheduler.schedule(self.delay, self._fire)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def flush(self) -> None:
        """Run a pending call now instead of waiting."""
        if self._pending is None:
            return
        self.cancel()
        self.callback()

    def _fire(self) -> None:
        self._pending = None
        self.callback()


# ── Deferred removal ──────────────────────────────────────────


class DeferredRemoval:
    """Two-phase delete: mark now, remove after ``delay``.

    While marked, an id is only "fading"; the commit callback that removes
    it from memory and storage runs when the timer fires.
    """

    def __init__(self, scheduler: Scheduler, delay: float, commit: Callable[[str], None]) -> None:
        self.scheduler = scheduler
        self.delay = delay
        self.commit = commit
        self._pending: dict[str, TimerHandle] = {}

    def is_marked(self, item_id: str) -> bool:
        return item_id in self._pending

    def marked(self) -> set[str]:
        return set(self._pending)

    def mark(self, item_id: str) -> bool:
        """Schedule removal. Returns False if the id is already pending."""
        if item_id in self._pending:
            return False
        self._pending[item_id] = self.scheduler.schedule(self.delay, lambda: self._fire(item_id))
        return True

    def cancel(self, item_id: str) -> bool:
        handle = self._pending.pop(item_id, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def flush(self) -> None:
        """Commit every pending removal immediately (e.g. on shutdown)."""
        for item_id in list(self._pending):
            self.cancel(item_id)
            self.commit(item_id)

    def _fire(self, item_id: str) -> None:
        if self._pending.pop(item_id, None) is None:
            return
        logger.debug("Committing deferred removal of %s", item_id)
        self.commit(item_id)
