"""Unified reflections log and its filtered/sorted view.

The log is stored as one list under REFLECTIONS_KEY. Filtering never
touches the log: every call recomputes from the full entry set.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any

from lifeareas.areas import REFLECTIONS_KEY
from lifeareas.collection import new_item_id
from lifeareas.models import Reflection, ReflectionCard
from lifeareas.sanitize import sanitize_multiline, sanitize_text
from lifeareas.store import Store
from lifeareas.timers import DeferredRemoval

logger = logging.getLogger(__name__)


CATEGORY_COLORS: dict[str, str] = {
    "Física": "var(--color-fisica)",
    "Mental": "var(--color-mental)",
    "Financeira": "var(--color-financeira)",
    "Familiar": "var(--color-familiar)",
    "Profissional": "var(--color-profissional)",
    "Social": "var(--color-social)",
    "Espiritual": "var(--color-espiritual)",
}
FALLBACK_COLOR = "var(--color-secondary)"

DATE_RANGES = ("all", "today", "week", "month")
SORT_ORDERS = ("desc", "asc")

DAY_MS = 24 * 60 * 60 * 1000

DELETE_CONFIRM_MESSAGE = "Tem certeza que deseja excluir esta reflexão? Esta ação não pode ser desfeita."

_MONTHS_PT = ("jan.", "fev.", "mar.", "abr.", "mai.", "jun.", "jul.", "ago.", "set.", "out.", "nov.", "dez.")


def category_options() -> list[str]:
    """Values for a category picker, "all" first."""
    return ["all", *CATEGORY_COLORS]


# ── Log ───────────────────────────────────────────────────────


@dataclass
class ReflectionLog:
    store: Store
    key: str = REFLECTIONS_KEY
    entries: list[Reflection] = field(default_factory=list)


def load_reflections(store: Store, key: str = REFLECTIONS_KEY) -> ReflectionLog:
    raw = store.get(key)
    entries = []
    if isinstance(raw, list):
        for entry in raw:
            if not isinstance(entry, dict):
                logger.warning("Skipping malformed reflection: %r", entry)
                continue
            try:
                entries.append(Reflection.from_dict(entry))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping malformed reflection %r: %s", entry.get("id"), e)
    return ReflectionLog(store=store, key=key, entries=entries)


def save_reflections(log: ReflectionLog) -> None:
    log.store.set(log.key, [r.to_dict() for r in log.entries])


def add_reflection(
    log: ReflectionLog,
    category: str,
    title: str,
    text: str,
    now: datetime | None = None,
) -> Reflection | None:
    """Append a reflection. Unknown category or empty content is ignored."""
    title = (title or "").strip()
    text = (text or "").strip()
    if category not in CATEGORY_COLORS or not (title or text):
        return None
    if now is None:
        now = datetime.now().astimezone()
    timestamp = int(now.timestamp() * 1000)
    reflection = Reflection(
        id=new_item_id((r.id for r in log.entries), now_ms=timestamp),
        category=category,
        title=title,
        text=text,
        date=now.date().isoformat(),
        timestamp=timestamp,
    )
    log.entries.append(reflection)
    save_reflections(log)
    logger.info("Added reflection %s (%s)", reflection.id, category)
    return reflection


def delete_reflection(log: ReflectionLog, reflection_id: str) -> bool:
    remaining = [r for r in log.entries if r.id != reflection_id]
    if len(remaining) == len(log.entries):
        return False
    log.entries = remaining
    save_reflections(log)
    return True


def request_reflection_removal(
    log: ReflectionLog,
    removal: DeferredRemoval,
    reflection_id: str,
    confirm: Callable[[str], bool],
) -> bool:
    """Start the fade-out of a reflection once ``confirm`` approves.

    The actual delete happens when ``removal`` commits. Unknown or already
    fading ids never prompt.
    """
    if removal.is_marked(reflection_id) or not any(r.id == reflection_id for r in log.entries):
        return False
    if not confirm(DELETE_CONFIRM_MESSAGE):
        return False
    return removal.mark(reflection_id)


# ── Derived view ──────────────────────────────────────────────


def range_start_ms(date_range: str, now: datetime) -> int | None:
    """Earliest timestamp kept by a date-range filter, None for "all".

    "today" starts at local midnight; "week" and "month" count back from
    the end of today, not from now.
    """
    if date_range == "all":
        return None
    end_of_day = now.replace(hour=23, minute=59, second=59, microsecond=999000)
    end_ms = int(end_of_day.timestamp() * 1000)
    if date_range == "today":
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return int(start_of_day.timestamp() * 1000)
    if date_range == "week":
        return end_ms - 7 * DAY_MS
    if date_range == "month":
        return end_ms - 30 * DAY_MS
    return 0


def filter_reflections(
    entries: Sequence[Reflection],
    search_term: str = "",
    category: str = "all",
    date_range: str = "all",
    sort_order: str = "desc",
    now: datetime | None = None,
) -> list[Reflection]:
    """Filtered, sorted copy of entries. entries itself is left untouched."""
    result = list(entries)

    term = (search_term or "").lower()
    if term:
        result = [r for r in result if term in r.text.lower() or term in r.title.lower()]

    if category != "all":
        result = [r for r in result if r.category == category]

    if date_range != "all":
        if now is None:
            now = datetime.now().astimezone()
        start = range_start_ms(date_range, now)
        if start is not None:
            result = [r for r in result if r.timestamp >= start]

    return sorted(result, key=lambda r: r.timestamp, reverse=sort_order == "desc")


# ── Cards ─────────────────────────────────────────────────────


def format_reflection_date(timestamp: int, tz: tzinfo | None = None) -> str:
    """'17 de out. de 2026, 14:05' in the given timezone."""
    dt = datetime.fromtimestamp(timestamp / 1000, tz or timezone.utc)
    return f"{dt.day:02d} de {_MONTHS_PT[dt.month - 1]} de {dt.year}, {dt:%H:%M}"


def project_reflections(
    entries: Sequence[Reflection],
    fading: set[str] | None = None,
    tz: tzinfo | None = None,
) -> list[ReflectionCard]:
    fading = fading or set()
    cards = []
    for r in entries:
        cards.append(
            ReflectionCard(
                id=r.id,
                category=sanitize_text(r.category),
                color=CATEGORY_COLORS.get(r.category, FALLBACK_COLOR),
                title=sanitize_text(r.title),
                body_html=sanitize_multiline(r.text),
                date_label=format_reflection_date(r.timestamp, tz),
                fading=r.id in fading,
            )
        )
    return cards


def view_params(params: dict[str, Any]) -> dict[str, str]:
    """Normalize raw filter parameters, falling back to defaults."""
    category = str(params.get("category") or "all")
    date_range = str(params.get("range") or params.get("date_range") or "all")
    sort_order = str(params.get("sort") or params.get("sort_order") or "desc")
    return {
        "search_term": str(params.get("q") or params.get("search_term") or ""),
        "category": category if category in category_options() else "all",
        "date_range": date_range if date_range in DATE_RANGES else "all",
        "sort_order": sort_order if sort_order in SORT_ORDERS else "desc",
    }
