"""Typed dataclasses for the LifeAreas data model.

All persisted models use from_dict/to_dict for JSON serialization.
camelCase in the store is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _int_or(value: Any, default: int) -> int:
    """int(value), or default when the value is missing or not a number."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# ── Goals ─────────────────────────────────────────────────────


@dataclass
class Item:
    """One goal in a life-area list."""

    id: str = ""
    text: str = ""
    completed: bool = False
    time: str | None = None  # display only

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Item:
        time = d.get("time")
        return cls(
            id=str(d.get("id", "")),
            text=str(d.get("text", "")),
            completed=bool(d.get("completed", False)),
            time=str(time) if time else None,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"id": self.id, "text": self.text, "completed": self.completed}
        if self.time:
            d["time"] = self.time
        return d


# ── Assets ────────────────────────────────────────────────────


@dataclass
class Asset:
    """A household item tracked for replacement.

    The replacement date is derived from purchase_date and never stored.
    """

    id: str = ""
    name: str = ""
    purchase_date: str = ""  # ISO date

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Asset:
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            purchase_date=str(d.get("purchaseDate", d.get("purchase_date", ""))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "purchaseDate": self.purchase_date}


# ── Reflections ───────────────────────────────────────────────


@dataclass
class Reflection:
    id: str = ""
    category: str = ""
    title: str = ""
    text: str = ""
    date: str = ""  # YYYY-MM-DD
    timestamp: int = 0  # epoch milliseconds

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Reflection:
        return cls(
            id=str(d.get("id", "")),
            category=str(d.get("category", "")),
            title=str(d.get("title", "")),
            text=str(d.get("text", "")),
            date=str(d.get("date", "")),
            timestamp=int(d.get("timestamp", 0) or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "title": self.title,
            "text": self.text,
            "date": self.date,
            "timestamp": self.timestamp,
        }


# ── Settings ──────────────────────────────────────────────────


@dataclass
class Settings:
    """User settings read from profile.yaml."""

    timezone: str = "UTC"
    search_debounce_ms: int = 300
    removal_delay_ms: int = 300

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            timezone=str(d.get("timezone") or "UTC"),
            search_debounce_ms=_int_or(d.get("search_debounce_ms"), 300),
            removal_delay_ms=_int_or(d.get("removal_delay_ms"), 300),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "search_debounce_ms": self.search_debounce_ms,
            "removal_delay_ms": self.removal_delay_ms,
        }

    @property
    def search_debounce(self) -> float:
        return max(0, self.search_debounce_ms) / 1000.0

    @property
    def removal_delay(self) -> float:
        return max(0, self.removal_delay_ms) / 1000.0


# ── View models ───────────────────────────────────────────────
# Display-ready projections. Text fields here are already sanitized.


@dataclass(frozen=True)
class ItemView:
    id: str = ""
    text: str = ""
    completed: bool = False
    time: str | None = None
    draggable: bool = True
    editing: bool = False
    edit_value: str = ""
    select_all: bool = False
    placeholder: bool = False


@dataclass(frozen=True)
class AssetRow:
    id: str = ""
    name: str = ""
    purchase_date: str = ""
    replacement_date: str = ""
    placeholder: bool = False


@dataclass(frozen=True)
class ReflectionCard:
    id: str = ""
    category: str = ""
    color: str = ""
    title: str = ""
    body_html: str = ""
    date_label: str = ""
    fading: bool = False


@dataclass
class AreaDefinition:
    """Static description of one life area: key, seeds, labels."""

    tag: str
    name: str
    goals_key: str
    default_goals: list[Item] = field(default_factory=list)
    empty_message: str = "Nenhum objetivo definido."
