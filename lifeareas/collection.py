"""Ordered goal list: load, add, delete, toggle, edit and reorder.

Every mutation writes the whole list back to the store under the area's
key before returning. Invalid input and unknown ids are no-ops; nothing
here raises for them.
"""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from lifeareas.models import Item
from lifeareas.store import Store

logger = logging.getLogger(__name__)


CompletionHook = Callable[[str], None]


@dataclass
class ItemCollection:
    """Authoritative in-memory list for one life area."""

    category: str
    key: str
    store: Store
    items: list[Item] = field(default_factory=list)
    on_completed: CompletionHook | None = None

    def ids(self) -> list[str]:
        return [item.id for item in self.items]


# ── Loading ───────────────────────────────────────────────────


def parse_items(raw: Any) -> list[Item]:
    """Turn a persisted snapshot into Items, skipping malformed entries."""
    if not isinstance(raw, list):
        return []
    items = []
    for entry in raw:
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed goal entry: %r", entry)
            continue
        items.append(Item.from_dict(entry))
    return items


def choose_items(persisted: Sequence[Item] | None, defaults: Sequence[Item]) -> list[Item]:
    """Persisted items if there are any, otherwise a fresh copy of defaults."""
    if persisted:
        return list(persisted)
    return copy.deepcopy(list(defaults))


def load_collection(
    store: Store,
    category: str,
    key: str,
    defaults: Sequence[Item] = (),
    on_completed: CompletionHook | None = None,
) -> ItemCollection:
    """Load an area's goals from the store, seeding with defaults when empty."""
    items = choose_items(parse_items(store.get(key)), defaults)
    return ItemCollection(
        category=category,
        key=key,
        store=store,
        items=items,
        on_completed=on_completed,
    )


def save_collection(collection: ItemCollection) -> None:
    collection.store.set(collection.key, [item.to_dict() for item in collection.items])


# ── Lookup ────────────────────────────────────────────────────


def find_item(collection: ItemCollection, item_id: str) -> Item | None:
    for item in collection.items:
        if item.id == item_id:
            return item
    return None


def new_item_id(existing: Iterable[str], now_ms: int | None = None) -> str:
    """Millisecond timestamp id, bumped until it is not already taken."""
    taken = set(existing)
    candidate = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


# ── Mutations ─────────────────────────────────────────────────


def add_item(collection: ItemCollection, text: str) -> Item | None:
    """Prepend a new goal. Blank text is ignored and returns None."""
    text = (text or "").strip()
    if not text:
        return None
    item = Item(id=new_item_id(collection.ids()), text=text, completed=False)
    collection.items.insert(0, item)
    save_collection(collection)
    logger.info("Added goal %s to %s", item.id, collection.category)
    return item


def delete_item(collection: ItemCollection, item_id: str) -> bool:
    for i, item in enumerate(collection.items):
        if item.id == item_id:
            collection.items.pop(i)
            save_collection(collection)
            logger.info("Deleted goal %s from %s", item_id, collection.category)
            return True
    return False


def toggle_item(collection: ItemCollection, item_id: str) -> Item | None:
    """Flip completion. The completion hook fires only on false -> true."""
    item = find_item(collection, item_id)
    if item is None:
        return None
    was_completed = item.completed
    item.completed = not item.completed
    if item.completed and not was_completed:
        _notify_completed(collection)
    save_collection(collection)
    return item


def _notify_completed(collection: ItemCollection) -> None:
    if collection.on_completed is None:
        return
    try:
        collection.on_completed(collection.category)
    except Exception:
        logger.exception("Completion hook failed for %s", collection.category)


def edit_item(collection: ItemCollection, item_id: str, new_text: str) -> bool:
    """Replace a goal's text. Returns True only when the text changed."""
    new_text = (new_text or "").strip()
    if not new_text:
        return False
    item = find_item(collection, item_id)
    if item is None or item.text == new_text:
        return False
    item.text = new_text
    save_collection(collection)
    return True


def is_permutation(current: Sequence[str], proposed: Sequence[str]) -> bool:
    return len(current) == len(proposed) and set(current) == set(proposed) and len(set(proposed)) == len(proposed)


def reorder_items(collection: ItemCollection, new_order: Sequence[str]) -> bool:
    """Re-sort the goals to match new_order.

    new_order must contain every current id exactly once; anything else is
    rejected and leaves the list untouched.
    """
    new_order = list(new_order)
    if not is_permutation(collection.ids(), new_order):
        logger.warning(
            "Rejected reorder of %s: %d ids given for %d goals",
            collection.category, len(new_order), len(collection.items),
        )
        return False
    position = {item_id: i for i, item_id in enumerate(new_order)}
    collection.items.sort(key=lambda item: position[item.id])
    save_collection(collection)
    return True
