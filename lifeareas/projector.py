"""Collection state -> render-ready views, plus the inline edit session.

Projection is pure: it reads items and the current edit session and
produces ItemView entries with sanitized text. Surfaces draw those views;
they never read Items directly.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from lifeareas.collection import ItemCollection, edit_item
from lifeareas.models import Item, ItemView
from lifeareas.sanitize import sanitize_text


DEFAULT_EMPTY_MESSAGE = "Nenhum objetivo definido."


@dataclass
class EditSession:
    """An open inline editor. ``draft`` is what the user has typed so far."""

    item_id: str
    original: str
    draft: str

    def update(self, text: str) -> None:
        self.draft = text


def begin_edit(items: Sequence[Item], item_id: str) -> EditSession | None:
    for item in items:
        if item.id == item_id:
            return EditSession(item_id=item.id, original=item.text, draft=item.text)
    return None


def save_edit(collection: ItemCollection, session: EditSession | None) -> bool:
    """Commit the draft if it is non-blank. The session is over either way."""
    if session is None:
        return False
    return edit_item(collection, session.item_id, session.draft)


def cancel_edit(session: EditSession | None) -> None:
    """Drop the draft. Nothing in the collection changes."""
    if session is not None:
        session.draft = session.original


def carry_edit(items: Sequence[Item], session: EditSession | None) -> EditSession | None:
    """Keep an open editor across a redraw if its item still exists."""
    if session is None:
        return None
    for item in items:
        if item.id == session.item_id:
            return session
    return None


def project_items(
    items: Sequence[Item],
    session: EditSession | None = None,
    empty_message: str = DEFAULT_EMPTY_MESSAGE,
) -> list[ItemView]:
    if not items:
        return [ItemView(text=sanitize_text(empty_message), draggable=False, placeholder=True)]
    editing_id = session.item_id if session is not None else None
    views = []
    for item in items:
        editing = item.id == editing_id
        views.append(
            ItemView(
                id=item.id,
                text=sanitize_text(item.text),
                completed=item.completed,
                time=sanitize_text(item.time) if item.time else None,
                draggable=not editing,
                editing=editing,
                edit_value=sanitize_text(session.draft) if editing and session is not None else "",
                select_all=editing,
            )
        )
    return views


def rerender(
    collection: ItemCollection,
    session: EditSession | None,
    empty_message: str = DEFAULT_EMPTY_MESSAGE,
) -> tuple[list[ItemView], EditSession | None]:
    """Full redraw that re-enters edit mode for the item being edited."""
    session = carry_edit(collection.items, session)
    return project_items(collection.items, session, empty_message), session

