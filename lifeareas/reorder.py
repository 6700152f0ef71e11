"""Drag-and-drop reordering.

The anchor computation is plain geometry over element boxes, so any
surface that can report vertical positions (a browser, a terminal) can
use it. The dragged element itself is never a candidate.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from lifeareas.collection import ItemCollection, reorder_items

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Box:
    """Vertical extent of a rendered element."""

    top: float
    height: float

    @property
    def midpoint(self) -> float:
        return self.top + self.height / 2


def drop_anchor(candidates: Sequence[tuple[str, Box]], pointer_y: float) -> str | None:
    """Id of the element the dragged one should be inserted before.

    Picks the closest element whose midpoint is still below the pointer.
    None means "insert at the end".
    """
    best_id: str | None = None
    best_offset = float("-inf")
    for element_id, box in candidates:
        offset = pointer_y - box.midpoint
        if offset < 0 and offset > best_offset:
            best_offset = offset
            best_id = element_id
    return best_id


def insert_before(order: Sequence[str], moving_id: str, anchor_id: str | None) -> list[str]:
    """New order with moving_id placed before anchor_id (or last when None)."""
    result = [i for i in order if i != moving_id]
    if anchor_id is None or anchor_id not in result:
        result.append(moving_id)
    else:
        result.insert(result.index(anchor_id), moving_id)
    return result


def move_id(order: Sequence[str], item_id: str, offset: int) -> list[str]:
    """Shift one id by offset positions, clamped to the list bounds."""
    result = list(order)
    if item_id not in result:
        return result
    index = result.index(item_id)
    result.pop(index)
    target = max(0, min(len(result), index + offset))
    result.insert(target, item_id)
    return result


class DragSession:
    """State of one drag gesture.

    ``dragging_id`` is the "currently dragging" marker. It is set by
    ``start`` and always cleared by ``drop`` or ``cancel``.
    """

    def __init__(self) -> None:
        self.dragging_id: str | None = None
        self.preview: list[str] = []

    @property
    def active(self) -> bool:
        return self.dragging_id is not None

    def start(self, item_id: str, order: Sequence[str]) -> None:
        self.dragging_id = item_id
        self.preview = list(order)

    def hover(self, boxes: Mapping[str, Box], pointer_y: float) -> list[str]:
        """Recompute the preview order for the current pointer position."""
        if self.dragging_id is None:
            return list(self.preview)
        candidates = [
            (item_id, boxes[item_id])
            for item_id in self.preview
            if item_id != self.dragging_id and item_id in boxes
        ]
        anchor = drop_anchor(candidates, pointer_y)
        self.preview = insert_before(self.preview, self.dragging_id, anchor)
        return list(self.preview)

    def drop(self) -> list[str] | None:
        """End the gesture, returning the previewed order (None if idle)."""
        try:
            if self.dragging_id is None:
                return None
            return list(self.preview)
        finally:
            self.dragging_id = None

    def cancel(self) -> None:
        self.dragging_id = None
        self.preview = []


def commit_drop(collection: ItemCollection, session: DragSession) -> bool:
    """Finish the gesture and hand the final order to the collection."""
    order = session.drop()
    if order is None:
        return False
    if order == collection.ids():
        return False
    return reorder_items(collection, order)
