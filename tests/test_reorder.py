"""Tests for lifeareas/reorder.py — drop anchor geometry and drag sessions."""

from lifeareas.areas import FAMILIAR_GOALS_KEY
from lifeareas.collection import load_collection
from lifeareas.models import Item
from lifeareas.reorder import Box, DragSession, commit_drop, drop_anchor, insert_before, move_id


def _boxes():
    # three rows of height 10 stacked from y=0
    return {"a": Box(0, 10), "b": Box(10, 10), "c": Box(20, 10)}


def test_midpoint():
    assert Box(10, 10).midpoint == 15


def test_drop_anchor_closest_element_below_pointer():
    boxes = _boxes()
    candidates = [("a", boxes["a"]), ("b", boxes["b"])]
    # pointer above a's midpoint -> before a
    assert drop_anchor(candidates, 2) == "a"
    # pointer between midpoints -> before b
    assert drop_anchor(candidates, 12) == "b"


def test_drop_anchor_below_everything_is_none():
    boxes = _boxes()
    assert drop_anchor([("a", boxes["a"]), ("b", boxes["b"])], 100) is None
    assert drop_anchor([], 5) is None


def test_insert_before():
    assert insert_before(["a", "b", "c"], "c", "a") == ["c", "a", "b"]
    assert insert_before(["a", "b", "c"], "a", None) == ["b", "c", "a"]
    assert insert_before(["a", "b", "c"], "a", "missing") == ["b", "c", "a"]


def test_move_id_clamps():
    assert move_id(["a", "b", "c"], "b", -1) == ["b", "a", "c"]
    assert move_id(["a", "b", "c"], "a", -1) == ["a", "b", "c"]
    assert move_id(["a", "b", "c"], "c", 5) == ["a", "b", "c"]
    assert move_id(["a", "b", "c"], "x", 1) == ["a", "b", "c"]


def test_drag_last_to_top():
    session = DragSession()
    session.start("c", ["a", "b", "c"])
    assert session.active
    assert session.hover(_boxes(), 1) == ["c", "a", "b"]
    assert session.drop() == ["c", "a", "b"]
    assert not session.active


def test_drag_first_to_bottom():
    session = DragSession()
    session.start("a", ["a", "b", "c"])
    assert session.hover(_boxes(), 29) == ["b", "c", "a"]


def test_dragged_element_is_never_anchor():
    session = DragSession()
    session.start("b", ["a", "b", "c"])
    # pointer right above b's own midpoint; b is skipped, c is next below
    assert session.hover(_boxes(), 14) == ["a", "b", "c"]


def test_drop_clears_marker_and_idle_drop_is_none():
    session = DragSession()
    assert session.drop() is None
    session.start("a", ["a", "b"])
    session.drop()
    assert session.dragging_id is None


def test_cancel_clears_marker():
    session = DragSession()
    session.start("a", ["a", "b"])
    session.cancel()
    assert not session.active
    assert session.hover(_boxes(), 0) == []


def test_commit_drop_persists_final_order(store):
    store.set(FAMILIAR_GOALS_KEY, [{"id": i, "text": i.upper()} for i in ("a", "b", "c")])
    c = load_collection(store, "familiar", FAMILIAR_GOALS_KEY)
    session = DragSession()
    session.start("c", c.ids())
    session.hover(_boxes(), 1)
    assert commit_drop(c, session) is True
    assert c.ids() == ["c", "a", "b"]
    assert [d["id"] for d in store.get(FAMILIAR_GOALS_KEY)] == ["c", "a", "b"]
    assert not session.active


def test_commit_drop_unchanged_order_is_noop(store):
    store.set(FAMILIAR_GOALS_KEY, [Item(id="a", text="A").to_dict(), Item(id="b", text="B").to_dict()])
    c = load_collection(store, "familiar", FAMILIAR_GOALS_KEY)
    session = DragSession()
    session.start("a", c.ids())
    assert commit_drop(c, session) is False
    assert not session.active


def test_anchor_with_centered_boxes():
    candidates = [("x", Box(0, 100)), ("y", Box(100, 100)), ("z", Box(200, 100))]
    assert drop_anchor(candidates, 120) == "y"
    assert drop_anchor(candidates, 300) is None
