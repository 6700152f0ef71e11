"""Tests for lifeareas/collection.py — goal list mutations and persistence."""

from lifeareas.areas import AREAS, FISICA_GOALS_KEY
from lifeareas.collection import (
    add_item,
    delete_item,
    edit_item,
    load_collection,
    new_item_id,
    reorder_items,
    toggle_item,
)
from lifeareas.models import Item
from lifeareas.store import MemoryStore


def _collection(store, items=None, on_completed=None):
    if items is not None:
        store.set(FISICA_GOALS_KEY, [i.to_dict() for i in items])
    return load_collection(store, "fisica", FISICA_GOALS_KEY, AREAS["fisica"].default_goals, on_completed)


def _abc(store, on_completed=None):
    return _collection(
        store,
        [Item(id="a", text="A"), Item(id="b", text="B"), Item(id="c", text="C")],
        on_completed,
    )


# ── Loading ─────────────────────────────────────────────────


def test_load_seeds_defaults_when_empty(store):
    c = _collection(store)
    assert [i.text for i in c.items] == [i.text for i in AREAS["fisica"].default_goals]
    # defaults are copied, never shared
    c.items[0].completed = True
    assert AREAS["fisica"].default_goals[0].completed is False


def test_load_empty_list_falls_back_to_defaults(store):
    store.set(FISICA_GOALS_KEY, [])
    c = _collection(store)
    assert len(c.items) == len(AREAS["fisica"].default_goals)


def test_load_persisted_wins(store):
    c = _abc(store)
    assert c.ids() == ["a", "b", "c"]


def test_load_skips_malformed_entries(store):
    store.set(FISICA_GOALS_KEY, ["junk", {"id": "x", "text": "X"}])
    c = _collection(store)
    assert c.ids() == ["x"]


# ── Add ─────────────────────────────────────────────────────


def test_add_prepends_and_persists(store):
    c = _abc(store)
    item = add_item(c, "  Nadar  ")
    assert item is not None
    assert item.text == "Nadar"
    assert item.completed is False
    assert c.items[0] is item
    saved = store.get(FISICA_GOALS_KEY)
    assert saved[0]["text"] == "Nadar"
    assert len(saved) == 4


def test_add_blank_is_noop(store):
    c = _abc(store)
    before = store.snapshot()
    assert add_item(c, "   ") is None
    assert add_item(c, "") is None
    assert c.ids() == ["a", "b", "c"]
    assert store.snapshot() == before


def test_new_ids_are_unique():
    assert new_item_id(["100"], now_ms=100) == "101"
    assert new_item_id(["100", "101"], now_ms=100) == "102"
    assert new_item_id([], now_ms=5) == "5"


def test_rapid_adds_get_distinct_ids(store):
    c = _abc(store)
    ids = {add_item(c, f"goal {n}").id for n in range(20)}
    assert len(ids) == 20


# ── Delete ──────────────────────────────────────────────────


def test_delete_removes_only_that_id(store):
    c = _abc(store)
    assert delete_item(c, "b") is True
    assert c.ids() == ["a", "c"]
    assert [d["id"] for d in store.get(FISICA_GOALS_KEY)] == ["a", "c"]


def test_delete_unknown_is_noop(store):
    c = _abc(store)
    assert delete_item(c, "zzz") is False
    assert c.ids() == ["a", "b", "c"]


# ── Toggle ──────────────────────────────────────────────────


def test_toggle_fires_hook_only_on_completion(store):
    calls = []
    c = _abc(store, on_completed=calls.append)

    toggle_item(c, "a")
    assert c.items[0].completed is True
    assert calls == ["fisica"]

    toggle_item(c, "a")
    assert c.items[0].completed is False
    assert calls == ["fisica"]
    assert store.get(FISICA_GOALS_KEY)[0]["completed"] is False


def test_toggle_twice_restores_state(store):
    c = _abc(store)
    toggle_item(c, "b")
    toggle_item(c, "b")
    assert c.items[1].completed is False


def test_toggle_unknown_is_noop(store):
    calls = []
    c = _abc(store, on_completed=calls.append)
    assert toggle_item(c, "nope") is None
    assert calls == []


def test_failing_hook_does_not_block_toggle(store):
    def boom(category):
        raise RuntimeError("hook down")

    c = _abc(store, on_completed=boom)
    item = toggle_item(c, "c")
    assert item.completed is True
    assert store.get(FISICA_GOALS_KEY)[2]["completed"] is True


# ── Edit ────────────────────────────────────────────────────


def test_edit_changes_text(store):
    c = _abc(store)
    assert edit_item(c, "b", "  Beta ") is True
    assert c.items[1].text == "Beta"
    assert store.get(FISICA_GOALS_KEY)[1]["text"] == "Beta"


def test_edit_blank_keeps_text(store):
    c = _abc(store)
    assert edit_item(c, "b", "   ") is False
    assert c.items[1].text == "B"


def test_edit_same_text_does_not_write():
    store = MemoryStore()
    c = _abc(store)
    writes = []
    original_set = store.set
    store.set = lambda k, v: (writes.append(k), original_set(k, v))
    assert edit_item(c, "a", "A") is False
    assert writes == []


# ── Reorder ─────────────────────────────────────────────────


def test_reorder_applies_permutation(store):
    c = _abc(store)
    assert reorder_items(c, ["c", "a", "b"]) is True
    assert c.ids() == ["c", "a", "b"]
    assert [d["id"] for d in store.get(FISICA_GOALS_KEY)] == ["c", "a", "b"]


def test_reorder_keeps_items_intact(store):
    c = _abc(store)
    toggle_item(c, "b")
    reorder_items(c, ["b", "c", "a"])
    assert c.items[0].text == "B"
    assert c.items[0].completed is True


def test_reorder_rejects_partial_order(store):
    c = _abc(store)
    assert reorder_items(c, ["c", "a"]) is False
    assert c.ids() == ["a", "b", "c"]


def test_reorder_rejects_unknown_and_duplicate_ids(store):
    c = _abc(store)
    assert reorder_items(c, ["a", "b", "x"]) is False
    assert reorder_items(c, ["a", "a", "b"]) is False
    assert c.ids() == ["a", "b", "c"]
