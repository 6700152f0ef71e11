"""Tests for lifeareas/hooks.py — hook system."""

import json

import yaml

from lifeareas.areas import FISICA_GOALS_KEY
from lifeareas.collection import load_collection, toggle_item
from lifeareas.hooks import completion_hook, load_hooks_config, run_hooks
from lifeareas.store import MemoryStore


def _write_config(workspace, config):
    (workspace / "hooks.yaml").write_text(yaml.dump(config), encoding="utf-8")


def test_run_hooks_no_config(workspace):
    """No hooks.yaml -> no hooks run."""
    results = run_hooks("on_goal_complete", {"category": "fisica"}, workspace)
    assert results == []


def test_run_hooks_with_echo(workspace):
    """Test hook that echoes context via stdin."""
    _write_config(workspace, {"on_goal_complete": ["cat"]})  # echo back stdin

    results = run_hooks("on_goal_complete", {"category": "fisica"}, workspace)
    assert len(results) == 1
    assert results[0]["exit_code"] == 0
    output = json.loads(results[0]["stdout"])
    assert output == {"hook_point": "on_goal_complete", "category": "fisica"}


def test_run_hooks_invalid_hook_point(workspace):
    results = run_hooks("invalid_point", {}, workspace)
    assert results == []


def test_run_hooks_timeout(workspace):
    """Test hook timeout protection."""
    _write_config(workspace, {"on_goal_complete": [{"command": "sleep 10", "timeout": 1}]})

    results = run_hooks("on_goal_complete", {"category": "fisica"}, workspace)
    assert len(results) == 1
    assert results[0]["exit_code"] == -1
    assert "timed out" in results[0].get("error", "").lower()


def test_run_hooks_nonzero_exit(workspace):
    _write_config(workspace, {"on_goal_complete": ["exit 3"]})
    results = run_hooks("on_goal_complete", {"category": "fisica"}, workspace)
    assert results[0]["exit_code"] == 3


def test_load_hooks_config_bad_yaml(workspace):
    (workspace / "hooks.yaml").write_text("on_goal_complete: [unclosed", encoding="utf-8")
    assert load_hooks_config(workspace) == {}


def test_completion_hook_runs_on_toggle(workspace):
    marker = workspace / "completed.json"
    _write_config(workspace, {"on_goal_complete": [f"cat > {marker}"]})

    store = MemoryStore({FISICA_GOALS_KEY: [{"id": "1", "text": "Correr"}]})
    c = load_collection(store, "fisica", FISICA_GOALS_KEY, on_completed=completion_hook(workspace))
    toggle_item(c, "1")

    assert json.loads(marker.read_text(encoding="utf-8"))["category"] == "fisica"
