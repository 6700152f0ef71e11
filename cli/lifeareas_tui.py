#!/usr/bin/env python3
"""LifeAreas TUI — goals, reflections and assets in the terminal, powered by Textual."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from markupsafe import Markup
from rich.text import Text
from textual import events, on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.timer import Timer
from textual.widget import Widget
from textual.widgets import (
    Checkbox,
    ContentSwitcher,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Select,
    Static,
)

from lifeareas import (
    AREAS,
    Box,
    Debouncer,
    DeferredRemoval,
    DragSession,
    EditSession,
    StoreError,
    add_asset,
    add_item,
    add_reflection,
    begin_asset_edit,
    begin_edit,
    cancel_edit,
    carry_edit,
    commit_drop,
    completion_hook,
    configure_logging,
    daily_water_ml,
    delete_asset,
    delete_item,
    delete_reflection,
    edit_asset,
    filter_reflections,
    find_item,
    get_user_timezone,
    init_workspace,
    load_assets,
    load_collection,
    load_reflections,
    load_settings,
    move_id,
    now_local,
    open_store,
    project_assets,
    project_items,
    project_reflections,
    reorder_items,
    request_reflection_removal,
    save_edit,
    toggle_item,
    workspace_root,
)
from lifeareas.assets import AssetCollection, AssetEditSession
from lifeareas.collection import ItemCollection
from lifeareas.models import ItemView, ReflectionCard
from lifeareas.reflections import DATE_RANGES, SORT_ORDERS, ReflectionLog, category_options
from lifeareas.store import Store


# ── Helpers ────────────────────────────────────────────────────


def _plain(html_safe: str) -> str:
    """Sanitized text back to plain characters for terminal rendering."""
    return Markup(html_safe).unescape()


def _cycle(values: list[str] | tuple[str, ...], current: str) -> str:
    values = list(values)
    return values[(values.index(current) + 1) % len(values)] if current in values else values[0]


@contextmanager
def _store_errors(widget: Widget) -> Iterator[None]:
    try:
        yield
    except StoreError as e:
        widget.notify(str(e), title="Storage error", severity="error")


class _TimerHandle:
    def __init__(self, timer: Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.stop()


class TextualScheduler:
    """Scheduler backed by the widget's own event-loop timers."""

    def __init__(self, host: Widget) -> None:
        self.host = host

    def schedule(self, delay: float, callback: Callable[[], None]) -> _TimerHandle:
        return _TimerHandle(self.host.set_timer(delay, callback))


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
.section-title {
    text-style: bold;
    padding: 0 1;
}

.goal-row {
    height: auto;
    padding: 0 1;
}

.goal-row.completed Checkbox {
    text-style: strike;
    color: $text-muted;
}

.goal-row.dragging {
    background: $primary-background;
}

.handle {
    width: 2;
    color: $text-muted;
}

.item-time {
    color: $text-muted;
    padding: 0 1;
}

.empty-list-placeholder {
    color: $text-muted;
    padding: 1 2;
}

.reflection-card {
    padding: 0 1;
    margin: 0 0 1 0;
    border-left: thick $accent;
}

.reflection-card:focus {
    background: $boost;
}

.reflection-card.fade-out {
    opacity: 40%;
}

#goal-list, #reflection-list {
    height: 1fr;
}

#filters-bar, #reflection-form, #hydration-bar, #asset-form {
    height: auto;
}
"""


# ── Goals ──────────────────────────────────────────────────────


class GoalRow(Horizontal):
    """One goal: drag handle + checkbox label, or an inline editor."""

    def __init__(self, view: ItemView, dragging: bool = False, **kwargs) -> None:
        super().__init__(**kwargs)
        self.item_view = view
        self.item_id = view.id
        self.dragging = dragging

    def compose(self) -> ComposeResult:
        v = self.item_view
        if v.placeholder:
            yield Static(_plain(v.text), markup=False, classes="empty-list-placeholder")
            return
        yield Static("⠿" if v.draggable else " ", classes="handle")
        if v.editing:
            yield Input(value=_plain(v.edit_value), classes="item-edit-input")
        else:
            yield Checkbox(Text(_plain(v.text)), value=v.completed, classes="goal-check")
            if v.time:
                yield Static(_plain(v.time), markup=False, classes="item-time")

    def on_mount(self) -> None:
        self.add_class("goal-row")
        if self.item_view.completed:
            self.add_class("completed")
        if self.dragging:
            self.add_class("dragging")


class GoalsPane(Vertical):
    """Goal list for one life area."""

    BINDINGS = [
        Binding("e", "edit_goal", "Edit"),
        Binding("x", "delete_goal", "Delete"),
        Binding("ctrl+up", "move_goal(-1)", "Move up"),
        Binding("ctrl+down", "move_goal(1)", "Move down"),
        Binding("escape", "cancel_edit", "Cancel", show=False),
    ]

    def __init__(self, store: Store, **kwargs) -> None:
        super().__init__(**kwargs)
        self.store = store
        self.area = AREAS["fisica"]
        self.collection: ItemCollection | None = None
        self.session: EditSession | None = None
        self.drag = DragSession()
        self._hook = completion_hook(workspace_root())

    def compose(self) -> ComposeResult:
        yield Label("", id="area-title", classes="section-title")
        yield Input(placeholder="Novo objetivo…", id="new-goal")
        yield VerticalScroll(id="goal-list")
        yield Horizontal(
            Input(placeholder="Peso (kg)", id="weight-input"),
            Label("0 ml", id="hydration-result"),
            id="hydration-bar",
        )

    def _on_completed(self, category: str) -> None:
        self.notify("Meta concluída!", title=self.area.name)
        self._run_completion_hook(category)

    @work(thread=True)
    def _run_completion_hook(self, category: str) -> None:
        """Hooks are shell commands; keep them off the event loop."""
        self._hook(category)

    async def show_area(self, tag: str) -> None:
        self.area = AREAS[tag]
        self.session = None
        self.drag.cancel()
        with _store_errors(self):
            self.collection = load_collection(
                self.store,
                self.area.tag,
                self.area.goals_key,
                self.area.default_goals,
                on_completed=self._on_completed,
            )
        self.query_one("#area-title", Label).update(Text(self.area.name))
        self.query_one("#hydration-bar").display = tag == "fisica"
        await self.redraw()

    async def redraw(self, order: list[str] | None = None, focus_id: str | None = None) -> None:
        if self.collection is None:
            return
        items = self.collection.items
        if order is not None:
            position = {item_id: i for i, item_id in enumerate(order)}
            items = sorted(items, key=lambda item: position.get(item.id, len(position)))
        self.session = carry_edit(self.collection.items, self.session)
        views = project_items(items, self.session, self.area.empty_message)

        goal_list = self.query_one("#goal-list", VerticalScroll)
        await goal_list.remove_children()
        await goal_list.mount_all(
            [GoalRow(v, dragging=v.id == self.drag.dragging_id and bool(v.id)) for v in views]
        )
        self._restore_focus(focus_id)

    def _restore_focus(self, focus_id: str | None) -> None:
        if self.session is not None:
            for editor in self.query(".item-edit-input"):
                editor.focus()
            return
        for row in self.query(GoalRow):
            if focus_id and row.item_id == focus_id:
                for cb in row.query(Checkbox):
                    cb.focus()

    def _current_id(self) -> str | None:
        node = self.screen.focused
        while node is not None:
            if isinstance(node, GoalRow):
                return node.item_id or None
            node = node.parent
        return None

    # ── Add / toggle / delete / move ───────────────────────────

    @on(Input.Submitted, "#new-goal")
    async def _on_add(self, event: Input.Submitted) -> None:
        if self.collection is None:
            return
        with _store_errors(self):
            if add_item(self.collection, event.value) is not None:
                event.input.value = ""
                await self.redraw()

    @on(Checkbox.Changed)
    async def _on_toggle(self, event: Checkbox.Changed) -> None:
        if self.collection is None:
            return
        row = event.checkbox.parent
        if not isinstance(row, GoalRow):
            return
        item_id = row.item_id
        item = find_item(self.collection, item_id)
        if item is None or item.completed == event.value:
            return
        with _store_errors(self):
            toggle_item(self.collection, item_id)
        await self.redraw(focus_id=item_id)

    async def action_delete_goal(self) -> None:
        item_id = self._current_id()
        if self.collection is None or item_id is None:
            return
        with _store_errors(self):
            delete_item(self.collection, item_id)
        await self.redraw()

    async def action_move_goal(self, offset: int) -> None:
        item_id = self._current_id()
        if self.collection is None or item_id is None:
            return
        with _store_errors(self):
            reorder_items(self.collection, move_id(self.collection.ids(), item_id, offset))
        await self.redraw(focus_id=item_id)

    # ── Inline edit ────────────────────────────────────────────

    async def action_edit_goal(self) -> None:
        item_id = self._current_id()
        if self.collection is None or item_id is None or self.session is not None:
            return
        self.session = begin_edit(self.collection.items, item_id)
        await self.redraw()

    @on(Input.Changed, ".item-edit-input")
    def _on_edit_typed(self, event: Input.Changed) -> None:
        if self.session is not None:
            self.session.update(event.value)

    @on(Input.Submitted, ".item-edit-input")
    async def _on_edit_submitted(self, event: Input.Submitted) -> None:
        await self._finish_edit(save=True)

    async def action_cancel_edit(self) -> None:
        if self.session is not None:
            await self._finish_edit(save=False)

    async def _finish_edit(self, save: bool) -> None:
        session, self.session = self.session, None
        if session is None or self.collection is None:
            return
        if save:
            with _store_errors(self):
                save_edit(self.collection, session)
        else:
            cancel_edit(session)
        await self.redraw(focus_id=session.item_id)

    def on_descendant_blur(self, event: events.DescendantBlur) -> None:
        if self.session is not None:
            self.call_after_refresh(self._save_if_editor_unfocused)

    async def _save_if_editor_unfocused(self) -> None:
        if self.session is None:
            return
        focused = self.screen.focused
        if focused is not None and focused.has_class("item-edit-input"):
            return
        await self._finish_edit(save=True)

    # ── Drag reorder ───────────────────────────────────────────

    def on_mouse_down(self, event: events.MouseDown) -> None:
        if self.collection is None or self.session is not None:
            return
        widget, _ = self.app.get_widget_at(event.screen_x, event.screen_y)
        if not widget.has_class("handle") or not isinstance(widget.parent, GoalRow):
            return
        self.drag.start(widget.parent.item_id, self.collection.ids())
        self.capture_mouse()

    async def on_mouse_move(self, event: events.MouseMove) -> None:
        if not self.drag.active:
            return
        boxes = {
            row.item_id: Box(top=row.region.y, height=row.region.height)
            for row in self.query(GoalRow)
            if row.item_id
        }
        before = list(self.drag.preview)
        preview = self.drag.hover(boxes, event.screen_y)
        if preview != before:
            await self.redraw(order=preview)

    async def on_mouse_up(self, event: events.MouseUp) -> None:
        if not self.drag.active:
            return
        self.release_mouse()
        moved = self.drag.dragging_id
        try:
            if self.collection is not None:
                with _store_errors(self):
                    commit_drop(self.collection, self.drag)
        finally:
            self.drag.cancel()
        await self.redraw(focus_id=moved)

    # ── Hydration ──────────────────────────────────────────────

    @on(Input.Submitted, "#weight-input")
    def _on_weight(self, event: Input.Submitted) -> None:
        ml = daily_water_ml(event.value)
        self.query_one("#hydration-result", Label).update(f"{ml} ml")
        if ml == 0:
            self.notify("Por favor, insira um peso válido.", severity="warning")


# ── Reflections ────────────────────────────────────────────────


class ReflectionCardWidget(Static):
    can_focus = True

    def __init__(self, card: ReflectionCard, **kwargs) -> None:
        body = _plain(card.body_html.replace("<br>", "\n"))
        text = Text()
        text.append(_plain(card.category), style="bold")
        text.append(f"  {card.date_label}\n", style="dim")
        text.append(_plain(card.title) + "\n", style="bold")
        text.append(body)
        super().__init__(text, **kwargs)
        self.reflection_id = card.id
        if card.fading:
            self.add_class("fade-out")

    def on_mount(self) -> None:
        self.add_class("reflection-card")


class ReflectionsPane(Vertical):
    """Filterable reflections log with debounced search."""

    BINDINGS = [
        Binding("ctrl+g", "cycle_category", "Category"),
        Binding("ctrl+r", "cycle_range", "Range"),
        Binding("ctrl+o", "toggle_sort", "Sort"),
        Binding("x", "delete_reflection", "Delete"),
    ]

    def __init__(self, store: Store, **kwargs) -> None:
        super().__init__(**kwargs)
        self.store = store
        self.log: ReflectionLog | None = None
        self.search_term = ""
        self.category = "all"
        self.date_range = "all"
        self.sort_order = "desc"
        self.debouncer: Debouncer | None = None
        self.removal: DeferredRemoval | None = None
        self._armed_delete: str | None = None

    def compose(self) -> ComposeResult:
        yield Label("Reflexões", classes="section-title")
        yield Horizontal(
            Input(placeholder="Buscar…", id="reflection-search"),
            Label("", id="filters-label"),
            id="filters-bar",
        )
        yield VerticalScroll(id="reflection-list")
        yield Horizontal(
            Select(
                [(c, c) for c in category_options() if c != "all"],
                value="Física",
                allow_blank=False,
                id="reflection-category",
            ),
            Input(placeholder="Título", id="reflection-title"),
            Input(placeholder="Reflexão (Enter salva)", id="reflection-text"),
            id="reflection-form",
        )

    def on_mount(self) -> None:
        settings = load_settings()
        scheduler = TextualScheduler(self)
        self.debouncer = Debouncer(scheduler, settings.search_debounce, self.redraw)
        self.removal = DeferredRemoval(scheduler, settings.removal_delay, self._commit_delete)

    def reload(self) -> None:
        with _store_errors(self):
            self.log = load_reflections(self.store)
        self.redraw()

    def redraw(self) -> None:
        if self.log is None:
            return
        entries = filter_reflections(
            self.log.entries,
            self.search_term,
            self.category,
            self.date_range,
            self.sort_order,
            now=now_local(),
        )
        fading = self.removal.marked() if self.removal else set()
        cards = project_reflections(entries, fading, tz=get_user_timezone())
        self.query_one("#filters-label", Label).update(
            Text(f" {self.category} · {self.date_range} · {self.sort_order} · {len(cards)}")
        )
        container = self.query_one("#reflection-list", VerticalScroll)
        container.remove_children()
        if cards:
            container.mount_all([ReflectionCardWidget(c) for c in cards])
        else:
            container.mount(Static("Nenhuma reflexão encontrada.", classes="empty-list-placeholder"))

    @on(Input.Changed, "#reflection-search")
    def _on_search(self, event: Input.Changed) -> None:
        self.search_term = event.value
        if self.debouncer is not None:
            self.debouncer.trigger()

    def action_cycle_category(self) -> None:
        self.category = _cycle(category_options(), self.category)
        self.redraw()

    def action_cycle_range(self) -> None:
        self.date_range = _cycle(DATE_RANGES, self.date_range)
        self.redraw()

    def action_toggle_sort(self) -> None:
        self.sort_order = _cycle(SORT_ORDERS, self.sort_order)
        self.redraw()

    def action_delete_reflection(self) -> None:
        focused = self.screen.focused
        if not isinstance(focused, ReflectionCardWidget) or self.removal is None:
            return
        reflection_id = focused.reflection_id

        def confirm(message: str) -> bool:
            if self._armed_delete == reflection_id:
                return True
            self._armed_delete = reflection_id
            self.notify(f"{message} (pressione x novamente)", severity="warning")
            return False

        if self.log is not None and request_reflection_removal(self.log, self.removal, reflection_id, confirm):
            self._armed_delete = None
            focused.add_class("fade-out")

    def _commit_delete(self, reflection_id: str) -> None:
        if self.log is None:
            return
        with _store_errors(self):
            if delete_reflection(self.log, reflection_id):
                self.notify("Reflexão excluída com sucesso.", severity="information")
        self.redraw()

    @on(Input.Submitted, "#reflection-text")
    def _on_add(self, event: Input.Submitted) -> None:
        if self.log is None:
            return
        category = self.query_one("#reflection-category", Select).value
        title_input = self.query_one("#reflection-title", Input)
        with _store_errors(self):
            created = add_reflection(self.log, str(category), title_input.value, event.value, now=now_local())
            if created is not None:
                title_input.value = ""
                event.input.value = ""
                self.redraw()

    def flush(self) -> None:
        if self.removal is not None:
            self.removal.flush()


# ── Assets ─────────────────────────────────────────────────────


class AssetsPane(Vertical):
    """Replacement planning table for household assets."""

    BINDINGS = [
        Binding("e", "edit_asset", "Edit"),
        Binding("x", "delete_asset", "Delete"),
    ]

    def __init__(self, store: Store, **kwargs) -> None:
        super().__init__(**kwargs)
        self.store = store
        self.assets: AssetCollection | None = None
        self.session: AssetEditSession | None = None
        self._armed_delete: str | None = None

    def compose(self) -> ComposeResult:
        yield Label("Planejamento de troca", classes="section-title")
        yield DataTable(id="asset-table", cursor_type="row")
        yield Horizontal(
            Input(placeholder="Item", id="asset-name"),
            Input(placeholder="Data de compra (AAAA-MM-DD, Enter salva)", id="asset-date"),
            id="asset-form",
        )

    def on_mount(self) -> None:
        self.query_one("#asset-table", DataTable).add_columns("Item", "Compra", "Troca")

    def reload(self) -> None:
        with _store_errors(self):
            self.assets = load_assets(self.store)
        self.redraw()

    def redraw(self) -> None:
        table = self.query_one("#asset-table", DataTable)
        table.clear()
        if self.assets is None:
            return
        for row in project_assets(self.assets.assets):
            if row.placeholder:
                table.add_row(_plain(row.name), "", "")
                continue
            table.add_row(_plain(row.name), row.purchase_date, row.replacement_date, key=row.id)

    def _selected_id(self) -> str | None:
        table = self.query_one("#asset-table", DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return row_key.value if row_key is not None else None

    def action_edit_asset(self) -> None:
        asset_id = self._selected_id()
        if self.assets is None or asset_id is None:
            return
        self.session = begin_asset_edit(self.assets, asset_id)
        if self.session is not None:
            self.query_one("#asset-name", Input).value = self.session.name
            self.query_one("#asset-date", Input).value = self.session.purchase_date
            self.query_one("#asset-name", Input).focus()

    def action_delete_asset(self) -> None:
        asset_id = self._selected_id()
        if self.assets is None or asset_id is None:
            return

        def confirm(message: str) -> bool:
            if self._armed_delete == asset_id:
                return True
            self._armed_delete = asset_id
            self.notify(f"{message} (pressione x novamente)", severity="warning")
            return False

        with _store_errors(self):
            if delete_asset(self.assets, asset_id, confirm):
                self._armed_delete = None
                self.notify("Item removido do planejamento.", severity="information")
                self.redraw()

    @on(Input.Submitted, "#asset-date")
    def _on_submit(self, event: Input.Submitted) -> None:
        if self.assets is None:
            return
        name_input = self.query_one("#asset-name", Input)
        errors: list[str] = []
        with _store_errors(self):
            if self.session is not None:
                self.session.name = name_input.value
                self.session.purchase_date = event.value
                _, errors = edit_asset(self.assets, self.session)
            else:
                _, errors = add_asset(self.assets, name_input.value, event.value)
        if errors:
            # keep the form (and an open edit session) as typed
            self.notify("; ".join(errors), title="Nome do item e data são obrigatórios.", severity="warning")
            return
        self.session = None
        name_input.value = ""
        event.input.value = ""
        self.redraw()


# ── Main app ───────────────────────────────────────────────────


class LifeAreasApp(App):
    """LifeAreas — goals per life area, reflections and asset planning."""

    TITLE = "LifeAreas"
    CSS = CSS

    BINDINGS = [
        Binding("f1", "show_area('fisica')", "Física"),
        Binding("f2", "show_area('financeira')", "Financeira"),
        Binding("f3", "show_area('familiar')", "Familiar"),
        Binding("f4", "show_reflections", "Reflexões"),
        Binding("f5", "show_assets", "Bens"),
        Binding("ctrl+q", "quit_app", "Quit"),
    ]

    def __init__(self, store: Store) -> None:
        super().__init__()
        self.store = store

    def compose(self) -> ComposeResult:
        yield Header()
        with ContentSwitcher(initial="goals", id="switcher"):
            yield GoalsPane(self.store, id="goals")
            yield ReflectionsPane(self.store, id="reflections")
            yield AssetsPane(self.store, id="assets")
        yield Footer()

    async def on_mount(self) -> None:
        await self.action_show_area("fisica")

    async def action_show_area(self, tag: str) -> None:
        self.query_one("#switcher", ContentSwitcher).current = "goals"
        await self.query_one(GoalsPane).show_area(tag)
        self.sub_title = AREAS[tag].name

    def action_show_reflections(self) -> None:
        self.query_one("#switcher", ContentSwitcher).current = "reflections"
        self.query_one(ReflectionsPane).reload()
        self.sub_title = "Reflexões"

    def action_show_assets(self) -> None:
        self.query_one("#switcher", ContentSwitcher).current = "assets"
        self.query_one(AssetsPane).reload()
        self.sub_title = "Bens"

    def action_quit_app(self) -> None:
        # pending fade-outs still need to reach the store
        with _store_errors(self):
            self.query_one(ReflectionsPane).flush()
        self.exit()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    configure_logging()
    root = init_workspace(workspace_root())
    try:
        store = open_store(root)
    except StoreError as e:
        print(f"Cannot open store: {e}")
        sys.exit(1)

    app = LifeAreasApp(store)
    app.run()


if __name__ == "__main__":
    main()
