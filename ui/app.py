from __future__ import annotations

import logging
import os
import secrets
from typing import Any

from fastapi import Body, Depends, FastAPI, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from lifeareas import (
    AREAS,
    StoreError,
    add_asset,
    add_item,
    add_reflection,
    begin_asset_edit,
    begin_edit,
    category_options,
    completion_hook,
    configure_logging,
    daily_water_ml,
    delete_asset,
    delete_item,
    delete_reflection,
    edit_asset,
    edit_item,
    filter_reflections,
    get_area,
    get_user_timezone,
    load_assets,
    load_collection,
    load_reflections,
    move_id,
    now_local,
    open_store,
    project_assets,
    project_items,
    project_reflections,
    reorder_items,
    toggle_item,
    workspace_root,
)
from lifeareas.collection import ItemCollection
from lifeareas.models import ItemView
from lifeareas.reflections import DATE_RANGES, DELETE_CONFIRM_MESSAGE, SORT_ORDERS, view_params
from lifeareas.sanitize import sanitize_text

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="LifeAreas UI", version="0.1.0")

security = HTTPBasic(auto_error=False)


# ── Auth ──────────────────────────────────────────────────────

def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("LIFEAREAS_USERNAME", "")
    expected_password = os.environ.get("LIFEAREAS_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


@app.exception_handler(StoreError)
def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Store failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Storage unavailable"})


# ── Helpers ───────────────────────────────────────────────────

def _collection(tag: str) -> ItemCollection:
    area = get_area(tag)
    if area is None:
        raise HTTPException(status_code=404, detail=f"Unknown area: {tag}")
    root = workspace_root()
    return load_collection(
        open_store(root),
        area.tag,
        area.goals_key,
        area.default_goals,
        on_completed=completion_hook(root),
    )


def _view_dict(v: ItemView) -> dict[str, Any]:
    return {"id": v.id, "text": v.text, "completed": v.completed, "time": v.time, "placeholder": v.placeholder}


def _page(title: str, body: str) -> HTMLResponse:
    nav = " · ".join(f'<a href="/areas/{a.tag}">{sanitize_text(a.name)}</a>' for a in AREAS.values())
    html = f"""<!doctype html>
<html lang="pt-BR">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{sanitize_text(title)} · LifeAreas</title>
</head>
<body>
  <header><h1>{sanitize_text(title)}</h1><nav>{nav} · <a href="/reflections">Reflexões</a></nav></header>
  <main>{body}</main>
</body>
</html>"""
    return HTMLResponse(html)


def _goal_rows(tag: str, views: list[ItemView]) -> str:
    rows = []
    for v in views:
        if v.placeholder:
            rows.append(f'<li class="empty-list-placeholder">{v.text}</li>')
            continue
        base = f"/areas/{tag}/goals/{sanitize_text(v.id)}"
        if v.editing:
            rows.append(
                f'<li class="editing"><form method="post" action="{base}/edit">'
                f'<input type="text" name="text" class="item-edit-input" value="{v.edit_value}" autofocus onfocus="this.select()" />'
                f'<button type="submit">Salvar</button> <a href="/areas/{tag}">Cancelar</a></form></li>'
            )
            continue
        time_html = f' <span class="item-time">{v.time}</span>' if v.time else ""
        rows.append(
            f'<li class="{"completed" if v.completed else ""}" data-id="{sanitize_text(v.id)}">'
            f'<form method="post" action="{base}/toggle" style="display:inline"><button type="submit">{"☑" if v.completed else "☐"}</button></form> '
            f'<span class="item-text">{v.text}</span>{time_html} '
            f'<a href="/areas/{tag}?edit={sanitize_text(v.id)}">editar</a> '
            f'<form method="post" action="{base}/move" style="display:inline"><input type="hidden" name="offset" value="-1" /><button type="submit">↑</button></form>'
            f'<form method="post" action="{base}/move" style="display:inline"><input type="hidden" name="offset" value="1" /><button type="submit">↓</button></form>'
            f'<form method="post" action="{base}/delete" style="display:inline"><button type="submit">apagar</button></form>'
            f"</li>"
        )
    return "\n".join(rows)


def _asset_rows() -> str:
    rows = []
    for r in project_assets(load_assets(open_store()).assets):
        if r.placeholder:
            rows.append(f'<tr><td colspan="4" class="empty-list-placeholder">{r.name}</td></tr>')
            continue
        rows.append(
            f'<tr data-id="{sanitize_text(r.id)}"><td>{r.name}</td><td>{r.purchase_date}</td><td>{r.replacement_date}</td>'
            f'<td><form method="post" action="/finance/assets/{sanitize_text(r.id)}/delete">'
            f'<label><input type="checkbox" name="confirm" value="true" /> confirmar</label> '
            f'<button type="submit">remover</button></form></td></tr>'
        )
    return "\n".join(rows)


# ── Pages ─────────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(username: str = Depends(get_current_user)) -> HTMLResponse:
    links = "".join(f'<li><a href="/areas/{a.tag}">{sanitize_text(a.name)}</a></li>' for a in AREAS.values())
    return _page("LifeAreas", f'<ul>{links}<li><a href="/reflections">Reflexões</a></li></ul>')


@app.get("/areas/{tag}", response_class=HTMLResponse)
def area_page(tag: str, edit: str | None = None, weight: str | None = None, username: str = Depends(get_current_user)) -> HTMLResponse:
    collection = _collection(tag)
    area = AREAS[tag]
    session = begin_edit(collection.items, edit) if edit else None
    views = project_items(collection.items, session, area.empty_message)

    body = f"""
    <form method="post" action="/areas/{tag}/goals">
      <input type="text" name="text" placeholder="Novo objetivo" /> <button type="submit">Adicionar</button>
    </form>
    <ul id="{tag}-metas-list">{_goal_rows(tag, views)}</ul>
    """
    if tag == "fisica":
        ml = daily_water_ml(weight) if weight is not None else 0
        warning = '<p class="warning">Por favor, insira um peso válido.</p>' if weight is not None and ml == 0 else ""
        body += f"""
        <h2>Hidratação</h2>
        <form method="get" action="/areas/fisica">
          <input type="number" step="0.1" name="weight" placeholder="Peso (kg)" value="{sanitize_text(weight or '')}" />
          <button type="submit">Calcular</button> <span id="hydration-result">{ml} ml</span>
        </form>{warning}
        """
    if tag == "financeira":
        body += f"""
        <h2>Planejamento de troca</h2>
        <table><thead><tr><th>Item</th><th>Compra</th><th>Troca</th><th></th></tr></thead>
        <tbody>{_asset_rows()}</tbody></table>
        <form method="post" action="/finance/assets">
          <input type="text" name="name" placeholder="Item" /> <input type="date" name="purchase_date" />
          <button type="submit">Adicionar</button>
        </form>
        """
    return _page(area.name, body)


@app.post("/areas/{tag}/goals")
def form_add_goal(tag: str, text: str = Form(""), username: str = Depends(get_current_user)) -> RedirectResponse:
    add_item(_collection(tag), text)
    return RedirectResponse(url=f"/areas/{tag}", status_code=303)


@app.post("/areas/{tag}/goals/{item_id}/toggle")
def form_toggle_goal(tag: str, item_id: str, username: str = Depends(get_current_user)) -> RedirectResponse:
    toggle_item(_collection(tag), item_id)
    return RedirectResponse(url=f"/areas/{tag}", status_code=303)


@app.post("/areas/{tag}/goals/{item_id}/edit")
def form_edit_goal(tag: str, item_id: str, text: str = Form(""), username: str = Depends(get_current_user)) -> RedirectResponse:
    edit_item(_collection(tag), item_id, text)
    return RedirectResponse(url=f"/areas/{tag}", status_code=303)


@app.post("/areas/{tag}/goals/{item_id}/delete")
def form_delete_goal(tag: str, item_id: str, username: str = Depends(get_current_user)) -> RedirectResponse:
    delete_item(_collection(tag), item_id)
    return RedirectResponse(url=f"/areas/{tag}", status_code=303)


@app.post("/areas/{tag}/goals/{item_id}/move")
def form_move_goal(tag: str, item_id: str, offset: int = Form(0), username: str = Depends(get_current_user)) -> RedirectResponse:
    collection = _collection(tag)
    reorder_items(collection, move_id(collection.ids(), item_id, offset))
    return RedirectResponse(url=f"/areas/{tag}", status_code=303)


@app.post("/finance/assets")
def form_add_asset(name: str = Form(""), purchase_date: str = Form(""), username: str = Depends(get_current_user)) -> RedirectResponse:
    _, errors = add_asset(load_assets(open_store()), name, purchase_date)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    return RedirectResponse(url="/areas/financeira", status_code=303)


@app.post("/finance/assets/{asset_id}/delete")
def form_delete_asset(asset_id: str, confirm: str = Form(""), username: str = Depends(get_current_user)) -> RedirectResponse:
    delete_asset(load_assets(open_store()), asset_id, lambda _msg: confirm == "true")
    return RedirectResponse(url="/areas/financeira", status_code=303)


@app.get("/reflections", response_class=HTMLResponse)
def reflections_page(request: Request, username: str = Depends(get_current_user)) -> HTMLResponse:
    params = view_params(dict(request.query_params))
    log = load_reflections(open_store())
    entries = filter_reflections(log.entries, now=now_local(), **params)
    cards = project_reflections(entries, tz=get_user_timezone())

    def options(values: list[str] | tuple[str, ...], selected: str) -> str:
        return "".join(
            f'<option value="{sanitize_text(v)}"{" selected" if v == selected else ""}>{sanitize_text(v)}</option>'
            for v in values
        )

    items = "".join(
        f'<div class="reflection-card-item" data-id="{sanitize_text(c.id)}" style="border-left-color:{c.color}">'
        f'<span class="reflection-card-category">{c.category}</span> <span class="reflection-card-date">{c.date_label}</span>'
        f'<strong class="reflection-title">{c.title}</strong><p>{c.body_html}</p></div>'
        for c in cards
    ) or '<p id="reflexoes-empty-state">Nenhuma reflexão encontrada.</p>'

    body = f"""
    <form method="get" action="/reflections">
      <input type="search" name="q" value="{sanitize_text(params['search_term'])}" placeholder="Buscar" />
      <select name="category">{options(category_options(), params['category'])}</select>
      <select name="range">{options(DATE_RANGES, params['date_range'])}</select>
      <select name="sort">{options(SORT_ORDERS, params['sort_order'])}</select>
      <button type="submit">Filtrar</button>
    </form>
    <div id="reflexoes-list-container">{items}</div>
    """
    return _page("Reflexões", body)


# ── JSON API: goals ───────────────────────────────────────────

@app.get("/api/areas/{tag}/goals")
def api_list_goals(tag: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    collection = _collection(tag)
    views = project_items(collection.items, None, AREAS[tag].empty_message)
    return {"area": tag, "goals": [_view_dict(v) for v in views]}


@app.post("/api/areas/{tag}/goals")
def api_add_goal(tag: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    item = add_item(_collection(tag), str(payload.get("text", "")))
    return {"ok": item is not None, "goal": item.to_dict() if item else None}


@app.post("/api/areas/{tag}/goals/{item_id}/toggle")
def api_toggle_goal(tag: str, item_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    item = toggle_item(_collection(tag), item_id)
    return {"ok": item is not None, "goal": item.to_dict() if item else None}


@app.put("/api/areas/{tag}/goals/{item_id}")
def api_edit_goal(tag: str, item_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    changed = edit_item(_collection(tag), item_id, str(payload.get("text", "")))
    return {"ok": True, "changed": changed}


@app.delete("/api/areas/{tag}/goals/{item_id}")
def api_delete_goal(tag: str, item_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"ok": True, "deleted": delete_item(_collection(tag), item_id)}


@app.post("/api/areas/{tag}/reorder")
def api_reorder_goals(tag: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Commit a drop: payload.ids is the final visual order."""
    ids = payload.get("ids")
    if not isinstance(ids, list):
        raise HTTPException(status_code=400, detail="Missing ids")
    collection = _collection(tag)
    applied = reorder_items(collection, [str(i) for i in ids])
    return {"ok": applied, "ids": collection.ids()}


# ── JSON API: reflections ─────────────────────────────────────

@app.get("/api/reflections")
def api_list_reflections(request: Request, username: str = Depends(get_current_user)) -> dict[str, Any]:
    params = view_params(dict(request.query_params))
    log = load_reflections(open_store())
    entries = filter_reflections(log.entries, now=now_local(), **params)
    return {"count": len(entries), "params": params, "reflections": [r.to_dict() for r in entries]}


@app.post("/api/reflections")
def api_add_reflection(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    reflection = add_reflection(
        load_reflections(open_store()),
        str(payload.get("category", "")),
        str(payload.get("title", "")),
        str(payload.get("text", "")),
        now=now_local(),
    )
    return {"ok": reflection is not None, "reflection": reflection.to_dict() if reflection else None}


@app.delete("/api/reflections/{reflection_id}")
def api_delete_reflection(reflection_id: str, confirm: bool = False, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Destructive: requires confirm=true, like asset removal."""
    if not confirm:
        return {"ok": True, "deleted": False, "confirm": DELETE_CONFIRM_MESSAGE}
    return {"ok": True, "deleted": delete_reflection(load_reflections(open_store()), reflection_id)}


# ── JSON API: assets & hydration ──────────────────────────────

@app.get("/api/assets")
def api_list_assets(username: str = Depends(get_current_user)) -> dict[str, Any]:
    assets = load_assets(open_store()).assets
    if not assets:
        return {"assets": []}
    # one row per asset, same order
    return {
        "assets": [
            {
                **a.to_dict(),
                "purchaseDateLabel": r.purchase_date,
                "replacementDateLabel": r.replacement_date,
            }
            for a, r in zip(assets, project_assets(assets))
        ]
    }


@app.post("/api/assets")
def api_add_asset(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    asset, errors = add_asset(
        load_assets(open_store()),
        str(payload.get("name", "")),
        str(payload.get("purchaseDate", "")),
    )
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    return {"ok": True, "asset": asset.to_dict() if asset else None}


@app.put("/api/assets/{asset_id}")
def api_edit_asset(asset_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    collection = load_assets(open_store())
    session = begin_asset_edit(collection, asset_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Asset not found: {asset_id}")
    session.name = str(payload.get("name", ""))
    session.purchase_date = str(payload.get("purchaseDate", ""))
    asset, errors = edit_asset(collection, session)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    return {"ok": True, "asset": asset.to_dict() if asset else None}


@app.delete("/api/assets/{asset_id}")
def api_delete_asset(asset_id: str, confirm: bool = False, username: str = Depends(get_current_user)) -> dict[str, Any]:
    deleted = delete_asset(load_assets(open_store()), asset_id, lambda _msg: confirm)
    return {"ok": True, "deleted": deleted}


@app.get("/api/hydration")
def api_hydration(weight: str = "", username: str = Depends(get_current_user)) -> dict[str, Any]:
    ml = daily_water_ml(weight)
    return {"ok": ml > 0, "ml": ml}
