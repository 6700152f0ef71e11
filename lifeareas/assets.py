"""Asset replacement tracker for the financial area.

Assets are validated explicitly: add and edit return ``(asset, errors)``
and reject blank fields without touching the list. An invalid edit keeps
its session open so the user's input is not lost.
"""

from __future__ import annotations

import calendar
import copy
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta

from lifeareas.areas import DEFAULT_ASSETS, FINANCE_ASSETS_KEY
from lifeareas.collection import new_item_id
from lifeareas.models import Asset, AssetRow
from lifeareas.sanitize import sanitize_text
from lifeareas.store import Store

logger = logging.getLogger(__name__)


REPLACEMENT_YEARS = 7
EMPTY_MESSAGE = "Nenhum item adicionado."

ConfirmCallback = Callable[[str], bool]


@dataclass
class AssetCollection:
    store: Store
    key: str = FINANCE_ASSETS_KEY
    assets: list[Asset] = field(default_factory=list)


@dataclass
class AssetEditSession:
    """Open edit form. Stays open (with the typed values) while invalid."""

    asset_id: str
    name: str
    purchase_date: str
    errors: list[str] = field(default_factory=list)


# ── Validation & derived dates ────────────────────────────────


def validate_asset(name: str, purchase_date: str) -> list[str]:
    """Return a list of validation errors (empty if valid)."""
    errors = []
    if not (name or "").strip():
        errors.append("Missing required field: name")
    if not (purchase_date or "").strip():
        errors.append("Missing required field: purchase_date")
    else:
        try:
            date.fromisoformat(purchase_date.strip())
        except ValueError:
            errors.append(f"Invalid purchase_date: {purchase_date}")
    return errors


def replacement_date(purchase_date: str | date) -> date:
    """Purchase date plus seven years. 29 Feb rolls over to 1 Mar."""
    if isinstance(purchase_date, str):
        purchase_date = date.fromisoformat(purchase_date)
    year = purchase_date.year + REPLACEMENT_YEARS
    if purchase_date.month == 2 and purchase_date.day == 29 and not calendar.isleap(year):
        return date(year, 2, 28) + timedelta(days=1)
    return purchase_date.replace(year=year)


def format_br_date(d: date) -> str:
    return d.strftime("%d/%m/%Y")


# ── Load / save ───────────────────────────────────────────────


def load_assets(
    store: Store,
    key: str = FINANCE_ASSETS_KEY,
    defaults: Sequence[Asset] = DEFAULT_ASSETS,
) -> AssetCollection:
    raw = store.get(key)
    assets = []
    if isinstance(raw, list):
        for entry in raw:
            if not isinstance(entry, dict):
                logger.warning("Skipping malformed asset: %r", entry)
                continue
            assets.append(Asset.from_dict(entry))
    if not assets:
        assets = copy.deepcopy(list(defaults))
    return AssetCollection(store=store, key=key, assets=assets)


def save_assets(collection: AssetCollection) -> None:
    collection.store.set(collection.key, [a.to_dict() for a in collection.assets])


def find_asset(collection: AssetCollection, asset_id: str) -> Asset | None:
    for a in collection.assets:
        if a.id == asset_id:
            return a
    return None


# ── CRUD ──────────────────────────────────────────────────────


def add_asset(collection: AssetCollection, name: str, purchase_date: str) -> tuple[Asset | None, list[str]]:
    """Append a new asset. Returns (asset, errors)."""
    errors = validate_asset(name, purchase_date)
    if errors:
        return None, errors
    asset = Asset(
        id=new_item_id(a.id for a in collection.assets),
        name=name.strip(),
        purchase_date=purchase_date.strip(),
    )
    collection.assets.append(asset)
    save_assets(collection)
    logger.info("Added asset %s", asset.id)
    return asset, []


def begin_asset_edit(collection: AssetCollection, asset_id: str) -> AssetEditSession | None:
    asset = find_asset(collection, asset_id)
    if asset is None:
        return None
    return AssetEditSession(asset_id=asset.id, name=asset.name, purchase_date=asset.purchase_date)


def edit_asset(collection: AssetCollection, session: AssetEditSession) -> tuple[Asset | None, list[str]]:
    """Apply an edit session. On errors the session keeps its values and errors."""
    asset = find_asset(collection, session.asset_id)
    if asset is None:
        return None, [f"Asset not found: {session.asset_id}"]
    errors = validate_asset(session.name, session.purchase_date)
    session.errors = errors
    if errors:
        return None, errors
    asset.name = session.name.strip()
    asset.purchase_date = session.purchase_date.strip()
    save_assets(collection)
    return asset, []


def delete_asset(collection: AssetCollection, asset_id: str, confirm: ConfirmCallback) -> bool:
    """Remove an asset once ``confirm`` approves. Unknown ids are ignored."""
    asset = find_asset(collection, asset_id)
    if asset is None:
        return False
    if not confirm(f'Tem certeza que deseja remover "{asset.name}" do planejamento?'):
        return False
    collection.assets = [a for a in collection.assets if a.id != asset_id]
    save_assets(collection)
    logger.info("Deleted asset %s", asset_id)
    return True


# ── Projection ────────────────────────────────────────────────


def project_assets(assets: Sequence[Asset]) -> list[AssetRow]:
    if not assets:
        return [AssetRow(name=EMPTY_MESSAGE, placeholder=True)]
    rows = []
    for a in assets:
        try:
            bought = date.fromisoformat(a.purchase_date)
        except ValueError:
            rows.append(AssetRow(id=a.id, name=sanitize_text(a.name), purchase_date=sanitize_text(a.purchase_date)))
            continue
        rows.append(
            AssetRow(
                id=a.id,
                name=sanitize_text(a.name),
                purchase_date=format_br_date(bought),
                replacement_date=format_br_date(replacement_date(bought)),
            )
        )
    return rows
