"""Tests for lifeareas/assets.py — replacement planning."""

from datetime import date

from lifeareas.areas import DEFAULT_ASSETS, FINANCE_ASSETS_KEY
from lifeareas.assets import (
    EMPTY_MESSAGE,
    add_asset,
    begin_asset_edit,
    delete_asset,
    edit_asset,
    load_assets,
    project_assets,
    replacement_date,
    validate_asset,
)


def _assets(store):
    store.set(FINANCE_ASSETS_KEY, [{"id": "1", "name": "Sofá", "purchaseDate": "2020-03-15"}])
    return load_assets(store)


def test_replacement_is_seven_years_later():
    assert replacement_date("2020-03-15") == date(2027, 3, 15)
    assert replacement_date(date(2014, 1, 1)) == date(2021, 1, 1)


def test_replacement_from_leap_day_rolls_to_march():
    assert replacement_date("2020-02-29") == date(2027, 3, 1)
    assert replacement_date("2016-02-29") == date(2023, 3, 1)


def test_validate_asset():
    assert validate_asset("TV", "2021-05-01") == []
    assert len(validate_asset("", "")) == 2
    assert validate_asset("TV", "31/12/2020") == ["Invalid purchase_date: 31/12/2020"]


def test_load_seeds_defaults(store):
    c = load_assets(store)
    assert [a.name for a in c.assets] == [a.name for a in DEFAULT_ASSETS]


def test_add_appends(store):
    c = _assets(store)
    asset, errors = add_asset(c, " Fogão ", "2022-01-10")
    assert errors == []
    assert c.assets[-1] is asset
    assert asset.name == "Fogão"
    assert store.get(FINANCE_ASSETS_KEY)[-1] == {"id": asset.id, "name": "Fogão", "purchaseDate": "2022-01-10"}


def test_add_invalid_is_noop(store):
    c = _assets(store)
    asset, errors = add_asset(c, "", "2022-01-10")
    assert asset is None
    assert errors
    assert len(c.assets) == 1


def test_edit_valid(store):
    c = _assets(store)
    session = begin_asset_edit(c, "1")
    session.name = "Sofá novo"
    session.purchase_date = "2024-06-01"
    asset, errors = edit_asset(c, session)
    assert errors == []
    assert asset.name == "Sofá novo"
    assert store.get(FINANCE_ASSETS_KEY)[0]["purchaseDate"] == "2024-06-01"


def test_edit_invalid_keeps_session_values(store):
    c = _assets(store)
    session = begin_asset_edit(c, "1")
    session.name = "   "
    session.purchase_date = "2024-06-01"
    asset, errors = edit_asset(c, session)
    assert asset is None
    assert session.errors == errors
    assert session.purchase_date == "2024-06-01"
    assert c.assets[0].name == "Sofá"


def test_edit_unknown_asset(store):
    c = _assets(store)
    session = begin_asset_edit(c, "1")
    session.asset_id = "ghost"
    asset, errors = edit_asset(c, session)
    assert asset is None
    assert errors == ["Asset not found: ghost"]
    assert begin_asset_edit(c, "ghost") is None


def test_delete_requires_confirmation(store):
    c = _assets(store)
    prompts = []

    def decline(message):
        prompts.append(message)
        return False

    assert delete_asset(c, "1", decline) is False
    assert prompts == ['Tem certeza que deseja remover "Sofá" do planejamento?']
    assert len(c.assets) == 1

    assert delete_asset(c, "1", lambda message: True) is True
    assert c.assets == []
    assert store.get(FINANCE_ASSETS_KEY) == []


def test_delete_unknown_never_prompts(store):
    c = _assets(store)
    assert delete_asset(c, "x", lambda m: 1 / 0) is False


def test_project_rows():
    from lifeareas.models import Asset

    rows = project_assets([Asset(id="1", name="<TV>", purchase_date="2020-02-29")])
    assert rows[0].name == "&lt;TV&gt;"
    assert rows[0].purchase_date == "29/02/2020"
    assert rows[0].replacement_date == "01/03/2027"


def test_project_bad_date_has_no_replacement():
    from lifeareas.models import Asset

    rows = project_assets([Asset(id="1", name="TV", purchase_date="ontem")])
    assert rows[0].replacement_date == ""
    assert rows[0].purchase_date == "ontem"


def test_project_empty_placeholder():
    rows = project_assets([])
    assert rows[0].placeholder
    assert rows[0].name == EMPTY_MESSAGE
