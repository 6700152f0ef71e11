"""Tests for lifeareas/models.py — data model serialization."""

from lifeareas.models import Asset, Item, Reflection, Settings


class TestItem:
    def test_roundtrip(self):
        d = {"id": "1", "text": "Correr", "completed": True, "time": "07:00"}
        assert Item.from_dict(d).to_dict() == d

    def test_time_is_optional(self):
        item = Item.from_dict({"id": "1", "text": "x"})
        assert item.time is None
        assert "time" not in item.to_dict()
        assert item.completed is False

    def test_ignores_unknown_keys(self):
        item = Item.from_dict({"id": 5, "text": "x", "color": "red"})
        assert item.id == "5"


class TestAsset:
    def test_camel_case_key(self):
        asset = Asset.from_dict({"id": "1", "name": "TV", "purchaseDate": "2020-01-01"})
        assert asset.purchase_date == "2020-01-01"
        assert asset.to_dict() == {"id": "1", "name": "TV", "purchaseDate": "2020-01-01"}

    def test_snake_case_accepted(self):
        assert Asset.from_dict({"purchase_date": "2021-02-03"}).purchase_date == "2021-02-03"


class TestReflection:
    def test_defaults(self):
        r = Reflection.from_dict({"id": "1"})
        assert r.timestamp == 0
        assert r.category == ""

    def test_timestamp_coerced(self):
        assert Reflection.from_dict({"timestamp": "1700000000000"}).timestamp == 1700000000000


class TestSettings:
    def test_defaults(self):
        s = Settings.from_dict({})
        assert s.timezone == "UTC"
        assert s.search_debounce == 0.3
        assert s.removal_delay == 0.3

    def test_from_dict(self):
        s = Settings.from_dict({"timezone": "America/Sao_Paulo", "search_debounce_ms": 500})
        assert s.timezone == "America/Sao_Paulo"
        assert s.search_debounce == 0.5
        assert s.removal_delay_ms == 300

    def test_negative_delays_clamp(self):
        assert Settings(removal_delay_ms=-5).removal_delay == 0
