"""
Tests for blob storage, farm settings and price alerts
"""
import json
import os
import sys
from types import SimpleNamespace

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from agrinexus.config import ALERTS_KEY, SETTINGS_KEY
from agrinexus.models import FarmSettings
from agrinexus.services.alerts import PriceAlertBook
from agrinexus.services.settings_store import load_settings, save_settings
from agrinexus.services.storage import FileBlobStore, SupabaseBlobStore, load_json, save_json


@pytest.fixture
def store(tmp_path):
    return FileBlobStore(str(tmp_path / "storage"))


class FakeSupabaseTable:
    def __init__(self, rows):
        self.rows = rows
        self._filter = None

    def select(self, columns):
        return self

    def eq(self, column, value):
        self._filter = (column, value)
        return self

    def upsert(self, row):
        self.rows[row["key"]] = row["value"]
        return self

    def execute(self):
        if self._filter:
            _, key = self._filter
            self._filter = None
            data = [{"value": self.rows[key]}] if key in self.rows else []
            return SimpleNamespace(data=data)
        return SimpleNamespace(data=[])


class FakeSupabase:
    def __init__(self):
        self.rows = {}
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return FakeSupabaseTable(self.rows)


# =============================================================================
# Blob stores
# =============================================================================
class TestBlobStores:
    def test_file_store_round_trip(self, store):
        assert store.get("missing") is None
        store.set("greeting", '{"hello": "world"}')
        assert store.get("greeting") == '{"hello": "world"}'

    def test_file_store_rejects_path_like_keys(self, store):
        with pytest.raises(ValueError):
            store.set("../escape", "{}")

    def test_supabase_store_round_trip(self):
        client = FakeSupabase()
        store = SupabaseBlobStore(client, table="app_storage")
        assert store.get("k") is None
        store.set("k", "[1]")
        assert store.get("k") == "[1]"
        assert set(client.tables) == {"app_storage"}

    def test_load_json_defaults_when_absent(self, store):
        default = {"items": []}
        loaded = load_json(store, "nothing", default)
        assert loaded == default
        loaded["items"].append(1)
        assert default == {"items": []}

    def test_load_json_defaults_when_malformed(self, store):
        store.set("broken", "{not json")
        assert load_json(store, "broken", []) == []

    def test_save_json_writes_json(self, store):
        save_json(store, "numbers", [1, 2, 3])
        assert json.loads(store.get("numbers")) == [1, 2, 3]


# =============================================================================
# Settings
# =============================================================================
class TestSettings:
    def test_defaults_when_nothing_saved(self, store):
        settings = load_settings(store)
        assert settings == FarmSettings()
        assert settings.altitude == 1450
        assert settings.location == "Lumle, Kaski"
        assert settings.primary_crops == ["Rice", "Organic Potato"]
        assert settings.language == "en"
        assert settings.farm_size == 8
        assert settings.soil_type == "Loamy"
        assert settings.email == ""

    def test_save_then_load(self, store):
        saved = FarmSettings(location="Bandipur", altitude=1030, email="farmer@example.com")
        save_settings(store, saved)
        assert load_settings(store) == saved
        stored = json.loads(store.get(SETTINGS_KEY))
        assert stored["primaryCrops"] == ["Rice", "Organic Potato"]

    def test_partial_settings_are_filled_with_defaults(self, store):
        store.set(SETTINGS_KEY, json.dumps({"location": "Pokhara"}))
        settings = load_settings(store)
        assert settings.location == "Pokhara"
        assert settings.altitude == 1450

    @pytest.mark.parametrize("raw", ["{oops", "[]", '"text"', '{"altitude": "very high"}'])
    def test_malformed_settings_fall_back_to_defaults(self, store, raw):
        store.set(SETTINGS_KEY, raw)
        assert load_settings(store) == FarmSettings()


# =============================================================================
# Price alerts
# =============================================================================
class TestPriceAlertBook:
    def test_second_alert_for_a_crop_replaces_the_first(self, store):
        book = PriceAlertBook(store)
        book.set_alert("Rice", 450)
        second = book.set_alert("Rice", 520, "below")

        rice_alerts = [a for a in book.alerts if a.crop == "Rice"]
        assert rice_alerts == [second]
        assert rice_alerts[0].target_price == 520
        assert rice_alerts[0].condition == "below"

    def test_alerts_for_different_crops_coexist(self, store):
        book = PriceAlertBook(store)
        book.set_alert("Rice", 450)
        book.set_alert("Maize", 300)
        assert sorted(a.crop for a in book.alerts) == ["Maize", "Rice"]

    def test_alert_ids_are_unique(self, store):
        book = PriceAlertBook(store)
        ids = {book.set_alert(crop, 100).id for crop in ["Rice", "Maize", "Citrus", "Ginger"]}
        assert len(ids) == 4

    def test_remove_alert(self, store):
        book = PriceAlertBook(store)
        book.set_alert("Citrus", 800)
        assert book.remove_alert("Citrus") is True
        assert book.find("Citrus") is None
        assert book.alerts == []
        assert book.remove_alert("Citrus") is False

    def test_every_change_is_persisted(self, store):
        book = PriceAlertBook(store)
        book.set_alert("Rice", 450)
        assert [a["crop"] for a in json.loads(store.get(ALERTS_KEY))] == ["Rice"]
        assert json.loads(store.get(ALERTS_KEY))[0]["targetPrice"] == 450

        book.remove_alert("Rice")
        assert json.loads(store.get(ALERTS_KEY)) == []

    def test_alerts_are_read_back_at_startup(self, store):
        PriceAlertBook(store).set_alert("Organic Potato", 130)
        reloaded = PriceAlertBook(store)
        alert = reloaded.find("Organic Potato")
        assert alert.target_price == 130
        assert alert.active is True

    def test_malformed_storage_starts_empty(self, store):
        store.set(ALERTS_KEY, '{"not": "a list"}')
        assert PriceAlertBook(store).alerts == []

    def test_invalid_and_duplicate_stored_alerts_are_cleaned(self, store):
        store.set(ALERTS_KEY, json.dumps([
            {"id": "1", "crop": "Rice", "targetPrice": 400, "condition": "above", "active": True},
            {"id": "2", "crop": "Rice", "targetPrice": 410, "condition": "above", "active": True},
            {"id": "3", "crop": "Maize"},
        ]))
        book = PriceAlertBook(store)
        assert len(book.alerts) == 1
        assert book.find("Rice").id == "2"
