# -*- coding: utf-8 -*-
"""
Тесты для core/db/persisted_state.py
"""
import json

from core.db.persisted_state import PersistedState
from core.db.state_db import MemoryStateDB
from core.models.location import Location, LocationSet
from core.utils.error_handler import PersistenceError

KEY = "weather_app_state:1"
OSLO = Location("Oslo", 59.91, 10.75)
PARIS = Location("Paris", 48.85, 2.35)
HERE = Location("Текущее местоположение", 55.75, 37.62)


class BrokenStore:
    def get(self, key):
        raise PersistenceError("disk is gone")

    def set(self, key, value):
        raise PersistenceError("disk is full")


def test_missing_key_returns_none():
    assert PersistedState(MemoryStateDB(), KEY).load() is None


def test_round_trip():
    store = MemoryStateDB()
    persisted = PersistedState(store, KEY)
    state = LocationSet(current=HERE, tracked=[OSLO, PARIS])

    persisted.save(state)

    assert persisted.load() == state
    # Кириллица хранится как есть
    assert "Текущее местоположение" in store.get(KEY)
    assert set(json.loads(store.get(KEY))) == {"current", "tracked"}
    print("✅ test_round_trip passed")


def test_legacy_cities_key():
    store = MemoryStateDB({KEY: json.dumps({"current": None, "cities": [OSLO.to_dict()]})})
    assert PersistedState(store, KEY).load() == LocationSet(tracked=[OSLO])


def test_corrupted_value_starts_empty():
    for raw in ("{not json", "[1, 2]", '{"tracked": [{"name": "X", "lat": "abc", "lon": 1}]}', '"text"'):
        state = PersistedState(MemoryStateDB({KEY: raw}), KEY).load()
        assert state == LocationSet(), raw
    print("✅ test_corrupted_value_starts_empty passed")


def test_load_drops_duplicates():
    raw = json.dumps({
        "current": HERE.to_dict(),
        "tracked": [
            OSLO.to_dict(),
            {"name": "Осло", "lat": 59.91, "lon": 10.75},
            {"name": "Дом", "lat": 55.75, "lon": 37.62},
            PARIS.to_dict(),
        ],
    })
    state = PersistedState(MemoryStateDB({KEY: raw}), KEY).load()
    assert state.current == HERE
    assert state.tracked == [OSLO, PARIS]


def test_store_failures_are_logged_not_raised():
    persisted = PersistedState(BrokenStore(), KEY)
    assert persisted.load() is None
    persisted.save(LocationSet(tracked=[OSLO]))  # не падает
