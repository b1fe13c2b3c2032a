# -*- coding: utf-8 -*-
"""
Тесты для core/models/location.py
"""
import pytest

from core.models.location import Candidate, Location, LocationSet


def test_location_identity_ignores_name():
    a = Location("Осло", 59.91, 10.75)
    b = Location("Oslo", 59.91, 10.75)
    assert a.same_place(b)
    assert not a.same_place(None)
    assert not a.same_place(Location("Oslo", 59.9, 10.75))


def test_location_from_dict_strict():
    assert Location.from_dict({"name": "Oslo", "lat": 59.91, "lon": 10}) == Location("Oslo", 59.91, 10.0)

    for bad in (
        "Oslo",
        {"name": "Oslo", "lat": "59.91", "lon": 10.75},
        {"name": None, "lat": 59.91, "lon": 10.75},
        {"name": "Oslo", "lat": 95, "lon": 10.75},
        {"name": "Oslo", "lat": 59.91},
    ):
        with pytest.raises(ValueError):
            Location.from_dict(bad)


def test_location_set_round_trip():
    state = LocationSet(
        current=Location("Текущее местоположение", 55.75, 37.62),
        tracked=[Location("Oslo", 59.91, 10.75), Location("Paris", 48.85, 2.35)],
    )
    assert LocationSet.from_dict(state.to_dict()) == state
    print("✅ test_location_set_round_trip passed")


def test_location_set_legacy_cities_key():
    state = LocationSet.from_dict({"current": None, "cities": [{"name": "Oslo", "lat": 59.91, "lon": 10.75}]})
    assert state.current is None
    assert [loc.name for loc in state.tracked] == ["Oslo"]


def test_location_set_rejects_bad_shape():
    with pytest.raises(ValueError):
        LocationSet.from_dict([])
    with pytest.raises(ValueError):
        LocationSet.from_dict({"tracked": "Oslo"})


def test_location_set_copy_is_independent():
    state = LocationSet(tracked=[Location("Oslo", 59.91, 10.75)])
    copy = state.copy()
    copy.tracked.append(Location("Paris", 48.85, 2.35))
    assert len(state.tracked) == 1
    assert LocationSet().is_empty()
    assert not state.is_empty()


def test_candidate_label():
    assert Candidate("Paris", 48.85, 2.35, "Île-de-France", "France").label == "Paris, Île-de-France, France"
    assert Candidate("Paris", 33.66, -95.55, None, "United States").label == "Paris, United States"
    assert Candidate("Nowhere", 0, 0).label == "Nowhere"
    assert Candidate("Paris", 48.85, 2.35, "Île-de-France").to_location() == Location("Paris", 48.85, 2.35)
