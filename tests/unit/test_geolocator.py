# -*- coding: utf-8 -*-
"""
Тесты для scripts/weather/_services/geolocator.py
"""
from core.models.location import CURRENT_LOCATION_NAME, Location
from core.utils.error_handler import GEO_DENIED, GEO_TIMEOUT, GEO_UNSUPPORTED, GeolocationError, GeolocationFailure
from scripts.weather._services.geolocator import ALREADY_ATTEMPTED, FAILURE_MESSAGES, Geolocator
from tests.fakes import FakePositionProvider


async def test_locate_success():
    provider = FakePositionProvider(position=(59.91, 10.75))

    result = await Geolocator(provider).locate()

    assert result == Location(CURRENT_LOCATION_NAME, 59.91, 10.75)
    print("✅ test_locate_success passed")


async def test_locate_failures():
    for reason in (GEO_DENIED, GEO_TIMEOUT, GEO_UNSUPPORTED):
        provider = FakePositionProvider(error=GeolocationError(reason))
        result = await Geolocator(provider).locate()

        assert isinstance(result, GeolocationFailure)
        assert result.reason == reason
        assert result.message == FAILURE_MESSAGES[reason]

    assert FAILURE_MESSAGES[GEO_UNSUPPORTED] == "Геолокация не поддерживается в этом чате"
    assert FAILURE_MESSAGES[GEO_DENIED] == "Не удалось получить геолокацию. Пожалуйста, добавьте город вручную."


async def test_single_attempt():
    provider = FakePositionProvider(error=GeolocationError(GEO_DENIED))
    geolocator = Geolocator(provider)

    await geolocator.locate()
    assert geolocator.attempted
    result = await geolocator.locate()

    assert result.reason == ALREADY_ATTEMPTED
    assert provider.calls == 1


async def test_invalid_coordinates():
    provider = FakePositionProvider(position=(200.0, 0.0))
    result = await Geolocator(provider).locate()
    assert isinstance(result, GeolocationFailure)
