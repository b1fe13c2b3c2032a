# -*- coding: utf-8 -*-
"""
Однократное определение местоположения.

Geolocator делает ровно одну попытку за жизнь дашборда и никогда не повторяет
её сам. Платформа (Telegram, консоль, тест) подключается через PositionProvider.
"""

import logging
from typing import Protocol, Tuple, Union

from core.models.location import CURRENT_LOCATION_NAME, Location
from core.utils.error_handler import (
    GEO_DENIED,
    GEO_TIMEOUT,
    GEO_UNSUPPORTED,
    GeolocationError,
    GeolocationFailure,
)
from core.utils.validator import validate_coordinates

logger = logging.getLogger("geolocator")

FAILURE_MESSAGES = {
    GEO_UNSUPPORTED: "Геолокация не поддерживается в этом чате",
    GEO_DENIED: "Не удалось получить геолокацию. Пожалуйста, добавьте город вручную.",
    GEO_TIMEOUT: "Не удалось получить геолокацию. Пожалуйста, добавьте город вручную.",
}
ALREADY_ATTEMPTED = "already_attempted"


class PositionProvider(Protocol):
    async def get_current_position(self) -> Tuple[float, float]:
        """Возвращает (lat, lon) или выбрасывает GeolocationError."""
        ...


class Geolocator:

    def __init__(self, provider: PositionProvider):
        self.provider = provider
        self._attempted = False

    @property
    def attempted(self) -> bool:
        return self._attempted

    async def locate(self) -> Union[Location, GeolocationFailure]:
        if self._attempted:
            logger.warning("⚠️ Повторный запрос геолокации отклонён")
            return GeolocationFailure(ALREADY_ATTEMPTED, FAILURE_MESSAGES[GEO_DENIED])
        self._attempted = True

        try:
            lat, lon = await self.provider.get_current_position()
        except GeolocationError as e:
            logger.info(f"📍 Геолокация недоступна: {e.reason}")
            return GeolocationFailure(e.reason, FAILURE_MESSAGES.get(e.reason, FAILURE_MESSAGES[GEO_DENIED]))

        if not validate_coordinates(lat, lon):
            logger.error(f"❌ Платформа вернула неверные координаты: lat={lat}, lon={lon}")
            return GeolocationFailure(GEO_UNSUPPORTED, FAILURE_MESSAGES[GEO_DENIED])

        logger.info(f"📍 Геопозиция получена: {lat}, {lon}")
        return Location(name=CURRENT_LOCATION_NAME, lat=float(lat), lon=float(lon))
