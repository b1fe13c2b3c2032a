# -*- coding: utf-8 -*-
"""
Получение прогноза для одной локации с изоляцией ошибок.
"""

import logging
from typing import Protocol

from core.models.forecast import DailyForecast, ForecastResult
from core.utils.error_handler import ApiError, FetchError, log_exception

logger = logging.getLogger("forecast_fetcher")


class ForecastSource(Protocol):
    async def daily_forecast(self, lat: float, lon: float) -> DailyForecast: ...


class ForecastFetcher:

    def __init__(self, source: ForecastSource):
        self.source = source

    async def fetch(self, lat: float, lon: float) -> ForecastResult:
        """
        Получает прогноз.

        Args:
            lat (float): Широта
            lon (float): Долгота

        Returns:
            DailyForecast или FetchError с общим текстом (подробности — только в логе)
        """
        try:
            forecast = await self.source.daily_forecast(lat, lon)
        except ApiError as e:
            logger.error(f"❌ Не удалось получить прогноз для ({lat}, {lon}): {e}")
            return FetchError()
        except Exception as e:
            log_exception(e, "Неожиданная ошибка получения прогноза", {"lat": lat, "lon": lon})
            return FetchError()

        logger.info(f"✅ Прогноз получен для ({lat}, {lon})")
        return forecast
