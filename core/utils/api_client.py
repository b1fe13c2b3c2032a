# -*- coding: utf-8 -*-
"""
Асинхронный клиент Open-Meteo (геокодинг + дневной прогноз).

Контракт:
- geocode(query)          → список кандидатов (до 10), пустой список = "ничего не найдено"
- daily_forecast(lat,lon) → DailyForecast на FORECAST_DAYS дней
- Любая ошибка (статус не 2xx, транспорт, неверный JSON/структура) → ApiError.
  Текст исходной ошибки остаётся в логах и в ApiError, пользователю не показывается.

Таймауты и повторы не добавляются: используется то, что даёт транспорт httpx.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
import pydantic

from config.bot_config import GEOCODING_API_URL, WEATHER_API_URL
from core.models.api_schemas import ForecastResponse, GeocodingResponse
from core.models.forecast import DailyForecast
from core.models.location import Candidate
from core.utils.error_handler import ApiError

logger = logging.getLogger("api_client")

# === КОНФИГУРАЦИЯ API ===
DAILY_VARIABLES = [
    "temperature_2m_max",
    "temperature_2m_min",
    "weathercode",
    "precipitation_sum",
    "windspeed_10m_max",
]
MAX_GEOCODING_RESULTS = 10
USER_AGENT = "WeatherDashboardBot/1.0"


class OpenMeteoClient:
    """Клиент для Open-Meteo API поверх общего httpx.AsyncClient."""

    def __init__(
        self,
        http: Optional[httpx.AsyncClient] = None,
        geocoding_url: str = GEOCODING_API_URL,
        weather_url: str = WEATHER_API_URL,
        language: str = "ru",
        forecast_days: int = 7,
    ):
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(headers={"User-Agent": USER_AGENT})
        self.geocoding_url = geocoding_url
        self.weather_url = weather_url
        self.language = language
        self.forecast_days = forecast_days

    async def aclose(self):
        if self._owns_http:
            await self.http.aclose()

    async def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        try:
            response = await self.http.get(url, params=params)
        except httpx.HTTPError as e:
            raise ApiError(f"Транспортная ошибка: {e!r}") from e

        if not response.is_success:
            raise ApiError(f"HTTP {response.status_code} от {url}", status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Некорректный JSON от {url}: {e}") from e

    async def geocode(self, query: str, count: int = MAX_GEOCODING_RESULTS) -> List[Candidate]:
        """Поиск городов по названию."""
        count = max(1, min(count, MAX_GEOCODING_RESULTS))
        params = {
            "name": query,
            "count": count,
            "language": self.language,
            "format": "json",
        }
        data = await self._get_json(self.geocoding_url, params)
        try:
            parsed = GeocodingResponse.model_validate(data)
        except pydantic.ValidationError as e:
            raise ApiError(f"Неожиданная структура ответа геокодинга: {e}") from e

        candidates = parsed.candidates(count)
        logger.info(f"🔎 Геокодинг '{query}': найдено {len(candidates)}")
        return candidates

    async def daily_forecast(self, lat: float, lon: float) -> DailyForecast:
        """Дневной прогноз для одной точки."""
        params = {
            "latitude": lat,
            "longitude": lon,
            "daily": ",".join(DAILY_VARIABLES),
            "timezone": "auto",
            "forecast_days": self.forecast_days,
        }
        data = await self._get_json(self.weather_url, params)
        try:
            parsed = ForecastResponse.model_validate(data)
        except pydantic.ValidationError as e:
            raise ApiError(f"Неожиданная структура ответа прогноза: {e}") from e

        forecast = parsed.to_daily_forecast()
        logger.info(f"✅ Open-Meteo: прогноз получен для ({lat}, {lon}), дней: {len(forecast.days)}")
        return forecast
