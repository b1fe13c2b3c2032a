# -*- coding: utf-8 -*-
"""
Pydantic-схемы ответов Open-Meteo (геокодинг и дневной прогноз).
Лишние поля ответа игнорируются, отсутствующие необязательные — None.
"""
import logging
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from core.models.forecast import DailyForecast, DayForecast
from core.models.location import Candidate

logger = logging.getLogger("api_schemas")


class GeocodingResult(BaseModel):
    name: str
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    admin1: Optional[str] = None
    country: Optional[str] = None

    def to_candidate(self) -> Candidate:
        return Candidate(
            name=self.name,
            lat=self.latitude,
            lon=self.longitude,
            region=self.admin1,
            country=self.country,
        )


class GeocodingResponse(BaseModel):
    # Поле results отсутствует, если ничего не найдено
    results: Optional[List[GeocodingResult]] = None

    def candidates(self, limit: int) -> List[Candidate]:
        return [item.to_candidate() for item in (self.results or [])[:limit]]


class DailyBlock(BaseModel):
    time: List[date]
    temperature_2m_max: List[Optional[float]]
    temperature_2m_min: List[Optional[float]]
    weathercode: List[Optional[int]]
    precipitation_sum: Optional[List[Optional[float]]] = None
    windspeed_10m_max: Optional[List[Optional[float]]] = None

    @model_validator(mode="after")
    def _check_parallel_arrays(self):
        size = len(self.time)
        required = {
            "temperature_2m_max": self.temperature_2m_max,
            "temperature_2m_min": self.temperature_2m_min,
            "weathercode": self.weathercode,
        }
        for name, values in required.items():
            if len(values) < size:
                raise ValueError(f"Массив {name} короче массива time ({len(values)} < {size})")
        return self


class ForecastResponse(BaseModel):
    daily: DailyBlock

    def to_daily_forecast(self) -> DailyForecast:
        daily = self.daily
        days = []
        for i, day in enumerate(daily.time):
            t_max = daily.temperature_2m_max[i]
            t_min = daily.temperature_2m_min[i]
            code = daily.weathercode[i]
            if t_max is None or t_min is None or code is None:
                logger.warning(f"⚠️ Неполные данные за {day}, день пропущен")
                continue
            days.append(DayForecast(
                day=day,
                temp_min=t_min,
                temp_max=t_max,
                weather_code=code,
                precipitation=_optional_at(daily.precipitation_sum, i),
                wind_speed=_optional_at(daily.windspeed_10m_max, i),
            ))
        return DailyForecast(days=days)


def _optional_at(values: Optional[List[Optional[float]]], index: int) -> Optional[float]:
    if values is None or index >= len(values):
        return None
    return values[index]
