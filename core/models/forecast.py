# core/models/forecast.py
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Union

from core.utils.error_handler import FetchError


@dataclass(frozen=True)
class DayForecast:
    day: date
    temp_min: float
    temp_max: float
    weather_code: int
    precipitation: Optional[float] = None
    wind_speed: Optional[float] = None


@dataclass
class DailyForecast:
    days: List[DayForecast] = field(default_factory=list)

    def head(self, count: int) -> List[DayForecast]:
        """Первые count дней — столько показываем в карточке."""
        return self.days[:max(count, 0)]


@dataclass(frozen=True)
class DayCard:
    """Готовая к показу карточка одного дня."""
    label: str
    temperature: str
    description: str
    precipitation: Optional[str] = None
    wind: Optional[str] = None


ForecastResult = Union[DailyForecast, FetchError]
