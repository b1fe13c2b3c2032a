# -*- coding: utf-8 -*-
"""
Форматирование дневного прогноза в карточки (подпись даты, температура, описание).
"""

import math
from datetime import date, timedelta
from typing import List, Optional

from core.models.forecast import DayCard, DayForecast

# === КОДЫ ПОГОДЫ WMO ===
WEATHER_CODES = {
    "ru": {
        0: "Ясно",
        1: "Преимущественно ясно",
        2: "Переменная облачность",
        3: "Пасмурно",
        45: "Туман",
        48: "Изморозь",
        51: "Легкая морось",
        53: "Морось",
        55: "Сильная морось",
        61: "Небольшой дождь",
        63: "Дождь",
        65: "Сильный дождь",
        71: "Небольшой снег",
        73: "Снег",
        75: "Сильный снег",
        77: "Снежная крупа",
        80: "Небольшие ливни",
        81: "Ливни",
        82: "Сильные ливни",
        85: "Небольшой снегопад",
        86: "Снегопад",
        95: "Гроза",
        96: "Гроза с градом",
        99: "Гроза с сильным градом",
    },
    "en": {
        0: "Clear sky",
        1: "Mainly clear",
        2: "Partly cloudy",
        3: "Overcast",
        45: "Fog",
        48: "Rime fog",
        51: "Light drizzle",
        53: "Drizzle",
        55: "Dense drizzle",
        61: "Light rain",
        63: "Rain",
        65: "Heavy rain",
        71: "Light snow",
        73: "Snow",
        75: "Heavy snow",
        77: "Snow grains",
        80: "Light showers",
        81: "Showers",
        82: "Violent showers",
        85: "Light snow showers",
        86: "Snow showers",
        95: "Thunderstorm",
        96: "Thunderstorm with hail",
        99: "Thunderstorm with heavy hail",
    },
}

UNKNOWN = {"ru": "Неизвестно", "en": "Unknown"}
TODAY = {"ru": "Сегодня", "en": "Today"}
TOMORROW = {"ru": "Завтра", "en": "Tomorrow"}

WEEKDAYS_SHORT = {
    "ru": ["пн", "вт", "ср", "чт", "пт", "сб", "вс"],
    "en": ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"],
}
# Родительный падеж: "23 октября"
MONTHS = {
    "ru": ["января", "февраля", "марта", "апреля", "мая", "июня",
           "июля", "августа", "сентября", "октября", "ноября", "декабря"],
    "en": ["January", "February", "March", "April", "May", "June",
           "July", "August", "September", "October", "November", "December"],
}
PRECIPITATION = {"ru": "Осадки: {value} мм", "en": "Precipitation: {value} mm"}
WIND = {"ru": "Ветер: {value} км/ч", "en": "Wind: {value} km/h"}


def _lang(language: str) -> str:
    return language if language in WEATHER_CODES else "ru"


def round_half_up(value: float) -> int:
    """Округление как в Math.round: 0.5 → 1, -0.5 → 0."""
    return int(math.floor(value + 0.5))


def describe_weather(code: int, language: str = "ru") -> str:
    lang = _lang(language)
    return WEATHER_CODES[lang].get(code, UNKNOWN[lang])


def format_date_label(day: date, today: Optional[date] = None, language: str = "ru") -> str:
    """
    "Сегодня" / "Завтра" относительно локальной даты зрителя,
    иначе "пт, 23 октября".
    """
    lang = _lang(language)
    today = today or date.today()
    if day == today:
        return TODAY[lang]
    if day == today + timedelta(days=1):
        return TOMORROW[lang]

    weekday = WEEKDAYS_SHORT[lang][day.weekday()]
    month = MONTHS[lang][day.month - 1]
    if lang == "en":
        return f"{weekday}, {month} {day.day}"
    return f"{weekday}, {day.day} {month}"


def format_amount(value: float) -> str:
    """Осадки выводятся как есть: 0 → "0", 1.5 → "1.5"."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def build_day_card(day: DayForecast, today: Optional[date] = None, language: str = "ru") -> DayCard:
    lang = _lang(language)
    precipitation = None
    if day.precipitation is not None:
        precipitation = PRECIPITATION[lang].format(value=format_amount(day.precipitation))
    wind = None
    if day.wind_speed is not None:
        wind = WIND[lang].format(value=round_half_up(day.wind_speed))

    return DayCard(
        label=format_date_label(day.day, today, lang),
        temperature=f"{round_half_up(day.temp_min)}° / {round_half_up(day.temp_max)}°",
        description=describe_weather(day.weather_code, lang),
        precipitation=precipitation,
        wind=wind,
    )


def build_day_cards(days: List[DayForecast], today: Optional[date] = None, language: str = "ru") -> List[DayCard]:
    return [build_day_card(day, today, language) for day in days]
