# -*- coding: utf-8 -*-
"""
Тесты для scripts/weather/_processes/formatter.py
"""
from datetime import date

from core.models.forecast import DayForecast
from scripts.weather._processes.formatter import (
    build_day_card,
    describe_weather,
    format_amount,
    format_date_label,
    round_half_up,
)

# 19 октября 2026: понедельник
TODAY = date(2026, 10, 19)


def test_format_date_label():
    assert format_date_label(date(2026, 10, 19), TODAY) == "Сегодня"
    assert format_date_label(date(2026, 10, 20), TODAY) == "Завтра"
    assert format_date_label(date(2026, 10, 21), TODAY) == "ср, 21 октября"
    assert format_date_label(date(2026, 10, 23), TODAY) == "пт, 23 октября"
    assert format_date_label(date(2026, 11, 1), TODAY) == "вс, 1 ноября"
    print("✅ test_format_date_label passed")


def test_format_date_label_english():
    assert format_date_label(date(2026, 10, 19), TODAY, "en") == "Today"
    assert format_date_label(date(2026, 10, 20), TODAY, "en") == "Tomorrow"
    assert format_date_label(date(2026, 10, 23), TODAY, "en") == "Fri, October 23"


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(-0.5) == 0
    assert round_half_up(-2.6) == -3
    assert round_half_up(7.49) == 7


def test_describe_weather():
    assert describe_weather(0) == "Ясно"
    assert describe_weather(95) == "Гроза"
    assert describe_weather(3, "en") == "Overcast"
    assert describe_weather(42) == "Неизвестно"
    # Неизвестный язык: русские подписи
    assert describe_weather(0, "xx") == "Ясно"


def test_format_amount():
    assert format_amount(0.0) == "0"
    assert format_amount(1.5) == "1.5"
    assert format_amount(12) == "12"


def test_build_day_card():
    card = build_day_card(
        DayForecast(TODAY, temp_min=-2.5, temp_max=7.5, weather_code=3, precipitation=0.0, wind_speed=12.4),
        TODAY,
    )
    assert card.label == "Сегодня"
    assert card.temperature == "-2° / 8°"
    assert card.description == "Пасмурно"
    assert card.precipitation == "Осадки: 0 мм"
    assert card.wind == "Ветер: 12 км/ч"
    print("✅ test_build_day_card passed")


def test_build_day_card_without_optional_fields():
    card = build_day_card(DayForecast(date(2026, 10, 20), 1.0, 4.0, 61), TODAY, "en")
    assert card.label == "Tomorrow"
    assert card.description == "Light rain"
    assert card.precipitation is None
    assert card.wind is None
