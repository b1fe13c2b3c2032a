# core/utils/validator.py
import html
import re
from typing import Any


def sanitize_user_input(text: str) -> str:
    """Санитизация пользовательского ввода (поисковая строка города)."""
    if not isinstance(text, str):
        raise ValueError("Input must be a string")
    text = html.unescape(text.strip())
    # Разрешаем только буквы (любой алфавит), цифры, пробел и , . - ' ( )
    text = re.sub(r"[^\w\s,\.\-'\(\)]", "", text)
    text = " ".join(text.split())
    return text[:100]  # ограничение длины


def is_number(value: Any) -> bool:
    """bool — не число, хотя и наследуется от int."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_coordinates(lat: Any, lon: Any) -> bool:
    """
    Проверяет, что координаты — числа в допустимом диапазоне.

    Args:
        lat: Широта (-90 .. 90)
        lon: Долгота (-180 .. 180)
    """
    if not is_number(lat) or not is_number(lon):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180
