# -*- coding: utf-8 -*-
"""
Централизованная обработка ошибок.

Таксономия:
- ValidationError  — ошибка пользовательского ввода (пустое имя, дубль, не выбран город).
                     Значение, а не исключение: показывается рядом с полем ввода.
- FetchError       — не удалось получить данные (геокодинг/прогноз). Значение,
                     показывается в пределах своей области (поиск или карточка локации).
- GeolocationError — отказ/таймаут/нет поддержки геолокации. Глобальный баннер.
- PersistenceError — сбой хранилища. Только лог, сессия продолжается в памяти.
"""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger("error_handler")

# === ТИПЫ ОШИБОК ВАЛИДАЦИИ ===
EMPTY_NAME = "empty_name"
NOT_SELECTED = "not_selected"
DUPLICATE_TRACKED = "duplicate_tracked"
DUPLICATE_CURRENT = "duplicate_current"

# === ПРИЧИНЫ ОТКАЗА ГЕОЛОКАЦИИ ===
GEO_DENIED = "denied"
GEO_TIMEOUT = "timeout"
GEO_UNSUPPORTED = "unsupported"

GENERIC_FETCH_ERROR = "Не удалось загрузить данные о погоде"
GENERIC_SEARCH_ERROR = "Не удалось выполнить поиск. Попробуйте ещё раз."


class ApiError(Exception):
    """Ошибка HTTP-запроса к внешнему API (статус не 2xx, транспорт, формат ответа)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GeolocationError(Exception):
    """Платформа не смогла выдать координаты."""

    def __init__(self, reason: str, message: str = ""):
        super().__init__(message or reason)
        self.reason = reason


class PersistenceError(Exception):
    """Сбой чтения/записи хранилища состояния."""


@dataclass(frozen=True)
class ValidationError:
    kind: str
    message: str


@dataclass(frozen=True)
class FetchError:
    message: str = GENERIC_FETCH_ERROR


@dataclass(frozen=True)
class GeolocationFailure:
    reason: str
    message: str


def log_exception(exception: Exception, message: str = "Необработанное исключение", context: Optional[dict] = None):
    """
    Просто логирует исключение без выбрасывания.

    Args:
        exception (Exception): Исключение
        message (str): Описание
        context (dict): Контекст (chat_id, lat, lon и т.п.)
    """
    log_context = f" | Контекст: {context}" if context else ""
    logger.error(f"{message}{log_context} | Ошибка: {exception!r}", exc_info=exception)
