# -*- coding: utf-8 -*-
"""
Поиск города с debounce.

Правила:
- Строка короче SEARCH_MIN_CHARS → подсказки очищаются сразу, запроса нет.
- Иначе запрос уходит через debounce-интервал; новый ввод в пределах окна
  перезапускает таймер (не больше одного запроса на серию нажатий).
- Каждый ввод увеличивает токен сессии; ответ с устаревшим токеном отбрасывается.
- Пустой ответ — состояние "ничего не найдено", ошибка запроса — приглушённое
  сообщение в подсказках. Исключения наружу не выходят.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Protocol, Union

from core.models.location import Candidate, Location
from core.utils.debounce import CancellableTimer
from core.utils.error_handler import (
    EMPTY_NAME,
    GENERIC_SEARCH_ERROR,
    NOT_SELECTED,
    ApiError,
    ValidationError,
    log_exception,
)
from core.utils.validator import sanitize_user_input

logger = logging.getLogger("location_search")

# === СОСТОЯНИЯ СЕССИИ ===
IDLE = "idle"
LOADING = "loading"
RESULTS = "results"
NO_MATCHES = "no_matches"
ERROR = "error"

NO_MATCHES_MESSAGE = "Ничего не найдено"


@dataclass
class SearchSession:
    query: str = ""
    token: int = 0
    candidates: List[Candidate] = field(default_factory=list)
    status: str = IDLE
    message: Optional[str] = None
    selected: Optional[Candidate] = None


class Geocoder(Protocol):
    async def geocode(self, query: str, count: int = 10) -> List[Candidate]: ...


SearchListener = Callable[[SearchSession], Awaitable[None]]


class LocationSearch:

    def __init__(
        self,
        geocoder: Geocoder,
        debounce_sec: float = 0.3,
        min_chars: int = 2,
        max_results: int = 10,
        on_update: Optional[SearchListener] = None,
    ):
        self.geocoder = geocoder
        self.min_chars = min_chars
        self.max_results = max_results
        self.on_update = on_update
        self._timer = CancellableTimer(debounce_sec)
        self._session = SearchSession()

    @property
    def session(self) -> SearchSession:
        return self._session

    def _invalidate(self) -> int:
        """Отменяет ожидающий таймер и делает устаревшими все запросы в полёте."""
        self._timer.cancel()
        self._session.token += 1
        return self._session.token

    async def _notify(self) -> None:
        if self.on_update is None:
            return
        try:
            await self.on_update(self._session)
        except Exception as e:
            log_exception(e, "Ошибка отображения подсказок")

    async def query(self, text: str) -> None:
        """Очередное изменение строки поиска."""
        token = self._invalidate()
        session = self._session
        session.query = text
        session.selected = None
        session.candidates = []
        session.message = None

        cleaned = sanitize_user_input(text or "")
        if len(cleaned) < self.min_chars:
            session.status = IDLE
            await self._notify()
            return

        session.status = LOADING

        async def run():
            await self._run(token, cleaned)

        self._timer.schedule(run)

    async def _run(self, token: int, text: str) -> None:
        if token != self._session.token:
            return
        logger.debug(f"Поиск '{text}' (токен {token})")

        try:
            candidates = await self.geocoder.geocode(text, self.max_results)
        except ApiError as e:
            failure = e
        except Exception as e:
            log_exception(e, "Неожиданная ошибка поиска", {"query": text})
            failure = e
        else:
            failure = None

        if token != self._session.token:
            logger.info(f"🗑️ Устаревший ответ для '{text}' отброшен")
            return

        session = self._session
        if failure is not None:
            logger.error(f"❌ Ошибка поиска городов '{text}': {failure}")
            session.candidates = []
            session.status = ERROR
            session.message = GENERIC_SEARCH_ERROR
        elif candidates:
            session.candidates = list(candidates[:self.max_results])
            session.status = RESULTS
            session.message = None
        else:
            session.candidates = []
            session.status = NO_MATCHES
            session.message = NO_MATCHES_MESSAGE
        await self._notify()

    async def select(self, index: int) -> Optional[Candidate]:
        """Выбор подсказки: список очищается, запросы в полёте устаревают."""
        session = self._session
        if not 0 <= index < len(session.candidates):
            logger.warning(f"⚠️ Подсказка #{index} не найдена (всего {len(session.candidates)})")
            return None

        chosen = session.candidates[index]
        self._invalidate()
        session.selected = chosen
        session.query = chosen.name
        session.candidates = []
        session.status = IDLE
        session.message = None
        await self._notify()
        return chosen

    def selection(self) -> Union[Location, ValidationError]:
        """
        Проверка для кнопки "Добавить".

        Returns:
            Location — выбранный город,
            ValidationError — если ничего не введено или город не выбран из списка.
        Сессию не сбрасывает: после успешного добавления вызывающий код делает reset().
        """
        session = self._session
        if not session.query.strip():
            return ValidationError(EMPTY_NAME, "Введите название города")
        if session.selected is None:
            return ValidationError(NOT_SELECTED, "Выберите город из списка")
        return session.selected.to_location()

    def reset(self) -> None:
        """Уход со строки ввода: сессия забывается целиком."""
        token = self._invalidate()
        self._session = SearchSession(token=token)

    async def wait_idle(self) -> None:
        """Ждёт срабатывания таймера и завершения запроса в полёте."""
        await self._timer.wait()
