# -*- coding: utf-8 -*-
"""
Дашборд погоды одного чата: связывает хранилище, менеджер локаций,
поиск, геолокацию и отрисовку.

Поток запуска:
    load() → есть локации? → refresh()
                        нет → форма добавления + одна попытка геолокации
                              → успех: set_current() → refresh()
                              → отказ: глобальный баннер
"""

import logging
from typing import Optional, Protocol, Union

from config.bot_config import BotConfig
from core.db.persisted_state import PersistedState
from core.event_bus import LOCATIONS_CHANGED, EventBus
from core.models.location import Candidate, Location
from core.utils.error_handler import ValidationError, log_exception
from scripts.weather._processes.forecast_fetcher import ForecastFetcher, ForecastSource
from scripts.weather._processes.render_pipeline import RenderPipeline, RenderSurface
from scripts.weather._services.geolocator import Geolocator, PositionProvider
from scripts.weather._services.location_manager import LocationSetManager
from scripts.weather._services.location_search import Geocoder, LocationSearch

logger = logging.getLogger("dashboard")

ALREADY_REMOVED_MESSAGE = "Этот город уже удалён из списка"


class WeatherClient(Geocoder, ForecastSource, Protocol):
    """Геокодинг + прогноз (OpenMeteoClient или тестовая заглушка)."""


class WeatherDashboard:

    def __init__(
        self,
        persisted: PersistedState,
        client: WeatherClient,
        surface: RenderSurface,
        position_provider: PositionProvider,
        config: BotConfig,
    ):
        self.surface = surface
        self.events = EventBus()
        self.manager = LocationSetManager.from_storage(persisted, self.events)
        self.pipeline = RenderPipeline(
            ForecastFetcher(client),
            surface,
            display_days=config.display_days,
            language=config.language,
        )
        self.search = LocationSearch(
            client,
            debounce_sec=config.search_debounce_sec,
            min_chars=config.search_min_chars,
            max_results=config.search_max_results,
            on_update=surface.show_suggestions,
        )
        self.geolocator = Geolocator(position_provider)
        self.events.subscribe_async(LOCATIONS_CHANGED, self._on_locations_changed)
        self._started = False

    async def _on_locations_changed(self, event: dict) -> None:
        await self.pipeline.refresh(event["state"])

    async def start(self) -> None:
        """Первый запуск: отрисовка сохранённого или однократная геолокация."""
        if self._started:
            await self.refresh()
            return
        self._started = True

        state = self.manager.state
        if not state.is_empty():
            await self.refresh()
            return

        await self.surface.show_add_city()
        result = await self.geolocator.locate()
        if isinstance(result, Location):
            await self.manager.set_current(result)
        else:
            await self.surface.show_banner(result.message)

    async def refresh(self) -> None:
        try:
            await self.pipeline.refresh(self.manager.state)
        except Exception as e:
            log_exception(e, "Ошибка обновления экрана")

    async def on_input(self, text: str) -> None:
        await self.surface.show_input_error(None)
        await self.search.query(text)

    async def pick(self, index: int) -> Optional[Candidate]:
        return await self.search.select(index)

    async def add_selected(self) -> Optional[ValidationError]:
        """Кнопка "Добавить". Ошибка ввода показывается рядом с полем и возвращается."""
        await self.surface.show_input_error(None)
        selection: Union[Location, ValidationError] = self.search.selection()
        if isinstance(selection, ValidationError):
            await self.surface.show_input_error(selection.message)
            return selection

        error = await self.manager.add_tracked(selection)
        if error is not None:
            await self.surface.show_input_error(error.message)
            return error

        self.search.reset()
        return None

    async def remove(self, index: int) -> bool:
        removed = await self.manager.remove_tracked(index)
        if not removed:
            # Кнопка из устаревшей отрисовки: перерисовываем и сообщаем
            await self.refresh()
            await self.surface.show_input_error(ALREADY_REMOVED_MESSAGE)
        return removed

    async def cancel_search(self) -> None:
        self.search.reset()
        await self.surface.show_suggestions(self.search.session)

    def detach(self) -> None:
        """Отписывает дашборд от событий и гасит поиск; данные остаются в хранилище."""
        self.search.reset()
        self.events.clear()

    async def close(self) -> None:
        self.detach()
