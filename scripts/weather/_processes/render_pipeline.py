# -*- coding: utf-8 -*-
"""
Отрисовка набора локаций.

refresh(state):
1. Очищает все цели отрисовки и глобальный баннер.
   Цель, созданная проходом после того, как его вытеснили, сразу удаляется.
2. Создаёт цели строго по порядку: текущее местоположение, затем города списка.
3. Каждая цель загружает прогноз независимо: ошибка одной локации
   показывается только в её карточке и не задерживает остальные.
4. Общий индикатор загрузки скрыт только когда завершились все запросы прохода.

Новый проход вытесняет старый: поздние ответы старого прохода отбрасываются
и индикатор не трогают.
"""

import asyncio
import logging
from datetime import date
from typing import Callable, List, Optional, Protocol

from core.models.forecast import DayCard
from core.models.location import Location, LocationSet
from core.utils.error_handler import FetchError, log_exception
from scripts.weather._processes.forecast_fetcher import ForecastFetcher
from scripts.weather._processes.formatter import build_day_cards
from scripts.weather._services.location_search import SearchSession

logger = logging.getLogger("render_pipeline")


class RenderTarget(Protocol):
    async def show_forecast(self, cards: List[DayCard]) -> None: ...

    async def show_error(self, message: str) -> None: ...


class RenderSurface(Protocol):
    """Всё, что нужно дашборду от экрана (Telegram-чат, тестовая заглушка)."""

    async def clear_targets(self) -> None: ...

    async def create_target(self, title: str, is_current: bool, index: Optional[int]) -> RenderTarget: ...

    async def remove_target(self, target: RenderTarget) -> None: ...

    async def show_loader(self) -> None: ...

    async def hide_loader(self) -> None: ...

    async def show_banner(self, message: str) -> None: ...

    async def clear_banner(self) -> None: ...

    async def show_add_city(self) -> None: ...

    async def show_suggestions(self, session: SearchSession) -> None: ...

    async def show_input_error(self, message: Optional[str]) -> None: ...


class RenderPipeline:

    def __init__(
        self,
        fetcher: ForecastFetcher,
        surface: RenderSurface,
        display_days: int = 3,
        language: str = "ru",
        today: Callable[[], date] = date.today,
    ):
        self.fetcher = fetcher
        self.surface = surface
        self.display_days = display_days
        self.language = language
        self.today = today
        self._pass = 0
        self._loader_visible = False

    @property
    def current_pass(self) -> int:
        return self._pass

    async def _set_loader(self, visible: bool) -> None:
        if visible == self._loader_visible:
            return
        self._loader_visible = visible
        if visible:
            await self.surface.show_loader()
        else:
            await self.surface.hide_loader()

    def _superseded(self, pass_id: int) -> bool:
        return pass_id != self._pass

    async def refresh(self, state: LocationSet) -> None:
        self._pass += 1
        pass_id = self._pass
        try:
            await self._render(pass_id, state)
        finally:
            # Индикатор гасит только последний проход, даже если он упал
            if not self._superseded(pass_id):
                await self._set_loader(False)

    async def _render(self, pass_id: int, state: LocationSet) -> None:
        await self.surface.clear_banner()
        await self.surface.clear_targets()
        if self._superseded(pass_id):
            logger.debug(f"Проход {pass_id} вытеснен во время очистки")
            return

        slots = []
        if state.current is not None:
            slots.append((state.current, True, None))
        slots.extend((location, False, index) for index, location in enumerate(state.tracked))

        jobs = []
        for location, is_current, index in slots:
            target = await self.surface.create_target(location.name, is_current, index)
            if self._superseded(pass_id):
                # Новый проход уже очистил экран: цель, созданная после этого, лишняя
                await self.surface.remove_target(target)
                logger.debug(f"Проход {pass_id} вытеснен во время создания целей")
                return
            jobs.append((target, location))

        if not jobs:
            await self._set_loader(False)
            await self.surface.show_add_city()
            return

        await self._set_loader(True)
        logger.info(f"🔄 Проход {pass_id}: загрузка прогноза для {len(jobs)} локаций")
        await asyncio.gather(*(self._load(pass_id, target, location) for target, location in jobs))

    async def _load(self, pass_id: int, target: RenderTarget, location: Location) -> None:
        try:
            result = await self.fetcher.fetch(location.lat, location.lon)
        except Exception as e:
            log_exception(e, "Сбой загрузки прогноза", {"location": location.name})
            result = FetchError()

        if self._superseded(pass_id):
            logger.debug(f"Ответ для {location.name} из устаревшего прохода {pass_id} отброшен")
            return

        try:
            if isinstance(result, FetchError):
                await target.show_error(result.message)
            else:
                cards = build_day_cards(result.head(self.display_days), self.today(), self.language)
                await target.show_forecast(cards)
        except Exception as e:
            log_exception(e, "Ошибка отрисовки карточки", {"location": location.name})
