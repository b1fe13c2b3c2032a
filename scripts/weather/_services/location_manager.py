# -*- coding: utf-8 -*-
"""
Владелец набора локаций одного чата.

Инварианты:
- в tracked нет двух записей с одинаковыми (lat, lon);
- current не совпадает ни с одной записью tracked;
- tracked хранит порядок добавления, удаление не меняет порядок остальных.

Каждое изменение: память → сохранение (без await между ними) → событие
LOCATIONS_CHANGED, по которому дашборд перерисовывает экран.
"""

import logging
from typing import Optional

from core.db.persisted_state import PersistedState
from core.event_bus import LOCATIONS_CHANGED, EventBus
from core.models.location import Location, LocationSet
from core.utils.error_handler import DUPLICATE_CURRENT, DUPLICATE_TRACKED, ValidationError

logger = logging.getLogger("location_manager")

DUPLICATE_TRACKED_MESSAGE = "Этот город уже добавлен"
DUPLICATE_CURRENT_MESSAGE = "Этот город уже добавлен как текущее местоположение"


class LocationSetManager:

    def __init__(self, persisted: PersistedState, events: EventBus, state: Optional[LocationSet] = None):
        self.persisted = persisted
        self.events = events
        self._state = state.copy() if state else LocationSet()

    @classmethod
    def from_storage(cls, persisted: PersistedState, events: EventBus) -> "LocationSetManager":
        """Создаёт менеджер, восстановив состояние из хранилища (или пустое)."""
        return cls(persisted, events, persisted.load())

    @property
    def state(self) -> LocationSet:
        """Снимок состояния: изменения снимка не влияют на менеджер."""
        return self._state.copy()

    def _commit(self) -> LocationSet:
        self.persisted.save(self._state)
        return self._state.copy()

    async def _changed(self, snapshot: LocationSet, reason: str) -> None:
        await self.events.emit(LOCATIONS_CHANGED, {"state": snapshot, "reason": reason})

    async def set_current(self, location: Location) -> None:
        # Город из списка, совпавший с новым текущим местоположением, уходит из списка
        self._state.tracked = [loc for loc in self._state.tracked if not loc.same_place(location)]
        self._state.current = location
        snapshot = self._commit()
        logger.info(f"📍 Текущее местоположение: {location.lat}, {location.lon}")
        await self._changed(snapshot, "set_current")

    def check_duplicate(self, location: Location) -> Optional[ValidationError]:
        if any(loc.same_place(location) for loc in self._state.tracked):
            return ValidationError(DUPLICATE_TRACKED, DUPLICATE_TRACKED_MESSAGE)
        if location.same_place(self._state.current):
            return ValidationError(DUPLICATE_CURRENT, DUPLICATE_CURRENT_MESSAGE)
        return None

    async def add_tracked(self, location: Location) -> Optional[ValidationError]:
        """
        Добавляет город в конец списка.

        Returns:
            None при успехе, ValidationError — если такой город уже есть.
        """
        error = self.check_duplicate(location)
        if error is not None:
            logger.info(f"⚠️ Дубль отклонён ({error.kind}): {location.name} {location.key}")
            return error

        self._state.tracked.append(location)
        snapshot = self._commit()
        logger.info(f"➕ Добавлен город: {location.name} ({location.lat}, {location.lon})")
        await self._changed(snapshot, "add")
        return None

    async def remove_tracked(self, index: int) -> bool:
        """Удаляет город по индексу. Неверный индекс — предупреждение в лог и False."""
        if not 0 <= index < len(self._state.tracked):
            logger.warning(f"⚠️ Удаление: индекс {index} вне диапазона [0, {len(self._state.tracked)})")
            return False

        removed = self._state.tracked.pop(index)
        snapshot = self._commit()
        logger.info(f"🗑️ Удалён город: {removed.name}")
        await self._changed(snapshot, "remove")
        return True
