# -*- coding: utf-8 -*-
"""
Сохранение набора локаций одного чата как JSON-строки в хранилище ключ/значение.

- load(): ключа нет → None; мусор в значении → пустой LocationSet (старт не падает);
  сбой чтения хранилища → None (только лог).
- save(): сбой записи логируется и проглатывается — сохранение best-effort.
"""

import json
import logging
from typing import Optional, Protocol

from core.models.location import LocationSet
from core.utils.error_handler import PersistenceError, log_exception

logger = logging.getLogger("persisted_state")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


def normalize(state: LocationSet) -> LocationSet:
    """Убирает дубли (первая запись побеждает) и совпадения с текущим местоположением."""
    seen = {state.current.key} if state.current else set()
    tracked = []
    for loc in state.tracked:
        if loc.key in seen:
            logger.warning(f"⚠️ Дубль локации при загрузке отброшен: {loc.name} {loc.key}")
            continue
        seen.add(loc.key)
        tracked.append(loc)
    return LocationSet(current=state.current, tracked=tracked)


class PersistedState:

    def __init__(self, store: KeyValueStore, key: str):
        self.store = store
        self.key = key

    def load(self) -> Optional[LocationSet]:
        try:
            raw = self.store.get(self.key)
        except PersistenceError as e:
            log_exception(e, "Ошибка чтения состояния", {"key": self.key})
            return None

        if raw is None:
            return None

        try:
            state = LocationSet.from_dict(json.loads(raw))
        except ValueError as e:
            # json.JSONDecodeError тоже ValueError
            logger.error(f"❌ Повреждённое состояние по ключу {self.key}, начинаем с пустого: {e}")
            return LocationSet()

        return normalize(state)

    def save(self, state: LocationSet) -> None:
        try:
            self.store.set(self.key, json.dumps(state.to_dict(), ensure_ascii=False))
        except (PersistenceError, TypeError, ValueError) as e:
            log_exception(e, "Ошибка сохранения состояния", {"key": self.key})
