# -*- coding: utf-8 -*-
"""
Шина событий (Event Bus) для связи состояния и отображения.

Архитектурный принцип:
- Производитель (LocationSetManager) → публикует события об изменении набора локаций
- Потребители (WeatherDashboard → RenderPipeline) → подписываются на события
- Шина — экземпляр, принадлежащий одному дашборду; глобальных реестров нет

Использование:

bus = EventBus()

async def on_changed(event):
    await pipeline.refresh(event["state"])

bus.subscribe_async(LOCATIONS_CHANGED, on_changed)
await bus.emit(LOCATIONS_CHANGED, {"state": snapshot, "reason": "add"})
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List

logger = logging.getLogger("event_bus")

LOCATIONS_CHANGED = "locations_changed"

# Типы обработчиков
SyncHandler = Callable[[Dict[str, Any]], None]
AsyncHandler = Callable[[Dict[str, Any]], Awaitable[None]]


class EventBus:

    def __init__(self):
        self._sync_handlers: Dict[str, List[SyncHandler]] = {}
        self._async_handlers: Dict[str, List[AsyncHandler]] = {}

    def subscribe(self, event_type: str, handler: SyncHandler) -> None:
        """
        Подписка на событие с синхронным обработчиком.

        Args:
            event_type (str): Тип события (например, "locations_changed")
            handler (callable): Функция, принимающая dict с данными события
        """
        self._sync_handlers.setdefault(event_type, []).append(handler)
        logger.debug("Зарегистрирован синхронный обработчик для события: %s", event_type)

    def subscribe_async(self, event_type: str, handler: AsyncHandler) -> None:
        if handler is None:
            logger.warning(f"⚠️ Попытка подписаться на событие {event_type} с handler=None. Игнорируем.")
            return
        self._async_handlers.setdefault(event_type, []).append(handler)
        logger.debug("Зарегистрирован асинхронный обработчик для события: %s", event_type)

    def unsubscribe(self, event_type: str, handler: Callable) -> None:
        """Отписка от события (синхронный или асинхронный обработчик)."""
        for registry in (self._sync_handlers, self._async_handlers):
            handlers = registry.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                logger.debug("Обработчик удалён для события: %s", event_type)
                return
        logger.warning("Обработчик не найден для события: %s", event_type)

    async def emit(self, event_type: str, event_data: Dict[str, Any]) -> None:
        """
        Публикация события.

        Синхронные обработчики вызываются первыми и прямо в цикле событий,
        затем асинхронные — по очереди, в порядке подписки.
        Ошибки в обработчиках логируются, но не прерывают выполнение.
        """
        logger.debug("Публикация события: %s", event_type)

        for handler in list(self._sync_handlers.get(event_type, [])):
            try:
                handler(event_data)
            except Exception as e:
                logger.error("Ошибка в синхронном обработчике события %s: %s", event_type, e, exc_info=True)

        for handler in list(self._async_handlers.get(event_type, [])):
            try:
                await handler(event_data)
            except Exception as e:
                logger.error("Ошибка в асинхронном обработчике события %s: %s", event_type, e, exc_info=True)

    def clear(self) -> None:
        """Очищает все обработчики. Используется в тестах и при закрытии дашборда."""
        self._sync_handlers.clear()
        self._async_handlers.clear()
