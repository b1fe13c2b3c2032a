# -*- coding: utf-8 -*-
"""
Отменяемый таймер для debounce поверх asyncio.

schedule() отменяет предыдущий ещё не сработавший таймер и ставит новый.
Сработавший таймер (callback уже выполняется, например HTTP-запрос в полёте)
не отменяется — устаревшие результаты отбрасывает вызывающий код по токену.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger("debounce")


class CancellableTimer:

    def __init__(self, delay: float):
        self.delay = delay
        self._waiting: Optional[asyncio.Task] = None
        self._running: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._waiting is not None and not self._waiting.done()

    def schedule(self, callback: Callable[[], Awaitable[None]]) -> None:
        self.cancel()
        self._waiting = asyncio.get_running_loop().create_task(self._fire(callback))

    def cancel(self) -> bool:
        """Отменяет ожидающий таймер. True — если было что отменять."""
        if self.pending:
            self._waiting.cancel()
            self._waiting = None
            return True
        return False

    async def _fire(self, callback: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self.delay)
        # Дальше отменять нельзя: запускаем callback отдельной задачей
        self._waiting = None
        self._running = asyncio.get_running_loop().create_task(callback())

    async def wait(self) -> None:
        """Ждёт, пока сработает ожидающий таймер и завершится запущенный callback."""
        waiting = self._waiting
        if waiting is not None:
            try:
                await waiting
            except asyncio.CancelledError:
                # отменили таймер, но не нас самих
                if not waiting.cancelled():
                    raise
        running = self._running
        if running is not None and not running.done():
            await running
