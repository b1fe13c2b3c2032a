# -*- coding: utf-8 -*-
"""
Отрисовка дашборда в Telegram-чате и запрос геопозиции.

Каждая цель отрисовки — отдельное сообщение, которое сначала показывает
"Загрузка...", а потом редактируется в прогноз или ошибку.
Баннер, индикатор загрузки, подсказки поиска и ошибка ввода — служебные
сообщения, которые заменяются/удаляются по мере надобности.
"""

import asyncio
import html
import logging
import os
from typing import List, Optional, Tuple

from jinja2 import Template
from telegram import (
    Bot,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
)
from telegram.constants import ChatAction, ChatType, ParseMode
from telegram.error import TelegramError

from core.models.forecast import DayCard
from core.utils.error_handler import GEO_DENIED, GEO_TIMEOUT, GEO_UNSUPPORTED, GeolocationError
from scripts.weather._services.location_search import SearchSession

logger = logging.getLogger("telegram_surface")

# Загружаем шаблоны из файлов
TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")


def _load_template(name: str) -> Template:
    with open(os.path.join(TEMPLATES_DIR, name), "r", encoding="utf-8") as f:
        return Template(f.read(), autoescape=True, trim_blocks=True, lstrip_blocks=True)


TARGET_TEMPLATE = _load_template("target.html.j2")
SUGGESTIONS_TEMPLATE = _load_template("suggestions.html.j2")

SHARE_LOCATION_TEXT = "📍 Отправить геопозицию"
DECLINE_LOCATION_TEXT = "✋ Ввести город вручную"
ADD_CITY_TEXT = (
    "🌍 <b>Добавьте город</b>\n"
    "Напишите название (минимум 2 буквы) и выберите вариант из списка."
)
LOADER_TEXT = "⏳ Загрузка прогноза..."

# === callback_data ===
CB_PICK = "pick:"
CB_REMOVE = "remove:"
CB_ADD = "add_city"
CB_REFRESH = "refresh"


def refresh_markup() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([[InlineKeyboardButton("🔄 Обновить", callback_data=CB_REFRESH)]])


def render_target(title: str, is_current: bool, *, loading: bool = False,
                  cards: Optional[List[DayCard]] = None, error: Optional[str] = None) -> str:
    return TARGET_TEMPLATE.render(
        icon="📍" if is_current else "🌍",
        title=title,
        loading=loading,
        cards=cards or [],
        error=error,
    ).strip()


class TelegramRenderTarget:

    def __init__(self, surface: "TelegramRenderSurface", message_id: Optional[int], title: str,
                 is_current: bool, markup: Optional[InlineKeyboardMarkup]):
        self.surface = surface
        self.message_id = message_id
        self.title = title
        self.is_current = is_current
        self.markup = markup

    async def _edit(self, text: str) -> None:
        if self.message_id is None:
            # Заготовку "Загрузка..." отправить не удалось: шлём готовую карточку
            self.message_id = await self.surface._send(text, self.markup)
            if self.message_id is not None:
                self.surface._target_ids.append(self.message_id)
            return
        await self.surface.bot.edit_message_text(
            chat_id=self.surface.chat_id,
            message_id=self.message_id,
            text=text,
            parse_mode=ParseMode.HTML,
            reply_markup=self.markup,
        )

    async def show_forecast(self, cards: List[DayCard]) -> None:
        await self._edit(render_target(self.title, self.is_current, cards=cards))

    async def show_error(self, message: str) -> None:
        await self._edit(render_target(self.title, self.is_current, error=message))


class TelegramRenderSurface:

    def __init__(self, bot: Bot, chat_id: int):
        self.bot = bot
        self.chat_id = chat_id
        self._target_ids: List[int] = []
        self._loader_id: Optional[int] = None
        self._banner_id: Optional[int] = None
        self._suggestions_id: Optional[int] = None
        self._input_error_id: Optional[int] = None

    async def _send(self, text: str, markup=None) -> Optional[int]:
        try:
            message = await self.bot.send_message(
                chat_id=self.chat_id,
                text=text,
                parse_mode=ParseMode.HTML,
                reply_markup=markup,
            )
        except TelegramError as e:
            logger.error(f"❌ Не удалось отправить сообщение в чат {self.chat_id}: {e}")
            return None
        return message.message_id

    async def _delete(self, message_id: Optional[int]) -> None:
        if message_id is None:
            return
        try:
            await self.bot.delete_message(chat_id=self.chat_id, message_id=message_id)
        except TelegramError as e:
            # Сообщение могли удалить вручную
            logger.warning(f"⚠️ Не удалось удалить сообщение {message_id}: {e}")

    # === ЦЕЛИ ОТРИСОВКИ ===
    async def clear_targets(self) -> None:
        ids, self._target_ids = self._target_ids, []
        for message_id in ids:
            await self._delete(message_id)

    async def create_target(self, title: str, is_current: bool, index: Optional[int]) -> TelegramRenderTarget:
        markup = None
        if index is not None:
            markup = InlineKeyboardMarkup([[
                InlineKeyboardButton("❌ Удалить", callback_data=f"{CB_REMOVE}{index}")
            ]])
        message_id = await self._send(render_target(title, is_current, loading=True), markup)
        if message_id is not None:
            self._target_ids.append(message_id)
        return TelegramRenderTarget(self, message_id, title, is_current, markup)

    async def remove_target(self, target: TelegramRenderTarget) -> None:
        """Удаляет одну цель, если её ещё не убрал clear_targets()."""
        if target.message_id in self._target_ids:
            self._target_ids.remove(target.message_id)
            await self._delete(target.message_id)

    # === ИНДИКАТОР ЗАГРУЗКИ ===
    async def show_loader(self) -> None:
        try:
            await self.bot.send_chat_action(chat_id=self.chat_id, action=ChatAction.TYPING)
        except TelegramError as e:
            logger.debug(f"send_chat_action: {e}")
        self._loader_id = await self._send(LOADER_TEXT)

    async def hide_loader(self) -> None:
        loader_id, self._loader_id = self._loader_id, None
        await self._delete(loader_id)

    # === ГЛОБАЛЬНЫЙ БАННЕР ===
    async def show_banner(self, message: str) -> None:
        await self.clear_banner()
        self._banner_id = await self._send(f"⚠️ {html.escape(message)}", refresh_markup())

    async def clear_banner(self) -> None:
        banner_id, self._banner_id = self._banner_id, None
        await self._delete(banner_id)

    async def show_add_city(self) -> None:
        await self._send(ADD_CITY_TEXT, refresh_markup())

    # === ПОИСК ===
    async def show_suggestions(self, session: SearchSession) -> None:
        await self._delete(self._suggestions_id)
        self._suggestions_id = None

        text = SUGGESTIONS_TEMPLATE.render(
            status=session.status,
            query=session.query,
            message=session.message,
            selected=session.selected,
        ).strip()
        if not text:
            return

        markup = None
        if session.candidates:
            markup = InlineKeyboardMarkup([
                [InlineKeyboardButton(candidate.label[:60], callback_data=f"{CB_PICK}{i}")]
                for i, candidate in enumerate(session.candidates)
            ])
        elif session.selected is not None:
            markup = InlineKeyboardMarkup([[InlineKeyboardButton("➕ Добавить", callback_data=CB_ADD)]])
        self._suggestions_id = await self._send(text, markup)

    async def show_input_error(self, message: Optional[str]) -> None:
        await self._delete(self._input_error_id)
        self._input_error_id = None
        if message:
            self._input_error_id = await self._send(f"❗ {html.escape(message)}")


class TelegramPositionProvider:
    """
    Одноразовый запрос геопозиции через кнопку request_location.

    Ответ приходит отдельным апдейтом: обработчик вызывает deliver() или decline().
    """

    def __init__(self, bot: Bot, chat_id: int, chat_type: str, timeout: float = 60):
        self.bot = bot
        self.chat_id = chat_id
        self.chat_type = chat_type
        self.timeout = timeout
        self._future: Optional[asyncio.Future] = None

    @property
    def waiting(self) -> bool:
        return self._future is not None and not self._future.done()

    async def get_current_position(self) -> Tuple[float, float]:
        # Кнопка request_location работает только в личных чатах
        if self.chat_type != ChatType.PRIVATE:
            raise GeolocationError(GEO_UNSUPPORTED)

        self._future = asyncio.get_running_loop().create_future()
        keyboard = ReplyKeyboardMarkup(
            [[KeyboardButton(SHARE_LOCATION_TEXT, request_location=True)],
             [KeyboardButton(DECLINE_LOCATION_TEXT)]],
            resize_keyboard=True,
            one_time_keyboard=True,
        )
        try:
            await self.bot.send_message(
                chat_id=self.chat_id,
                text="📍 Поделитесь геопозицией, чтобы увидеть погоду рядом с вами:",
                reply_markup=keyboard,
            )
        except TelegramError as e:
            self._future = None
            raise GeolocationError(GEO_UNSUPPORTED, str(e)) from e

        try:
            return await asyncio.wait_for(self._future, self.timeout)
        except asyncio.TimeoutError:
            raise GeolocationError(GEO_TIMEOUT)
        finally:
            self._future = None
            await self._remove_keyboard()

    async def _remove_keyboard(self) -> None:
        try:
            await self.bot.send_message(
                chat_id=self.chat_id,
                text="👌",
                reply_markup=ReplyKeyboardRemove(),
            )
        except TelegramError as e:
            logger.warning(f"⚠️ Не удалось убрать клавиатуру: {e}")

    def deliver(self, lat: float, lon: float) -> bool:
        """Геопозиция пришла. False — если её никто не ждал."""
        if not self.waiting:
            return False
        self._future.set_result((lat, lon))
        return True

    def decline(self) -> bool:
        if not self.waiting:
            return False
        self._future.set_exception(GeolocationError(GEO_DENIED))
        return True
