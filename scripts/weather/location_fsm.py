# scripts/weather/location_fsm.py
"""
Обработчики управления локациями: поиск города, выбор подсказки,
добавление, удаление, геопозиция.
"""
import logging

from telegram import Update
from telegram.ext import ContextTypes

from core.models.location import CURRENT_LOCATION_NAME, Location
from core.utils.validator import validate_coordinates
from process_manager import process_manager
from scripts.weather._io.telegram_surface import CB_ADD, CB_PICK, CB_REFRESH, CB_REMOVE
from scripts.weather.dashboard import WeatherDashboard

logger = logging.getLogger("location_fsm")


def _dashboard(update: Update, context: ContextTypes.DEFAULT_TYPE) -> WeatherDashboard:
    chat = update.effective_chat
    return process_manager.get_dashboard(context.bot, chat.id, chat.type)


def _parse_index(data: str, prefix: str):
    try:
        return int(data[len(prefix):])
    except ValueError:
        return None


# === ТЕКСТ = СТРОКА ПОИСКА ===
async def handle_text_input(update: Update, context: ContextTypes.DEFAULT_TYPE):
    user_input = update.message.text or ""
    logger.info(f"⌨️ Чат {update.effective_chat.id}: ввод '{user_input[:50]}'")
    await _dashboard(update, context).on_input(user_input)


async def add_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/add — то же, что кнопка "Добавить"."""
    await _dashboard(update, context).add_selected()


async def cancel_search(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await _dashboard(update, context).cancel_search()


# === ОБРАБОТКА INLINE-КНОПОК ===
async def handle_location_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    query = update.callback_query
    await query.answer()
    data = query.data or ""
    logger.info(f"🖱️ Чат {update.effective_chat.id}: нажата кнопка '{data}'")

    dashboard = _dashboard(update, context)

    if data == CB_REFRESH:
        await dashboard.refresh()
    elif data == CB_ADD:
        await dashboard.add_selected()
    elif data.startswith(CB_PICK):
        index = _parse_index(data, CB_PICK)
        if index is not None:
            await dashboard.pick(index)
    elif data.startswith(CB_REMOVE):
        index = _parse_index(data, CB_REMOVE)
        if index is not None:
            await dashboard.remove(index)
    else:
        logger.warning(f"⚠️ Неизвестная кнопка: {data}")


# === ОБРАБОТКА ГЕОПОЗИЦИИ ===
async def handle_location_geo(update: Update, context: ContextTypes.DEFAULT_TYPE):
    chat_id = update.effective_chat.id
    loc = update.message.location
    if not loc:
        return

    logger.info(f"📍 Чат {chat_id}: получена геопозиция {loc.latitude}, {loc.longitude}")
    dashboard = _dashboard(update, context)
    provider = process_manager.position_providers.get(chat_id)
    if provider is not None and provider.deliver(loc.latitude, loc.longitude):
        return

    # Геопозицию прислали без запроса: это явное действие пользователя
    if not validate_coordinates(loc.latitude, loc.longitude):
        logger.warning(f"⚠️ Неверные координаты от Telegram: {loc.latitude}, {loc.longitude}")
        return
    await dashboard.manager.set_current(Location(CURRENT_LOCATION_NAME, loc.latitude, loc.longitude))


async def handle_location_decline(update: Update, context: ContextTypes.DEFAULT_TYPE):
    chat_id = update.effective_chat.id
    provider = process_manager.position_providers.get(chat_id)
    if provider is not None and provider.decline():
        logger.info(f"✋ Чат {chat_id}: геопозиция отклонена")
        return
    # Никто не ждал, значит это обычный ввод в строку поиска
    await handle_text_input(update, context)
