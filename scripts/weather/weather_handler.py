# scripts/weather/weather_handler.py
"""
Команды прогноза: /start (первый запуск дашборда) и /refresh.
"""
import logging

from telegram import Update
from telegram.ext import ContextTypes

from process_manager import process_manager

logger = logging.getLogger("weather_handler")


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Главный экран: сохранённые локации или запрос геопозиции."""
    chat = update.effective_chat
    logger.info(f"👤 Чат {chat.id}: вызвано /start")
    dashboard = process_manager.get_dashboard(context.bot, chat.id, chat.type)
    # Ожидание геопозиции длится до таймаута, поэтому не держим обработчик
    context.application.create_task(dashboard.start(), update=update)


async def refresh(update: Update, context: ContextTypes.DEFAULT_TYPE):
    chat = update.effective_chat
    logger.info(f"🔄 Чат {chat.id}: вызвано /refresh")
    await process_manager.get_dashboard(context.bot, chat.id, chat.type).refresh()


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    logger.error(f"⚠️ Исключение при обработке: {context.error}", exc_info=context.error)
    if update and hasattr(update, 'update_id'):
        logger.error(f"Update ID: {update.update_id}")
