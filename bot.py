# bot.py
# -*- coding: utf-8 -*-
"""
Точка входа: дашборд погоды в Telegram.
"""
import logging

from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    MessageHandler,
    filters,
)

from process_manager import process_manager
from scripts.weather._io.telegram_surface import DECLINE_LOCATION_TEXT
from scripts.weather.location_fsm import (
    add_command,
    cancel_search,
    handle_location_callback,
    handle_location_decline,
    handle_location_geo,
    handle_text_input,
)
from scripts.weather.weather_handler import error_handler, refresh, start


async def _post_shutdown(application: Application):
    await process_manager.shutdown()


def build_application(token: str) -> Application:
    # Ответы на кнопки не должны ждать, пока другой чат дождётся геопозиции или прогноза
    app = (
        Application.builder()
        .token(token)
        .concurrent_updates(True)
        .post_shutdown(_post_shutdown)
        .build()
    )

    # === РЕГИСТРАЦИЯ ОБРАБОТЧИКОВ (ПОРЯДОК ВАЖЕН!) ===

    # 1. Команды
    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("refresh", refresh))
    app.add_handler(CommandHandler("add", add_command))
    app.add_handler(CommandHandler("cancel", cancel_search))

    # 2. Геопозиция и отказ от неё (до общего текстового обработчика)
    app.add_handler(MessageHandler(filters.LOCATION, handle_location_geo))
    app.add_handler(MessageHandler(filters.Text([DECLINE_LOCATION_TEXT]), handle_location_decline))

    # 3. Любой другой текст = строка поиска
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_text_input))

    # 4. Inline-кнопки: подсказки, добавить, удалить, обновить
    app.add_handler(CallbackQueryHandler(handle_location_callback))

    # 5. Обработчик ошибок
    app.add_error_handler(error_handler)
    return app


def main():
    # Инициализация
    process_manager.initialize_sync()
    logging.info("🚀 Запуск бота")
    if not process_manager.config.telegram_token:
        logging.critical("❌ TELEGRAM_BOT_TOKEN не задан")
        raise ValueError(" TELEGRAM_BOT_TOKEN не задан в .env!")

    app = build_application(process_manager.config.telegram_token)
    print("🚀 Бот запущен. Используйте /start.")
    print("Нажмите Ctrl+C для остановки.")
    app.run_polling(drop_pending_updates=True)
    print("✅ Бот завершил работу.")


if __name__ == "__main__":
    main()
