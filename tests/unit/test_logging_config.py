# -*- coding: utf-8 -*-
"""
Тесты для config/logging_config.py
"""
import logging

from config.logging_config import setup_logging


def test_setup_logging(tmp_path):
    root = logging.getLogger()
    old_level = root.level
    # pytest держит свои обработчики на корневом логгере: на время теста убираем
    saved = root.handlers[:]
    for handler in saved:
        root.removeHandler(handler)

    setup_logging("debug", tmp_path / "logs")
    try:
        assert root.level == logging.DEBUG
        assert sorted(type(h).__name__ for h in root.handlers) == [
            "FileHandler", "RotatingFileHandler", "StreamHandler",
        ]
        assert logging.getLogger("httpx").level == logging.WARNING

        logging.getLogger("forecast_fetcher").error("❌ Не удалось получить прогноз")
        logging.getLogger("forecast_fetcher").info("✅ Прогноз получен")
        for handler in root.handlers:
            handler.flush()

        errors = (tmp_path / "logs" / "errors.log").read_text(encoding="utf-8")
        app = (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")
        assert "Не удалось получить прогноз" in errors
        assert "Прогноз получен" not in errors
        assert "Прогноз получен" in app

        # Повторный вызов не дублирует обработчики
        setup_logging("info", tmp_path / "logs")
        assert len(root.handlers) == 3
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        for handler in saved:
            root.addHandler(handler)
        root.setLevel(old_level)
