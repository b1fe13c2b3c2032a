# -*- coding: utf-8 -*-
"""
Конфигурация путей к хранилищу состояния.
Хранилище — SQLite-таблица ключ/значение (аналог localStorage браузера).
"""

from pathlib import Path

# === Корень проекта ===
PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# === Папка данных ===
DATA_DIR = PROJECT_ROOT / "data"

# === ХРАНИЛИЩЕ СОСТОЯНИЯ: локации по чатам ===
STATE_DB_PATH = DATA_DIR / "state.db"

# === ПАРАМЕТРЫ ПОДКЛЮЧЕНИЯ ===
DB_CONNECTION_TIMEOUT = 30  # секунд


def ensure_data_dir(path: Path = DATA_DIR) -> Path:
    """Создаёт папку данных, если её нет."""
    path.mkdir(parents=True, exist_ok=True)
    return path
