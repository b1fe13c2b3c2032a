# -*- coding: utf-8 -*-
"""
Хранилище ключ/значение (строка → строка) для состояния чатов.
Использует SQLite в синхронном режиме: запись короткая и не должна
разрываться точкой await между изменением памяти и сохранением.
"""

import sqlite3
import logging
from pathlib import Path
from typing import Dict, Optional

from config.db_config import DB_CONNECTION_TIMEOUT, STATE_DB_PATH
from core.utils.error_handler import PersistenceError

logger = logging.getLogger("state_db")


class StateDB:
    """
    Хранилище на SQLite.
    Потокобезопасно за счёт локального подключения в каждом методе.
    """

    def __init__(self, db_path: Path = None):
        self.db_path = Path(db_path or STATE_DB_PATH)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Создаёт новое подключение к БД."""
        conn = sqlite3.connect(
            self.db_path,
            timeout=DB_CONNECTION_TIMEOUT,
            check_same_thread=False
        )
        conn.row_factory = sqlite3.Row  # доступ по имени колонки
        return conn

    def _init_db(self):
        """Инициализирует таблицу при первом запуске."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._get_connection()
        try:
            with conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)
            logger.info("БД состояния инициализирована: %s", self.db_path)
        finally:
            conn.close()

    def get(self, key: str) -> Optional[str]:
        """Возвращает значение по ключу или None."""
        try:
            conn = self._get_connection()
            try:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?",
                    (key,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Ошибка чтения ключа {key}: {e}") from e
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        """Записывает значение (вставка или замена)."""
        try:
            conn = self._get_connection()
            try:
                with conn:
                    conn.execute(
                        """
                        INSERT INTO kv_store (key, value) VALUES (?, ?)
                        ON CONFLICT(key) DO UPDATE SET
                            value = excluded.value,
                            updated_at = CURRENT_TIMESTAMP
                        """,
                        (key, value)
                    )
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Ошибка записи ключа {key}: {e}") from e


class MemoryStateDB:
    """То же API в памяти — для тестов и запуска без диска."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
