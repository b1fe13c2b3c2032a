# process_manager.py
# -*- coding: utf-8 -*-
"""
Глобальный координатор зависимостей.
Инициализирует все сервисы один раз и предоставляет к ним доступ.
Состояние локаций здесь не хранится — им владеют дашборды чатов.
"""

import logging
from typing import Dict, Optional

from telegram import Bot

from config.bot_config import STORAGE_KEY, BotConfig
from config.db_config import STATE_DB_PATH, ensure_data_dir
from config.logging_config import setup_logging
from core.db.persisted_state import PersistedState
from core.db.state_db import StateDB
from core.utils.api_client import OpenMeteoClient
from scripts.weather._io.telegram_surface import TelegramPositionProvider, TelegramRenderSurface
from scripts.weather.dashboard import WeatherDashboard

logger = logging.getLogger("process_manager")


class ProcessManager:
    """
    Единый контекст приложения. Все зависимости инициализируются здесь.
    """

    def __init__(self):
        self._initialized = False
        # Конфигурация
        self.config: Optional[BotConfig] = None
        # Хранилище состояния чатов
        self.state_db: Optional[StateDB] = None
        # Клиент Open-Meteo (общий httpx-пул)
        self.api_client: Optional[OpenMeteoClient] = None
        # Дашборды по chat_id
        self.dashboards: Dict[int, WeatherDashboard] = {}
        self.position_providers: Dict[int, TelegramPositionProvider] = {}

    def initialize_sync(self, config: Optional[BotConfig] = None):
        """Синхронная инициализация всех компонентов."""
        if self._initialized:
            return

        # 1. Загрузка конфигурации
        self.config = config or BotConfig.load()
        setup_logging(self.config.log_level)

        # 2. Хранилище состояния
        ensure_data_dir(STATE_DB_PATH.parent)
        self.state_db = StateDB(db_path=STATE_DB_PATH)

        # 3. API-клиент
        self.api_client = OpenMeteoClient(
            geocoding_url=self.config.geocoding_url,
            weather_url=self.config.weather_url,
            language=self.config.language,
            forecast_days=self.config.forecast_days,
        )

        self._initialized = True
        logger.info("✅ ProcessManager: initialized (state_db, api_client ready)")

    def get_dashboard(self, bot: Bot, chat_id: int, chat_type: str) -> WeatherDashboard:
        """Дашборд чата; создаётся при первом обращении и восстанавливает сохранённые локации."""
        dashboard = self.dashboards.pop(chat_id, None)
        if dashboard is not None:
            # Переставляем в конец: порядок словаря задаёт давность обращения
            self.dashboards[chat_id] = dashboard
            return dashboard

        provider = TelegramPositionProvider(
            bot, chat_id, chat_type, timeout=self.config.geolocation_timeout_sec
        )
        dashboard = WeatherDashboard(
            persisted=PersistedState(self.state_db, f"{STORAGE_KEY}:{chat_id}"),
            client=self.api_client,
            surface=TelegramRenderSurface(bot, chat_id),
            position_provider=provider,
            config=self.config,
        )
        self.position_providers[chat_id] = provider
        self.dashboards[chat_id] = dashboard
        logger.info(f"🆕 Дашборд создан для чата {chat_id}")
        self._evict_idle(keep=chat_id)
        return dashboard

    def _evict_idle(self, keep: int):
        """Закрывает самые давние дашборды сверх лимита; чаты, ждущие геопозицию, не трогаем."""
        excess = len(self.dashboards) - self.config.max_dashboards
        if excess <= 0:
            return
        for chat_id in list(self.dashboards):
            if excess <= 0:
                break
            provider = self.position_providers.get(chat_id)
            if chat_id == keep or (provider is not None and provider.waiting):
                continue
            self.dashboards.pop(chat_id).detach()
            self.position_providers.pop(chat_id, None)
            excess -= 1
            logger.debug(f"🧹 Дашборд чата {chat_id} выгружен из памяти")

    async def shutdown(self):
        """Завершение: закрываем дашборды и HTTP-клиент."""
        if not self._initialized:
            return
        for dashboard in self.dashboards.values():
            await dashboard.close()
        self.dashboards.clear()
        self.position_providers.clear()
        if self.api_client is not None:
            await self.api_client.aclose()
        self._initialized = False
        logger.info("🛑 ProcessManager: shut down")


# Глобальный экземпляр: точка доступа для всех модулей
process_manager = ProcessManager()
