"""
Общие фикстуры pytest.
"""

import pytest

from config.bot_config import BotConfig
from core.db.persisted_state import PersistedState
from core.db.state_db import MemoryStateDB
from tests.fakes import FakeSurface, FakeWeatherClient


@pytest.fixture
def config():
    """Конфигурация без .env: короткий debounce, чтобы тесты шли быстро."""
    return BotConfig(telegram_token="test-token", search_debounce_ms=10)


@pytest.fixture
def store():
    return MemoryStateDB()


@pytest.fixture
def persisted(store):
    return PersistedState(store, "weather_app_state:1")


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def client():
    return FakeWeatherClient()
