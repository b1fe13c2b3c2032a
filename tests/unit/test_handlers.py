# -*- coding: utf-8 -*-
"""
Тесты для scripts/weather/location_fsm.py, weather_handler.py и process_manager.py
Update и Bot подменены заглушками, дашборд — AsyncMock.
"""
import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

import process_manager as pm_module
from core.db.state_db import MemoryStateDB
from core.models.location import CURRENT_LOCATION_NAME, Location
from core.utils.api_client import OpenMeteoClient
from process_manager import ProcessManager, process_manager
from scripts.weather import location_fsm, weather_handler
from scripts.weather.dashboard import WeatherDashboard


def _update(chat_id=1, text=None, data=None, location=None):
    return SimpleNamespace(
        effective_chat=SimpleNamespace(id=chat_id, type="private"),
        message=SimpleNamespace(text=text, location=location),
        callback_query=AsyncMock(data=data),
    )


@pytest.fixture
def dashboard(monkeypatch):
    dashboard = AsyncMock()
    monkeypatch.setattr(process_manager, "get_dashboard", lambda bot, chat_id, chat_type: dashboard)
    monkeypatch.setattr(process_manager, "position_providers", {})
    return dashboard


async def test_callbacks_routed(dashboard):
    context = SimpleNamespace(bot=AsyncMock())

    await location_fsm.handle_location_callback(_update(data="pick:1"), context)
    await location_fsm.handle_location_callback(_update(data="remove:2"), context)
    await location_fsm.handle_location_callback(_update(data="add_city"), context)
    await location_fsm.handle_location_callback(_update(data="refresh"), context)
    await location_fsm.handle_location_callback(_update(data="remove:abc"), context)

    dashboard.pick.assert_awaited_once_with(1)
    dashboard.remove.assert_awaited_once_with(2)
    dashboard.add_selected.assert_awaited_once()
    dashboard.refresh.assert_awaited_once()
    print("✅ test_callbacks_routed passed")


async def test_text_is_search_input(dashboard):
    await location_fsm.handle_text_input(_update(text="Осло"), SimpleNamespace(bot=AsyncMock()))
    dashboard.on_input.assert_awaited_once_with("Осло")


async def test_shared_location_sets_current(dashboard):
    update = _update(location=SimpleNamespace(latitude=59.91, longitude=10.75))

    await location_fsm.handle_location_geo(update, SimpleNamespace(bot=AsyncMock()))

    dashboard.manager.set_current.assert_awaited_once_with(Location(CURRENT_LOCATION_NAME, 59.91, 10.75))


async def test_shared_location_delivered_to_waiting_provider(dashboard):
    provider = MagicMock()
    provider.deliver.return_value = True
    process_manager.position_providers[1] = provider
    update = _update(location=SimpleNamespace(latitude=59.91, longitude=10.75))

    await location_fsm.handle_location_geo(update, SimpleNamespace(bot=AsyncMock()))

    provider.deliver.assert_called_once_with(59.91, 10.75)
    dashboard.manager.set_current.assert_not_awaited()


async def test_decline_without_waiting_provider_is_search(dashboard):
    await location_fsm.handle_location_decline(_update(text="✋ Ввести город вручную"), SimpleNamespace(bot=AsyncMock()))
    dashboard.on_input.assert_awaited_once()


async def test_refresh_command(dashboard):
    await weather_handler.refresh(_update(), SimpleNamespace(bot=AsyncMock()))
    dashboard.refresh.assert_awaited_once()


async def test_process_manager_dashboards(config):
    manager = ProcessManager()
    manager.config = config
    manager.state_db = MemoryStateDB()
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    manager.api_client = OpenMeteoClient(http=http)
    manager._initialized = True

    first = manager.get_dashboard(AsyncMock(), 7, "private")
    assert isinstance(first, WeatherDashboard)
    assert manager.get_dashboard(AsyncMock(), 7, "private") is first
    assert manager.get_dashboard(AsyncMock(), 8, "group") is not first
    assert set(manager.position_providers) == {7, 8}

    await manager.shutdown()
    assert manager.dashboards == {}
    await http.aclose()


async def test_idle_dashboards_are_evicted(config):
    config.max_dashboards = 2
    manager = ProcessManager()
    manager.config = config
    manager.state_db = MemoryStateDB()
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    manager.api_client = OpenMeteoClient(http=http)
    manager._initialized = True

    manager.get_dashboard(AsyncMock(), 1, "private")
    manager.get_dashboard(AsyncMock(), 2, "private")
    # Чат 1 снова активен: вытеснен будет чат 2
    manager.get_dashboard(AsyncMock(), 1, "private")
    manager.get_dashboard(AsyncMock(), 3, "private")
    assert list(manager.dashboards) == [1, 3]
    assert set(manager.position_providers) == {1, 3}

    # Чат, ждущий геопозицию, остаётся в памяти
    manager.position_providers[1]._future = asyncio.get_running_loop().create_future()
    manager.get_dashboard(AsyncMock(), 4, "private")
    assert list(manager.dashboards) == [1, 4]

    manager.position_providers[1]._future.cancel()
    await manager.shutdown()
    await http.aclose()


def test_global_instance():
    assert isinstance(pm_module.process_manager, ProcessManager)
