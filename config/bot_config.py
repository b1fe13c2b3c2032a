# config/bot_config.py
import os
from dataclasses import dataclass
from dotenv import load_dotenv
load_dotenv()

GEOCODING_API_URL = "https://geocoding-api.open-meteo.com/v1/search"
WEATHER_API_URL = "https://api.open-meteo.com/v1/forecast"
STORAGE_KEY = "weather_app_state"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class BotConfig:
    telegram_token: str
    geocoding_url: str = GEOCODING_API_URL
    weather_url: str = WEATHER_API_URL
    language: str = "ru"
    search_debounce_ms: int = 300
    search_min_chars: int = 2
    search_max_results: int = 10
    forecast_days: int = 7
    display_days: int = 3
    geolocation_timeout_sec: int = 60
    max_dashboards: int = 1000
    log_level: str = "INFO"

    @property
    def search_debounce_sec(self) -> float:
        return self.search_debounce_ms / 1000.0

    @classmethod
    def load(cls):
        return cls(
            telegram_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
            geocoding_url=os.getenv("GEOCODING_API_URL", GEOCODING_API_URL),
            weather_url=os.getenv("WEATHER_API_URL", WEATHER_API_URL),
            language=os.getenv("UI_LANGUAGE", "ru").lower(),
            search_debounce_ms=_env_int("SEARCH_DEBOUNCE_MS", 300),
            search_min_chars=_env_int("SEARCH_MIN_CHARS", 2),
            search_max_results=min(_env_int("SEARCH_MAX_RESULTS", 10), 10),
            forecast_days=_env_int("FORECAST_DAYS", 7),
            display_days=_env_int("DISPLAY_DAYS", 3),
            geolocation_timeout_sec=_env_int("GEOLOCATION_TIMEOUT_SEC", 60),
            max_dashboards=_env_int("MAX_DASHBOARDS", 1000),
            log_level=os.getenv("LOG_LEVEL", "INFO")
        )
