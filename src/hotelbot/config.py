from __future__ import annotations

import importlib
import logging
import os
from typing import Optional, Type

from dotenv import load_dotenv

from hotelbot.base_config import HotelBotConfig
from hotelbot.adapters.base import RegistryAdapter
from hotelbot.adapters.memory_adapter import InMemoryRegistryAdapter
from hotelbot.adapters.sqlite_adapter import SQLiteRegistryAdapter
from hotelbot.exceptions import ConfigurationError
from hotelbot.services.clock import DEFAULT_UTC_OFFSET_HOURS

load_dotenv()

DEFAULT_CONFIG_CLASS = "hotelbot.config.EnvironmentHotelBotConfig"
CONFIG_ENV_KEY = "HOTELBOT_CONFIG"
MEMORY_DATABASE_URL = "memory://"

logger = logging.getLogger(__name__)


def _import_config_class(path: str) -> Type[HotelBotConfig]:
    try:
        module_path, class_name = path.rsplit(".", 1)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid config path '{path}'") from exc

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise ConfigurationError(f"Could not import module '{module_path}'") from exc

    try:
        cls = getattr(module, class_name)
    except AttributeError as exc:
        raise ConfigurationError(f"Config class '{class_name}' not found in '{module_path}'") from exc

    if not isinstance(cls, type) or not issubclass(cls, HotelBotConfig):
        raise ConfigurationError(f"{path} is not a subclass of HotelBotConfig")

    return cls


class EnvironmentHotelBotConfig(HotelBotConfig):
    """Default configuration that reads from environment variables."""

    def __init__(self) -> None:
        self._env = os.environ

    def get_database_url(self) -> str:
        return self._env.get("DATABASE_URL", MEMORY_DATABASE_URL)

    def get_groq_api_key(self) -> Optional[str]:
        return self._env.get("GROQ_API_KEY")

    def get_groq_model(self) -> str:
        return self._env.get("GROQ_MODEL", "llama-3.1-70b-versatile")

    def get_llm_timeout(self) -> int:
        try:
            return int(self._env.get("LLM_TIMEOUT", "60"))
        except (TypeError, ValueError):
            return 60

    def get_telegram_bot_token(self) -> Optional[str]:
        return self._env.get("TELEGRAM_BOT_TOKEN")

    def get_hotel_display_name(self) -> str:
        return self._env.get("HOTEL_NAME", "Hotel Bot")

    def get_utc_offset_hours(self) -> float:
        raw = self._env.get("HOTEL_UTC_OFFSET_HOURS")
        if raw is None:
            return DEFAULT_UTC_OFFSET_HOURS
        try:
            offset = float(raw)
        except ValueError as exc:
            raise ConfigurationError(f"HOTEL_UTC_OFFSET_HOURS must be a number, got '{raw}'") from exc
        if not -24 < offset < 24:
            raise ConfigurationError(f"HOTEL_UTC_OFFSET_HOURS out of range: {offset}")
        return offset

    def create_adapter(self) -> RegistryAdapter:
        db_url = self.get_database_url()
        if db_url == MEMORY_DATABASE_URL:
            adapter: RegistryAdapter = InMemoryRegistryAdapter()
        elif db_url.startswith("sqlite:///"):
            adapter = SQLiteRegistryAdapter(db_url)
        else:
            raise ConfigurationError(f"Unsupported DATABASE_URL '{db_url}'")

        adapter.init()
        return adapter


_CONFIG: Optional[HotelBotConfig] = None


def get_config() -> HotelBotConfig:
    global _CONFIG
    if _CONFIG is None:
        class_path = os.getenv(CONFIG_ENV_KEY, DEFAULT_CONFIG_CLASS)
        cls = _import_config_class(class_path)
        _CONFIG = cls()
    return _CONFIG


def set_config(config: Optional[HotelBotConfig]) -> None:
    global _CONFIG
    _CONFIG = config
