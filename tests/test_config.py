import os
import tempfile

import pytest

from hotelbot.adapters import InMemoryRegistryAdapter, SQLiteRegistryAdapter
from hotelbot.config import (
    EnvironmentHotelBotConfig,
    _import_config_class,
    get_config,
    set_config,
)
from hotelbot.exceptions import ConfigurationError
from hotelbot.services import Registry


@pytest.fixture(autouse=True)
def reset_config():
    set_config(None)
    yield
    set_config(None)


class TestEnvironmentConfig:

    def test_defaults(self, monkeypatch):
        for key in ("DATABASE_URL", "HOTEL_UTC_OFFSET_HOURS", "HOTEL_NAME", "LLM_TIMEOUT"):
            monkeypatch.delenv(key, raising=False)
        config = EnvironmentHotelBotConfig()

        assert config.get_database_url() == "memory://"
        assert config.get_utc_offset_hours() == -3.0
        assert config.get_hotel_display_name() == "Hotel Bot"
        assert config.get_llm_timeout() == 60

    def test_bad_llm_timeout_falls_back(self, monkeypatch):
        monkeypatch.setenv("LLM_TIMEOUT", "soon")
        assert EnvironmentHotelBotConfig().get_llm_timeout() == 60

    def test_offset_from_env(self, monkeypatch):
        monkeypatch.setenv("HOTEL_UTC_OFFSET_HOURS", "5.5")
        assert EnvironmentHotelBotConfig().get_utc_offset_hours() == 5.5

    @pytest.mark.parametrize("raw", ["abc", "24", "-30"])
    def test_bad_offset(self, monkeypatch, raw):
        monkeypatch.setenv("HOTEL_UTC_OFFSET_HOURS", raw)
        with pytest.raises(ConfigurationError):
            EnvironmentHotelBotConfig().get_utc_offset_hours()

    def test_memory_adapter(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "memory://")
        assert isinstance(EnvironmentHotelBotConfig().create_adapter(), InMemoryRegistryAdapter)

    def test_sqlite_adapter(self, monkeypatch):
        with tempfile.TemporaryDirectory() as td:
            monkeypatch.setenv("DATABASE_URL", f"sqlite:///{os.path.join(td, 'hotel.db')}")
            adapter = EnvironmentHotelBotConfig().create_adapter()
            assert isinstance(adapter, SQLiteRegistryAdapter)
            # init() already created the tables
            assert adapter.load_room_pool() is None
            del adapter

    def test_unsupported_database_url(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://localhost/hotel")
        with pytest.raises(ConfigurationError):
            EnvironmentHotelBotConfig().create_adapter()

    def test_create_registry(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "memory://")
        monkeypatch.setenv("HOTEL_UTC_OFFSET_HOURS", "0")
        registry = EnvironmentHotelBotConfig().create_registry()

        assert isinstance(registry, Registry)
        assert registry.list_available_rooms() == list(range(1, 21))
        assert registry.render_time(0) == "1970-01-01T00:00:00+00:00"

    def test_system_prompt_mentions_hotel(self, monkeypatch):
        monkeypatch.setenv("HOTEL_NAME", "Pousada Sol")
        assert "Pousada Sol" in EnvironmentHotelBotConfig().get_system_prompt()


class TestConfigLoading:

    def test_get_config_uses_default_class(self, monkeypatch):
        monkeypatch.delenv("HOTELBOT_CONFIG", raising=False)
        config = get_config()
        assert isinstance(config, EnvironmentHotelBotConfig)
        assert get_config() is config

    def test_set_config(self):
        config = EnvironmentHotelBotConfig()
        set_config(config)
        assert get_config() is config

    @pytest.mark.parametrize("path", [
        "nodots",
        "hotelbot.missing_module.Config",
        "hotelbot.config.MissingConfig",
        "hotelbot.config.get_config",
        "hotelbot.services.Registry",
    ])
    def test_invalid_config_paths(self, path):
        with pytest.raises(ConfigurationError):
            _import_config_class(path)
