"""Unit tests for component assembly in quizforge.main."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from quizforge.config.loader import load_config
from quizforge.config.settings import Settings
from quizforge.main import BUNDLED_DATA_DIR, _build_llm_provider, build_components, shutdown, startup
from quizforge.providers.llm.anthropic_provider import AnthropicLLMProvider
from quizforge.providers.llm.openai_provider import OpenAILLMProvider
from quizforge.services.content_selector import ContentSelector
from quizforge.utils.errors import ConfigurationError


def _settings(**overrides) -> Settings:
    defaults = {
        "openai_api_key": "",
        "anthropic_api_key": "",
        "redis_url": "",
        "curated_data_dir": "",
        "app_env": "test",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


def _config(app_settings: Settings, tmp_path: Path) -> dict:
    return load_config(str(tmp_path / "absent.yaml"), settings=app_settings)


class TestLLMSelection:
    def test_anthropic_preferred(self) -> None:
        provider = _build_llm_provider(_settings(anthropic_api_key="a", openai_api_key="o"))
        assert isinstance(provider, AnthropicLLMProvider)

    def test_openai_when_only_openai_key(self) -> None:
        assert isinstance(_build_llm_provider(_settings(openai_api_key="o")), OpenAILLMProvider)

    def test_none_without_keys(self) -> None:
        assert _build_llm_provider(_settings()) is None


class TestBuildComponents:
    def test_wires_selector_with_bundled_bank(self, tmp_path: Path) -> None:
        app_settings = _settings()
        components = build_components(app_settings, _config(app_settings, tmp_path))

        assert isinstance(components["selector"], ContentSelector)
        assert components["curated_store"].data_dir == BUNDLED_DATA_DIR
        assert components["primary_llm"] is None
        assert components["primary_llm_name"] == "none"
        assert components["generator"].is_available() is False

    def test_custom_data_dir(self, tmp_path: Path) -> None:
        app_settings = _settings(curated_data_dir=str(tmp_path))
        components = build_components(app_settings, _config(app_settings, tmp_path))
        assert components["curated_store"].data_dir == tmp_path

    def test_invalid_config_raises(self, tmp_path: Path) -> None:
        app_settings = _settings()
        config = _config(app_settings, tmp_path)
        config["cache"]["tier1_max_size"] = 0
        with pytest.raises(ConfigurationError):
            build_components(app_settings, config)

    @pytest.mark.asyncio
    async def test_startup_and_shutdown_without_redis(self, tmp_path: Path) -> None:
        app_settings = _settings()
        components = build_components(app_settings, _config(app_settings, tmp_path))

        await startup(components, background=False)
        try:
            assert components["cache"].tier2_enabled is False
            assert "python" in components["curated_store"].topics()
            records = await components["selector"].select_content("python", "easy", 3)
            assert len(records) == 3
            assert all(r.difficulty_label == "easy" for r in records)
        finally:
            await shutdown(components)

    @pytest.mark.asyncio
    async def test_startup_starts_background_tasks(self, tmp_path: Path) -> None:
        app_settings = _settings()
        components = build_components(app_settings, _config(app_settings, tmp_path))

        with patch.object(components["cache"], "start") as start:
            await startup(components)
        start.assert_called_once()

        components["redis_cache"].close = AsyncMock()
        await shutdown(components)
        components["redis_cache"].close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rejected_key_at_startup_falls_back_to_curated(self, tmp_path: Path) -> None:
        app_settings = _settings(openai_api_key="sk-bad", generator_validate_on_startup=True)
        components = build_components(app_settings, _config(app_settings, tmp_path))
        llm = components["primary_llm"]
        llm.validate_credentials = AsyncMock(return_value=False)
        llm.complete = AsyncMock()

        await startup(components, background=False)
        try:
            assert components["generator"].is_available() is False
            records = await components["selector"].select_content("python", "easy", 2)
            assert all(r.id.startswith("fallback_") for r in records)
            llm.complete.assert_not_awaited()
        finally:
            await shutdown(components)

    @pytest.mark.asyncio
    async def test_credentials_not_checked_by_default(self, tmp_path: Path) -> None:
        app_settings = _settings(openai_api_key="sk-test")
        components = build_components(app_settings, _config(app_settings, tmp_path))
        components["primary_llm"].validate_credentials = AsyncMock(return_value=False)

        await startup(components, background=False)
        try:
            components["primary_llm"].validate_credentials.assert_not_awaited()
            assert components["generator"].is_available() is True
        finally:
            await shutdown(components)
