"""Unit tests for Settings and the YAML config loader."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from quizforge.config.loader import _deep_merge, load_config
from quizforge.config.settings import Settings

_ENV_VARS = (
    "REDIS_URL",
    "CACHE_DEFAULT_TTL",
    "CACHE_TIER1_MAX_SIZE",
    "SELECTION_CACHE_TTL",
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write_yaml(tmp_path: Path, text: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.redis_url == ""
        assert settings.cache_default_ttl == 300
        assert settings.selection_cache_ttl == 1800
        assert settings.max_questions_per_request == 50
        assert settings.get_available_llm_providers() == []

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REDIS_URL", "redis://cache:6379/0")
        monkeypatch.setenv("CACHE_DEFAULT_TTL", "60")
        settings = Settings(_env_file=None)
        assert settings.redis_url == "redis://cache:6379/0"
        assert settings.cache_default_ttl == 60

    def test_invalid_values_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, cache_default_ttl=0)

    def test_available_providers(self) -> None:
        settings = Settings(_env_file=None, anthropic_api_key="a", openai_api_key="o")
        assert settings.get_available_llm_providers() == ["anthropic", "openai"]


class TestLoadConfig:
    def test_missing_file_yields_settings_defaults(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "absent.yaml"), settings=Settings(_env_file=None))
        assert config["cache"]["default_ttl"] == 300
        assert config["cache"]["redis_url"] == ""
        assert config["selection"]["cache_ttl"] == 1800
        assert config["llm"]["available_providers"] == []
        assert config["generator"]["validate_on_startup"] is False

    def test_yaml_overrides_defaults(self, tmp_path: Path) -> None:
        path = _write_yaml(tmp_path, "cache:\n  tier1_max_size: 42\nselection:\n  cache_ttl: 60\n")
        config = load_config(path, settings=Settings(_env_file=None))
        assert config["cache"]["tier1_max_size"] == 42
        assert config["cache"]["default_ttl"] == 300
        assert config["selection"]["cache_ttl"] == 60

    def test_explicit_environment_beats_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CACHE_TIER1_MAX_SIZE", "7")
        path = _write_yaml(tmp_path, "cache:\n  tier1_max_size: 42\n")
        config = load_config(path, settings=Settings(_env_file=None))
        assert config["cache"]["tier1_max_size"] == 7

    def test_empty_yaml_file(self, tmp_path: Path) -> None:
        path = _write_yaml(tmp_path, "")
        assert load_config(path, settings=Settings(_env_file=None))["logging"]["level"] == "INFO"

    def test_repository_config_file_loads(self) -> None:
        root = Path(__file__).resolve().parents[2]
        config = load_config(str(root / "config" / "config.yaml"), settings=Settings(_env_file=None))
        assert config["cache"]["default_ttl"] > 0
        assert config["selection"]["max_questions_per_request"] > 0


def test_deep_merge_nested() -> None:
    base = {"a": {"x": 1, "y": 2}, "b": 1}
    _deep_merge(base, {"a": {"y": 3}, "c": 4})
    assert base == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
