"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ───────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml - Static defaults checked into the repo
#   2. .env file          - Local developer overrides (not committed)
#   3. Environment vars   - Set at deploy time
#
# Only values that were explicitly provided through the environment (or
# .env) override the YAML file, so a tuned `cache.tier1_max_size` in
# config.yaml is not clobbered by the Settings default.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from quizforge.config.settings import Settings

# Settings field -> (section, key) in the resolved configuration dict.
_FIELD_MAP: dict[str, tuple[str, str]] = {
    "redis_url": ("cache", "redis_url"),
    "redis_socket_timeout": ("cache", "redis_socket_timeout"),
    "cache_default_ttl": ("cache", "default_ttl"),
    "cache_tier1_max_size": ("cache", "tier1_max_size"),
    "cache_sweep_interval": ("cache", "sweep_interval"),
    "cache_stats_interval": ("cache", "stats_interval"),
    "selection_cache_ttl": ("selection", "cache_ttl"),
    "max_questions_per_request": ("selection", "max_questions_per_request"),
    "curated_data_dir": ("selection", "curated_data_dir"),
    "generator_timeout_seconds": ("generator", "timeout_seconds"),
    "generator_validate_on_startup": ("generator", "validate_on_startup"),
    "app_env": ("app", "env"),
    "log_level": ("logging", "level"),
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Every section always carries a value for every known key: YAML first,
    then Settings defaults for anything the YAML file leaves out, then
    explicitly set environment values on top.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built settings; a fresh ``Settings()`` when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    explicit = settings.model_fields_set

    defaults: dict = {}
    overrides: dict = {}
    for field_name, (section, key) in _FIELD_MAP.items():
        value = getattr(settings, field_name)
        defaults.setdefault(section, {})[key] = value
        if field_name in explicit:
            overrides.setdefault(section, {})[key] = value

    overrides.setdefault("llm", {})["available_providers"] = settings.get_available_llm_providers()

    resolved: dict = {}
    _deep_merge(resolved, defaults)
    _deep_merge(resolved, yaml_config)
    _deep_merge(resolved, overrides)
    return resolved


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
