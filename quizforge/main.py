"""quizforge component assembly.

Wires providers and services together via constructor injection.  One
component set is built per process:

    components = build_components(settings, config)
    await startup(components)
    records = await components["selector"].select_content("python", "easy", 5)
    await shutdown(components)

Configuration comes from ``.env`` / environment (``Settings``) merged with
``config/config.yaml`` (``load_config``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog

from quizforge.config.loader import load_config
from quizforge.config.settings import Settings
from quizforge.interfaces.llm_provider import ILLMProvider
from quizforge.providers.cache.memory_cache import MemoryCacheProvider
from quizforge.providers.cache.redis_cache import RedisCacheProvider
from quizforge.providers.generator.llm_question_generator import LLMQuestionGenerator
from quizforge.providers.llm.anthropic_provider import AnthropicLLMProvider
from quizforge.providers.llm.openai_provider import OpenAILLMProvider
from quizforge.services.cache_coordinator import CacheCoordinator
from quizforge.services.content_selector import ContentSelector
from quizforge.services.curated_store import CuratedContentStore
from quizforge.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)

BUNDLED_DATA_DIR = Path(__file__).resolve().parent / "data" / "quizzes"


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider | None:
    """Select the first LLM provider with a configured API key.

    Priority order: Anthropic -> OpenAI.  ``None`` when neither is set,
    in which case questions come from the curated bank only.
    """
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    return None


def _require_positive(config: dict, section: str, key: str) -> Any:
    value = config.get(section, {}).get(key)
    if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
        raise ConfigurationError(f"{section}.{key} must be a positive number, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# DI assembly
# ---------------------------------------------------------------------------


def build_components(
    app_settings: Settings | None = None, config: dict | None = None
) -> dict[str, Any]:
    """Construct every provider and service instance.

    Nothing touches the network or disk here; see :func:`startup`.

    Returns a flat dict of named components.
    """
    app_settings = app_settings or Settings()
    config = config if config is not None else load_config(settings=app_settings)
    cache_cfg = config.get("cache", {})
    selection_cfg = config.get("selection", {})
    generator_cfg = config.get("generator", {})

    default_ttl = int(_require_positive(config, "cache", "default_ttl"))
    max_size = int(_require_positive(config, "cache", "tier1_max_size"))
    max_count = int(_require_positive(config, "selection", "max_questions_per_request"))

    # -- Cache tiers --
    memory_cache = MemoryCacheProvider(max_size=max_size, ttl=default_ttl)
    redis_cache = RedisCacheProvider(
        url=cache_cfg.get("redis_url", ""),
        socket_timeout=float(cache_cfg.get("redis_socket_timeout", 2.0)),
    )
    coordinator = CacheCoordinator(
        memory_cache,
        redis_cache,
        default_ttl=default_ttl,
        sweep_interval=float(cache_cfg.get("sweep_interval", 60.0)),
        stats_interval=float(cache_cfg.get("stats_interval", 300.0)),
    )

    # -- Content sources --
    data_dir = selection_cfg.get("curated_data_dir") or BUNDLED_DATA_DIR
    curated = CuratedContentStore(data_dir)

    primary_llm = _build_llm_provider(app_settings)
    generator = LLMQuestionGenerator(primary_llm)

    selector = ContentSelector(
        coordinator,
        curated,
        generator,
        cache_ttl=int(selection_cfg.get("cache_ttl", 1800)),
        max_count=max_count,
        generator_timeout=float(generator_cfg.get("timeout_seconds", 0) or 0),
    )

    return {
        "settings": app_settings,
        "config": config,
        "memory_cache": memory_cache,
        "redis_cache": redis_cache,
        "cache": coordinator,
        "curated_store": curated,
        "primary_llm": primary_llm,
        "primary_llm_name": primary_llm.get_provider_name() if primary_llm else "none",
        "generator": generator,
        "selector": selector,
    }


async def startup(components: dict[str, Any], *, background: bool = True) -> None:
    """Connect Redis, load the curated bank and start cache maintenance.

    With ``generator.validate_on_startup`` set, the LLM key is checked once
    here and a rejected key leaves the selector on the curated bank.

    ``background=False`` skips the periodic sweep/report tasks (one-shot
    CLI runs).
    """
    await components["redis_cache"].connect()
    await components["curated_store"].load()

    generator = components["generator"]
    validate = components["config"].get("generator", {}).get("validate_on_startup", False)
    if validate and generator.is_available():
        await generator.verify_credentials()

    if background:
        components["cache"].start()

    logger.info(
        "quizforge_startup",
        tier2_enabled=components["cache"].tier2_enabled,
        curated_topics=len(components["curated_store"].topics()),
        primary_llm=components["primary_llm_name"],
        generator_available=generator.is_available(),
    )


async def shutdown(components: dict[str, Any]) -> None:
    await components["cache"].close()
    logger.info("quizforge_shutdown")
