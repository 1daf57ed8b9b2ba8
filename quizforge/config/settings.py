"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources (in priority order):
#
#   1. **Environment variables** e.g. REDIS_URL=redis://localhost:6379/0
#   2. **.env file** in the working directory (local development)
#
# Field `redis_url` maps to env var `REDIS_URL` automatically.  Defaults
# below apply when neither source sets a value.
#
# Empty string = "not configured": an empty REDIS_URL runs the cache in
# memory-only mode, and empty LLM keys disable question generation so
# every request is served from the curated bank.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """quizforge settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === LLM question generation ===
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoints (TogetherAI, Groq, ...)
    openai_model: str = ""  # Empty = gpt-4o-mini
    generator_timeout_seconds: float = Field(default=25.0, ge=0.0)  # 0 = no deadline
    generator_validate_on_startup: bool = False  # One minimal LLM call to check the key

    # === Shared cache (Tier-2) ===
    redis_url: str = ""
    redis_socket_timeout: float = 2.0

    # === In-process cache (Tier-1) ===
    cache_default_ttl: int = Field(default=300, gt=0)  # seconds
    cache_tier1_max_size: int = Field(default=10_000, gt=0)
    cache_sweep_interval: float = Field(default=60.0, ge=0.0)  # 0 = no background sweep
    cache_stats_interval: float = Field(default=300.0, ge=0.0)  # 0 = no periodic report

    # === Content selection ===
    selection_cache_ttl: int = Field(default=1800, ge=0)
    max_questions_per_request: int = Field(default=50, gt=0)
    curated_data_dir: str = ""  # Empty = bundled quizforge/data/quizzes

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_llm_providers(self) -> list[str]:
        """Return LLM provider names that have non-empty API keys configured."""
        providers: list[str] = []
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.openai_api_key:
            providers.append("openai")
        return providers
