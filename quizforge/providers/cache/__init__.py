"""Cache store providers: in-process memory (Tier-1) and Redis (Tier-2)."""

from quizforge.providers.cache.memory_cache import MemoryCacheProvider
from quizforge.providers.cache.redis_cache import RedisCacheProvider

__all__ = ["MemoryCacheProvider", "RedisCacheProvider"]
