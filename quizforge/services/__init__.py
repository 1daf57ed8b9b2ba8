"""quizforge services: cache coordination, curated content and selection."""

from quizforge.services.cache_coordinator import CacheCoordinator
from quizforge.services.content_selector import ContentSelector, selection_cache_key
from quizforge.services.curated_store import CuratedContentStore
from quizforge.services.normalization import normalize_batch, normalize_item

__all__ = [
    "CacheCoordinator",
    "ContentSelector",
    "CuratedContentStore",
    "normalize_batch",
    "normalize_item",
    "selection_cache_key",
]
