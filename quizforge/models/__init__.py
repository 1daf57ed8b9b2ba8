"""quizforge domain models.

    - cache.py    -- CacheStatistics snapshot with derived hit rates
    - content.py  -- ContentRecord (normalized question) and RecordSource
"""

from __future__ import annotations

from quizforge.models.cache import CacheStatistics
from quizforge.models.content import ContentRecord, RecordSource

__all__ = ["CacheStatistics", "ContentRecord", "RecordSource"]
