"""Cache-key wildcard patterns.

Invalidation patterns use a single wildcard, ``*``, meaning "any sequence
of characters".  Every other character matches itself.  Redis ``SCAN
MATCH`` uses glob syntax where ``?``, ``[``, ``]`` and ``\\`` are special
too, so those are escaped before a pattern is sent to the shared store.
"""

from __future__ import annotations

import re
from functools import lru_cache

_REDIS_GLOB_SPECIALS = re.compile(r"([?\[\]\\])")


@lru_cache(maxsize=256)
def wildcard_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile *pattern* into an anchored regex (use with ``fullmatch``)."""
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")), re.DOTALL)


def matches(pattern: str, key: str) -> bool:
    return wildcard_to_regex(pattern).fullmatch(key) is not None


def to_redis_glob(pattern: str) -> str:
    """Escape everything but ``*`` so Redis treats it as a literal."""
    return _REDIS_GLOB_SPECIALS.sub(r"\\\1", pattern)
