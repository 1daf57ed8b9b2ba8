"""Utility modules for quizforge.

- **errors** -- Domain exception hierarchy rooted at QuizForgeError.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **patterns** -- ``*`` wildcard matching for cache-key invalidation.
- **sampling** -- Fisher-Yates shuffling used when selecting questions.
"""

from quizforge.utils.errors import (
    ConfigurationError,
    ContentUnavailableError,
    GeneratorError,
    InvalidRequestError,
    LLMError,
    QuizForgeError,
    StoreUnavailableError,
)
from quizforge.utils.logging import configure_logging, get_logger
from quizforge.utils.patterns import matches, to_redis_glob, wildcard_to_regex
from quizforge.utils.sampling import fisher_yates_shuffle, sample_without_replacement

__all__ = [
    "ConfigurationError",
    "ContentUnavailableError",
    "GeneratorError",
    "InvalidRequestError",
    "LLMError",
    "QuizForgeError",
    "StoreUnavailableError",
    "configure_logging",
    "fisher_yates_shuffle",
    "get_logger",
    "matches",
    "sample_without_replacement",
    "to_redis_glob",
    "wildcard_to_regex",
]
