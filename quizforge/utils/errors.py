"""Custom exception hierarchy for quizforge.

All application exceptions inherit from :class:`QuizForgeError`, which
carries an optional ``provider_name`` so error handlers can identify which
backend (e.g. "redis", "anthropic", "curated-bank") caused the failure.

    QuizForgeError  (base -- catch-all for any quizforge error)
    +-- InvalidRequestError      (bad selection arguments, rejected before I/O)
    +-- GeneratorError           (question generation failed or was unusable)
    +-- LLMError                 (any LLM API call failure)
    +-- StoreUnavailableError    (shared cache unreachable or erroring)
    +-- ContentUnavailableError  (no content source can serve the request)
    +-- ConfigurationError       (startup / invalid config)

Only ``InvalidRequestError`` and ``ContentUnavailableError`` ever reach a
consumer of the content selector.  Generator and store failures are
recovered internally and logged.
"""


class QuizForgeError(Exception):
    """Base exception for all quizforge errors.

    ``__str__`` prefixes the provider name in brackets for log scanning,
    e.g. ``[redis] GET failed: Connection refused``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------

class InvalidRequestError(QuizForgeError):
    """Raised when selection arguments are invalid (e.g. ``count <= 0``)."""

    def __init__(
        self,
        message: str = "Invalid content request",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Content sources
# ---------------------------------------------------------------------------

class GeneratorError(QuizForgeError):
    """Raised when the question generator fails or returns unusable output.

    The content selector catches this and falls back to the curated bank.
    """

    def __init__(
        self,
        message: str = "Question generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(QuizForgeError):
    """Raised when an LLM API call fails or returns an empty response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ContentUnavailableError(QuizForgeError):
    """Raised when neither the generator nor the curated bank can serve content.

    Distinct from "no questions for this topic", which is answered from the
    built-in default pool and is not an error.
    """

    def __init__(
        self,
        message: str = "No content source is available",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Cache / infrastructure
# ---------------------------------------------------------------------------

class StoreUnavailableError(QuizForgeError):
    """Raised by the shared cache adapter when the store cannot be reached.

    The cache coordinator treats this as a miss and continues with the
    in-process tier only.
    """

    def __init__(
        self,
        message: str = "Cache store is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(QuizForgeError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
