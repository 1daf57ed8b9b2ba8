"""Abstract base class for LLM service providers.

Defines the contract for any large-language-model backend used to write
quiz questions.  Implementations wrap the Anthropic API (Claude) or an
OpenAI-compatible endpoint; callers stay provider-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: AnthropicLLMProvider, OpenAILLMProvider
# Located in: quizforge/providers/llm/
class ILLMProvider(ABC):
    """Contract for text-completion LLM services."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 4000,
    ) -> str:
        """Generate a text completion from the model.

        Parameters
        ----------
        system_prompt:
            The system/instruction message that sets the model's behaviour.
        user_prompt:
            The user-facing prompt containing the actual request.
        temperature:
            Sampling temperature (0.0 = deterministic, 1.0 = creative).
        max_tokens:
            Upper bound on the number of tokens in the response.

        Returns
        -------
        str
            The model's text response.

        Raises
        ------
        quizforge.utils.errors.LLMError
            If the API call fails or returns an empty response.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable name for this provider (e.g. ``"anthropic"``)."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured (API key present)."""

    async def validate_credentials(self) -> bool:
        """Make a minimal call to check that the configured key works.

        Returns ``False`` on any failure instead of raising.
        """
        try:
            await self.complete("Reply with OK.", "ping", temperature=0.0, max_tokens=5)
        except Exception:  # noqa: BLE001
            return False
        return True
