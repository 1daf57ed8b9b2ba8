"""Abstract base class for question generators.

A question generator produces fresh multiple-choice questions for a topic
on demand (typically by prompting an LLM).  Output is loosely shaped: the
content selector normalizes whatever comes back, so generators only need
to honour the ``{"questions": [...]}`` envelope.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


# Concrete implementation: LLMQuestionGenerator
# Located in: quizforge/providers/generator/
class IQuestionGenerator(ABC):
    """Contract for on-demand question generation."""

    @abstractmethod
    async def generate(self, topic: str, count: int, difficulty: str) -> dict[str, Any]:
        """Produce up to *count* questions about *topic*.

        Returns
        -------
        dict
            ``{"questions": [raw_item, ...]}`` where each raw item is a dict
            using any of the recognised field names (``question``/``prompt``,
            ``options``/``choices``, ``correctIndex``/``correct_index`` ...).

        Raises
        ------
        quizforge.utils.errors.GeneratorError
            If generation fails or the output cannot be parsed.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the generator can be called right now."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for logs."""
