"""LLM provider adapters.

Two concrete implementations of ILLMProvider
(quizforge/interfaces/llm_provider.py):
    - AnthropicLLMProvider -- Claude via the Messages API
    - OpenAILLMProvider    -- gpt-4o-mini or any OpenAI-compatible endpoint

At startup, ``quizforge.main`` picks the first provider whose API key is
configured and hands it to the question generator.
"""

from quizforge.providers.llm.anthropic_provider import AnthropicLLMProvider
from quizforge.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["AnthropicLLMProvider", "OpenAILLMProvider"]
