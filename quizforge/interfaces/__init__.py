"""Abstract interfaces (adapter contracts) for quizforge.

Services depend on these ABCs, never on concrete providers, so that cache
stores, LLM backends and question generators can be swapped freely.
"""

from quizforge.interfaces.cache_provider import ICacheProvider
from quizforge.interfaces.llm_provider import ILLMProvider
from quizforge.interfaces.question_generator import IQuestionGenerator

__all__ = ["ICacheProvider", "ILLMProvider", "IQuestionGenerator"]
