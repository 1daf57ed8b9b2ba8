"""Question generator adapters."""

from quizforge.providers.generator.llm_question_generator import LLMQuestionGenerator

__all__ = ["LLMQuestionGenerator"]
