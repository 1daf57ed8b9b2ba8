"""LLM-backed question generator.

Prompts whichever :class:`ILLMProvider` is configured for a batch of
multiple-choice questions and pulls the JSON payload out of the reply.
The payload is returned loosely shaped; normalization into
:class:`~quizforge.models.content.ContentRecord` happens in the content
selector.
"""

from __future__ import annotations

import json
import re
from typing import Any

import structlog

from quizforge.interfaces.llm_provider import ILLMProvider
from quizforge.interfaces.question_generator import IQuestionGenerator
from quizforge.utils.errors import GeneratorError, LLMError

logger = structlog.get_logger(logger_name=__name__)

# LLMs wrap JSON in ```json ... ``` fences despite being told not to.
_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)

_SYSTEM_PROMPT = (
    "You are an experienced programming instructor who writes clear, "
    "accurate multiple-choice quiz questions. Respond with JSON only."
)


class LLMQuestionGenerator(IQuestionGenerator):
    """Generates quiz questions by prompting an LLM.

    Parameters
    ----------
    llm:
        The LLM provider to call, or ``None`` when no key is configured
        (the generator then reports itself unavailable).
    temperature:
        Sampling temperature; questions benefit from some variety.
    """

    def __init__(self, llm: ILLMProvider | None, temperature: float = 0.7) -> None:
        self._llm = llm
        self._temperature = temperature
        self._rejected = False

    async def generate(self, topic: str, count: int, difficulty: str) -> dict[str, Any]:
        if self._llm is None or not self.is_available():
            raise GeneratorError(
                message="No usable LLM provider configured", provider_name=self.get_provider_name()
            )

        try:
            response = await self._llm.complete(
                system_prompt=_SYSTEM_PROMPT,
                user_prompt=self._build_prompt(topic, count, difficulty),
                temperature=self._temperature,
            )
        except LLMError as exc:
            raise GeneratorError(
                message=f"LLM call failed: {exc.message}",
                provider_name=exc.provider_name or self.get_provider_name(),
            ) from exc

        try:
            questions = self._parse_questions(response)
        except (json.JSONDecodeError, ValueError) as exc:
            logger.warning(
                "generator_unparseable_response",
                topic=topic,
                provider=self.get_provider_name(),
                preview=response[:200],
            )
            raise GeneratorError(
                message=f"Could not parse questions from LLM output: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info(
            "questions_generated",
            topic=topic,
            difficulty=difficulty,
            requested=count,
            returned=len(questions),
            provider=self.get_provider_name(),
        )
        return {"questions": questions}

    def is_available(self) -> bool:
        return self._llm is not None and not self._rejected and self._llm.is_available()

    async def verify_credentials(self) -> bool:
        """Check the LLM key with a minimal call.

        A rejected key takes the generator out of service for the life of
        the process, so requests go straight to the curated bank instead of
        failing one LLM call each.
        """
        if self._llm is None:
            return False
        if await self._llm.validate_credentials():
            return True
        self._rejected = True
        logger.warning("generator_credentials_rejected", provider=self.get_provider_name())
        return False

    def get_provider_name(self) -> str:
        return self._llm.get_provider_name() if self._llm is not None else "llm"

    # ------------------------------------------------------------------
    # Prompt / response handling
    # ------------------------------------------------------------------

    @staticmethod
    def _build_prompt(topic: str, count: int, difficulty: str) -> str:
        return (
            f"Generate {count} {difficulty}-level multiple choice quiz questions "
            f"about {topic}.\n"
            "\n"
            "For each question:\n"
            "- Write a clear, educational question\n"
            "- Provide 4 options\n"
            "- Give the zero-based index of the correct option\n"
            "- Include a brief explanation, the concept tested and a short hint\n"
            "\n"
            "Return only a JSON object of this shape:\n"
            '{"questions": [{"question": "...", "options": ["...", "...", "...", "..."], '
            '"correctIndex": 0, "explanation": "...", "conceptTested": "...", '
            f'"hint": "...", "difficulty": "{difficulty}"}}]}}'
        )

    @staticmethod
    def _parse_questions(response: str) -> list[dict[str, Any]]:
        """Pull the question list out of a raw LLM reply.

        Accepts a ``{"questions": [...]}`` object or a bare array, with or
        without code fences or surrounding prose.

        Raises
        ------
        json.JSONDecodeError
            If no JSON can be decoded.
        ValueError
            If the JSON does not contain a list of questions.
        """
        text = response.strip()

        fence_match = _JSON_FENCE_RE.search(text)
        if fence_match:
            text = fence_match.group(1).strip()

        if not text.startswith(("{", "[")):
            starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
            if starts:
                start = min(starts)
                closer = "}" if text[start] == "{" else "]"
                end = text.rfind(closer)
                if end > start:
                    text = text[start : end + 1]

        parsed = json.loads(text)

        if isinstance(parsed, dict):
            parsed = parsed.get("questions")
        if not isinstance(parsed, list):
            raise ValueError("LLM response does not contain a question list")
        return [item for item in parsed if isinstance(item, dict)]
