"""Quiz content records served to consumers.

Every question that leaves the content selector is a :class:`ContentRecord`,
regardless of whether it came from the generator, the shared cache or the
curated bank.  Records are frozen and validate their own invariants, so a
record that exists is always renderable: it has a prompt, at least one
choice, and a correct index that points at one of those choices.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RecordSource(str, Enum):  # noqa: UP042
    """Where a record originated.  Used as the prefix of its ``id``."""

    GENERATED = "ai"
    CURATED = "fallback"


class ContentRecord(BaseModel):
    """A single normalized multiple-choice question."""

    model_config = ConfigDict(frozen=True)

    id: str
    prompt: str = Field(min_length=1)
    choices: tuple[str, ...] = Field(min_length=1)
    correct_choice_index: int = Field(ge=0)
    explanation: str
    concept: str
    hint: str
    difficulty_label: str
    topic: str

    @model_validator(mode="after")
    def _check_index_and_topic(self) -> ContentRecord:
        if self.correct_choice_index >= len(self.choices):
            raise ValueError(
                f"correct_choice_index {self.correct_choice_index} out of range "
                f"for {len(self.choices)} choices"
            )
        if self.topic != self.topic.lower():
            raise ValueError("topic must be lowercase")
        return self

    @property
    def correct_choice(self) -> str:
        return self.choices[self.correct_choice_index]
