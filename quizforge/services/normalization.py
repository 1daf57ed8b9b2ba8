"""Normalization of loosely shaped question dicts into ContentRecords.

Generators, curated files and the default pool all describe questions a
little differently (``question`` vs ``prompt``, ``correctIndex`` vs
``correct_index`` ...).  :func:`normalize_item` is the single place that
knows every spelling.  Field precedence, first present wins:

    prompt       question > prompt > text
    choices      options > choices
    index        correctIndex > correct_index > correct > answerIndex
    concept      conceptTested > concept > category > <topic>
    difficulty   difficulty > <requested difficulty>

A non-integer index becomes 0.  Items without a prompt, without choices,
or with an index outside the choices are dropped, never returned.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from quizforge.models.content import ContentRecord, RecordSource

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_EXPLANATION = "No explanation available."

_PROMPT_FIELDS = ("question", "prompt", "text")
_CHOICE_FIELDS = ("options", "choices")
_INDEX_FIELDS = ("correctIndex", "correct_index", "correct", "answerIndex")
_CONCEPT_FIELDS = ("conceptTested", "concept", "category")


def _first(raw: Mapping[str, Any], fields: Iterable[str]) -> Any:
    for field in fields:
        value = raw.get(field)
        if value not in (None, ""):
            return value
    return None


def _default_hint(source: RecordSource, topic: str) -> str:
    if source is RecordSource.GENERATED:
        return f"Think about {topic} fundamentals."
    return "Think carefully about the question."


def _coerce_index(value: Any) -> int:
    # bool is an int subclass; True must not silently become index 1.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def normalize_item(
    raw: Mapping[str, Any],
    *,
    topic: str,
    difficulty: str,
    source: RecordSource,
    position: int,
    timestamp_ms: int | None = None,
) -> ContentRecord | None:
    """Build a :class:`ContentRecord` from one raw item, or ``None`` if unusable."""
    if not isinstance(raw, Mapping):
        return None

    prompt = _first(raw, _PROMPT_FIELDS)
    choices = _first(raw, _CHOICE_FIELDS)
    if not isinstance(prompt, str) or not isinstance(choices, (list, tuple)) or not choices:
        return None

    topic = topic.lower()
    stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    label = raw.get("difficulty") or difficulty

    try:
        return ContentRecord(
            id=f"{source.value}_{stamp}_{position}",
            prompt=prompt,
            choices=tuple(str(choice) for choice in choices),
            correct_choice_index=_coerce_index(_first(raw, _INDEX_FIELDS)),
            explanation=str(raw.get("explanation") or DEFAULT_EXPLANATION),
            concept=str(_first(raw, _CONCEPT_FIELDS) or topic),
            hint=str(raw.get("hint") or _default_hint(source, topic)),
            difficulty_label=str(label).lower(),
            topic=topic,
        )
    except ValidationError as exc:
        logger.debug("record_rejected", topic=topic, position=position, errors=exc.error_count())
        return None


def normalize_batch(
    items: Iterable[Mapping[str, Any]],
    *,
    topic: str,
    difficulty: str,
    source: RecordSource,
) -> list[ContentRecord]:
    """Normalize *items* in order, dropping malformed ones.

    Every record in the batch shares one timestamp and gets a distinct
    position, so ids are unique within the batch.
    """
    stamp = int(time.time() * 1000)
    records: list[ContentRecord] = []
    dropped = 0
    for raw in items:
        record = normalize_item(
            raw,
            topic=topic,
            difficulty=difficulty,
            source=source,
            position=len(records),
            timestamp_ms=stamp,
        )
        if record is None:
            dropped += 1
            continue
        records.append(record)
    if dropped:
        logger.warning("malformed_items_dropped", topic=topic, source=source.value, dropped=dropped)
    return records
