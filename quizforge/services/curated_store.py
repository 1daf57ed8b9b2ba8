"""Curated question bank loaded from a directory of JSON topic files.

Each ``<topic>.json`` file in the data directory contributes one topic (the
lowercased file stem).  Three file shapes are accepted:

    [ {...}, {...} ]                          bare list of questions
    {"questions": [ {...} ]}                  wrapped list
    {"beginner": [...], "advanced": [...]}    level map, flattened in order

The index is built once at startup and only ever replaced wholesale by
:meth:`CuratedContentStore.reload`: a new mapping is built off to the side
and the reference swapped, so concurrent readers see either the old index
or the new one, never a partially loaded one.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import structlog

logger = structlog.get_logger(logger_name=__name__)

RawItem = Mapping[str, Any]
TopicIndex = Mapping[str, tuple[RawItem, ...]]

_EMPTY_INDEX: TopicIndex = MappingProxyType({})


def _extract_items(data: Any) -> list[RawItem] | None:
    """Return the question list for one parsed file, or ``None`` if unrecognised."""
    if isinstance(data, list):
        return [item for item in data if isinstance(item, Mapping)]
    if isinstance(data, Mapping):
        if "questions" in data:
            questions = data["questions"]
            return _extract_items(questions) if isinstance(questions, list) else None
        levels = [value for value in data.values() if isinstance(value, list)]
        if levels:
            return [item for level in levels for item in level if isinstance(item, Mapping)]
    return None


def _read_directory(data_dir: Path) -> dict[str, tuple[RawItem, ...]]:
    """Blocking load of every topic file.  Runs in a worker thread.

    Raises ``OSError`` if the directory itself cannot be listed.  Files that
    cannot be read or parsed are skipped with a warning.
    """
    index: dict[str, tuple[RawItem, ...]] = {}
    for path in sorted(data_dir.iterdir()):
        if path.suffix.lower() != ".json" or not path.is_file():
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("curated_file_unreadable", file=path.name, error=str(exc))
            continue
        items = _extract_items(data)
        if items is None:
            logger.warning("curated_file_unrecognised", file=path.name)
            continue
        index[path.stem.lower()] = tuple(items)
    return index


class CuratedContentStore:
    """Read-mostly topic -> questions index.

    Parameters
    ----------
    data_dir:
        Directory containing ``*.json`` topic files.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self._data_dir = Path(data_dir)
        self._index: TopicIndex = _EMPTY_INDEX
        self._loaded = False

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def is_loaded(self) -> bool:
        """``True`` once the directory has been read successfully at least once."""
        return self._loaded

    async def load(self) -> bool:
        """Build a fresh index from disk and swap it in.

        Returns ``False`` if the directory could not be read, in which case
        the previous index (possibly empty) stays in place.
        """
        try:
            fresh = await asyncio.to_thread(_read_directory, self._data_dir)
        except OSError as exc:
            logger.warning("curated_store_unavailable", path=str(self._data_dir), error=str(exc))
            return False

        self._index = MappingProxyType(fresh)
        self._loaded = True
        logger.info(
            "curated_store_loaded",
            topics=len(fresh),
            questions=sum(len(items) for items in fresh.values()),
        )
        return True

    async def reload(self) -> bool:
        return await self.load()

    def match_topic(self, topic: str) -> tuple[RawItem, ...] | None:
        """Find the question pool for *topic*.

        Exact match on the lowercased topic first; otherwise the first topic
        (in index order) where either name contains the other.
        """
        index = self._index
        query = topic.lower()
        if query in index:
            return index[query]
        for key, items in index.items():
            if key in query or query in key:
                return items
        return None

    def topics(self) -> frozenset[str]:
        return frozenset(self._index)

    def count(self, topic: str) -> int:
        return len(self._index.get(topic.lower(), ()))

    def snapshot(self) -> TopicIndex:
        """The current index.  Safe to iterate; never mutated in place."""
        return self._index
