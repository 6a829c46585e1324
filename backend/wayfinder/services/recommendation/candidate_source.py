"""Candidate sources — the narrow read interface onto the venue repository."""

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Iterable

logger = logging.getLogger(__name__)


class CandidateSource(ABC):
    """Returns raw candidate records (Candidate models or plain mappings) for a city."""

    @abstractmethod
    def fetch_candidates(self, city_id: str | None, category: str) -> list[Any]:
        ...


class InMemoryCandidateSource(CandidateSource):
    """Candidate records held in memory, keyed by city. ``None`` city holds shared records."""

    def __init__(self, records: Iterable[Any] = (), city_id: str | None = None):
        self._by_city: dict[str | None, list[Any]] = defaultdict(list)
        self.add(records, city_id)

    def add(self, records: Iterable[Any], city_id: str | None = None) -> None:
        self._by_city[city_id].extend(records)

    def fetch_candidates(self, city_id: str | None, category: str) -> list[Any]:
        records = self._by_city.get(city_id, [])
        matched = [r for r in records if _category_of(r) == category]
        logger.debug(f"Fetched {len(matched)} {category} records for city {city_id!r}")
        return matched


def _category_of(record: Any) -> str | None:
    if isinstance(record, dict):
        return record.get("category")
    return getattr(record, "category", None)
