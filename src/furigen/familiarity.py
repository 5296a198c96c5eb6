from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

__all__ = [
    "WordRecord",
    "Observation",
    "WordFamiliarityTracker",
]


@dataclass
class WordRecord:
    """Exposure counters for one word, updated in reading order."""

    key: str
    times_seen: int = 0
    last_seen_position: int | None = None
    max_distance: int = 0


@dataclass(frozen=True)
class Observation:
    """
    Snapshot of a word's record right after one occurrence was counted.

    ``distance`` is the gap to the previous occurrence of the same word, or
    ``None`` on the first occurrence. The tracker carries no visibility
    policy; callers decide what these numbers mean.
    """

    key: str
    position: int
    times_seen: int
    distance: int | None
    max_distance: int

    @property
    def first_occurrence(self) -> bool:
        return self.distance is None


class WordFamiliarityTracker:
    """Counts word occurrences across a whole book in reading order."""

    def __init__(self) -> None:
        self._records: dict[str, WordRecord] = {}
        self._position = 0

    @property
    def position(self) -> int:
        """Number of word occurrences observed so far."""
        return self._position

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def observe(self, key: str) -> Observation:
        self._position += 1
        record = self._records.get(key)
        if record is None:
            record = WordRecord(key=key)
            self._records[key] = record
        distance: int | None = None
        if record.last_seen_position is not None:
            distance = self._position - record.last_seen_position
            record.max_distance = max(record.max_distance, distance)
        record.times_seen += 1
        record.last_seen_position = self._position
        return Observation(
            key=key,
            position=self._position,
            times_seen=record.times_seen,
            distance=distance,
            max_distance=record.max_distance,
        )

    def get(self, key: str) -> WordRecord | None:
        record = self._records.get(key)
        if record is None:
            return None
        # Callers get a copy so the map is only ever changed through observe().
        return WordRecord(
            key=record.key,
            times_seen=record.times_seen,
            last_seen_position=record.last_seen_position,
            max_distance=record.max_distance,
        )

    def records(self) -> Iterator[WordRecord]:
        """Yield copies of every record in first-seen order."""
        for key in self._records:
            record = self.get(key)
            if record is not None:
                yield record
