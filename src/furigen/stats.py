from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .familiarity import WordFamiliarityTracker

__all__ = [
    "WordStat",
    "WordStats",
    "WORD_STATS_SUFFIX",
    "summarize",
    "format_word_stats",
    "word_stats_path",
    "write_word_stats",
]

WORD_STATS_SUFFIX = ".word_stats.txt"


@dataclass(frozen=True)
class WordStat:
    surface: str
    max_distance: int
    times_seen: int


@dataclass
class WordStats:
    total_words: int
    words: list[WordStat] = field(default_factory=list)


def summarize(tracker: WordFamiliarityTracker) -> WordStats:
    """Project the tracker's final state; rows keep first-seen order."""
    rows = [
        WordStat(surface=record.key, max_distance=record.max_distance, times_seen=record.times_seen)
        for record in tracker.records()
    ]
    return WordStats(total_words=tracker.position, words=rows)


def format_word_stats(stats: WordStats) -> str:
    lines = [f"Text length in words: {stats.total_words}", ""]
    for row in stats.words:
        lines.append(f"{row.surface}        distance {row.max_distance} | seen {row.times_seen}")
    return "\n".join(lines) + "\n"


def word_stats_path(output_path: Path) -> Path:
    return output_path.with_name(output_path.name + WORD_STATS_SUFFIX)


def write_word_stats(output_path: Path, stats: WordStats) -> Path:
    target = word_stats_path(output_path)
    target.write_text(format_word_stats(stats), encoding="utf-8")
    return target
