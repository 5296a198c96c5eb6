from .annotator import (
    Annotator,
    AnnotatorConfig,
    AnnotatorUnavailableError,
    FugashiAnnotator,
    PlainSegment,
    WordSegment,
)
from .archive import InvalidEpubError, rewrite_epub
from .familiarity import Observation, WordFamiliarityTracker, WordRecord
from .pitch import PitchMarkers, PitchPattern
from .session import LearningSession, LearnPolicy
from .stats import WordStats, summarize, write_word_stats

__all__ = [
    "Annotator",
    "AnnotatorConfig",
    "AnnotatorUnavailableError",
    "FugashiAnnotator",
    "PlainSegment",
    "WordSegment",
    "InvalidEpubError",
    "rewrite_epub",
    "Observation",
    "WordFamiliarityTracker",
    "WordRecord",
    "PitchMarkers",
    "PitchPattern",
    "LearningSession",
    "LearnPolicy",
    "WordStats",
    "summarize",
    "write_word_stats",
]
