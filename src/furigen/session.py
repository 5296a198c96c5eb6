from __future__ import annotations

from dataclasses import dataclass

from .annotator import Annotator, AnnotatorConfig, PlainSegment, WordSegment
from .defaults import DEFAULT_FORGET_DISTANCE, DEFAULT_MIN_EXPOSURES
from .familiarity import Observation, WordFamiliarityTracker
from .logging_utils import debug_log
from .markup import rewrite_text_nodes
from .ruby import render_ruby
from .stats import WordStats, summarize

__all__ = [
    "LearnPolicy",
    "LearningSession",
]


@dataclass(frozen=True)
class LearnPolicy:
    """
    Decay rule for learn mode.

    A word loses its furigana once it has been seen ``min_exposures`` times
    and its previous occurrence was fewer than ``forget_distance`` words
    ago. A long gap brings the furigana back.
    """

    min_exposures: int = DEFAULT_MIN_EXPOSURES
    forget_distance: int = DEFAULT_FORGET_DISTANCE

    def show_furigana(self, observation: Observation) -> bool:
        distance = observation.distance
        if distance is None or observation.times_seen < self.min_exposures:
            return True
        return distance >= self.forget_distance


class LearningSession:
    """
    Adds furigana to a book one document at a time, in reading order.

    The session owns the familiarity tracker for the whole pass; documents
    must be fed in book order and never concurrently.
    """

    def __init__(
        self,
        annotator: Annotator,
        config: AnnotatorConfig | None = None,
        *,
        learn_mode: bool = False,
        policy: LearnPolicy | None = None,
    ) -> None:
        self.annotator = annotator
        self.config = config or AnnotatorConfig()
        self.learn_mode = learn_mode
        self.policy = policy or LearnPolicy()
        self.tracker = WordFamiliarityTracker()

    @property
    def global_word_position(self) -> int:
        return self.tracker.position

    @property
    def known_words(self) -> frozenset[str]:
        return self.config.known_words

    @property
    def exclusion_rank(self) -> int | None:
        return self.config.exclude_top_n or None

    def process_document(self, html: str) -> str:
        """Return ``html`` with furigana added to its text nodes."""
        return rewrite_text_nodes(html, self.annotate_text)

    def annotate_text(self, text: str) -> str:
        pieces: list[str] = []
        for segment in self.annotator.segment(text, self.config):
            if isinstance(segment, PlainSegment):
                pieces.append(segment.text)
            else:
                pieces.append(self._render_word(segment))
        return "".join(pieces)

    def _render_word(self, word: WordSegment) -> str:
        if word.excluded or word.surface in self.config.known_words:
            return word.surface
        observation = self.tracker.observe(word.surface)
        if self.learn_mode and not self.policy.show_furigana(observation):
            debug_log(
                f"hide {word.surface} at {observation.position} "
                f"(seen {observation.times_seen}, gap {observation.distance})"
            )
            return word.surface
        return render_ruby(
            word.surface,
            word.reading,
            pattern=word.pitch,
            accent_type=word.accent_type,
            markers=self.config.pitch_markers,
        )

    def word_stats(self) -> WordStats:
        return summarize(self.tracker)
