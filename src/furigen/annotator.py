from __future__ import annotations

import shlex
import warnings
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, Sequence, Union

from .frequency import is_common_word
from .pitch import PitchMarkers, PitchPattern, classify_accent
from .ruby import katakana_to_hiragana
from .dictionary import locate_dictionary
from .logging_utils import debug_log

__all__ = [
    "PlainSegment",
    "WordSegment",
    "Segment",
    "AnnotatorConfig",
    "Annotator",
    "AnnotatorUnavailableError",
    "FugashiAnnotator",
]


class AnnotatorUnavailableError(RuntimeError):
    """Raised when the morphological analyzer cannot be initialized."""


@dataclass(frozen=True)
class PlainSegment:
    text: str


@dataclass(frozen=True)
class WordSegment:
    surface: str
    reading: str
    accent_type: int | None = None
    pitch: PitchPattern = PitchPattern.NONE
    lemma: str | None = None
    excluded: bool = False


Segment = Union[PlainSegment, WordSegment]


@dataclass(frozen=True)
class AnnotatorConfig:
    exclude_top_n: int = 0
    known_words: frozenset[str] = field(default_factory=frozenset)
    pitch_markers: PitchMarkers | None = None


class Annotator(Protocol):
    def segment(self, text: str, config: AnnotatorConfig) -> Sequence[Segment]:
        """
        Split ``text`` into plain runs and word units.

        Concatenating every segment's surface text must give back ``text``.
        """
        ...


def _is_cjk_char(ch: str) -> bool:
    if not ch:
        return False
    code = ord(ch)
    return (
        0x4E00 <= code <= 0x9FFF
        or 0x3400 <= code <= 0x4DBF
        or 0x20000 <= code <= 0x2A6DF
        or 0x2A700 <= code <= 0x2EBEF
        or 0x30000 <= code <= 0x3134F
        or 0xF900 <= code <= 0xFAFF
        or 0x2F800 <= code <= 0x2FA1F
        or ch in "々〆ヵヶ"
    )


def _contains_cjk(text: str) -> bool:
    return any(_is_cjk_char(ch) for ch in text)


def _feature_value(token: Any, names: Sequence[str]) -> Optional[str]:
    feature = getattr(token, "feature", None)
    if feature is None:
        return None
    for attr in names:
        if hasattr(feature, attr):
            value = getattr(feature, attr)
        else:
            try:
                value = feature[attr]
            except Exception:  # pragma: no cover - feature object may not be subscriptable
                value = None
        if value and value != "*":
            return str(value)
    return None


_ACCENT_FIELDS = ("aType", "accentType", "pitchAccentType")
_ACCENT_SAMPLE_TEXT = "日本の本"


def _has_accent_data(tagger: Callable[[str], Any]) -> bool:
    """True when the dictionary behind ``tagger`` reports UniDic accent types."""
    return any(_feature_value(word, _ACCENT_FIELDS) is not None for word in tagger(_ACCENT_SAMPLE_TEXT))


class FugashiAnnotator:
    """Fugashi (MeCab + UniDic) implementation of the annotator contract."""

    def __init__(self, tagger: Callable[[str], Any] | None = None) -> None:
        self._tagger = tagger if tagger is not None else self._build_tagger()
        self._kakasi_converter = self._build_kakasi_converter()

    def segment(self, text: str, config: AnnotatorConfig) -> list[Segment]:
        segments: list[Segment] = []
        if not text:
            return segments
        pos = 0
        for raw in self._tagger(text):
            surface = raw.surface
            if not surface:
                continue
            start = text.find(surface, pos)
            if start == -1:
                continue
            if start > pos:
                self._append_plain(segments, text[pos:start])
            pos = start + len(surface)
            word = self._word_segment(raw, surface, config) if _contains_cjk(surface) else None
            if word is None:
                self._append_plain(segments, surface)
            else:
                segments.append(word)
        if pos < len(text):
            self._append_plain(segments, text[pos:])
        return segments

    @staticmethod
    def _append_plain(segments: list[Segment], text: str) -> None:
        if segments and isinstance(segments[-1], PlainSegment):
            segments[-1] = PlainSegment(segments[-1].text + text)
        else:
            segments.append(PlainSegment(text))

    def _word_segment(self, raw: Any, surface: str, config: AnnotatorConfig) -> WordSegment | None:
        reading = self._reading_for_token(raw, surface)
        if not reading:
            return None
        lemma = _feature_value(raw, ("lemma",))
        accent_type = self._extract_accent_type(raw)
        excluded = surface in config.known_words or (lemma is not None and lemma in config.known_words)
        if config.exclude_top_n > 0 and is_common_word(surface, config.exclude_top_n):
            excluded = True
        return WordSegment(
            surface=surface,
            reading=reading,
            accent_type=accent_type,
            pitch=classify_accent(accent_type),
            lemma=lemma,
            excluded=excluded,
        )

    def _reading_for_token(self, raw: Any, surface: str) -> str:
        value = _feature_value(raw, ("kana", "reading", "reading_form", "pron", "pronunciation"))
        if value and not _contains_cjk(value):
            return katakana_to_hiragana(value)
        if self._kakasi_converter is None:
            return ""
        converted = self._kakasi_converter(surface)
        if not converted or _contains_cjk(converted):
            return ""
        return katakana_to_hiragana(converted)

    @staticmethod
    def _extract_accent_type(raw: Any) -> int | None:
        value = _feature_value(raw, _ACCENT_FIELDS)
        if value is None:
            return None
        # Several comma-separated candidates means the accent is ambiguous.
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _build_tagger() -> Callable[[str], Any]:
        try:
            from fugashi import GenericTagger, Tagger  # type: ignore
            from fugashi import fugashi as fugashi_core  # type: ignore
        except ImportError as exc:
            raise AnnotatorUnavailableError(
                "Furigana generation requires 'fugashi' (MeCab) to be installed."
            ) from exc

        location = locate_dictionary()
        if location is None:
            debug_log("no UniDic located; using the default MeCab dictionary")
        else:
            debug_log(f"using {location.source} dictionary at {location.path}")
        try:
            if location is not None and not location.packaged:
                args = f"-d {shlex.quote(str(location.path))}"
                feature_wrapper = getattr(fugashi_core, "UnidicFeatures29", None)
                if feature_wrapper is not None:
                    tagger = GenericTagger(args, feature_wrapper)
                else:
                    tagger = GenericTagger(args)
            else:
                # fugashi picks a downloaded ``unidic`` over ``unidic-lite`` on its own.
                tagger = Tagger()
        except RuntimeError as exc:
            where = f"'{location.path}'" if location is not None else "the default MeCab dictionary"
            raise AnnotatorUnavailableError(f"Failed to initialize MeCab with {where}: {exc}") from exc
        if not _has_accent_data(tagger):
            warnings.warn(
                "The MeCab dictionary in use has no pitch-accent data; pitch markers will be omitted.",
                RuntimeWarning,
                stacklevel=3,
            )
        return tagger

    @staticmethod
    def _build_kakasi_converter() -> Optional[Callable[[str], str]]:
        try:
            from pykakasi import kakasi  # type: ignore
        except ImportError as exc:
            raise AnnotatorUnavailableError(
                "Furigana generation requires 'pykakasi' for fallback readings."
            ) from exc

        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", category=DeprecationWarning)
            kk = kakasi()

        def _convert(text: str) -> str:
            try:
                result = kk.convert(text)
            except Exception:  # pragma: no cover - kakasi errors are rare
                return ""
            if isinstance(result, list):
                return "".join(item.get("hira") or item.get("orig", "") for item in result)
            return str(result)

        return _convert
