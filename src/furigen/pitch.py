from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .defaults import DEFAULT_ACCENT_MARKER, DEFAULT_FLAT_MARKER

__all__ = [
    "PitchPattern",
    "PitchMarkers",
    "classify_accent",
    "split_morae",
    "mark_reading",
]

# Small kana merge with the preceding kana into one mora.
_SMALL_KANA = set("ゃゅょぁぃぅぇぉゎゕゖャュョァィゥェォヮヵヶ")


class PitchPattern(str, Enum):
    ACCENTED = "accented"
    FLAT = "flat"
    NONE = "none"


@dataclass(frozen=True)
class PitchMarkers:
    accented: str = DEFAULT_ACCENT_MARKER
    flat: str = DEFAULT_FLAT_MARKER


def classify_accent(accent_type: int | None) -> PitchPattern:
    """
    Map a UniDic ``aType`` value to a pattern.

    ``0`` is heiban (flat), a positive value names the mora after which the
    pitch drops. Missing or ambiguous accents (``None``) get no marker.
    """
    if accent_type is None or accent_type < 0:
        return PitchPattern.NONE
    if accent_type == 0:
        return PitchPattern.FLAT
    return PitchPattern.ACCENTED


def split_morae(reading: str) -> list[str]:
    morae: list[str] = []
    for ch in reading:
        if ch in _SMALL_KANA and morae:
            morae[-1] += ch
        else:
            morae.append(ch)
    return morae


def mark_reading(
    reading: str,
    pattern: PitchPattern,
    accent_type: int | None,
    markers: PitchMarkers,
) -> str:
    """
    Return ``reading`` with the pitch marker applied.

    The accented marker follows the accented mora. An accent index past the
    end of ``reading`` appends it, and an index of zero or less puts it in
    front. The flat marker is always appended.
    """
    if pattern is PitchPattern.FLAT:
        return reading + markers.flat
    if pattern is PitchPattern.ACCENTED and accent_type is not None:
        morae = split_morae(reading)
        index = min(max(accent_type, 0), len(morae))
        return "".join(morae[:index]) + markers.accented + "".join(morae[index:])
    return reading
