from __future__ import annotations

import html

from .pitch import PitchMarkers, PitchPattern, mark_reading, split_morae

__all__ = [
    "katakana_to_hiragana",
    "split_okurigana",
    "render_ruby",
]


def katakana_to_hiragana(text: str) -> str:
    result_chars: list[str] = []
    for ch in text:
        code = ord(ch)
        if 0x30A1 <= code <= 0x30F6:
            result_chars.append(chr(code - 0x60))
        elif ch == "ヽ":
            result_chars.append("ゝ")
        elif ch == "ヾ":
            result_chars.append("ゞ")
        else:
            result_chars.append(ch)
    return "".join(result_chars)


def _is_kana(ch: str) -> bool:
    code = ord(ch)
    return 0x3041 <= code <= 0x309F or 0x30A1 <= code <= 0x30FF


def split_okurigana(surface: str, reading: str) -> tuple[str, str, str, str]:
    """
    Split ``surface`` into (kana prefix, kanji core, core reading, kana suffix).

    Kana at either end of the surface that matches the reading stays outside
    the ruby, so 食べる/たべる becomes ("", "食", "た", "べる"). ``reading``
    must be hiragana.
    """
    folded = katakana_to_hiragana(surface)
    start = 0
    while (
        start < len(surface)
        and start < len(reading)
        and _is_kana(surface[start])
        and folded[start] == reading[start]
    ):
        start += 1
    end = 0
    while (
        len(surface) - end > start
        and len(reading) - end > start
        and _is_kana(surface[-1 - end])
        and folded[-1 - end] == reading[-1 - end]
    ):
        end += 1
    core = surface[start : len(surface) - end]
    core_reading = reading[start : len(reading) - end]
    return surface[:start], core, core_reading, surface[len(surface) - end :]


def render_ruby(
    surface: str,
    reading: str,
    *,
    pattern: PitchPattern = PitchPattern.NONE,
    accent_type: int | None = None,
    markers: PitchMarkers | None = None,
) -> str:
    prefix, core, core_reading, suffix = split_okurigana(surface, reading)
    if not core or not core_reading or core_reading == katakana_to_hiragana(core):
        return surface
    rt = core_reading
    css_class = ""
    if markers is not None and pattern is not PitchPattern.NONE:
        core_accent = accent_type
        if accent_type is not None:
            # The drop sits outside the ruby when the accented mora is kana:
            # on the prefix the marker opens the rt, on okurigana it closes it.
            core_morae = len(split_morae(core_reading))
            core_accent = min(max(accent_type - len(split_morae(prefix)), 0), core_morae)
        rt = mark_reading(core_reading, pattern, core_accent, markers)
        css_class = ' class="pitch_accent"' if pattern is PitchPattern.ACCENTED else ' class="pitch_flat"'
    return f"{prefix}<ruby{css_class}>{core}<rt>{html.escape(rt, quote=False)}</rt></ruby>{suffix}"
