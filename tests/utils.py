from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Iterable

from furigen.annotator import AnnotatorConfig, PlainSegment, Segment, WordSegment
from furigen.frequency import is_common_word
from furigen.pitch import classify_accent

READINGS = {
    "日本": "にほん",
    "本": "ほん",
    "猫": "ねこ",
    "犬": "いぬ",
    "食べる": "たべる",
    "お茶": "おちゃ",
    "学校": "がっこう",
}
ACCENTS = {
    "本": 1,
    "猫": 1,
    "学校": 0,
}


class DictAnnotator:
    """Longest-match annotator over a fixed reading table."""

    def __init__(
        self,
        readings: dict[str, str] | None = None,
        accents: dict[str, int] | None = None,
    ) -> None:
        self.readings = dict(READINGS if readings is None else readings)
        self.accents = dict(ACCENTS if accents is None else accents)
        self._keys = sorted(self.readings, key=len, reverse=True)
        self.calls: list[str] = []

    def segment(self, text: str, config: AnnotatorConfig) -> list[Segment]:
        self.calls.append(text)
        segments: list[Segment] = []
        plain: list[str] = []
        idx = 0
        while idx < len(text):
            match = next((key for key in self._keys if text.startswith(key, idx)), None)
            if match is None:
                plain.append(text[idx])
                idx += 1
                continue
            if plain:
                segments.append(PlainSegment("".join(plain)))
                plain = []
            accent = self.accents.get(match)
            segments.append(
                WordSegment(
                    surface=match,
                    reading=self.readings[match],
                    accent_type=accent,
                    pitch=classify_accent(accent),
                    excluded=is_common_word(match, config.exclude_top_n),
                )
            )
            idx += len(match)
        if plain:
            segments.append(PlainSegment("".join(plain)))
        return segments


def xhtml(body: str, title: str = "本") -> str:
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<html xmlns="http://www.w3.org/1999/xhtml">\n'
        f"<head><title>{title}</title></head>\n"
        f"<body>{body}</body>\n"
        "</html>\n"
    )


def write_epub(
    path: Path,
    entries: Iterable[tuple[str, bytes | str]],
    *,
    first_name: str = "mimetype",
) -> None:
    """Write a zip whose first entry is ``first_name`` followed by ``entries``."""
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr(zipfile.ZipInfo(first_name), b"application/epub+zip")
        for name, data in entries:
            zf.writestr(name, data, compress_type=zipfile.ZIP_DEFLATED)
