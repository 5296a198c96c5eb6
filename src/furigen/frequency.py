from __future__ import annotations

from importlib import resources

__all__ = [
    "load_kanji_ranking",
    "common_kanji",
    "is_common_word",
]

_KANJI_RANKING_CACHE: list[str] | None = None
_COMMON_KANJI_CACHE: dict[int, frozenset[str]] = {}


def _parse_ranking(text: str) -> list[str]:
    ranking: list[str] = []
    seen: set[str] = set()
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        for ch in stripped:
            if ch.isspace() or ch in seen:
                continue
            seen.add(ch)
            ranking.append(ch)
    return ranking


def load_kanji_ranking() -> list[str]:
    """Return bundled kanji, most frequent first (first occurrence wins)."""
    global _KANJI_RANKING_CACHE
    if _KANJI_RANKING_CACHE is None:
        data = resources.files("furigen").joinpath("data/kanji_frequency.txt")
        _KANJI_RANKING_CACHE = _parse_ranking(data.read_text(encoding="utf-8"))
    return _KANJI_RANKING_CACHE


def common_kanji(top_n: int) -> frozenset[str]:
    if top_n <= 0:
        return frozenset()
    cached = _COMMON_KANJI_CACHE.get(top_n)
    if cached is None:
        cached = frozenset(load_kanji_ranking()[:top_n])
        _COMMON_KANJI_CACHE[top_n] = cached
    return cached


def is_common_word(surface: str, top_n: int) -> bool:
    """True when every kanji in ``surface`` is among the ``top_n`` most common."""
    if top_n <= 0:
        return False
    common = common_kanji(top_n)
    kanji = [ch for ch in surface if 0x3400 <= ord(ch) <= 0x9FFF or 0xF900 <= ord(ch) <= 0xFAFF]
    return bool(kanji) and all(ch in common for ch in kanji)
