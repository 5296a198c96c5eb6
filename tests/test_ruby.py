from __future__ import annotations

import pytest

from furigen.pitch import PitchMarkers, PitchPattern
from furigen.ruby import katakana_to_hiragana, render_ruby, split_okurigana


def test_katakana_to_hiragana() -> None:
    assert katakana_to_hiragana("ガッコウ") == "がっこう"
    assert katakana_to_hiragana("ヴァ本") == "ゔぁ本"


@pytest.mark.parametrize(
    "surface, reading, expected",
    [
        ("日本", "にほん", ("", "日本", "にほん", "")),
        ("食べる", "たべる", ("", "食", "た", "べる")),
        ("お茶", "おちゃ", ("お", "茶", "ちゃ", "")),
        ("取り消し", "とりけし", ("", "取り消", "とりけ", "し")),
    ],
)
def test_split_okurigana(surface, reading, expected) -> None:
    assert split_okurigana(surface, reading) == expected


def test_render_ruby_wraps_only_the_kanji_core() -> None:
    assert render_ruby("食べる", "たべる") == "<ruby>食<rt>た</rt></ruby>べる"
    assert render_ruby("お茶", "おちゃ") == "お<ruby>茶<rt>ちゃ</rt></ruby>"


def test_render_ruby_skips_kana_only_words() -> None:
    assert render_ruby("する", "する") == "する"


def test_render_ruby_with_pitch_markers() -> None:
    markers = PitchMarkers(accented="＊", flat="口")
    assert (
        render_ruby("本", "ほん", pattern=PitchPattern.ACCENTED, accent_type=1, markers=markers)
        == '<ruby class="pitch_accent">本<rt>ほ＊ん</rt></ruby>'
    )
    assert (
        render_ruby("学校", "がっこう", pattern=PitchPattern.FLAT, accent_type=0, markers=markers)
        == '<ruby class="pitch_flat">学校<rt>がっこう口</rt></ruby>'
    )
    # Without markers configured the pattern is ignored.
    assert render_ruby("本", "ほん", pattern=PitchPattern.ACCENTED, accent_type=1) == "<ruby>本<rt>ほん</rt></ruby>"


def test_render_ruby_shifts_accent_past_kana_prefix() -> None:
    markers = PitchMarkers(accented="＊", flat="口")
    # おちゃ accented on the 2nd mora (ちゃ) -> marker after ちゃ in the core reading.
    assert (
        render_ruby("お茶", "おちゃ", pattern=PitchPattern.ACCENTED, accent_type=2, markers=markers)
        == 'お<ruby class="pitch_accent">茶<rt>ちゃ＊</rt></ruby>'
    )


def test_render_ruby_marks_accent_on_prefix_or_okurigana_at_rt_edges() -> None:
    markers = PitchMarkers(accented="＊", flat="口")
    # おちゃ accented on お: the drop comes before the kanji core.
    assert (
        render_ruby("お茶", "おちゃ", pattern=PitchPattern.ACCENTED, accent_type=1, markers=markers)
        == 'お<ruby class="pitch_accent">茶<rt>＊ちゃ</rt></ruby>'
    )
    # たべる accented on べ: the drop comes after the kanji core.
    assert (
        render_ruby("食べる", "たべる", pattern=PitchPattern.ACCENTED, accent_type=2, markers=markers)
        == '<ruby class="pitch_accent">食<rt>た＊</rt></ruby>べる'
    )


def test_render_ruby_escapes_markers() -> None:
    markers = PitchMarkers(accented="<", flat="&")
    assert render_ruby("学校", "がっこう", pattern=PitchPattern.FLAT, accent_type=0, markers=markers).endswith(
        "<rt>がっこう&amp;</rt></ruby>"
    )
