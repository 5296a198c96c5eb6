from __future__ import annotations

from furigen.markup import rewrite_text_nodes


def _bracket(text: str) -> str:
    return f"[{text}]"


def test_text_runs_are_transformed_in_order() -> None:
    seen: list[str] = []

    def _record(text: str) -> str:
        seen.append(text)
        return text.upper()

    html = "<p>one<b>two</b></p>three"
    assert rewrite_text_nodes(html, _record) == "<p>ONE<b>TWO</b></p>THREE"
    assert seen == ["one", "two", "three"]


def test_skipped_elements_and_special_markup() -> None:
    html = (
        "<!DOCTYPE html><?xml-stylesheet href='a.css'?>"
        "<head><title>t</title></head>"
        "<body><!-- c --><![CDATA[d]]><ruby>r<rt>rt</rt></ruby>x</body>"
    )
    assert rewrite_text_nodes(html, _bracket) == html.replace("x</body>", "[x]</body>")


def test_quoted_angle_brackets_inside_attributes() -> None:
    html = '<p title="a > b">text</p>'
    assert rewrite_text_nodes(html, _bracket) == '<p title="a > b">[text]</p>'


def test_self_closing_and_namespaced_tags() -> None:
    html = "<p>a<br/>b<svg:svg><svg:text>c</svg:text></svg:svg><rt/>d</p>"
    assert rewrite_text_nodes(html, _bracket) == (
        "<p>[a]<br/>[b]<svg:svg><svg:text>c</svg:text></svg:svg><rt/>[d]</p>"
    )


def test_whitespace_runs_are_left_alone() -> None:
    calls: list[str] = []
    html = "<p>\n  </p>"
    assert rewrite_text_nodes(html, lambda text: calls.append(text) or text) == html
    assert calls == []


def test_stray_closing_tag_does_not_unbalance() -> None:
    html = "</ruby><p>x</p>"
    assert rewrite_text_nodes(html, _bracket) == "</ruby><p>[x]</p>"


def test_omitted_rt_end_tag_closes_with_ruby() -> None:
    html = "<p><ruby>猫<rt>ねこ</ruby>と本</p><p>本<ruby>犬<rp>(<rt>いぬ<rp>)</ruby>！</p>"
    assert rewrite_text_nodes(html, _bracket) == (
        "<p><ruby>猫<rt>ねこ</ruby>[と本]</p><p>[本]<ruby>犬<rp>(<rt>いぬ<rp>)</ruby>[！]</p>"
    )
