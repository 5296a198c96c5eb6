from __future__ import annotations

import re
from typing import Callable

__all__ = [
    "SKIP_TAGS",
    "rewrite_text_nodes",
]

# Text inside these elements is never handed to the callback.
SKIP_TAGS = frozenset(
    {
        "head",
        "title",
        "script",
        "style",
        "ruby",
        "rt",
        "rp",
        "svg",
        "math",
        "textarea",
    }
)

_MARKUP_PATTERN = re.compile(
    r"<!--.*?-->"
    r"|<!\[CDATA\[.*?\]\]>"
    r"|<\?.*?\?>"
    r"|<![^>]*>"
    r"""|<(?:"[^"]*"|'[^']*'|[^'">])*>""",
    re.DOTALL,
)
_TAG_NAME_PATTERN = re.compile(r"<\s*(/)?\s*([A-Za-z][\w:.\-]*)")


def _tag_info(markup: str) -> tuple[str, bool, bool] | None:
    """Return (local name, is closing, is self-closing) for an element tag."""
    match = _TAG_NAME_PATTERN.match(markup)
    if match is None:
        return None
    name = match.group(2).rsplit(":", 1)[-1].lower()
    return name, bool(match.group(1)), markup.rstrip().endswith("/>")


def rewrite_text_nodes(html: str, transform: Callable[[str], str]) -> str:
    """
    Apply ``transform`` to every text run of ``html`` outside SKIP_TAGS.

    Tags, comments, CDATA sections and declarations are copied verbatim;
    only the text between them is replaced. Runs are visited in document
    order.
    """
    pieces: list[str] = []
    # Open SKIP_TAGS elements, innermost last.
    open_skips: list[str] = []
    pos = 0

    def _emit_text(text: str) -> None:
        if open_skips or not text.strip():
            pieces.append(text)
        else:
            pieces.append(transform(text))

    for match in _MARKUP_PATTERN.finditer(html):
        if match.start() > pos:
            _emit_text(html[pos : match.start()])
        markup = match.group(0)
        pieces.append(markup)
        pos = match.end()
        info = _tag_info(markup)
        if info is None:
            continue
        name, closing, self_closing = info
        if name not in SKIP_TAGS or self_closing:
            continue
        if not closing:
            open_skips.append(name)
        elif name in open_skips:
            # Closing an element also closes children whose end tags were
            # omitted, e.g. ``<rt>`` before ``</ruby>``.
            innermost = len(open_skips) - 1 - open_skips[::-1].index(name)
            del open_skips[innermost:]
    if pos < len(html):
        _emit_text(html[pos:])
    return "".join(pieces)
