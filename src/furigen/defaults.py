from __future__ import annotations

# Learn mode: a word seen at least this many times...
DEFAULT_MIN_EXPOSURES = 4
# ...and seen again within this many words is treated as learned.
DEFAULT_FORGET_DISTANCE = 2500

DEFAULT_ACCENT_MARKER = "＊"
DEFAULT_FLAT_MARKER = "口"

EPUB_MIMETYPE = "application/epub+zip"

PITCH_ACCENT_CSS = """
ruby.pitch_accent > rt {
    color: #c0c0c0;
}
ruby.pitch_flat > rt {
    color: #c0c0c0;
}
"""
