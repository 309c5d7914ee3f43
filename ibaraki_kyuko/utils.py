from __future__ import annotations

import re

# Fullwidth exclamation mark (U+FF01) through fullwidth tilde (U+FF5E).
# Everything in this block sits exactly 0xFEE0 above its ASCII counterpart.
FULLWIDTH_FIRST = 0xFF01
FULLWIDTH_LAST = 0xFF5E
FULLWIDTH_OFFSET = 0xFEE0

_EXTRA_REPLACEMENTS = {
    "　": " ",  # ideographic space
    "／": "/",
    "（": "(",
    "）": ")",
}

# Python's str.isspace() set plus U+FEFF (zero width no-break space), which
# pasted bulletin text often starts with.
WHITESPACE = r"\s\ufeff"
WHITESPACE_RE = re.compile(f"[{WHITESPACE}]+")
_EDGE_WHITESPACE_RE = re.compile(f"^[{WHITESPACE}]+|[{WHITESPACE}]+$")


def _half_width_char(ch: str) -> str:
    code = ord(ch)
    if FULLWIDTH_FIRST <= code <= FULLWIDTH_LAST:
        return chr(code - FULLWIDTH_OFFSET)
    return _EXTRA_REPLACEMENTS.get(ch, ch)


def to_half_width(text: str) -> str:
    """Convert fullwidth ASCII, the ideographic space, slash and parentheses to half width.

    Only the U+FF01..U+FF5E block and the explicit extras are touched, so marker
    glyphs (◉ ◎ ◇ ☆), arrows and punctuation such as ・ pass through unchanged.
    """
    return "".join(_half_width_char(ch) for ch in text)


def strip_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub("", text)


def trim(text: str) -> str:
    return _EDGE_WHITESPACE_RE.sub("", text)


def split_words(text: str) -> list[str]:
    return [word for word in WHITESPACE_RE.split(text) if word]
