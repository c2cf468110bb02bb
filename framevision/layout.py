# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 framevision contributors

"""Fixed-width line wrapping and page grouping for the accessory display.

Layout is a pure function of the text and the display geometry:

* no line is longer than ``width`` characters;
* lines break at whitespace, and a word is only split mid-token when it is
  longer than ``width`` on its own;
* embedded line breaks are hard breaks and interior blank lines survive;
* whitespace is dropped only where a break is injected (and around the
  whole text), so the non-whitespace characters are reproduced in order.
"""
from __future__ import annotations

import re
from typing import List

from .models import Page

_WORD_RE = re.compile(r"(\s*)(\S+)")


def _split_word(word: str, width: int) -> List[str]:
    return [word[i : i + width] for i in range(0, len(word), width)]


def _wrap_paragraph(paragraph: str, width: int) -> List[str]:
    lines: List[str] = []
    current = ""
    for match in _WORD_RE.finditer(paragraph):
        space, word = match.groups()
        if current and len(current) + len(space) + len(word) <= width:
            current += space + word
            continue

        if current:
            lines.append(current)
        if len(word) > width:
            chunks = _split_word(word, width)
            lines.extend(chunks[:-1])
            current = chunks[-1]
        else:
            current = word

    lines.append(current)
    return lines


def wrap_text(text: str, width: int) -> List[str]:
    """Wrap ``text`` into lines of at most ``width`` characters."""

    if width < 1:
        raise ValueError("width must be at least 1")

    text = text.strip()
    if not text:
        return []

    lines: List[str] = []
    for paragraph in text.splitlines():
        lines.extend(_wrap_paragraph(paragraph, width))
    return lines


def layout_pages(text: str, width: int, max_lines: int) -> List[Page]:
    """Wrap ``text`` and group the lines into pages of ``max_lines`` lines."""

    if max_lines < 1:
        raise ValueError("max_lines must be at least 1")

    lines = wrap_text(text, width)
    return [
        Page(lines=tuple(lines[start : start + max_lines]))
        for start in range(0, len(lines), max_lines)
    ]
