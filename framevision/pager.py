"""Navigable pages of extracted text."""
from __future__ import annotations

from typing import List, Tuple

from .layout import layout_pages
from .models import Page


class Pager:
    """Holds the laid out pages and the index of the one on display.

    The index is kept inside ``[0, max(0, page_count - 1)]``; moving past
    either end leaves it where it is.
    """

    def __init__(self, display_width_chars: int, max_lines_per_page: int) -> None:
        if display_width_chars < 1:
            raise ValueError("display_width_chars must be at least 1")
        if max_lines_per_page < 1:
            raise ValueError("max_lines_per_page must be at least 1")
        self.display_width_chars = display_width_chars
        self.max_lines_per_page = max_lines_per_page
        self._pages: List[Page] = []
        self._index = 0

    @property
    def pages(self) -> Tuple[Page, ...]:
        return tuple(self._pages)

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def current_index(self) -> int:
        return self._index

    def clear(self) -> None:
        self._pages = []
        self._index = 0

    def append_line(self, text: str) -> None:
        """Lay ``text`` out on its own and append the resulting pages whole."""

        self._pages.extend(
            layout_pages(text, self.display_width_chars, self.max_lines_per_page)
        )
        self._clamp()

    def next_page(self) -> None:
        self._index += 1
        self._clamp()

    def previous_page(self) -> None:
        self._index -= 1
        self._clamp()

    def current_page(self) -> List[str]:
        if not self._pages:
            return []
        return list(self._pages[self._index].lines)

    def _clamp(self) -> None:
        self._index = max(0, min(self._index, len(self._pages) - 1))
