"""Verse viewer state: which verse and moment is showing and at what size."""

from __future__ import annotations

from typing import List, Optional

from services.media import get_moment_image_url

DEFAULT_FONT_SIZE = 32
MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 80
FONT_STEP = 4
EMPTY_CONTENT = 'No content for this verse'


class VersePager:
    def __init__(self, verses: Optional[List[dict]] = None, initial_index: int = 0):
        self.verses = list(verses or [])
        self.verse_index = self._clamp(initial_index, len(self.verses))
        self.moment_index = 0
        self.font_size = DEFAULT_FONT_SIZE
        self.focus_mode = False

    @staticmethod
    def _clamp(index: int, length: int) -> int:
        if length == 0:
            return 0
        return max(0, min(index, length - 1))

    @property
    def current_verse(self) -> Optional[dict]:
        if self.verse_index >= len(self.verses):
            return None
        return self.verses[self.verse_index]

    @property
    def moments(self) -> list:
        verse = self.current_verse or {}
        return verse.get('moments') or []

    @property
    def content(self) -> str:
        verse = self.current_verse or {}
        return verse.get('content') or EMPTY_CONTENT

    @property
    def label(self) -> str:
        return f'Verse {self.verse_index + 1} of {len(self.verses)}'

    @property
    def moment_label(self) -> str:
        return f'{self.moment_index + 1}/{len(self.moments)}'

    def go_to_verse(self, index: int) -> bool:
        if not 0 <= index < len(self.verses) or index == self.verse_index:
            return False
        self.verse_index = index
        self.moment_index = 0
        return True

    def next_verse(self) -> bool:
        return self.go_to_verse(self.verse_index + 1)

    def previous_verse(self) -> bool:
        return self.go_to_verse(self.verse_index - 1)

    def next_moment(self) -> bool:
        if self.moment_index >= len(self.moments) - 1:
            return False
        self.moment_index += 1
        return True

    def previous_moment(self) -> bool:
        if self.moment_index <= 0:
            return False
        self.moment_index -= 1
        return True

    def zoom_in(self) -> int:
        self.font_size = min(self.font_size + FONT_STEP, MAX_FONT_SIZE)
        return self.font_size

    def zoom_out(self) -> int:
        self.font_size = max(self.font_size - FONT_STEP, MIN_FONT_SIZE)
        return self.font_size

    def toggle_focus_mode(self) -> bool:
        self.focus_mode = not self.focus_mode
        return self.focus_mode

    def current_image_url(self, api_url: Optional[str]) -> Optional[str]:
        moments = self.moments
        if not moments:
            return None
        return get_moment_image_url(moments[self.moment_index], api_url)
