"""Tag editor state: draft text, selected tags and popular suggestions."""

from __future__ import annotations

from typing import Iterable, List, Optional

import bleach

MAX_TAGS = 5
MAX_SUGGESTIONS = 8
COMMIT_KEYS = ('Enter', ',')
LIMIT_MESSAGE = 'Maximum 5 tags per story'


def clean_tag(value: Optional[str]) -> str:
    return bleach.clean(value or '', tags=set(), strip=True).strip()


class TagInput:
    def __init__(self, selected: Optional[Iterable[str]] = None, max_tags: int = MAX_TAGS):
        self.selected: List[str] = list(selected or [])
        self.max_tags = max_tags
        self.draft = ''
        self.message: Optional[str] = None

    def set_draft(self, text: str):
        self.draft = text

    def key(self, key: str) -> bool:
        """Handle a key press; Enter and comma commit the draft."""
        if key in COMMIT_KEYS:
            self.add()
            return True
        return False

    def add(self) -> bool:
        if self.add_value(self.draft):
            self.draft = ''
            return True
        return False

    def add_value(self, value: str) -> bool:
        if len(self.selected) >= self.max_tags:
            self.message = LIMIT_MESSAGE
            return False
        tag = clean_tag(value)
        if not tag or tag in self.selected:
            return False
        self.message = None
        self.selected.append(tag)
        return True

    def remove(self, tag: str):
        self.selected = [t for t in self.selected if t != tag]

    def suggestions(self, available: Iterable[str]) -> List[dict]:
        return [
            {'tag': tag, 'selected': tag in self.selected, 'popular': index < 3}
            for index, tag in enumerate(list(available)[:MAX_SUGGESTIONS])
        ]
