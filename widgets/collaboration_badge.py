"""Badge shown on stories that accept contributions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Badge:
    label: str
    contributor_count: int
    extra: Optional[str] = None


def _author_key(author: Any):
    if not isinstance(author, dict):
        return None
    return author.get('id') or author.get('username')


def collaboration_badge(story: dict) -> Optional[Badge]:
    if not story or not story.get('allow_contributions'):
        return None

    authors = set()
    if story.get('creator'):
        authors.add(_author_key(story['creator']))
    for verse in story.get('verses') or []:
        if isinstance(verse, dict) and verse.get('author'):
            authors.add(_author_key(verse['author']))

    contributors = len(authors) - 1
    if contributors > 0:
        return Badge(f'{len(authors)} Contributors', contributors, f'+{contributors}')
    return Badge('Open to Collab', 0)
