"""Removed-URL list: path normalization, entry parsing and matching."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple, Union
from urllib.parse import unquote

logger = logging.getLogger(__name__)

_MALFORMED_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')


def normalize(path: Optional[str]) -> str:
    """Trim whitespace and trailing slashes; an empty result is the root."""
    value = (path or '').strip().rstrip('/')
    return value or '/'


def _strip_one_slash(path: str) -> str:
    return path[:-1] if path.endswith('/') else path


def decode_component(value: Optional[str]) -> str:
    """Percent-decode a path or query, returning it untouched if it can't be decoded.

    '+' is kept literal. A stray '%' or bytes that are not UTF-8 count as a
    decoding failure.
    """
    if not value:
        return ''
    if _MALFORMED_ESCAPE.search(value):
        return value
    try:
        return unquote(value, errors='strict')
    except UnicodeDecodeError:
        return value


def paths_match(entry_path: str, request_path: str) -> bool:
    # Legacy entries were saved both with and without a trailing slash.
    return (
        entry_path == request_path
        or entry_path == _strip_one_slash(request_path)
        or _strip_one_slash(entry_path) == request_path
    )


@dataclass(frozen=True)
class RemovedPathEntry:
    raw: str
    path: str
    query: Optional[str] = None

    @classmethod
    def parse(cls, raw) -> Optional['RemovedPathEntry']:
        if raw is None:
            return None
        text = str(raw).strip()
        if not text:
            return None
        path_part, sep, query_part = text.partition('?')
        return cls(raw=text, path=normalize(path_part), query=query_part if sep else None)

    def matches(self, path: str, query: str) -> bool:
        # entries may be saved percent-encoded while the request path arrives decoded
        if not (paths_match(self.path, path)
                or paths_match(decode_component(self.path), decode_component(path))):
            return False
        if self.query is None:
            return True
        return decode_component(self.query) == decode_component(query)


EntryLike = Union[RemovedPathEntry, str, None]


def parse_entries(raw_entries: Optional[Iterable[EntryLike]]) -> Tuple[RemovedPathEntry, ...]:
    if not raw_entries:
        return ()
    parsed = []
    for raw in raw_entries:
        entry = raw if isinstance(raw, RemovedPathEntry) else RemovedPathEntry.parse(raw)
        if entry is not None:
            parsed.append(entry)
    return tuple(parsed)


def load_removed_paths(file_path: str) -> Tuple[RemovedPathEntry, ...]:
    """Read the JSON array of removed URLs. A missing or broken file yields no entries."""
    try:
        with open(file_path, encoding='utf-8') as fh:
            data = json.load(fh)
    except FileNotFoundError:
        logger.warning('Removed-path list not found at %s; gate disabled', file_path)
        return ()
    except (OSError, ValueError) as exc:
        logger.error('Could not load removed-path list from %s: %s', file_path, exc)
        return ()

    if not isinstance(data, list):
        logger.error('Removed-path list at %s is not a JSON array; ignoring it', file_path)
        return ()

    entries = parse_entries(data)
    logger.info('Loaded %d removed-path entries from %s', len(entries), file_path)
    return entries


class MatchOutcome(Enum):
    MATCHED = 'matched'
    NOT_MATCHED = 'not_matched'
    EVALUATION_ERROR = 'evaluation_error'


@dataclass(frozen=True)
class MatchResult:
    outcome: MatchOutcome
    entry: Optional[RemovedPathEntry] = None
    error: Optional[Exception] = None

    @property
    def matched(self) -> bool:
        return self.outcome is MatchOutcome.MATCHED


NOT_MATCHED = MatchResult(MatchOutcome.NOT_MATCHED)


def evaluate(path: Optional[str], query: Optional[str], entries: Optional[Iterable[EntryLike]]) -> MatchResult:
    """Scan the entries in order and report the first one that covers the request."""
    try:
        request_path = normalize(path)
        request_query = query or ''
        if request_query.startswith('?'):
            request_query = request_query[1:]
        for raw in entries or ():
            entry = raw if isinstance(raw, RemovedPathEntry) else RemovedPathEntry.parse(raw)
            if entry is None:
                continue
            if entry.matches(request_path, request_query):
                return MatchResult(MatchOutcome.MATCHED, entry=entry)
        return NOT_MATCHED
    except Exception as exc:  # noqa: BLE001
        return MatchResult(MatchOutcome.EVALUATION_ERROR, error=exc)


def is_gone(path: Optional[str], query: Optional[str], entries: Optional[Iterable[EntryLike]]) -> bool:
    return evaluate(path, query, entries).matched
