"""Request gate that answers 410 Gone for removed URLs."""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Iterable, Optional, Tuple

from flask import Response, request

from services.deleted_paths import MatchOutcome, RemovedPathEntry, evaluate, parse_entries

logger = logging.getLogger(__name__)

EXCLUDED_PREFIXES: Tuple[str, ...] = (
    '_next/static',
    '_next/image',
    '_next/data',
    'static',
    'favicon.ico',
)


class GateDecision(Enum):
    SHORT_CIRCUIT = 'short_circuit'
    PASS_THROUGH = 'pass_through'


class EdgeGate:
    """Runs before every request and short-circuits removed resources with 410."""

    status_code = 410

    def __init__(self, entries: Iterable[RemovedPathEntry] = (), excluded_prefixes: Iterable[str] = EXCLUDED_PREFIXES):
        self.entries = parse_entries(entries)
        prefixes = '|'.join(re.escape(p) for p in excluded_prefixes)
        self._excluded = re.compile(rf'^/(?:{prefixes})') if prefixes else None

    def applies_to(self, path: str) -> bool:
        return not (self._excluded and self._excluded.match(path or '/'))

    def decide(self, path: str, query: str = '') -> GateDecision:
        if not self.entries or not self.applies_to(path):
            return GateDecision.PASS_THROUGH

        result = evaluate(path, query, self.entries)
        if result.outcome is MatchOutcome.MATCHED:
            logger.info('Removed resource requested: %s (entry %s)', path, result.entry.raw)
            return GateDecision.SHORT_CIRCUIT
        if result.outcome is MatchOutcome.EVALUATION_ERROR:
            logger.warning('Removed-path evaluation failed for %s: %s', path, result.error)
        return GateDecision.PASS_THROUGH

    def handle(self, req=None) -> Optional[Response]:
        """Return the 410 response for a removed resource, or None to let the request through."""
        req = req if req is not None else request
        query = req.query_string.decode('utf-8', errors='replace')
        if self.decide(req.path, query) is GateDecision.SHORT_CIRCUIT:
            return Response('', status=self.status_code)
        return None

    def init_app(self, app):
        app.extensions['edge_gate'] = self
        app.before_request(self.handle)
