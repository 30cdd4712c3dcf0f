"""Publish notifications from the backend when a story goes live."""

from __future__ import annotations

import hmac
import logging
from typing import Any, Mapping, Optional

from config import Settings
from services.backend_proxy import ConfigurationError, ProxyResult
from services.media import site_url
from services.sitemap import url_component

logger = logging.getLogger(__name__)

SECRET_HEADER = 'X-Sitemap-Secret'


def secret_matches(provided: Optional[str], expected: str) -> bool:
    if not provided:
        return False
    return hmac.compare_digest(provided.encode('utf-8'), expected.encode('utf-8'))


class PublishWebhook:
    def __init__(self, settings: Settings):
        self.settings = settings

    def secret(self) -> str:
        if not self.settings.webhook_secret:
            raise ConfigurationError('Webhook secret not configured')
        return self.settings.webhook_secret

    def handle(self, headers: Mapping[str, str], payload: Any) -> ProxyResult:
        try:
            expected = self.secret()
        except ConfigurationError as exc:
            logger.error('Publish webhook rejected: %s', exc)
            return ProxyResult({'error': 'Internal server error', 'details': str(exc)}, 500)

        if not secret_matches(headers.get(SECRET_HEADER), expected):
            logger.warning('Publish webhook called with an invalid secret')
            return ProxyResult({'error': 'Unauthorized'}, 401)

        slug = payload.get('slug') if isinstance(payload, dict) else None
        if not isinstance(slug, str) or not slug.strip():
            return ProxyResult({'error': 'Missing slug'}, 400)

        slug = slug.strip()
        story_url = site_url(f'/stories/{url_component(slug)}', self.settings.site_url)
        logger.info('Story published: %s', story_url)
        return ProxyResult({
            'ok': True,
            'slug': slug,
            'url': story_url,
            'sitemap': site_url('/sitemap.xml', self.settings.site_url),
        }, 200)
