"""Stateless forwarders from the web edge to the StoryVermo backend API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

from config import Settings

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """A required setting (backend origin, shared secret) is missing."""


class UpstreamError(Exception):
    def __init__(self, status_code: int, details: str = ''):
        super().__init__(f'Backend returned {status_code}')
        self.status_code = status_code
        self.details = details


@dataclass(frozen=True)
class ProxyResult:
    body: Any
    status: int


class BackendProxy:
    """Forwards one inbound call to the backend and relays its answer.

    Successful calls return the backend JSON and status untouched. Failures
    come back as an ``{error, details}`` envelope carrying the backend status,
    or 500 when there is no status to relay. Nothing is retried.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session if session is not None else requests.Session()

    def base_url(self) -> str:
        if not self.settings.api_url:
            raise ConfigurationError('API URL not configured')
        return self.settings.api_url

    @staticmethod
    def session_headers(headers: Optional[Mapping[str, str]]) -> dict:
        """Pick the session cookie and CSRF token off the inbound request."""
        forwarded = {}
        if not headers:
            return forwarded
        cookie = headers.get('Cookie')
        if cookie:
            forwarded['Cookie'] = cookie
        csrf_token = headers.get('X-CSRFToken') or headers.get('X-XSRF-Token')
        if csrf_token:
            forwarded['X-CSRFToken'] = csrf_token
        return forwarded

    def _relay(self, method: str, path: str, *, failure: str, config_error: dict,
               with_details: bool = True, **kwargs) -> ProxyResult:
        try:
            url = f'{self.base_url()}{path}'
        except ConfigurationError as exc:
            logger.error('Cannot proxy %s %s: %s', method, path, exc)
            return ProxyResult(config_error, 500)

        try:
            response = self.session.request(method, url, **kwargs)
            if not response.ok:
                raise UpstreamError(response.status_code, response.text)
            return ProxyResult(response.json(), response.status_code)
        except UpstreamError as exc:
            logger.warning('Backend %s %s failed with %s', method, path, exc.status_code)
            body = {'error': failure}
            if with_details:
                body['details'] = exc.details
            return ProxyResult(body, exc.status_code)
        except (requests.RequestException, ValueError) as exc:
            logger.exception('Backend %s %s raised: %s', method, path, exc)
            body = {'error': 'Internal server error'}
            if with_details:
                body['details'] = str(exc)
            return ProxyResult(body, 500)

    def upload_image(self, files, form=None, headers: Optional[Mapping[str, str]] = None) -> ProxyResult:
        # requests builds the multipart body and boundary itself
        return self._relay(
            'POST',
            '/api/images/',
            failure='Failed to upload image',
            config_error={'error': 'Internal server error', 'details': 'API URL not configured'},
            files=files,
            data=form or None,
            headers=self.session_headers(headers),
        )

    def popular_tags(self) -> ProxyResult:
        return self._relay(
            'GET',
            '/api/tags/popular/',
            failure='Failed to fetch popular tags',
            config_error={'error': 'API configuration error'},
            with_details=False,
            headers={'Accept': 'application/json'},
        )

    def verify_payment(self, reference: str, headers: Optional[Mapping[str, str]] = None) -> ProxyResult:
        forwarded = self.session_headers(headers)
        forwarded['Accept'] = 'application/json'
        return self._relay(
            'GET',
            '/api/payments/verify/',
            failure='Failed to verify payment',
            config_error={'error': 'Internal server error', 'details': 'API URL not configured'},
            params={'reference': reference},
            headers=forwarded,
        )
