"""
Configuration for the StoryVermo web edge
Loads settings from environment variables
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_SITE_URL = 'https://storyvermo.com'
DEFAULT_DELETED_PATHS_FILE = os.path.join(BASE_DIR, 'data', 'deleted_paths.json')


class Config:
    """Flask application configuration"""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY')
    APP_ENV = os.environ.get('APP_ENV', 'production')
    DEBUG = os.environ.get('FLASK_ENV') == 'development' or os.environ.get('FLASK_DEBUG') == '1'

    # Uploads are proxied straight through; the image widget caps files at 50 MB
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', str(60 * 1024 * 1024)))

    # Rate limiting
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    # Monitoring / logging
    SENTRY_DSN = os.environ.get('SENTRY_DSN')
    SENTRY_TRACES_SAMPLE_RATE = float(os.environ.get('SENTRY_TRACES_SAMPLE_RATE', '0.1'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR', 'logs')


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    """Domain settings read once at startup and handed to every handler."""

    api_url: Optional[str] = None
    site_url: str = DEFAULT_SITE_URL
    webhook_secret: Optional[str] = None
    deleted_paths_file: str = DEFAULT_DELETED_PATHS_FILE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        env = os.environ if environ is None else environ
        api_url = _clean(env.get('API_URL')) or _clean(env.get('NEXT_PUBLIC_API_URL'))
        site_url = _clean(env.get('SITE_URL')) or _clean(env.get('NEXT_PUBLIC_SITE_URL')) or DEFAULT_SITE_URL
        return cls(
            api_url=api_url.rstrip('/') if api_url else None,
            site_url=site_url.rstrip('/'),
            webhook_secret=_clean(env.get('SITEMAP_WEBHOOK_SECRET')),
            deleted_paths_file=_clean(env.get('DELETED_PATHS_FILE')) or DEFAULT_DELETED_PATHS_FILE,
        )
