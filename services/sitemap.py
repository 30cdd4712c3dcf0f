"""
XML sitemap built from the static pages plus whatever the backend lists:
trending tags, creator profiles, stories with their verses and tags.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Optional, Tuple
from urllib.parse import quote
from xml.sax.saxutils import escape

import requests

from config import Settings

logger = logging.getLogger(__name__)

CACHE_CONTROL = 'public, max-age=3600, s-maxage=7200'
FALLBACK_CACHE_CONTROL = 'public, max-age=300, s-maxage=600'
USER_AGENT = 'StoryVermo-Sitemap-Generator'
FETCH_TIMEOUT = 10

MAX_TAGS = 200
MAX_PROFILES = 2000
MAX_STORIES = 5000
MAX_STORY_PAGES = 50
PROFILE_ENDPOINTS = ('/api/profiles/', '/api/users/', '/api/creators/')

STATIC_PAGES = [
    ('/', '1.0', 'hourly'),
    ('/pricing', '0.8', 'weekly'),
    ('/about', '0.5', 'monthly'),
    ('/contact', '0.4', 'monthly'),
    ('/privacy', '0.1', 'yearly'),
    ('/terms', '0.1', 'yearly'),
    ('/tags', '0.7', 'daily'),
    ('/verses', '0.6', 'weekly'),
    ('/login', '0.2', 'monthly'),
    ('/signup', '0.2', 'monthly'),
    ('/saved', '0.3', 'weekly'),
    ('/search', '0.5', 'weekly'),
]

FALLBACK_PAGES = [
    ('/', '1.0', 'daily'),
    ('/pricing', '0.8', 'weekly'),
    ('/tags', '0.7', 'daily'),
    ('/verses', '0.6', 'weekly'),
]

_XML_ENTITIES = {'"': '&quot;', "'": '&apos;'}


@dataclass
class SitemapUrl:
    loc: str
    priority: str = '0.5'
    changefreq: str = 'weekly'
    lastmod: Optional[str] = None


def format_date(value: Any) -> Optional[str]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None
    return parsed.date().isoformat()


def url_component(value: str) -> str:
    return quote(value, safe="-_.!~*'()")


def extract_identifier(obj: Any, fields: Iterable[str] = ('slug', 'url_slug', 'public_id', 'id', 'username')) -> Optional[str]:
    if not isinstance(obj, dict):
        return None
    for field in fields:
        value = obj.get(field)
        if value:
            text = str(value).strip()
            if text:
                return text
    return None


def extract_username(obj: Any) -> Optional[str]:
    if not isinstance(obj, dict):
        return None
    user = obj.get('user')
    return (
        obj.get('username')
        or obj.get('user_name')
        or obj.get('slug')
        or obj.get('url_slug')
        or (user.get('username') if isinstance(user, dict) else None)
    )


def render_xml(urls: Iterable[SitemapUrl]) -> str:
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for u in urls:
        parts.append('  <url>')
        parts.append(f'    <loc>{escape(u.loc, _XML_ENTITIES)}</loc>')
        if u.lastmod:
            parts.append(f'    <lastmod>{u.lastmod}</lastmod>')
        parts.append(f'    <changefreq>{u.changefreq or "weekly"}</changefreq>')
        parts.append(f'    <priority>{u.priority or "0.5"}</priority>')
        parts.append('  </url>')
    parts.append('</urlset>')
    return '\n'.join(parts)


class _UrlSet:
    def __init__(self, site_url: str):
        self.site_url = site_url
        self.urls: List[SitemapUrl] = []
        self._seen = set()

    def add(self, path: str, priority: str, changefreq: str, lastmod: Optional[str] = None) -> bool:
        loc = f'{self.site_url}{path}'
        if loc in self._seen:
            return False
        self._seen.add(loc)
        self.urls.append(SitemapUrl(loc, priority, changefreq, lastmod))
        return True

    def add_profile(self, username: Any, creator: Any = None) -> bool:
        if not isinstance(username, str) or not username.strip():
            return False
        lastmod = None
        if isinstance(creator, dict):
            lastmod = format_date(creator.get('updated_at') or creator.get('date_joined'))
        return self.add(f'/{url_component(username.strip())}', '0.6', 'weekly', lastmod)


class SitemapBuilder:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None, timeout: float = FETCH_TIMEOUT):
        self.settings = settings
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def fetch_json(self, path: str, params: Optional[dict] = None) -> Any:
        url = f'{self.settings.api_url}{path}'
        try:
            response = self.session.get(
                url,
                params=params,
                headers={'Accept': 'application/json', 'User-Agent': USER_AGENT},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error('Sitemap fetch error: %s %s', url, exc)
            return None
        if not response.ok:
            logger.error('Sitemap fetch failed: %s (%s)', url, response.status_code)
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.error('Sitemap fetch returned invalid JSON: %s %s', url, exc)
            return None

    def _add_tags(self, urls: _UrlSet):
        tags = self.fetch_json('/api/tags/trending/')
        if not isinstance(tags, list):
            return
        for tag in tags[:MAX_TAGS]:
            slug = extract_identifier(tag, ('slug', 'name'))
            if slug:
                urls.add(f'/tags/{url_component(slug)}', '0.7', 'daily')

    def _add_profiles(self, urls: _UrlSet):
        for endpoint in PROFILE_ENDPOINTS:
            page = 1
            fetched = 0
            while fetched < MAX_PROFILES:
                data = self.fetch_json(endpoint, params={'page': page})
                if not data:
                    break
                if isinstance(data, list):
                    items = data
                elif isinstance(data, dict) and isinstance(data.get('results'), list):
                    items = data['results']
                else:
                    items = None
                if not items:
                    break

                for profile in items:
                    username = extract_username(profile)
                    if username:
                        urls.add_profile(username, profile)
                        fetched += 1

                if isinstance(data, list) or not data.get('next'):
                    break
                page += 1

            if fetched:
                logger.info('Profiles fetched from %s: %d', endpoint, fetched)
                return

    def _add_story(self, urls: _UrlSet, story: dict) -> bool:
        slug = extract_identifier(story, ('slug', 'url_slug', 'public_id'))
        if not slug:
            return False
        lastmod = format_date(story.get('updated_at') or story.get('created_at'))
        if not urls.add(f'/stories/{url_component(slug)}', '0.9', 'daily', lastmod):
            return False

        creator = story.get('creator') or story.get('author') or story.get('user')
        if creator:
            username = extract_username(creator)
            if username:
                urls.add_profile(username, creator)
        if not story.get('creator') and not story.get('author'):
            top_level = story.get('creator_username') or story.get('author_username') or story.get('username')
            if top_level:
                urls.add_profile(top_level)

        for verse in story.get('verses') or []:
            verse_id = extract_identifier(verse, ('slug', 'id', 'public_id'))
            if verse_id:
                urls.add(f'/verses/{url_component(verse_id)}', '0.5', 'weekly')

        for tag in story.get('tags') or []:
            tag_slug = extract_identifier(tag, ('slug', 'name'))
            if tag_slug:
                urls.add(f'/tags/{url_component(tag_slug)}', '0.6', 'weekly')
        return True

    def _add_stories(self, urls: _UrlSet):
        page = 1
        total = 0
        while page <= MAX_STORY_PAGES and total < MAX_STORIES:
            data = self.fetch_json('/api/stories/paginated_stories/', params={'page': page})
            if not isinstance(data, dict) or not data.get('results'):
                logger.info('Stories pagination stopped at page %d', page)
                break
            for story in data['results']:
                if isinstance(story, dict) and self._add_story(urls, story):
                    total += 1
            if not data.get('next'):
                break
            page += 1
        logger.info('Sitemap collected %d stories', total)

    def collect(self) -> List[SitemapUrl]:
        urls = _UrlSet(self.settings.site_url)
        for path, priority, changefreq in STATIC_PAGES:
            urls.add(path, priority, changefreq)

        if not self.settings.api_url:
            logger.warning('API URL not configured; sitemap lists static pages only')
            return urls.urls

        self._add_tags(urls)
        self._add_profiles(urls)
        self._add_stories(urls)
        return urls.urls

    def fallback(self) -> str:
        return render_xml(
            SitemapUrl(f'{self.settings.site_url}{path}', priority, changefreq)
            for path, priority, changefreq in FALLBACK_PAGES
        )

    def build(self) -> Tuple[str, str]:
        """Return the sitemap XML and the Cache-Control value to serve it with."""
        try:
            urls = self.collect()
            xml = render_xml(urls)
        except Exception:  # noqa: BLE001
            logger.exception('Sitemap generation error')
            return self.fallback(), FALLBACK_CACHE_CONTROL
        logger.info('Sitemap generated: %d URLs, %d bytes', len(urls), len(xml))
        return xml, CACHE_CONTROL
