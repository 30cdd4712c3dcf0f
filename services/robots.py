"""robots.txt for crawlers."""

import re

CACHE_CONTROL = 'public, max-age=86400, s-maxage=86400'

ALLOWED = ['/stories', '/verses', '/tags', '/about', '/contact', '/privacy', '/terms']

DISALLOWED_INTERNAL = [
    '/admin',
    '/api/',
    '/api/publish-webhook',
    '/api/publish-proxy',
    '/api/private',
]

DISALLOWED_PRIVATE = [
    '/notifications',
    '/settings',
    '/dashboard',
    '/create',
    '/edit',
    '/[username]/settings',
    '/[username]/dashboard',
    '/[username]/stories/create',
    '/[username]/stories/edit',
]

DISALLOWED_TOOLING = ['/scripts', '/node', '/_next', '/static']

CRAWL_DELAY = 5


def render_robots(site_url: str) -> str:
    site_url = site_url.rstrip('/')
    lines = ['User-agent: *', 'Allow: /', '', '# Allow public pages']
    lines += [f'Allow: {p}' for p in ALLOWED]
    lines += ['', '# Disallow sensitive or internal endpoints']
    lines += [f'Disallow: {p}' for p in DISALLOWED_INTERNAL]
    lines += ['', '# Disallow user-specific pages (require authentication)']
    lines += [f'Disallow: {p}' for p in DISALLOWED_PRIVATE]
    lines += ['', '# Disallow developer/test utilities and script endpoints']
    lines += [f'Disallow: {p}' for p in DISALLOWED_TOOLING]
    lines += [
        '',
        '# Crawl settings',
        f'Crawl-delay: {CRAWL_DELAY}',
        '',
        '# Sitemap location',
        f'Sitemap: {site_url}/sitemap.xml',
        '',
        '# Host declaration',
        f"Host: {re.sub(r'^https?://', '', site_url)}",
    ]
    return '\n'.join(lines)
