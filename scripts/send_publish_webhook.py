#!/usr/bin/env python3
"""POST a publish notification to the webhook using the shared secret.

Usage:
    python -m scripts.send_publish_webhook --slug my-story-slug [--url http://localhost:3000]
"""

from __future__ import annotations

import argparse
import sys

import requests

from config import Settings
from services.publish_webhook import SECRET_HEADER


def main():
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description='Send a test publish notification')
    parser.add_argument('--slug', default='test-slug')
    parser.add_argument('--url', '--site-url', dest='url', default=settings.site_url)
    args = parser.parse_args()

    if not settings.webhook_secret:
        print('SITEMAP_WEBHOOK_SECRET is not set', file=sys.stderr)
        sys.exit(1)

    target = f"{args.url.rstrip('/')}/api/publish-webhook"
    try:
        resp = requests.post(
            target,
            json={'slug': args.slug},
            headers={SECRET_HEADER: settings.webhook_secret},
            timeout=15,
        )
    except requests.RequestException as exc:
        print(f'request_failed {exc}', file=sys.stderr)
        sys.exit(1)

    print(f'status={resp.status_code}')
    print(resp.text)
    if resp.status_code != 200:
        sys.exit(1)


if __name__ == '__main__':
    main()
