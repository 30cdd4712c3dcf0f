#!/usr/bin/env python3
"""Maintenance CLI for the removed-URL list served as 410 Gone."""

from __future__ import annotations

import argparse
import json
from urllib.parse import urlsplit

from config import Settings
from services.deleted_paths import RemovedPathEntry, evaluate, load_removed_paths


def list_entries(file_path: str):
    for entry in load_removed_paths(file_path):
        print(entry.raw)


def check_url(file_path: str, url: str):
    parts = urlsplit(url)
    result = evaluate(parts.path or '/', parts.query, load_removed_paths(file_path))
    if result.matched:
        print(f"gone entry={result.entry.raw}")
    else:
        print(result.outcome.value)


def add_entry(file_path: str, raw: str):
    entry = RemovedPathEntry.parse(raw)
    if entry is None:
        print("invalid_entry")
        return
    with open(file_path, encoding='utf-8') as fh:
        data = json.load(fh)
    if entry.raw in data:
        print("already_present")
        return
    data.append(entry.raw)
    with open(file_path, 'w', encoding='utf-8') as fh:
        json.dump(data, fh, indent=2)
        fh.write('\n')
    print(f"added entries={len(data)}")


def main():
    parser = argparse.ArgumentParser(description='StoryVermo removed-URL utility')
    parser.add_argument('--file', default=Settings.from_env().deleted_paths_file)
    sub = parser.add_subparsers(dest='cmd', required=True)

    sub.add_parser('list')

    p1 = sub.add_parser('check')
    p1.add_argument('url', help='path or URL, e.g. "/auth/login?next=/x"')

    p2 = sub.add_parser('add')
    p2.add_argument('entry', help='"/path" or "/path?query"')

    args = parser.parse_args()

    if args.cmd == 'list':
        list_entries(args.file)
    elif args.cmd == 'check':
        check_url(args.file, args.url)
    elif args.cmd == 'add':
        add_entry(args.file, args.entry)


if __name__ == '__main__':
    main()
