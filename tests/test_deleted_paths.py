import json

import pytest

from services.deleted_paths import (
    MatchOutcome,
    RemovedPathEntry,
    decode_component,
    evaluate,
    is_gone,
    load_removed_paths,
    normalize,
)

ENTRIES = [
    '/stories/aye-m2oH3uM8',
    '/auth/login?next=%2Fnotifications%2Fget_unread_count%2F',
]


@pytest.mark.parametrize('raw, expected', [
    ('/stories/abc/', '/stories/abc'),
    ('/stories/abc///', '/stories/abc'),
    ('  /stories/abc  ', '/stories/abc'),
    ('/', '/'),
    ('', '/'),
    ('   ', '/'),
    (None, '/'),
])
def test_normalize(raw, expected):
    assert normalize(raw) == expected


@pytest.mark.parametrize('raw', ['/a/b/', ' /x// ', '', '/', '/a?b/'])
def test_normalize_is_idempotent(raw):
    assert normalize(normalize(raw)) == normalize(raw)


def test_entry_parse_splits_on_first_question_mark():
    entry = RemovedPathEntry.parse('/search/?q=a?b')
    assert entry.path == '/search'
    assert entry.query == 'q=a?b'


def test_entry_parse_distinguishes_empty_query():
    assert RemovedPathEntry.parse('/a').query is None
    assert RemovedPathEntry.parse('/a?').query == ''


@pytest.mark.parametrize('raw', [None, '', '   '])
def test_entry_parse_skips_blank(raw):
    assert RemovedPathEntry.parse(raw) is None


def test_decode_component_handles_bad_input():
    assert decode_component('next=%2Fa%2F') == 'next=/a/'
    assert decode_component('a+b') == 'a+b'
    assert decode_component('bad=%zz') == 'bad=%zz'
    assert decode_component('bad=%E0%A4%A') == 'bad=%E0%A4%A'
    assert decode_component('bad=%FF') == 'bad=%FF'
    assert decode_component(None) == ''


@pytest.mark.parametrize('query', ['', 'page=2', 'utm_source=x'])
def test_path_only_entry_ignores_query(query):
    assert is_gone('/stories/aye-m2oH3uM8', query, ENTRIES)
    assert is_gone('/stories/aye-m2oH3uM8/', query, ENTRIES)
    assert not is_gone('/stories/some-other-slug', query, ENTRIES)


def test_query_entry_requires_matching_decoded_query():
    assert is_gone('/auth/login', 'next=%2Fnotifications%2Fget_unread_count%2F', ENTRIES)
    assert is_gone('/auth/login', 'next=/notifications/get_unread_count/', ENTRIES)
    assert not is_gone('/auth/login', 'next=/other', ENTRIES)
    assert not is_gone('/auth/login', '', ENTRIES)
    assert not is_gone('/auth/logout', 'next=%2Fnotifications%2Fget_unread_count%2F', ENTRIES)


def test_request_query_leading_question_mark_is_ignored():
    assert is_gone('/auth/login', '?next=%2Fnotifications%2Fget_unread_count%2F', ENTRIES)


def test_entry_with_trailing_slash_matches_both_forms():
    entries = ['/stories/legacy/']
    assert is_gone('/stories/legacy', '', entries)
    assert is_gone('/stories/legacy/', '', entries)


def test_root_entry_only_matches_root():
    assert is_gone('/', '', ['/'])
    assert not is_gone('/stories', '', ['/'])


def test_empty_and_malformed_lists_never_match():
    assert not is_gone('/stories/aye-m2oH3uM8', '', [])
    assert not is_gone('/stories/aye-m2oH3uM8', '', None)
    assert not is_gone('/anything', '', [None, '', '  '])
    assert is_gone('/stories/aye-m2oH3uM8', '', [None, '', '/stories/aye-m2oH3uM8'])


def test_evaluate_reports_first_matching_entry():
    result = evaluate('/stories/aye-m2oH3uM8', '', ENTRIES + ['/stories/aye-m2oH3uM8/'])
    assert result.outcome is MatchOutcome.MATCHED
    assert result.entry.raw == '/stories/aye-m2oH3uM8'


def test_evaluate_captures_errors():
    class Exploding:
        def __iter__(self):
            raise RuntimeError('boom')

    result = evaluate('/stories/x', '', Exploding())
    assert result.outcome is MatchOutcome.EVALUATION_ERROR
    assert isinstance(result.error, RuntimeError)
    assert not result.matched


def test_load_removed_paths(tmp_path):
    path = tmp_path / 'deleted.json'
    path.write_text(json.dumps(ENTRIES + [None, '']))
    entries = load_removed_paths(str(path))
    assert [e.raw for e in entries] == ENTRIES


def test_load_removed_paths_tolerates_bad_files(tmp_path):
    missing = tmp_path / 'missing.json'
    broken = tmp_path / 'broken.json'
    broken.write_text('{not json')
    wrong_shape = tmp_path / 'object.json'
    wrong_shape.write_text('{"paths": []}')

    assert load_removed_paths(str(missing)) == ()
    assert load_removed_paths(str(broken)) == ()
    assert load_removed_paths(str(wrong_shape)) == ()


def test_cli_check_and_add(tmp_path, capsys):
    from scripts.deleted_paths_cli import add_entry, check_url, list_entries

    path = tmp_path / 'deleted.json'
    path.write_text(json.dumps(ENTRIES))

    check_url(str(path), 'https://storyvermo.com/stories/aye-m2oH3uM8/')
    check_url(str(path), '/auth/login?next=/other')
    add_entry(str(path), ' /stories/old-one/ ')
    add_entry(str(path), '/stories/old-one/')
    list_entries(str(path))

    out = capsys.readouterr().out.splitlines()
    assert out[0] == 'gone entry=/stories/aye-m2oH3uM8'
    assert out[1] == 'not_matched'
    assert out[2] == 'added entries=3'
    assert out[3] == 'already_present'
    assert out[-1] == '/stories/old-one/'


def test_encoded_entry_matches_decoded_path():
    assert is_gone('/stories/café', '', ['/stories/caf%C3%A9'])
    assert is_gone('/stories/café/', '', ['/stories/caf%C3%A9'])
    assert not is_gone('/stories/cafe', '', ['/stories/caf%C3%A9'])


def test_only_one_leading_question_mark_is_dropped():
    assert is_gone('/search', '?q=1', ['/search?q=1'])
    assert not is_gone('/search', '??q=1', ['/search?q=1'])
    assert is_gone('/search', '??q=1', ['/search??q=1'])
