from flask import Flask

from config import Settings
from services.deleted_paths import MatchOutcome, MatchResult
from services.edge_gate import EdgeGate, GateDecision
import services.edge_gate as edge_gate_module


def test_removed_story_returns_410(client):
    resp = client.get('/stories/aye-m2oH3uM8')
    assert resp.status_code == 410
    assert resp.data == b''


def test_trailing_slash_is_tolerated(client):
    assert client.get('/stories/aye-m2oH3uM8/').status_code == 410


def test_removed_url_with_query(client):
    resp = client.get('/auth/login?next=%2Fnotifications%2Fget_unread_count%2F')
    assert resp.status_code == 410


def test_query_mismatch_passes_through(client):
    resp = client.get('/auth/login?next=/other')
    assert resp.status_code == 404


def test_other_story_passes_through(client):
    assert client.get('/stories/some-other-slug').status_code == 404


def test_gate_applies_to_existing_routes(make_client, settings, tmp_path):
    path = tmp_path / 'deleted.json'
    path.write_text('["/health"]')
    c = make_client(Settings(api_url=settings.api_url, deleted_paths_file=str(path)))
    assert c.get('/health').status_code == 410


def test_static_prefixes_are_never_gated():
    gate = EdgeGate(['/static/old.css', '/favicon.ico', '/_next/static/chunk.js', '/stories/x'])
    assert gate.decide('/static/old.css') is GateDecision.PASS_THROUGH
    assert gate.decide('/favicon.ico') is GateDecision.PASS_THROUGH
    assert gate.decide('/_next/static/chunk.js') is GateDecision.PASS_THROUGH
    assert gate.decide('/stories/x') is GateDecision.SHORT_CIRCUIT


def test_malformed_entries_do_not_break_the_gate():
    gate = EdgeGate([None, '', '   '])
    assert gate.decide('/stories/anything', 'a=1') is GateDecision.PASS_THROUGH


def test_evaluation_error_passes_through(monkeypatch):
    def broken(path, query, entries):
        return MatchResult(MatchOutcome.EVALUATION_ERROR, error=RuntimeError('boom'))

    monkeypatch.setattr(edge_gate_module, 'evaluate', broken)
    gate = EdgeGate(['/stories/x'])
    assert gate.decide('/stories/x') is GateDecision.PASS_THROUGH


def test_handle_on_bare_flask_app():
    app = Flask(__name__)
    EdgeGate(['/gone']).init_app(app)

    @app.route('/kept')
    def kept():
        return 'ok'

    c = app.test_client()
    assert c.get('/gone').status_code == 410
    assert c.get('/kept').data == b'ok'
    assert app.extensions['edge_gate'].entries[0].path == '/gone'


def test_percent_encoded_entries_match_decoded_request_paths(make_client, settings, tmp_path):
    path = tmp_path / 'deleted.json'
    path.write_text('["/stories/caf%C3%A9", "/tags/a%2Fb"]')
    c = make_client(Settings(api_url=settings.api_url, deleted_paths_file=str(path)))
    assert c.get('/stories/caf%C3%A9').status_code == 410
    assert c.get('/stories/café').status_code == 410
    assert c.get('/tags/a%2Fb').status_code == 410
    assert c.get('/stories/cafe').status_code == 404


def test_gate_runs_before_the_rate_limiter(client):
    app = client.application
    gate = app.extensions['edge_gate']
    assert app.before_request_funcs[None][0] == gate.handle
