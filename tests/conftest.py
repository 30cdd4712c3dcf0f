import json
import os

import pytest

os.environ.setdefault('LOG_DIR', os.path.join(os.path.dirname(__file__), '.logs'))

from app import create_app
from config import Settings
from tests.fakes import FakeSession


@pytest.fixture
def deleted_paths_file(tmp_path):
    path = tmp_path / 'deleted_paths.json'
    path.write_text(json.dumps([
        '/stories/aye-m2oH3uM8',
        '/auth/login?next=%2Fnotifications%2Fget_unread_count%2F',
    ]))
    return str(path)


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def settings(deleted_paths_file):
    return Settings(
        api_url='http://backend.test',
        site_url='https://storyvermo.com',
        webhook_secret='s3cret',
        deleted_paths_file=deleted_paths_file,
    )


@pytest.fixture
def make_client(session):
    def _make(settings):
        app = create_app(settings, session=session)
        app.config.update(TESTING=True)
        return app.test_client()

    return _make


@pytest.fixture
def client(make_client, settings):
    return make_client(settings)
