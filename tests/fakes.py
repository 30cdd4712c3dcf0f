"""Stand-ins for requests objects used by the proxy and sitemap tests."""

import json


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError('No JSON object could be decoded')
        return self._payload


class FakeSession:
    """Records every outgoing call and answers from a (method, url) table."""

    def __init__(self, responses=None, error=None):
        self.responses = responses or {}
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.get((method, url), FakeResponse(404, text='not found'))

    def get(self, url, **kwargs):
        return self.request('GET', url, **kwargs)
