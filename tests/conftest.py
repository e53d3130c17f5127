import json
from collections import deque

import pytest
import requests

KEY = 'k' * 30
PASSWORD = 'p' * 40


def make_response(status_code=200, headers=None, body=b'', url='https://app.smartfile.com/'):
    resp = requests.Response()
    resp.status_code = status_code
    resp.headers.update(headers or {})
    if not isinstance(body, bytes):
        body = json.dumps(body).encode('utf-8')
        resp.headers.setdefault('Content-Type', 'application/json')
    resp._content = body
    resp.url = url
    return resp


def throttled(wait='0.1'):
    return make_response(503, headers={'X-Throttle': f'Request limit reached; next={wait} sec'})


class FakeSession(requests.Session):
    """Session answering from a queue of responses/exceptions and recording what was sent."""

    def __init__(self, responses=()):
        super().__init__()
        self.queue = deque(responses)
        self.sent = []
        self.send_kwargs = []
        self.closed = False

    def send(self, request, **kwargs):
        self.sent.append(request)
        self.send_kwargs.append(kwargs)
        item = self.queue.popleft()
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True
        super().close()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('SMARTFILE_API_KEY', 'SMARTFILE_API_PASSWORD', 'SMARTFILE_API_URL',
                 'SMARTFILE_API_VERSION', 'SMARTFILE_THROTTLE_WAIT'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def no_sleep(monkeypatch):
    calls = []

    def fake_sleep(seconds):
        calls.append(seconds)

    monkeypatch.setattr('smartfile.base_client.time.sleep', fake_sleep)
    return calls
