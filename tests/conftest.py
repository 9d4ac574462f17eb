"""
Shared fixtures: a scripted stand-in for the auth API behind httpx.MockTransport.
"""

from collections import defaultdict, deque

import httpx
import pytest

from authclient import AuthClient, Navigator

BASE_URL = "http://testserver/api"

USER_PAYLOAD = {
    "user": {
        "id": 1,
        "email": "a@b.com",
        "verified": True,
        "created_at": "2026-01-02T03:04:05Z",
    }
}


class ScriptedServer:
    """Answers each (method, path) with the next queued response.

    A queued entry is an ``httpx.Response``, an exception instance to raise,
    or a callable taking the request. The last entry of a queue repeats once
    the others are used up. Every request seen is kept in ``calls``.
    """

    def __init__(self):
        self.routes = defaultdict(deque)
        self.calls = []

    def on(self, method, path, *responses):
        self.routes[(method.upper(), "/api" + path)].extend(responses)
        return self

    def count(self, method, path):
        return sum(1 for r in self.calls if r.method == method.upper() and r.url.path == "/api" + path)

    def paths(self):
        return [f"{r.method} {r.url.path[len('/api'):]}" for r in self.calls]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"error": "not found"})
        entry = queue.popleft() if len(queue) > 1 else queue[0]
        if isinstance(entry, Exception):
            raise entry
        if callable(entry):
            entry = entry(request)
            if hasattr(entry, "__await__"):
                entry = await entry
        # responses are single-use, hand out a copy
        return httpx.Response(entry.status_code, headers=entry.headers, content=entry.content)

    def transport(self):
        return httpx.MockTransport(self)


def json_response(status_code, body=None, cookies=None):
    headers = [("set-cookie", f"{name}={value}; Path=/") for name, value in (cookies or {}).items()]
    return httpx.Response(status_code, json=body if body is not None else {}, headers=headers)


@pytest.fixture
def server():
    return ScriptedServer()


@pytest.fixture
def navigator():
    return Navigator()


@pytest.fixture
def make_client(server, navigator):
    def _make(**kwargs):
        return AuthClient(base_url=BASE_URL, transport=server.transport(), navigator=navigator, **kwargs)

    return _make
