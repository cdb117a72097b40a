"""
Shared fakes: a manual-clock scheduler and synchronous/deferred runners.
"""
import heapq
import json
from concurrent.futures import Future

import httpx
import pytest

from src.shared.app_state import AppState
from src.shared.notifications import NotificationCenter


class ManualScheduler:
    """Scheduler driven by advance(); time is in milliseconds from 0."""

    def __init__(self):
        self.now = 0
        self._queue = []
        self._seq = 0
        self._cancelled = set()
        self.closed = False

    def call_later(self, delay_ms, callback):
        if self.closed:
            return None
        self._seq += 1
        heapq.heappush(self._queue, (self.now + int(delay_ms), self._seq, callback))
        return self._seq

    def call_soon(self, callback):
        return self.call_later(0, callback)

    def cancel(self, handle):
        self._cancelled.add(handle)

    def close(self):
        self.closed = True

    def pending_count(self):
        return sum(1 for _due, seq, _cb in self._queue if seq not in self._cancelled)

    def advance(self, ms):
        target = self.now + ms
        while self._queue and self._queue[0][0] <= target:
            due, seq, callback = heapq.heappop(self._queue)
            if seq in self._cancelled:
                continue
            self.now = due
            callback()
        self.now = target

    def run_pending(self):
        self.advance(0)


class ImmediateRunner:
    """Runs submitted calls synchronously and returns a settled future."""

    def __init__(self):
        self.calls = []
        self.shut_down = False

    def submit(self, fn, *args, **kwargs):
        self.calls.append((fn, args, kwargs))
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait=False):
        self.shut_down = True


class DeferredRunner(ImmediateRunner):
    """Queues submitted calls until run_all() or run_next()."""

    def __init__(self):
        super().__init__()
        self._queue = []

    def submit(self, fn, *args, **kwargs):
        self.calls.append((fn, args, kwargs))
        future = Future()
        self._queue.append((future, fn, args, kwargs))
        return future

    @property
    def pending(self):
        return len(self._queue)

    def run_next(self):
        future, fn, args, kwargs = self._queue.pop(0)
        self._run(future, fn, args, kwargs)
        return future

    def run_last(self):
        future, fn, args, kwargs = self._queue.pop()
        self._run(future, fn, args, kwargs)
        return future

    def run_all(self):
        while self._queue:
            self.run_next()

    @staticmethod
    def _run(future, fn, args, kwargs):
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)


def users_payload(*emails):
    return {"users": [{"id": f"id-{i}", "email": e} for i, e in enumerate(emails)], "aud": "authenticated"}


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def runner():
    return ImmediateRunner()


@pytest.fixture
def deferred_runner():
    return DeferredRunner()


@pytest.fixture
def center():
    return NotificationCenter()


@pytest.fixture
def state():
    return AppState()


@pytest.fixture
def admin_api():
    """
    Fake admin/REST server as an httpx.MockTransport.

    Tweak `api.users`, `api.create_error`, `api.list_status`, `api.rest_status`;
    every request is appended to `api.requests`.
    """

    class FakeAdminApi:
        def __init__(self):
            self.users = []
            self.create_error = None
            self.list_status = 200
            self.rest_status = 200
            self.requests = []

        def handler(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            path = request.url.path
            if path == "/auth/v1/admin/users" and request.method == "GET":
                if self.list_status >= 400:
                    return httpx.Response(self.list_status, json={"msg": "Invalid API key"})
                return httpx.Response(200, json=users_payload(*self.users))
            if path == "/auth/v1/admin/users" and request.method == "POST":
                if self.create_error:
                    return httpx.Response(422, json={"code": 422, "msg": self.create_error})
                email = json.loads(request.content)["email"]
                self.users.append(email)
                return httpx.Response(200, json={"id": f"id-{len(self.users)}", "email": email})
            if path.startswith("/rest/v1"):
                return httpx.Response(self.rest_status, json=[])
            return httpx.Response(404, json={"message": "not found"})

        @property
        def transport(self):
            return httpx.MockTransport(self.handler)

    return FakeAdminApi()
