"""
Shared pytest fixtures for the webhook dispatcher tests.

Every test gets a fresh in-memory SQLite database and a fake HTTP session,
so no network access or external database is needed.
"""

import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests
from fastapi.testclient import TestClient

from webhook_dispatcher import crud, schemas
from webhook_dispatcher.config import Settings
from webhook_dispatcher.database import Database
from webhook_dispatcher.main import create_app
from webhook_dispatcher.worker.dispatcher import Dispatcher


def make_response(status_code: int = 200, body=None) -> requests.Response:
    """Build a real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    response._content_consumed = True
    if body is None:
        response._content = b""
    elif isinstance(body, (dict, list)):
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = str(body).encode("utf-8")
    return response


class FakeHTTP:
    """Stands in for requests.Session: records POSTs, replays scripted outcomes.

    ``routes`` maps a URL to either a Response or an exception instance to
    raise. Unknown URLs answer 200 with ``{"ok": true}``.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []
        self._lock = threading.Lock()
        self.closed = False

    def post(self, url, json=None, headers=None, timeout=None, stream=False):
        with self._lock:
            self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        outcome = self.routes.get(url, make_response(200, {"ok": True}))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True

    def urls(self):
        return [call["url"] for call in self.calls]


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite://", delivery_timeout=5.0, dispatch_max_workers=1)


@pytest.fixture
def database(settings: Settings) -> Database:
    database = Database(settings.database_url)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db(database: Database):
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_http() -> FakeHTTP:
    return FakeHTTP()


@pytest.fixture
def dispatcher(db, fake_http: FakeHTTP) -> Dispatcher:
    return Dispatcher(db, http=fake_http, timeout=5.0)


@pytest.fixture
def register(db):
    """Register a subscription with sensible defaults."""
    def _register(name="S1", target_url="http://x/webhook", event_types=("user.created",)):
        return crud.create_subscription(db, schemas.SubscriptionCreate(
            name=name, target_url=target_url, event_types=list(event_types)
        ))

    return _register


@pytest.fixture
def client(settings: Settings, fake_http: FakeHTTP):
    """TestClient against an app wired to in-memory storage and the fake HTTP session."""
    app = create_app(settings=settings, http=fake_http)
    with TestClient(app) as test_client:
        yield test_client


class SubscriberHandler(BaseHTTPRequestHandler):
    """Local subscriber: ``/slow`` trickles its body one byte every half second."""

    SLOW_BODY = b"slowbody"

    def do_POST(self):
        self.rfile.read(int(self.headers.get("Content-Length", 0)))
        if self.path == "/slow":
            self.send_response(200)
            self.send_header("Content-Type", "text/plain")
            self.send_header("Content-Length", str(len(self.SLOW_BODY)))
            self.end_headers()
            try:
                for i in range(len(self.SLOW_BODY)):
                    self.wfile.write(self.SLOW_BODY[i:i + 1])
                    self.wfile.flush()
                    time.sleep(0.5)
            except OSError:
                pass  # client gave up
            return

        body = b'{"received": true}'
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def subscriber_server():
    """Base URL of a real HTTP server on localhost."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), SubscriberHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


@pytest.fixture
def real_http():
    """A real requests session that ignores proxy settings from the environment."""
    session = requests.Session()
    session.trust_env = False
    yield session
    session.close()
