from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest

# Settings and the engine are created at import time, so configure them first
_DB_DIR = Path(tempfile.mkdtemp(prefix="skilltree-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'test.db'}"
os.environ["OPENAI_API_KEY"] = "test-key"
os.environ["JWT_SECRET_KEY"] = "test-secret"

from backend.app.completion_client import CompletionClient  # noqa: E402
from backend.app.db import Base, engine  # noqa: E402
from backend.app import models  # noqa: E402,F401

Handler = Callable[[httpx.Request], httpx.Response]


def completion_response(content: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


def failing_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def make_client(handler: Handler, *, api_key: str | None = "test-key") -> tuple[CompletionClient, RecordingTransport]:
    transport = RecordingTransport(handler)
    http_client = httpx.AsyncClient(transport=transport)
    client = CompletionClient(api_key=api_key, http_client=http_client)
    return client, transport


@pytest.fixture()
def db_tables() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    engine.dispose()
    shutil.rmtree(_DB_DIR, ignore_errors=True)


@pytest.fixture()
def client_factory() -> Callable[..., tuple[CompletionClient, RecordingTransport]]:
    return make_client


@pytest.fixture()
def reply() -> Callable[[str], httpx.Response]:
    return completion_response


@pytest.fixture()
def offline() -> Handler:
    return failing_handler
