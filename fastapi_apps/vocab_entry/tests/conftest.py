"""Pytest configuration and fixtures for the vocab_entry app tests."""
import json
import pytest
from typing import Dict, List
from unittest.mock import AsyncMock

import httpx
from fastapi.testclient import TestClient

from lookup_cascade import HttpxTransport
from store_bootstrap import SqlAlchemyHandleFactory, SqlAlchemyStoreConfig
from sync_status import AccountStatus, RemoteAccountProbe

from app.config import Settings
from app.container import AppContainer
from app.main import create_app


class FakeUpstream:
    """Answers Jisho and translate requests from in-memory tables."""

    def __init__(self) -> None:
        self.entries: Dict[str, dict] = {}
        self.translations: Dict[str, str] = {}
        self.fail = False
        self.requests: List[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request.url.host)
        if self.fail:
            raise httpx.ConnectError("upstream unreachable", request=request)

        if request.url.host == "jisho.org":
            keyword = request.url.params["keyword"]
            data = [self.entries[keyword]] if keyword in self.entries else []
            return httpx.Response(200, content=json.dumps({"data": data}).encode("utf-8"))

        text = request.url.params["q"]
        payload = [[[self.translations.get(text, text), text]]]
        return httpx.Response(200, content=json.dumps(payload).encode("utf-8"))


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def probe() -> AsyncMock:
    mock = AsyncMock(spec=RemoteAccountProbe)
    mock.check_status.return_value = AccountStatus.AVAILABLE
    return mock


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        ENVIRONMENT="test",
        STORE_IN_MEMORY=True,
        LOCAL_DATABASE_PATH=str(tmp_path / "vocab.sqlite3"),
        REMOTE_IDENTITY="vocab",
        SYNC_SETTLE_DELAY_SECONDS=0.05,
    )


@pytest.fixture
def make_container(upstream: FakeUpstream, probe: AsyncMock, settings: Settings):
    """Factory for containers with fake upstreams and real SQLite stores."""

    def factory(app_settings: Settings = settings) -> AppContainer:
        transport = HttpxTransport(
            httpx_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream))
        )
        handle_factory = SqlAlchemyHandleFactory(
            SqlAlchemyStoreConfig(
                remote_url=app_settings.REMOTE_DATABASE_URL,
                local_path=app_settings.LOCAL_DATABASE_PATH,
            )
        )
        return AppContainer(
            app_settings,
            transport=transport,
            probe=probe,
            handle_factory=handle_factory,
        )

    return factory


@pytest.fixture
def client(make_container, settings: Settings):
    """TestClient with the lifespan running."""
    app = create_app(settings, make_container(), show_banner=False)
    with TestClient(app) as test_client:
        yield test_client
