"""
SQLAlchemy-backed storage tiers.

REMOTE_SYNC points at the configured database URL (PostgreSQL in
production), LOCAL_ONLY at a SQLite file and IN_MEMORY at `sqlite://`.
Requesting in-memory storage puts every tier at `sqlite://`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .errors import StoreLoadError
from .handle import ThreadedBackendHandle
from .models import Base
from .types import BackendKind, MergePolicy, StoreContext

logger = logging.getLogger("store_bootstrap.sqlalchemy_backend")

IN_MEMORY_URL = "sqlite://"


def build_postgres_url(
    host: str = "localhost",
    port: int = 5432,
    user: str = "postgres",
    password: str = "postgres",
    database: str = "postgres",
) -> URL:
    """Build a sync PostgreSQL URL using the psycopg2 driver."""
    return URL.create(
        drivername="postgresql+psycopg2",
        username=user,
        password=password,
        host=host,
        port=port,
        database=database,
    )


@dataclass
class SqlAlchemyStoreConfig:
    """Locations and engine settings for the SQLAlchemy tiers."""

    remote_url: Optional[Union[str, URL]] = None
    """Remote database; None leaves the remote tier unconfigured."""

    local_path: Union[str, Path] = "vocab.sqlite3"

    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle: int = 1800
    connect_timeout: int = 5
    echo: bool = False

    def url_for(self, kind: BackendKind, in_memory: bool = False) -> Optional[URL]:
        """Database URL of a tier; None when the tier has no location."""
        if in_memory or kind == BackendKind.IN_MEMORY:
            return make_url(IN_MEMORY_URL)
        if kind == BackendKind.LOCAL_ONLY:
            return URL.create(drivername="sqlite", database=str(self.local_path))
        if self.remote_url is None:
            return None
        return make_url(self.remote_url)

    def get_engine_kwargs(self, url: URL) -> dict[str, Any]:
        """Keyword arguments for create_engine, by dialect."""
        if url.get_backend_name() == "sqlite":
            kwargs: dict[str, Any] = {
                "connect_args": {"check_same_thread": False},
                "echo": self.echo,
            }
            if url.database in (None, "", ":memory:"):
                kwargs["poolclass"] = StaticPool
            return kwargs

        return {
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_recycle": self.pool_recycle,
            "pool_pre_ping": True,
            "connect_args": {"connect_timeout": self.connect_timeout},
            "echo": self.echo,
        }


class SqlAlchemyBackendHandle(ThreadedBackendHandle):
    """
    One tier backed by a SQLAlchemy engine.

    Loading creates the engine, creates the schema and runs `SELECT 1`.
    """

    def __init__(
        self,
        kind: BackendKind,
        url: Optional[URL],
        engine_kwargs: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(kind)
        self._url = url
        self._engine_kwargs = engine_kwargs or {}
        self._engine: Optional[Engine] = None
        self._context: Optional[StoreContext] = None

    @property
    def url(self) -> Optional[URL]:
        return self._url

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError(f"{self.describe()} is not loaded")
        return self._engine

    @property
    def context(self) -> StoreContext:
        if self._context is None:
            raise RuntimeError(f"{self.describe()} has no configured context")
        return self._context

    def describe(self) -> str:
        if self._url is None:
            return f"{self.kind.value} (unconfigured)"
        return f"{self.kind.value} ({self._url.render_as_string(hide_password=True)})"

    def _open(self) -> None:
        if self._url is None:
            raise StoreLoadError(self.kind, f"No location configured for {self.kind.value}")

        engine = create_engine(self._url, **self._engine_kwargs)
        try:
            Base.metadata.create_all(engine)
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except Exception:
            engine.dispose()
            raise
        self._engine = engine

    def _discard(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
        self._context = None

    def configure_context(
        self,
        auto_merge_changes: bool = True,
        merge_policy: MergePolicy = MergePolicy.LATEST_WINS,
    ) -> StoreContext:
        # Expiring on commit makes sessions reload rows changed by other writers.
        factory = sessionmaker(
            bind=self.engine,
            expire_on_commit=auto_merge_changes,
            autoflush=False,
        )
        self._context = StoreContext(
            session_factory=factory,
            auto_merge_changes=auto_merge_changes,
            merge_policy=merge_policy,
        )
        logger.debug(
            f"SqlAlchemyBackendHandle: context for {self.describe()} "
            f"(auto_merge={auto_merge_changes}, policy={merge_policy.value})"
        )
        return self._context


class SqlAlchemyHandleFactory:
    """
    Builds a SqlAlchemyBackendHandle per tier from one config.

    Usable directly as the bootstrapper's handle factory.
    """

    def __init__(self, config: Optional[SqlAlchemyStoreConfig] = None) -> None:
        self._config = config or SqlAlchemyStoreConfig()

    @property
    def config(self) -> SqlAlchemyStoreConfig:
        return self._config

    def __call__(self, kind: BackendKind, in_memory: bool = False) -> SqlAlchemyBackendHandle:
        url = self._config.url_for(kind, in_memory)
        engine_kwargs = self._config.get_engine_kwargs(url) if url is not None else {}
        return SqlAlchemyBackendHandle(kind, url, engine_kwargs)
