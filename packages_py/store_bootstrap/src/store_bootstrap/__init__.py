"""
Tiered persistent-store bootstrap using SQLAlchemy 2.0.

Tries a remote synced database first, then a local SQLite file, then an
in-memory SQLite store, and adopts the first one that loads within the
load timeout.

Quick Start:

    from store_bootstrap import (
        BootstrapConfig,
        SqlAlchemyHandleFactory,
        SqlAlchemyStoreConfig,
        StoreBootstrapper,
    )

    factory = SqlAlchemyHandleFactory(
        SqlAlchemyStoreConfig(remote_url="postgresql+psycopg2://app@db/vocab")
    )
    result = StoreBootstrapper(factory, BootstrapConfig(remote_identity="vocab")).bootstrap()
    print(result.active_kind, result.status.label)
"""
from .types import (
    BackendKind,
    TIER_ORDER,
    MergePolicy,
    StoreContext,
    BootstrapAttempt,
    BootstrapResult,
    BootstrapConfig,
    HandleFactory,
    StatusListener,
)
from .errors import (
    StoreBootstrapError,
    StoreLoadError,
    StoreLoadTimeoutError,
    FatalBootstrapError,
    format_store_error,
)
from .handle import StorageBackendHandle, ThreadedBackendHandle
from .models import Base, WordRecord
from .sqlalchemy_backend import (
    IN_MEMORY_URL,
    SqlAlchemyBackendHandle,
    SqlAlchemyHandleFactory,
    SqlAlchemyStoreConfig,
    build_postgres_url,
)
from .bootstrapper import (
    StoreBootstrapper,
    create_store_bootstrapper,
    DEFAULT_BOOTSTRAP_CONFIG,
    merge_bootstrap_config,
)


__all__ = [
    # Types
    "BackendKind",
    "TIER_ORDER",
    "MergePolicy",
    "StoreContext",
    "BootstrapAttempt",
    "BootstrapResult",
    "BootstrapConfig",
    "HandleFactory",
    "StatusListener",
    # Errors
    "StoreBootstrapError",
    "StoreLoadError",
    "StoreLoadTimeoutError",
    "FatalBootstrapError",
    "format_store_error",
    # Handles
    "StorageBackendHandle",
    "ThreadedBackendHandle",
    "IN_MEMORY_URL",
    "SqlAlchemyBackendHandle",
    "SqlAlchemyHandleFactory",
    "SqlAlchemyStoreConfig",
    "build_postgres_url",
    # Schema
    "Base",
    "WordRecord",
    # Bootstrapper
    "StoreBootstrapper",
    "create_store_bootstrapper",
    "DEFAULT_BOOTSTRAP_CONFIG",
    "merge_bootstrap_config",
]

__version__ = "1.0.0"
