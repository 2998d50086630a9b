"""Composition root: builds the lookup cascade, store and sync monitor from Settings."""

import asyncio
import logging
from typing import Optional

from fastapi import Request

from cache_ttl import TtlCache, TtlCacheConfig
from lookup_cascade import (
    AutofillConfig,
    AutofillSession,
    CascadeConfig,
    GoogleTranslateService,
    HttpxTransport,
    JishoDictionaryProvider,
    LookupCascade,
    LookupResult,
    MockOfflineProvider,
    TimeoutConfig,
    Transport,
)
from store_bootstrap import (
    BackendKind,
    BootstrapConfig,
    BootstrapResult,
    HandleFactory,
    SqlAlchemyHandleFactory,
    SqlAlchemyStoreConfig,
    StoreBootstrapper,
)
from sync_status import (
    HttpAccountProbe,
    RemoteAccountProbe,
    SyncMonitorConfig,
    SyncStatusMonitor,
)

from app.config import Settings

logger = logging.getLogger("vocab_entry.container")


class AppContainer:
    """
    Owns every long-lived collaborator of the application.

    Collaborators that talk to the outside world (transport, account probe,
    store handle factory) can be injected; otherwise they are built from
    settings on start().
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[Transport] = None,
        probe: Optional[RemoteAccountProbe] = None,
        handle_factory: Optional[HandleFactory] = None,
    ) -> None:
        self.settings = settings
        self._transport = transport
        self._probe = probe
        self._handle_factory = handle_factory

        self.cache: Optional[TtlCache[LookupResult]] = None
        self.cascade: Optional[LookupCascade] = None
        self.monitor: Optional[SyncStatusMonitor] = None
        self.bootstrap_result: Optional[BootstrapResult] = None
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def _build_transport(self) -> Transport:
        return HttpxTransport(
            TimeoutConfig(
                connect=self.settings.HTTP_CONNECT_TIMEOUT,
                read=self.settings.HTTP_READ_TIMEOUT,
                write=self.settings.HTTP_WRITE_TIMEOUT,
            )
        )

    def _build_probe(self) -> Optional[RemoteAccountProbe]:
        if not self.settings.ACCOUNT_PROBE_URL:
            return None
        return HttpAccountProbe(
            self.settings.ACCOUNT_PROBE_URL,
            timeout=self.settings.ACCOUNT_PROBE_TIMEOUT,
        )

    def _build_handle_factory(self) -> HandleFactory:
        return SqlAlchemyHandleFactory(
            SqlAlchemyStoreConfig(
                remote_url=self.settings.REMOTE_DATABASE_URL,
                local_path=self.settings.LOCAL_DATABASE_PATH,
            )
        )

    def _build_cascade(self, transport: Transport) -> LookupCascade:
        self.cache = TtlCache(TtlCacheConfig(ttl_seconds=self.settings.CACHE_TTL_SECONDS))
        translator = (
            GoogleTranslateService(transport, self.settings.TRANSLATE_URL)
            if self.settings.TRANSLATION_ENABLED
            else None
        )
        return LookupCascade(
            cache=self.cache,
            primary=JishoDictionaryProvider(transport, self.settings.JISHO_SEARCH_URL),
            fallback=MockOfflineProvider(self.cache),
            translator=translator,
            config=CascadeConfig(
                max_meanings=self.settings.MAX_MEANINGS,
                source_lang=self.settings.SOURCE_LANG,
                target_lang=self.settings.TARGET_LANG,
                lookup_timeout_seconds=self.settings.LOOKUP_TIMEOUT_SECONDS,
                coalesce=self.settings.COALESCE_LOOKUPS,
            ),
        )

    async def start(self) -> None:
        """Bootstrap the store, wire the cascade and run the startup account check."""
        if self._started:
            return

        bootstrapper = StoreBootstrapper(
            self._handle_factory or self._build_handle_factory(),
            BootstrapConfig(
                load_timeout_seconds=self.settings.STORE_LOAD_TIMEOUT_SECONDS,
                remote_identity=self.settings.REMOTE_IDENTITY,
            ),
        )
        # Blocking by contract; keep it off the event loop.
        self.bootstrap_result = await asyncio.to_thread(
            bootstrapper.bootstrap, self.settings.STORE_IN_MEMORY
        )

        if self._transport is None:
            self._transport = self._build_transport()
        if self._probe is None:
            self._probe = self._build_probe()

        self.cascade = self._build_cascade(self._transport)
        self.monitor = SyncStatusMonitor(
            probe=self._probe,
            config=SyncMonitorConfig(
                remote_identity=self.settings.REMOTE_IDENTITY,
                settle_delay_seconds=self.settings.SYNC_SETTLE_DELAY_SECONDS,
            ),
            initial=self.bootstrap_result.status,
        )
        if self.bootstrap_result.active_kind == BackendKind.REMOTE_SYNC:
            await self.monitor.start()

        self._started = True
        logger.info(
            f"AppContainer: started on {self.bootstrap_result.handle.describe()} "
            f"(sync={self.monitor.status.state.value})"
        )

    def new_autofill_session(self) -> AutofillSession:
        """Create an autofill session bound to the shared cascade."""
        if self.cascade is None:
            raise RuntimeError("AppContainer is not started")
        return AutofillSession(
            self.cascade,
            AutofillConfig(debounce_seconds=self.settings.AUTOFILL_DEBOUNCE_SECONDS),
        )

    async def close(self) -> None:
        """Release every collaborator in reverse order of creation."""
        if self.monitor is not None:
            await self.monitor.close()
        if self.cascade is not None:
            self.cascade.close()
        if self.cache is not None:
            await self.cache.close()
        if self._probe is not None:
            await self._probe.close()
        if self._transport is not None:
            await self._transport.close()
        if self.bootstrap_result is not None:
            self.bootstrap_result.handle.close()
        self._started = False
        logger.info("AppContainer: closed")


def get_container(request: Request) -> AppContainer:
    """Dependency returning the application's container."""
    return request.app.state.container
