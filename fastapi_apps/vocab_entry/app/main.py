"""Vocabulary Entry FastAPI Application.

Serves dictionary lookups backed by the lookup cascade and reports which
storage tier the store bootstrap adopted and the current sync status.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from app.config import Settings, settings
from app.container import AppContainer
from app.routes import lookup, store, sync

logger = logging.getLogger("vocab_entry.main")


def configure_logging(level: str) -> None:
    """Configure root logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def print_startup_panel(container: AppContainer, console: Optional[Console] = None) -> None:
    """Print the startup summary."""
    config = container.settings
    result = container.bootstrap_result

    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()
    table.add_row("Server", f"http://{config.HOST}:{config.PORT}")
    table.add_row("Environment", config.ENVIRONMENT)
    table.add_row("Store", result.handle.describe())
    table.add_row("Sync", container.monitor.status.label)
    if result.diagnostic:
        table.add_row("Store diagnostic", f"[yellow]{result.diagnostic}[/yellow]")
    table.add_row("Translation", f"{config.SOURCE_LANG} -> {config.TARGET_LANG}" if config.TRANSLATION_ENABLED else "disabled")
    table.add_row("Lookup timeout", f"{config.LOOKUP_TIMEOUT_SECONDS}s")
    table.add_row("", "")
    table.add_row("Endpoints", "GET  /health")
    table.add_row("", "GET  /api/lookup/{term}")
    table.add_row("", "GET  /api/sync/status")
    table.add_row("", "POST /api/sync/retry")
    table.add_row("", "POST /api/sync/remote-change")
    table.add_row("", "GET  /api/store")

    (console or Console()).print(
        Panel(table, title=f"[bold green]{config.APP_NAME} {config.APP_VERSION}[/bold green]", expand=False)
    )


def create_app(
    app_settings: Optional[Settings] = None,
    container: Optional[AppContainer] = None,
    show_banner: bool = True,
) -> FastAPI:
    """
    Build the FastAPI application.

    The container is started in the lifespan and closed on shutdown; tests
    pass a container with injected collaborators.
    """
    app_settings = app_settings or settings
    container = container or AppContainer(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await container.start()
        app.state.container = container
        if show_banner:
            print_startup_panel(container)
        try:
            yield
        finally:
            await container.close()

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        debug=app_settings.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "ok",
            "store": container.bootstrap_result.active_kind.value if container.bootstrap_result else None,
            "sync": container.monitor.status.state.value if container.monitor else None,
            "timestamp": datetime.now().isoformat(),
        }

    app.include_router(lookup.router, prefix="/api/lookup", tags=["lookup"])
    app.include_router(sync.router, prefix="/api/sync", tags=["sync"])
    app.include_router(store.router, prefix="/api/store", tags=["store"])

    return app


configure_logging(settings.LOG_LEVEL)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
