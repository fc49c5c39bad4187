"""blogserver — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Runtime, template cache and settings are owned by the app (app.state),
      never by module globals
    - Lifespan startup loads entries; a load failure aborts startup
    - Lifespan shutdown runs after uvicorn has drained in-flight requests and
      performs the final save; a failed save propagates out of the lifespan

Design Decisions:
    - create_app() factory: tests build isolated apps over temp data files
    - Blocking start/shutdown run in the threadpool so the event loop stays free
    - Static files mounted under /static only when the directory exists
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from blogserver.api.error_handlers import register_error_handlers
from blogserver.api.routes import health, pages
from blogserver.config import Settings, get_settings
from blogserver.core.domain_types import LifecycleState
from blogserver.infrastructure.observability import setup_logging
from blogserver.infrastructure.templates import TemplateCache
from blogserver.services.blog_runtime import BlogRuntime

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    runtime: BlogRuntime = app.state.runtime
    setup_logging(settings.log_level, settings.log_format)
    if runtime.state is LifecycleState.UNINITIALIZED:
        await run_in_threadpool(runtime.start)
    logger.info(
        f"blogserver started with {len(runtime.store)} entries",
        extra={"path": str(runtime.data_file)},
    )
    yield
    logger.info("blogserver shutting down")
    await run_in_threadpool(runtime.shutdown)
    logger.info("blogserver stopped", extra={"state": runtime.state.value})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="blogserver", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.runtime = BlogRuntime(settings)
    app.state.templates = TemplateCache(settings.template_dir)

    app.include_router(health.router)
    app.include_router(pages.router)

    if settings.static_dir.is_dir():
        app.mount(
            "/static", StaticFiles(directory=str(settings.static_dir)), name="static",
        )

    register_error_handlers(app)
    return app


app = create_app()
