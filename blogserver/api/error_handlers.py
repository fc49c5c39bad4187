"""Error Handlers — global exception handlers for the blog server.

Invariants:
    - Template errors → generic HTML 500 page, detail only in the log
    - Other BlogError → structured JSON with error code, message, severity
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Template handlers registered per class: Starlette resolves handlers by
      MRO, so they win over the BlogError handler
    - Extracted from main.py to keep create_app() short
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse, JSONResponse

from blogserver.core.errors import (
    BlogError, ErrorSeverity, TemplateCompileError, TemplateExecutionError,
)

logger = logging.getLogger(__name__)

SERVER_ERROR_PAGE = (
    "<!DOCTYPE html><html><head><title>500 Internal Server Error</title></head>"
    "<body><h1>Internal Server Error</h1></body></html>"
)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_template_error_handler(app)
    _register_blog_error_handler(app)
    _register_generic_error_handler(app)


def _register_template_error_handler(app: FastAPI) -> None:
    """Register template compile/execution handler."""

    async def template_error_handler(request: Request, exc: BlogError):
        logger.error(
            f"Template error on {request.url.path}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "template": exc.context.template,
            },
        )
        return HTMLResponse(
            SERVER_ERROR_PAGE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    app.add_exception_handler(TemplateCompileError, template_error_handler)
    app.add_exception_handler(TemplateExecutionError, template_error_handler)


def _register_blog_error_handler(app: FastAPI) -> None:
    """Register blogserver domain/infrastructure error handler."""

    @app.exception_handler(BlogError)
    async def blog_error_handler(request: Request, exc: BlogError):
        """Handle all blogserver domain/infrastructure errors."""
        logger.error(
            f"BlogError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )

