"""Error Hierarchy — typed, categorized exceptions for every blogserver failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Startup errors (not found, decode) are raised out of BlogRuntime.start and abort the process
    - Per-request errors (validation, template) never touch shared state
    - Errors that can reach an HTTP response carry no file paths in their message

Design Decisions:
    - Single hierarchy with BlogError base: one global handler shape for every failure
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    PERSISTENCE = "persistence"
    TEMPLATE = "template"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    template: str | None = None
    path: str | None = None


class BlogError(Exception):
    """Base exception for all blogserver errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class EntryValidationError(BlogError):
    """Submitted entry is missing a required field."""
    def __init__(self, field: str, context: ErrorContext | None = None):
        super().__init__(
            f"Entry field '{field}' must not be empty",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


# ─── Persistence Errors ─────────────────────────────────────────

class StoreNotFoundError(BlogError):
    """Persisted entry file does not exist."""
    def __init__(self, path: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.path = path
        super().__init__(
            f"Entry file not found: {path}",
            "STORE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.path = path


class StoreDecodeError(BlogError):
    """Persisted entry file exists but cannot be decoded. Always fatal at startup."""
    def __init__(self, path: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.path = path
        super().__init__(
            f"Entry file {path} is corrupt: {reason}",
            "STORE_DECODE_FAILURE", ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.path = path
        self.reason = reason


class StoreWriteError(BlogError):
    """Saving the store failed. The previous file on disk is left untouched."""
    def __init__(self, path: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.path = path
        super().__init__(
            f"Could not save entries: {reason}",
            "STORE_WRITE_FAILURE", ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.path = path
        self.reason = reason


# ─── Template Errors (500-level, per request) ───────────────────

class TemplateCompileError(BlogError):
    """Template could not be loaded or parsed. Never cached."""
    def __init__(self, name: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.template = name
        super().__init__(
            f"Template '{name}' could not be compiled: {reason}",
            "TEMPLATE_COMPILE_FAILURE", ErrorCategory.TEMPLATE,
            ErrorSeverity.ERROR, ctx, 500,
        )
        self.name = name


class TemplateExecutionError(BlogError):
    """Compiled template failed while rendering. The cached handle stays valid."""
    def __init__(self, name: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.template = name
        super().__init__(
            f"Template '{name}' failed to render: {reason}",
            "TEMPLATE_EXECUTION_FAILURE", ErrorCategory.TEMPLATE,
            ErrorSeverity.ERROR, ctx, 500,
        )
        self.name = name
