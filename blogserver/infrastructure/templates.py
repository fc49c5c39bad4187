"""Template Cache — lazily compiled, memoized Jinja2 page templates.

Invariants:
    - Each name is compiled at most once for the life of the cache
    - A handle is published to the cache only after compilation succeeded;
      failures leave no entry, so the next call compiles again
    - Concurrent first uses of a name serialize on a per-name lock; other
      names are not blocked
    - Execution errors are reported per call and never evict the handle
    - Autoescape is on; only helper output (markdown) is marked safe

Design Decisions:
    - Jinja's own loader cache disabled (cache_size=0): this dict is the only cache
    - StrictUndefined: a missing field is an execution error, not a blank page
"""

import logging
import threading
from pathlib import Path
from typing import Any, Protocol

from jinja2 import (
    Environment, FileSystemLoader, StrictUndefined, Template,
    TemplateError, select_autoescape,
)

from blogserver.core.errors import TemplateCompileError, TemplateExecutionError
from blogserver.core.formatting import format_time, render_markdown

logger = logging.getLogger(__name__)

HELPERS = {
    "formatTime": format_time,
    "markdown": render_markdown,
}


class Writer(Protocol):
    def write(self, s: str, /) -> Any: ...


class TemplateCache:
    """Compile-once cache of named templates bound to the helper set."""

    def __init__(self, template_dir: str | Path):
        self.template_dir = Path(template_dir)
        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(default=True, default_for_string=True),
            undefined=StrictUndefined,
            cache_size=0,
        )
        self._env.filters.update(HELPERS)
        self._env.globals.update(HELPERS)
        self._templates: dict[str, Template] = {}
        self._lock = threading.Lock()
        self._name_locks: dict[str, threading.Lock] = {}

    def get(self, name: str) -> Template:
        """Return the compiled template, compiling it on first use."""
        cached = self._templates.get(name)
        if cached is not None:
            return cached

        with self._lock_for(name):
            cached = self._templates.get(name)
            if cached is not None:
                return cached
            try:
                template = self._env.get_template(name)
            except TemplateError as e:
                logger.error(
                    f"Failed to compile template {name}: {e}",
                    extra={"template": name, "error_code": "TEMPLATE_COMPILE_FAILURE"},
                )
                raise TemplateCompileError(name, type(e).__name__) from e
            with self._lock:
                self._templates[name] = template
            logger.debug(f"Compiled template {name}", extra={"template": name})
            return template

    def render(self, name: str, data: dict[str, Any] | None = None) -> str:
        template = self.get(name)
        try:
            return template.render(data or {})
        except Exception as e:
            raise self._execution_error(name, e) from e

    def render_to(
        self, name: str, data: dict[str, Any] | None, writer: Writer,
    ) -> None:
        """Stream rendered output into writer chunk by chunk."""
        template = self.get(name)
        try:
            for chunk in template.generate(data or {}):
                writer.write(chunk)
        except Exception as e:
            raise self._execution_error(name, e) from e

    def cached_names(self) -> list[str]:
        with self._lock:
            return sorted(self._templates)

    def _lock_for(self, name: str) -> threading.Lock:
        with self._lock:
            return self._name_locks.setdefault(name, threading.Lock())

    def _execution_error(self, name: str, e: Exception) -> TemplateExecutionError:
        logger.error(
            f"Template {name} failed to render: {e}",
            extra={"template": name, "error_code": "TEMPLATE_EXECUTION_FAILURE"},
        )
        return TemplateExecutionError(name, type(e).__name__)
