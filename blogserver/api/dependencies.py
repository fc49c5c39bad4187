"""API Dependencies — hand route handlers the components owned by the app.

Invariants:
    - Components live on app.state, created by create_app(); no module globals
    - Handlers receive them through Depends so tests can override each one
"""

from fastapi import Request

from blogserver.config import Settings
from blogserver.infrastructure.templates import TemplateCache
from blogserver.services.blog_runtime import BlogRuntime


def get_runtime(request: Request) -> BlogRuntime:
    return request.app.state.runtime


def get_templates(request: Request) -> TemplateCache:
    return request.app.state.templates


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
