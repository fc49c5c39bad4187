"""Root conftest — shared fixtures for runtime and HTTP tests.

Invariants:
    - Every test gets its own data file under tmp_path
    - The real package templates are used; .env files are ignored
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

from blogserver.config import Settings
from blogserver.main import create_app

# Human-readable logs in test output
os.environ.setdefault("BLOG_LOG_FORMAT", "text")


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "entries.json"


@pytest.fixture
def settings(data_file):
    return Settings(_env_file=None, data_file=data_file, log_format="text")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def runtime(app):
    """Started runtime owned by the app; shut down (and saved) after the test."""
    runtime = app.state.runtime
    runtime.start()
    yield runtime
    runtime.shutdown()


@pytest.fixture
async def client(app, runtime):
    """HTTP client over the app. Lifespan is not run; `runtime` starts it."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
