"""Lifespan — startup load and shutdown save around the app's lifetime.

Invariants:
    - Entering the lifespan loads entries; a corrupt file aborts startup
    - Leaving the lifespan saves every entry added while serving
"""

import pytest
from httpx import ASGITransport, AsyncClient

from blogserver.core.domain_types import LifecycleState
from blogserver.core.errors import StoreDecodeError
from blogserver.infrastructure.persistence import load_store
from blogserver.main import create_app


async def test_shutdown_saves_submitted_entries(settings, data_file):
    app = create_app(settings)
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test",
        ) as c:
            await c.post("/submit/", data={"title": "Hello", "content": "World"})
            await c.post("/submit/", data={"title": "Second", "content": "Post"})
        assert not data_file.exists()

    assert app.state.runtime.state is LifecycleState.TERMINATED
    assert sorted(e.title for e in load_store(data_file).all_by_date()) == [
        "Hello", "Second",
    ]


async def test_restart_continues_ids(settings):
    first = create_app(settings)
    async with first.router.lifespan_context(first):
        first.state.runtime.add_entry("Hello", "World")

    second = create_app(settings)
    async with second.router.lifespan_context(second):
        assert second.state.runtime.add_entry("Again", "Post").id == 2


async def test_corrupt_file_aborts_startup(settings, data_file):
    data_file.parent.mkdir(parents=True)
    data_file.write_text("not json", encoding="utf-8")
    app = create_app(settings)

    with pytest.raises(StoreDecodeError):
        async with app.router.lifespan_context(app):
            pass
    assert data_file.read_text(encoding="utf-8") == "not json"
