"""Blog Pages — HTTP contract of /, /submit/ and /static/.

Tests cover:
    - Empty main page renders without entry markup
    - Valid submission creates one entry and redirects to /
    - Blank fields redirect back to the form and leave the store unchanged
    - Entry titles are escaped in the rendered page
    - Template failures produce a generic 500 page
"""

import pytest
from httpx import ASGITransport, AsyncClient

from blogserver.config import Settings
from blogserver.core.errors import StoreWriteError
from blogserver.infrastructure.templates import TemplateCache
from blogserver.main import create_app


async def test_main_page_with_no_entries(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    assert "<article" not in res.text


async def test_submit_form_renders(client):
    res = await client.get("/submit/")
    assert res.status_code == 200
    assert '<form method="post" action="/submit/">' in res.text


async def test_valid_submission_redirects_home(client, runtime):
    res = await client.post("/submit/", data={"title": "Hello", "content": "World"})
    assert res.status_code == 302
    assert res.headers["location"] == "/"

    entries = runtime.store.all_by_date()
    assert [(e.id, e.title, e.content) for e in entries] == [(1, "Hello", "World")]


async def test_two_submissions_get_sequential_ids(client, runtime):
    await client.post("/submit/", data={"title": "Hello", "content": "World"})
    await client.post("/submit/", data={"title": "Second", "content": "Post"})

    entries = runtime.store.all_by_date()
    assert sorted(e.id for e in entries) == [1, 2]
    assert entries[0].date >= entries[1].date

    res = await client.get("/")
    assert "Hello" in res.text and "Second" in res.text


@pytest.mark.parametrize("form", [
    {"title": "", "content": "World"},
    {"title": "Hello", "content": ""},
    {"title": "   ", "content": "World"},
    {"content": "World"},
    {},
])
async def test_incomplete_submission_redirects_back(client, runtime, form):
    res = await client.post("/submit/", data=form)
    assert res.status_code == 302
    assert res.headers["location"] == "/submit/"
    assert len(runtime.store) == 0
    assert runtime.unsaved_count == 0


async def test_submitted_title_is_escaped(client):
    await client.post(
        "/submit/",
        data={"title": "<script>alert(1)</script>", "content": "<b>hi</b>"},
    )
    res = await client.get("/")
    assert "<script>alert(1)</script>" not in res.text
    assert "&lt;script&gt;" in res.text
    assert "<b>hi</b>" not in res.text


async def test_unknown_path_is_404(client):
    res = await client.get("/nope")
    assert res.status_code == 404


async def test_static_assets_are_served(client):
    res = await client.get("/static/style.css")
    assert res.status_code == 200
    assert "font-family" in res.text


async def test_template_compile_failure_is_generic_500(app, client, tmp_path):
    app.state.templates = TemplateCache(tmp_path / "no-templates-here")
    res = await client.get("/")
    assert res.status_code == 500
    assert "Internal Server Error" in res.text
    assert "main.html" not in res.text


async def test_template_execution_failure_is_generic_500(app, client, tmp_path):
    (tmp_path / "main.html").write_text("{{ missing.field }}", encoding="utf-8")
    app.state.templates = TemplateCache(tmp_path)
    res = await client.get("/")
    assert res.status_code == 500
    assert "Internal Server Error" in res.text
    assert app.state.templates.cached_names() == ["main.html"]


async def test_failed_render_does_not_touch_store(app, client, runtime, tmp_path):
    await client.post("/submit/", data={"title": "Hello", "content": "World"})
    app.state.templates = TemplateCache(tmp_path / "missing")
    await client.get("/")
    assert len(runtime.store) == 1


async def test_save_failure_on_submit_is_503(data_file, monkeypatch):
    def failing_write(entries, path):
        raise StoreWriteError(str(path), "disk full")

    monkeypatch.setattr("blogserver.services.blog_runtime.write_entries", failing_write)
    app = create_app(Settings(_env_file=None, data_file=data_file, save_on_submit=True))
    runtime = app.state.runtime
    runtime.start()
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        res = await c.post("/submit/", data={"title": "Hello", "content": "World"})

    assert res.status_code == 503
    body = res.json()
    assert body["error"]["code"] == "STORE_WRITE_FAILURE"
    assert str(data_file) not in body["error"]["message"]
    # the entry stays in memory for the shutdown save
    assert len(runtime.store) == 1
    assert runtime.unsaved_count == 1
