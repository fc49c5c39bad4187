"""Blog Pages — entry list and submission form.

Invariants:
    - GET / renders every entry newest-first through the main template
    - POST /submit/ with both fields non-blank adds exactly one entry, then 302 -> /
    - POST /submit/ with a blank field changes nothing and 302s back to /submit/
    - Template failures propagate as BlogError; the error handler owns the 500

Design Decisions:
    - Sync handlers: FastAPI runs them on its threadpool (thread per request),
      matching the store's threading locks
    - Silent redirect on invalid form: no error message is shown (known UX gap)
"""

import logging

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import HTMLResponse, RedirectResponse

from blogserver.api.dependencies import get_app_settings, get_runtime, get_templates
from blogserver.config import Settings
from blogserver.infrastructure.templates import TemplateCache
from blogserver.schemas.entry import SubmissionForm
from blogserver.services.blog_runtime import BlogRuntime

logger = logging.getLogger(__name__)
router = APIRouter(tags=["pages"])


@router.get("/", response_class=HTMLResponse)
def main_page(
    runtime: BlogRuntime = Depends(get_runtime),
    templates: TemplateCache = Depends(get_templates),
    settings: Settings = Depends(get_app_settings),
):
    """All entries, newest first."""
    html = templates.render(
        settings.main_template, {"entries": runtime.store.all_by_date()},
    )
    return HTMLResponse(html)


@router.get("/submit/", response_class=HTMLResponse)
def submit_form(
    templates: TemplateCache = Depends(get_templates),
    settings: Settings = Depends(get_app_settings),
):
    """Empty submission form."""
    return HTMLResponse(templates.render(settings.submit_template, {}))


@router.post("/submit/")
def submit_entry(
    title: str = Form(""),
    content: str = Form(""),
    runtime: BlogRuntime = Depends(get_runtime),
):
    """Create an entry from the form, or bounce back to it."""
    form = SubmissionForm(title=title, content=content)
    if not form.is_complete:
        logger.info("Rejected submission with a blank field")
        return RedirectResponse("/submit/", status_code=status.HTTP_302_FOUND)

    runtime.add_entry(form.title, form.content)
    return RedirectResponse("/", status_code=status.HTTP_302_FOUND)
