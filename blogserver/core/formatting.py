"""Template Helpers — pure functions exposed to every page template.

Invariants:
    - format_time output is independent of the process locale
    - render_markdown escapes raw HTML from the source; only converter
      output is marked safe
    - Links and images with script-capable URL schemes lose their target

Design Decisions:
    - English month table over strftime("%b"): %b follows LC_TIME
    - Deregister Python-Markdown's raw HTML handlers instead of
      post-sanitizing: text nodes are then escaped by the serializer
"""

import html
import re
from datetime import datetime
from xml.etree.ElementTree import Element

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import AMP_SUBSTITUTE
from markupsafe import Markup

_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_UNSAFE_SCHEMES = ("javascript:", "vbscript:", "data:")

_IGNORED_IN_SCHEME = re.compile(r"[\x00-\x20]+")

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "smarty"]


def format_time(t: datetime) -> str:
    """Format as RFC 822 with numeric zone, e.g. '02 Jan 06 15:04 -0700'."""
    return (
        f"{t.day:02d} {_MONTHS[t.month - 1]} {t:%y} "
        f"{t:%H:%M} {t:%z}"
    )


def _url_target(value: str) -> str:
    """Normalize a URL the way a browser reads its scheme."""
    value = html.unescape(value.replace(AMP_SUBSTITUTE, "&"))
    return _IGNORED_IN_SCHEME.sub("", value).lower()


class _DropUnsafeLinks(Treeprocessor):
    def run(self, root: Element) -> None:
        for el in root.iter():
            for attr in ("href", "src"):
                value = el.get(attr)
                if value is None:
                    continue
                if _url_target(value).startswith(_UNSAFE_SCHEMES):
                    del el.attrib[attr]


class EscapeHtmlExtension(Extension):
    """Treat raw HTML in the source as text."""

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        md.treeprocessors.register(_DropUnsafeLinks(md), "drop_unsafe_links", 1)


def render_markdown(text: str | None) -> Markup:
    if not text:
        return Markup("")
    # Markdown instances carry per-document state; build one per call
    md = markdown.Markdown(
        extensions=[*MARKDOWN_EXTENSIONS, EscapeHtmlExtension()],
    )
    return Markup(md.convert(text))
