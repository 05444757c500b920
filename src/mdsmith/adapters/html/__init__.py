"""HTML page rendering through Jinja2 templates."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    Template,
    TemplateError,
    select_autoescape,
)
from markupsafe import Markup

from mdsmith.adapters.markdown import render_markdown
from mdsmith.core.documents import Document
from mdsmith.core.exceptions import RenderError
from mdsmith.core.metadata import mapping_field, sequence_field, text_field


__all__ = [
    "DEFAULT_CREATOR",
    "TEMPLATE_DIR",
    "HtmlRenderer",
    "PageFields",
    "build_page_fields",
    "default_css",
]


TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
DEFAULT_TEMPLATE = "default.html"
DEFAULT_STYLESHEET = "default.css"
DEFAULT_CREATOR = "mdsmith"


def default_css() -> str:
    """Return the stylesheet bundled with the default template."""
    return (TEMPLATE_DIR / DEFAULT_STYLESHEET).read_text(encoding="utf-8")


@dataclass(slots=True)
class PageFields:
    """Values exposed to page templates."""

    author: str = ""
    title: str = ""
    creator: str = DEFAULT_CREATOR
    version: str = ""
    date: str = ""
    styles: list[str] = field(default_factory=list)
    default_css: str = ""
    footer: dict[str, str] = field(default_factory=dict)
    body: str = ""

    def as_context(self) -> dict[str, Any]:
        context = asdict(self)
        context["default_css"] = Markup(self.default_css)
        context["body"] = Markup(self.body)
        return context


def build_page_fields(
    document: Document,
    body_html: str,
    *,
    css: str = "",
    creator: str = DEFAULT_CREATOR,
) -> PageFields:
    """Collect template fields from the document front matter."""
    metadata = document.metadata
    return PageFields(
        author=text_field(metadata, "author"),
        title=text_field(metadata, "title"),
        creator=text_field(metadata, "creator", creator),
        version=text_field(metadata, "version"),
        date=text_field(metadata, "date"),
        styles=sequence_field(metadata, "styles"),
        default_css=css,
        footer=mapping_field(metadata, "footer"),
        body=body_html,
    )


class HtmlRenderer:
    """Render documents to standalone HTML pages."""

    def __init__(
        self,
        *,
        template: Path | None = None,
        css: str | None = None,
        extensions: Sequence[str] | None = None,
        creator: str = DEFAULT_CREATOR,
    ) -> None:
        self.css = css or default_css()
        self.extensions = list(extensions) if extensions is not None else None
        self.creator = creator
        self._template = self._load_template(template)

    @staticmethod
    def _load_template(path: Path | None) -> Template:
        if path is None:
            template_dir, name = TEMPLATE_DIR, DEFAULT_TEMPLATE
        else:
            template_dir, name = Path(path).parent, Path(path).name
        env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(("html", "htm", "xml")),
            keep_trailing_newline=True,
        )
        try:
            return env.get_template(name)
        except TemplateError as exc:
            location = path or TEMPLATE_DIR / DEFAULT_TEMPLATE
            raise RenderError(f"Unable to load template '{location}': {exc}") from exc

    def render(self, document: Document) -> bytes:
        rendered = render_markdown(document.body, self.extensions)
        fields = build_page_fields(document, rendered.html, css=self.css, creator=self.creator)
        try:
            page = self._template.render(**fields.as_context())
        except TemplateError as exc:
            raise RenderError(f"Failed to render template: {exc}") from exc
        return page.encode("utf-8")
