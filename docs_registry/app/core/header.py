"""
Managed header rendering.

Transforms a validated record into the markdown placed inside the body's
managed region.

Design guarantees:
- Deterministic template rendering (Jinja2 + StrictUndefined)
- No autoescaping; the output is markdown, not HTML
- The record is passed through verbatim as the render context

The rendered header deliberately excludes ``checksum_sha256`` and
``updated_at``: both are derived from the body, so rendering them into the
body would make the checksum depend on itself.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from docs_registry.app.schemas.document import DocumentRecord

HEADER_TEMPLATE_NAME = "header.md.jinja"

DEFAULT_TEMPLATE_ROOT = Path(__file__).resolve().parent.parent / "templates"


class HeaderRenderError(RuntimeError):
    """Raised when the header template cannot be loaded or rendered."""


def _search_path(templates_dir: Optional[Path]) -> List[str]:
    # A custom directory shadows the bundled template of the same name.
    roots = [DEFAULT_TEMPLATE_ROOT]
    if templates_dir is not None:
        roots.insert(0, Path(templates_dir).resolve())
    return [str(root) for root in roots]


class HeaderRenderer:
    """
    Renders managed headers for one generation run.

    The template is resolved on each render so that a broken template is
    reported against every document it fails for, not as a run-level abort.
    """

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        self._env = Environment(
            loader=FileSystemLoader(_search_path(templates_dir)),
            undefined=StrictUndefined,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    def render(self, record: DocumentRecord) -> str:
        context: Dict[str, Any] = record.model_dump(mode="json")

        try:
            template = self._env.get_template(HEADER_TEMPLATE_NAME)
            return template.render(context)
        except TemplateError as exc:
            raise HeaderRenderError(
                f"header template failed for {record.document_id}: {exc}"
            ) from exc
