"""
Jinja2 document renderer.

Templates live in a single directory and are addressed by name without the
suffix: template ``"report"`` resolves to ``<templates_dir>/report.html.j2``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, select_autoescape

from eligibility.errors import RenderError

DEFAULT_SUFFIX = ".html.j2"


class DocumentRenderer:
    """
    Render report contexts through Jinja2 templates.

    Undefined template variables are errors rather than silent blanks.
    """

    def __init__(self, templates_dir: Path | str, suffix: str = DEFAULT_SUFFIX) -> None:
        self.templates_dir = Path(templates_dir)
        self.suffix = suffix
        self._env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=select_autoescape(enabled_extensions=("html", "html.j2")),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def template_filename(self, template_name: str) -> str:
        return f"{template_name}{self.suffix}"

    def render(self, template_name: str, context: Mapping[str, Any]) -> str:
        """
        Render `template_name` with `context`.

        Raises
        ------
        RenderError
            If the template is missing or has invalid syntax, or if anything
            raised while it runs (undefined variables, failing filters).
        """
        filename = self.template_filename(template_name)
        try:
            template = self._env.get_template(filename)
            return template.render(**context)
        except TemplateError as exc:
            raise self._render_error(filename, exc) from exc
        except Exception as exc:  # noqa: BLE001 - template code can raise anything
            raise self._render_error(filename, exc) from exc

    def _render_error(self, filename: str, exc: Exception) -> RenderError:
        return RenderError(
            f"cannot render template '{filename}' from {self.templates_dir}: "
            f"{type(exc).__name__}: {exc}"
        )


__all__ = ["DocumentRenderer", "DEFAULT_SUFFIX"]
