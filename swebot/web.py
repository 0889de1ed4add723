"""HTML pages listing tasks and showing a single task."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus
from pathlib import Path

import jinja2

from swebot.taskstore import Store

logger = logging.getLogger(__name__)

_HTML = "text/html; charset=utf-8"
_TEXT = "text/plain; charset=utf-8"


@dataclass
class Response:
    """A rendered HTTP response."""

    status: HTTPStatus
    body: str
    content_type: str = _HTML


def _error(status: HTTPStatus, message: str) -> Response:
    return Response(status=status, body=message + "\n", content_type=_TEXT)


def _environment(loader: jinja2.BaseLoader) -> jinja2.Environment:
    return jinja2.Environment(loader=loader, autoescape=True, undefined=jinja2.StrictUndefined)


class WebHandler:
    """Renders the task list and task detail pages from ``list.html`` and ``detail.html``."""

    def __init__(self, store: Store | None, templates: jinja2.Environment) -> None:
        self.store = store
        self.templates = templates

    @classmethod
    def from_directory(cls, store: Store | None, directory: str | Path = "templates") -> WebHandler:
        """Load every ``*.html`` template in ``directory``.

        Raises ``FileNotFoundError`` when there are none and
        ``jinja2.TemplateSyntaxError`` when one does not parse.
        """
        path = Path(directory)
        names = sorted(p.name for p in path.glob("*.html")) if path.is_dir() else []
        if not names:
            raise FileNotFoundError(f"no templates match {path / '*.html'}")
        env = _environment(jinja2.FileSystemLoader(str(path)))
        for name in names:
            env.get_template(name)
        return cls(store, env)

    def _render(self, name: str, **values: object) -> Response:
        try:
            body = self.templates.get_template(name).render(**values)
        except jinja2.TemplateError as exc:
            logger.error("Rendering %s failed: %s", name, exc)
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, "template rendering error")
        return Response(status=HTTPStatus.OK, body=body)

    def list_tasks(self) -> Response:
        """Render all tasks, newest first."""
        if self.store is None:
            return _error(HTTPStatus.SERVICE_UNAVAILABLE, "task store unavailable")
        return self._render("list.html", tasks=self.store.list_tasks())

    def task_detail(self, task_id: str) -> Response:
        """Render one task, or 404 if it is unknown."""
        if self.store is None:
            return _error(HTTPStatus.SERVICE_UNAVAILABLE, "task store unavailable")
        task = self.store.get(task_id)
        if task is None:
            return _error(HTTPStatus.NOT_FOUND, "404 page not found")
        return self._render("detail.html", task=task)