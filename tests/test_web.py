from http import HTTPStatus

import jinja2
import pytest

from swebot.taskstore import Store, Task
from swebot.web import WebHandler


def _templates(list_template: str, detail_template: str) -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.DictLoader({"list.html": list_template, "detail.html": detail_template}),
        autoescape=True,
        undefined=jinja2.StrictUndefined,
    )


def test_from_directory_loads_templates(tmp_path):
    templates_dir = tmp_path / "templates"
    templates_dir.mkdir()
    (templates_dir / "list.html").write_text("ok")
    (templates_dir / "detail.html").write_text("{{ task.id }}")

    store = Store()
    store.create(Task(id="task-123", title="demo"))
    handler = WebHandler.from_directory(store, templates_dir)

    assert handler.store is store
    assert handler.list_tasks().body == "ok"
    assert handler.task_detail("task-123").body == "task-123"


def test_from_directory_missing_templates(tmp_path):
    with pytest.raises(FileNotFoundError):
        WebHandler.from_directory(Store(), tmp_path / "templates")


def test_from_directory_syntax_error(tmp_path):
    templates_dir = tmp_path / "templates"
    templates_dir.mkdir()
    (templates_dir / "list.html").write_text("{% for %}")
    with pytest.raises(jinja2.TemplateSyntaxError):
        WebHandler.from_directory(Store(), templates_dir)


def test_list_tasks_without_store():
    handler = WebHandler(None, _templates("ok", "{{ task.id }}"))
    response = handler.list_tasks()
    assert response.status == HTTPStatus.SERVICE_UNAVAILABLE
    assert "task store unavailable" in response.body


def test_list_tasks_template_error():
    handler = WebHandler(Store(), _templates("{{ tasks[0].id }}", "{{ task.id }}"))
    response = handler.list_tasks()
    assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert "template rendering error" in response.body


def test_list_tasks_success():
    store = Store()
    store.create(Task(id="task-123", title="demo"))
    handler = WebHandler(store, _templates("{% for t in tasks %}{{ t.id }}{% endfor %}", "{{ task.id }}"))
    response = handler.list_tasks()
    assert response.status == HTTPStatus.OK
    assert "task-123" in response.body


def test_list_tasks_escapes_html():
    store = Store()
    store.create(Task(id="t", title="<b>bold</b>"))
    handler = WebHandler(store, _templates("{% for t in tasks %}{{ t.title }}{% endfor %}", ""))
    assert handler.list_tasks().body == "&lt;b&gt;bold&lt;/b&gt;"


def test_task_detail_without_store():
    handler = WebHandler(None, _templates("ok", "{{ task.id }}"))
    assert handler.task_detail("task-123").status == HTTPStatus.SERVICE_UNAVAILABLE


def test_task_detail_not_found():
    handler = WebHandler(Store(), _templates("ok", "{{ task.id }}"))
    assert handler.task_detail("missing").status == HTTPStatus.NOT_FOUND


def test_task_detail_success():
    store = Store()
    store.create(Task(id="task-123", title="demo"))
    handler = WebHandler(store, _templates("ok", "{{ task.id }}"))
    response = handler.task_detail("task-123")
    assert response.status == HTTPStatus.OK
    assert response.body == "task-123"