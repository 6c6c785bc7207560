# tests/test_forms.py

from __future__ import annotations

import pytest

from tarefas.forms import CommentForm, TaskForm, validate_form


def test_task_form_accepts_text_and_defaults_to_private() -> None:
    form, errors = validate_form(TaskForm, {"task": "Buy milk"})

    assert errors == {}
    assert form is not None
    assert form.task == "Buy milk"
    assert form.is_public is False


def test_task_form_reads_checked_checkbox() -> None:
    form, errors = validate_form(TaskForm, {"task": "Buy milk", "is_public": "on"})

    assert errors == {}
    assert form is not None and form.is_public is True


def test_task_form_keeps_text_as_typed() -> None:
    form, _ = validate_form(TaskForm, {"task": "  Buy milk\n"})

    assert form is not None
    assert form.task == "  Buy milk\n"


@pytest.mark.parametrize("data", [{}, {"task": ""}, {"task": "   "}, {"task": "\n\t"}])
def test_task_form_rejects_blank_text(data: dict) -> None:
    form, errors = validate_form(TaskForm, data)

    assert form is None
    assert errors == {"task": "Enter a task."}


@pytest.mark.parametrize("data", [{}, {"comment": ""}, {"comment": "  "}])
def test_comment_form_rejects_blank_text(data: dict) -> None:
    form, errors = validate_form(CommentForm, data)

    assert form is None
    assert errors == {"comment": "Enter a comment."}


def test_comment_form_accepts_text() -> None:
    form, errors = validate_form(CommentForm, {"comment": "nice!"})

    assert errors == {}
    assert form is not None and form.comment == "nice!"
