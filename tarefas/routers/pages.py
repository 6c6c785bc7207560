"""Server-rendered pages: landing, dashboard and public task detail."""

from pathlib import Path
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from ..config import PUBLIC_URL
from ..dependencies import get_comment_store, get_landing_aggregator, get_task_store
from ..errors import StoreError
from ..formatting import format_created_at
from ..forms import CommentForm, TaskForm, validate_form
from ..landing import LandingAggregator
from ..schemas.user import Identity
from ..store.comments import CommentStore
from ..store.tasks import TaskStore, build_share_url
from .auth import read_session

router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[1] / "templates"))
templates.env.filters["created_at"] = format_created_at
templates.env.globals["share_url"] = lambda task_id: build_share_url(task_id, PUBLIC_URL)

STORE_ERROR_MESSAGE = "We could not reach the server. Your text was kept, try again."


def _to_landing() -> RedirectResponse:
    return RedirectResponse("/", status_code=status.HTTP_307_TEMPORARY_REDIRECT)


def _see_other(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _form_data(**fields) -> Dict[str, object]:
    return {name: value for name, value in fields.items() if value is not None}


@router.get("/")
def landing(
    request: Request,
    aggregator: LandingAggregator = Depends(get_landing_aggregator),
):
    counts = aggregator.get()
    return templates.TemplateResponse(
        request,
        "index.html",
        {"user": read_session(request), "counts": counts},
    )


def _render_dashboard(
    request: Request,
    user: Identity,
    store: TaskStore,
    values: Optional[dict] = None,
    errors: Optional[dict] = None,
    error_message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
):
    try:
        tasks = store.list_tasks(user)
    except StoreError:
        tasks = []
        error_message = error_message or STORE_ERROR_MESSAGE
        status_code = max(status_code, status.HTTP_503_SERVICE_UNAVAILABLE)

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "user": user,
            "tasks": tasks,
            "values": values or {"task": "", "is_public": False},
            "errors": errors or {},
            "error_message": error_message,
        },
        status_code=status_code,
    )


@router.get("/dashboard")
def dashboard(request: Request, store: TaskStore = Depends(get_task_store)):
    user = read_session(request)
    if user is None:
        return _to_landing()
    return _render_dashboard(request, user, store)


@router.post("/dashboard")
def submit_task(
    request: Request,
    task: Optional[str] = Form(None),
    is_public: Optional[str] = Form(None),
    store: TaskStore = Depends(get_task_store),
):
    user = read_session(request)
    if user is None:
        return _see_other("/")

    values = {"task": task or "", "is_public": is_public is not None}
    form, errors = validate_form(TaskForm, _form_data(task=task, is_public=is_public))
    if form is None:
        return _render_dashboard(
            request, user, store, values=values, errors=errors,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    try:
        store.add_task(user, form.task, is_public=form.is_public)
    except StoreError:
        return _render_dashboard(
            request, user, store, values=values, error_message=STORE_ERROR_MESSAGE,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return _see_other("/dashboard")


def _owns_task(store: TaskStore, task_id: str, user: Identity) -> bool:
    task = store.get_task(task_id)
    return task is not None and task.user.email == user.email


@router.post("/dashboard/tasks/{task_id}/visibility")
def toggle_visibility(
    request: Request,
    task_id: str,
    is_public: Optional[str] = Form(None),
    store: TaskStore = Depends(get_task_store),
):
    user = read_session(request)
    if user is None:
        return _see_other("/")

    try:
        if not _owns_task(store, task_id, user):
            return _see_other("/dashboard")
        store.set_visibility(task_id, is_public is not None)
    except StoreError:
        return _render_dashboard(
            request, user, store, error_message=STORE_ERROR_MESSAGE,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return _see_other("/dashboard")


@router.post("/dashboard/tasks/{task_id}/delete")
def remove_task(
    request: Request,
    task_id: str,
    store: TaskStore = Depends(get_task_store),
):
    user = read_session(request)
    if user is None:
        return _see_other("/")

    try:
        if not _owns_task(store, task_id, user):
            return _see_other("/dashboard")
        store.delete_task(task_id)
    except StoreError:
        return _render_dashboard(
            request, user, store, error_message=STORE_ERROR_MESSAGE,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return _see_other("/dashboard")


def _render_task(
    request: Request,
    task,
    comments,
    user: Optional[Identity],
    values: Optional[dict] = None,
    errors: Optional[dict] = None,
    error_message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
):
    return templates.TemplateResponse(
        request,
        "task.html",
        {
            "user": user,
            "task": task,
            "comments": comments,
            "values": values or {"comment": ""},
            "errors": errors or {},
            "error_message": error_message,
        },
        status_code=status_code,
    )


@router.get("/task/{task_id}")
def task_detail(
    request: Request,
    task_id: str,
    tasks: TaskStore = Depends(get_task_store),
    comments: CommentStore = Depends(get_comment_store),
):
    task = tasks.get_task(task_id)
    if task is None or not task.is_public:
        return _to_landing()

    return _render_task(request, task, comments.list_comments(task_id), read_session(request))


@router.post("/task/{task_id}/comments")
def submit_comment(
    request: Request,
    task_id: str,
    comment: Optional[str] = Form(None),
    tasks: TaskStore = Depends(get_task_store),
    comments: CommentStore = Depends(get_comment_store),
):
    task = tasks.get_task(task_id)
    if task is None or not task.is_public:
        return _see_other("/")

    user = read_session(request)
    if user is None:
        return _see_other(f"/task/{task_id}")

    values = {"comment": comment or ""}
    form, errors = validate_form(CommentForm, _form_data(comment=comment))
    if form is None:
        return _render_task(
            request, task, comments.list_comments(task_id), user,
            values=values, errors=errors,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    try:
        # The redirect re-renders the comment list from the store.
        comments.add_comment(user, task_id, form.comment)
    except StoreError:
        return _render_task(
            request, task, comments.list_comments(task_id), user,
            values=values, error_message=STORE_ERROR_MESSAGE,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return _see_other(f"/task/{task_id}")


@router.post("/task/{task_id}/comments/{comment_id}/delete")
def remove_comment(
    request: Request,
    task_id: str,
    comment_id: str,
    comments: CommentStore = Depends(get_comment_store),
):
    user = read_session(request)
    if user is None:
        return _see_other(f"/task/{task_id}")

    comment = comments.get_comment(comment_id)
    if comment is None or comment.task_id != task_id:
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment.user.email != user.email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    comments.delete_comment(comment_id)
    return _see_other(f"/task/{task_id}")

