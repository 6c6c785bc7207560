import asyncio
import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from ..config import PUBLIC_URL
from ..dependencies import get_task_store
from ..forms import TaskForm
from ..schemas.task import ShareLink, Task, TaskVisibility
from ..schemas.user import Identity
from ..store.tasks import TaskListView, TaskStore, build_share_url
from .auth import get_current_user, get_optional_user

logger = logging.getLogger(__name__)

router = APIRouter()


def get_owned_task(task_id: str, current_user: Identity, store: TaskStore) -> Task:
    """The task if the current user owns it, otherwise 404."""
    task = store.get_task(task_id)
    if task is None or task.user.email != current_user.email:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.get("/tasks", response_model=List[Task])
def get_tasks(
    current_user: Identity = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    """Get the current user's tasks, newest first."""
    return store.list_tasks(current_user)


@router.post("/tasks", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(
    form: TaskForm,
    current_user: Identity = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    """Create a new task owned by the current user."""
    return store.add_task(current_user, form.task, is_public=form.is_public)


@router.get("/tasks/stream")
async def stream_tasks(
    current_user: Identity = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    """Server-sent events: the full task list on open and after every change."""
    loop = asyncio.get_running_loop()
    snapshots: asyncio.Queue = asyncio.Queue()

    def on_snapshot(tasks: List[Task]) -> None:
        loop.call_soon_threadsafe(snapshots.put_nowait, tasks)

    async def events():
        view = TaskListView(store, on_change=on_snapshot)
        try:
            await run_in_threadpool(view.bind, current_user)
            while True:
                tasks = await snapshots.get()
                payload = json.dumps([task.model_dump(mode="json") for task in tasks])
                yield f"event: snapshot\ndata: {payload}\n\n"
        finally:
            view.close()
            logger.debug("Task stream for %s closed", current_user.email)

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


@router.get("/tasks/{task_id}", response_model=Task)
def get_task(
    task_id: str,
    current_user: Optional[Identity] = Depends(get_optional_user),
    store: TaskStore = Depends(get_task_store),
):
    """Get a task. Private tasks are only visible to their owner."""
    task = store.get_task(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    if not task.is_public and (current_user is None or current_user.email != task.user.email):
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.patch("/tasks/{task_id}", response_model=Task)
def update_task_visibility(
    task_id: str,
    payload: TaskVisibility,
    current_user: Identity = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    """Make a task public or private."""
    get_owned_task(task_id, current_user, store)
    task = store.set_visibility(task_id, payload.is_public)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    current_user: Identity = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    """Delete a task. Irreversible."""
    get_owned_task(task_id, current_user, store)
    store.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/tasks/{task_id}/share", response_model=ShareLink)
def share_task(
    task_id: str,
    current_user: Identity = Depends(get_current_user),
    store: TaskStore = Depends(get_task_store),
):
    """Link for sharing one of the current user's tasks."""
    get_owned_task(task_id, current_user, store)
    return {"url": build_share_url(task_id, PUBLIC_URL)}
