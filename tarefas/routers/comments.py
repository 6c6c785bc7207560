from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..dependencies import get_comment_store, get_task_store
from ..forms import CommentForm
from ..schemas.comment import Comment
from ..schemas.task import Task
from ..schemas.user import Identity
from ..store.comments import CommentStore
from ..store.tasks import TaskStore
from .auth import get_current_user

router = APIRouter()


def get_public_task(task_id: str, store: TaskStore) -> Task:
    """The task if it is public; missing and private tasks look the same."""
    task = store.get_task(task_id)
    if task is None or not task.is_public:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.get("/tasks/{task_id}/comments", response_model=List[Comment])
def get_comments(
    task_id: str,
    tasks: TaskStore = Depends(get_task_store),
    comments: CommentStore = Depends(get_comment_store),
):
    """All comments on a public task."""
    get_public_task(task_id, tasks)
    return comments.list_comments(task_id)


@router.post("/tasks/{task_id}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED)
def create_comment(
    task_id: str,
    form: CommentForm,
    current_user: Identity = Depends(get_current_user),
    tasks: TaskStore = Depends(get_task_store),
    comments: CommentStore = Depends(get_comment_store),
):
    """Comment on a public task as the current user."""
    get_public_task(task_id, tasks)
    return comments.add_comment(current_user, task_id, form.comment)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: str,
    current_user: Identity = Depends(get_current_user),
    comments: CommentStore = Depends(get_comment_store),
):
    """Delete a comment. Only its author may do so."""
    comment = comments.get_comment(comment_id)
    if comment is None:
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment.user.email != current_user.email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    comments.delete_comment(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
