import logging
from typing import Callable, List, Optional

from sqlmodel import func, select

from ..database import get_session
from ..errors import store_operation
from ..models import Task as TaskRecord
from ..schemas.task import Task
from ..schemas.user import Identity
from .feed import ChangeFeed, Unsubscribe

logger = logging.getLogger(__name__)

TASKS = "tasks"

SnapshotHandler = Callable[[List[Task]], None]


def build_share_url(task_id: str, base_url: str) -> str:
    """Public link for a task. An empty base URL leaves the path relative."""
    return f"{base_url}/task/{task_id}"


class TaskStore:
    """Task collection operations plus live queries over the change feed."""

    def __init__(self, session_factory=get_session, feed: Optional[ChangeFeed] = None):
        self._session = session_factory
        self.feed = feed or ChangeFeed()

    def list_tasks(self, owner: Identity) -> List[Task]:
        """Owner's tasks, newest first."""
        with store_operation(logger, "list_tasks"), self._session() as session:
            query = (
                select(TaskRecord)
                .where(TaskRecord.user_email == owner.email)
                .order_by(TaskRecord.created_at.desc())
            )
            return [Task.from_record(record) for record in session.exec(query).all()]

    def watch_tasks(self, owner: Identity, on_snapshot: SnapshotHandler) -> Unsubscribe:
        """Deliver the owner's full task list now and after every task change.

        Returns the callable that releases the subscription.
        """

        def deliver() -> None:
            on_snapshot(self.list_tasks(owner))

        unsubscribe = self.feed.subscribe(TASKS, deliver)
        try:
            deliver()
        except Exception:
            unsubscribe()
            raise
        logger.debug("Opened task subscription for %s", owner.email)
        return unsubscribe

    def get_task(self, task_id: str) -> Optional[Task]:
        with store_operation(logger, "get_task"), self._session() as session:
            record = session.get(TaskRecord, task_id)
            return Task.from_record(record) if record else None

    def add_task(self, owner: Identity, task: str, is_public: bool = False) -> Task:
        with store_operation(logger, "add_task"), self._session() as session:
            record = TaskRecord(
                task=task,
                is_public=is_public,
                user_name=owner.name,
                user_email=owner.email,
                user_image=owner.image,
            )
            session.add(record)
            session.commit()
            session.refresh(record)
            created = Task.from_record(record)

        logger.info("Task %s created by %s", created.id, owner.email)
        self.feed.publish(TASKS)
        return created

    def set_visibility(self, task_id: str, is_public: bool) -> Optional[Task]:
        with store_operation(logger, "set_visibility"), self._session() as session:
            record = session.get(TaskRecord, task_id)
            if record is None:
                return None
            record.is_public = is_public
            session.add(record)
            session.commit()
            session.refresh(record)
            updated = Task.from_record(record)

        self.feed.publish(TASKS)
        return updated

    def delete_task(self, task_id: str) -> bool:
        """Remove a task by identifier. Comments referencing it are kept."""
        with store_operation(logger, "delete_task"), self._session() as session:
            record = session.get(TaskRecord, task_id)
            if record is None:
                return False
            session.delete(record)
            session.commit()

        logger.info("Task %s deleted", task_id)
        self.feed.publish(TASKS)
        return True

    def count_tasks(self) -> int:
        with store_operation(logger, "count_tasks"), self._session() as session:
            return session.exec(select(func.count()).select_from(TaskRecord)).one()


class TaskListView:
    """Live task list state for one mounted view.

    ``bind`` opens the subscription for an identity and re-subscribes when
    the identity changes; ``close`` releases it. Each delivered snapshot
    replaces ``tasks`` wholesale.
    """

    def __init__(self, store: TaskStore, on_change: Optional[SnapshotHandler] = None):
        self._store = store
        self._on_change = on_change
        self._unsubscribe: Optional[Unsubscribe] = None
        self._owner: Optional[Identity] = None
        self.tasks: List[Task] = []

    @property
    def is_open(self) -> bool:
        return self._unsubscribe is not None

    def bind(self, owner: Identity) -> None:
        if self.is_open and self._owner == owner:
            return
        self.close()
        self._owner = owner
        self._unsubscribe = self._store.watch_tasks(owner, self._replace)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _replace(self, tasks: List[Task]) -> None:
        self.tasks = tasks
        if self._on_change is not None:
            self._on_change(tasks)

    def __enter__(self) -> "TaskListView":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
