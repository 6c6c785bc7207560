import logging
import threading
import time
from typing import Callable, Optional

from .formatting import format_count
from .schemas.task import LandingCounts
from .store.comments import CommentStore
from .store.tasks import TaskStore

logger = logging.getLogger(__name__)


class LandingAggregator:
    """Task and comment totals for the landing page, refreshed once per window.

    Both counts are fetched together; if either fails the error propagates
    and the previous numbers stay cached.
    """

    def __init__(
        self,
        task_store: TaskStore,
        comment_store: CommentStore,
        revalidate_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._tasks = task_store
        self._comments = comment_store
        self._window = revalidate_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._cached: Optional[LandingCounts] = None
        self._fetched_at = 0.0

    def get(self) -> LandingCounts:
        with self._lock:
            now = self._clock()
            if self._cached is None or now - self._fetched_at >= self._window:
                self._cached = self._fetch()
                self._fetched_at = now
            return self._cached

    def _fetch(self) -> LandingCounts:
        tasks = self._tasks.count_tasks()
        comments = self._comments.count_comments()
        logger.debug("Landing counts refreshed: %d tasks, %d comments", tasks, comments)
        return LandingCounts(
            tasks=tasks,
            comments=comments,
            tasks_display=format_count(tasks),
            comments_display=format_count(comments),
        )
