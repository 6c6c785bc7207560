"""Process-wide store instances, exposed as FastAPI dependencies."""

from functools import lru_cache

from .config import LANDING_REVALIDATE_SECONDS
from .landing import LandingAggregator
from .store.comments import CommentStore
from .store.feed import ChangeFeed
from .store.tasks import TaskStore


@lru_cache()
def get_task_store() -> TaskStore:
    return TaskStore(feed=ChangeFeed())


@lru_cache()
def get_comment_store() -> CommentStore:
    return CommentStore()


@lru_cache()
def get_landing_aggregator() -> LandingAggregator:
    return LandingAggregator(
        get_task_store(),
        get_comment_store(),
        revalidate_seconds=LANDING_REVALIDATE_SECONDS,
    )
