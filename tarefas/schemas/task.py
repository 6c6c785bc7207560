from pydantic import BaseModel
from datetime import datetime

from .user import Identity


class TaskVisibility(BaseModel):
    """Schema for toggling task visibility."""
    is_public: bool


class Task(BaseModel):
    """Complete task schema with the owner snapshot nested."""
    id: str
    task: str
    is_public: bool
    created_at: datetime
    user: Identity

    @classmethod
    def from_record(cls, record) -> "Task":
        return cls(
            id=record.id,
            task=record.task,
            is_public=record.is_public,
            created_at=record.created_at,
            user=Identity(
                name=record.user_name,
                email=record.user_email,
                image=record.user_image,
            ),
        )


class ShareLink(BaseModel):
    url: str


class LandingCounts(BaseModel):
    tasks: int
    comments: int
    tasks_display: str
    comments_display: str
