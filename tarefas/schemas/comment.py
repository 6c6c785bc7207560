from pydantic import BaseModel
from datetime import datetime

from .user import Identity


class Comment(BaseModel):
    """Complete comment schema with the author snapshot nested."""
    id: str
    comment: str
    created_at: datetime
    task_id: str
    user: Identity

    @classmethod
    def from_record(cls, record) -> "Comment":
        return cls(
            id=record.id,
            comment=record.comment,
            created_at=record.created_at,
            task_id=record.task_id,
            user=Identity(
                name=record.user_name,
                email=record.user_email,
                image=record.user_image,
            ),
        )
