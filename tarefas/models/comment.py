from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4


class Comment(SQLModel, table=True):
    """Comment document on a public task.

    ``task_id`` is a plain reference without a foreign key, so comments
    outlive a deleted task.
    """
    __tablename__ = "comments"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    comment: str
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
    task_id: str = Field(index=True)

    # Author snapshot
    user_name: Optional[str] = None
    user_email: str = Field(index=True)
    user_image: Optional[str] = None
