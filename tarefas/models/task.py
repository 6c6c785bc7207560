from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4


class Task(SQLModel, table=True):
    """Task document.

    The owner is stored as an identity snapshot taken when the task was
    created; it is not linked to the provider profile afterwards.
    """
    __tablename__ = "tasks"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    task: str
    is_public: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
        index=True,
    )

    # Owner snapshot
    user_name: Optional[str] = None
    user_email: str = Field(index=True)
    user_image: Optional[str] = None
