import logging
from typing import List, Optional

from sqlmodel import func, select

from ..database import get_session
from ..errors import StoreError, store_operation
from ..models import Comment as CommentRecord
from ..schemas.comment import Comment
from ..schemas.user import Identity

logger = logging.getLogger(__name__)


class CommentStore:
    """Comment collection operations, scoped by task identifier."""

    def __init__(self, session_factory=get_session):
        self._session = session_factory

    def list_comments(self, task_id: str) -> List[Comment]:
        """One-shot fetch of a task's comments in the order the store returns them."""
        with store_operation(logger, "list_comments"), self._session() as session:
            query = select(CommentRecord).where(CommentRecord.task_id == task_id)
            return [Comment.from_record(record) for record in session.exec(query).all()]

    def get_comment(self, comment_id: str) -> Optional[Comment]:
        with store_operation(logger, "get_comment"), self._session() as session:
            record = session.get(CommentRecord, comment_id)
            return Comment.from_record(record) if record else None

    def add_comment(self, author: Identity, task_id: str, comment: str) -> Comment:
        """Write a comment, then read it back to obtain the stored timestamp."""
        with store_operation(logger, "add_comment"), self._session() as session:
            record = CommentRecord(
                comment=comment,
                task_id=task_id,
                user_name=author.name,
                user_email=author.email,
                user_image=author.image,
            )
            session.add(record)
            session.commit()
            comment_id = record.id

        created = self.get_comment(comment_id)
        if created is None:
            # Deleted between the write and the read-back.
            logger.warning("Comment %s missing on read-back", comment_id)
            raise StoreError("add_comment")

        logger.info("Comment %s added to task %s by %s", comment_id, task_id, author.email)
        return created

    def delete_comment(self, comment_id: str) -> bool:
        with store_operation(logger, "delete_comment"), self._session() as session:
            record = session.get(CommentRecord, comment_id)
            if record is None:
                return False
            session.delete(record)
            session.commit()

        logger.info("Comment %s deleted", comment_id)
        return True

    def count_comments(self) -> int:
        with store_operation(logger, "count_comments"), self._session() as session:
            return session.exec(select(func.count()).select_from(CommentRecord)).one()
