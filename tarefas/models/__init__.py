from .task import Task
from .comment import Comment

# Export all models for easy importing
__all__ = ["Task", "Comment"]
