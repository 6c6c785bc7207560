"""Submission-time validation for the task and comment forms."""

from typing import Dict, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

FormT = TypeVar("FormT", bound=BaseModel)


def _require_text(value: str, message: str) -> str:
    if not value.strip():
        raise PydanticCustomError("blank", message)
    return value


class TaskForm(BaseModel):
    task: str = Field(default="", validate_default=True)
    is_public: bool = False

    @field_validator("task")
    @classmethod
    def task_not_blank(cls, value: str) -> str:
        return _require_text(value, "Enter a task.")


class CommentForm(BaseModel):
    comment: str = Field(default="", validate_default=True)

    @field_validator("comment")
    @classmethod
    def comment_not_blank(cls, value: str) -> str:
        return _require_text(value, "Enter a comment.")


def validate_form(
    form: Type[FormT], data: Mapping[str, object]
) -> Tuple[Optional[FormT], Dict[str, str]]:
    """Validate submitted fields as a whole.

    Returns the parsed form and no errors, or ``None`` and one message per
    failing field.
    """
    try:
        return form.model_validate(dict(data)), {}
    except ValidationError as exc:
        errors: Dict[str, str] = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "__all__"
            errors.setdefault(field, error["msg"])
        return None, errors
