from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

TITLE_MAX_LENGTH = 200


def check_title(v: str) -> str:
    if not v or not v.strip():
        raise PydanticCustomError("title_required", "Task title is required")
    if len(v) > TITLE_MAX_LENGTH:
        raise PydanticCustomError(
            "title_length", "Task title must be between 1 and 200 characters"
        )
    return v


class TaskCreate(BaseModel):
    """Body of POST /tasks. Any owner sent by the client is ignored."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    is_done: bool = Field(False, alias="isDone")

    @field_validator("title")
    @classmethod
    def title_valid(cls, v):
        return check_title(v)


class TaskUpdate(BaseModel):
    """Body of PUT /tasks/{id}: the full representation, both fields required."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    is_done: bool = Field(..., alias="isDone")

    @field_validator("title")
    @classmethod
    def title_valid(cls, v):
        return check_title(v)


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    is_done: bool = Field(alias="isDone")
    user_id: int = Field(alias="userId")
