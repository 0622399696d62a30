from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError

from app.schemas.task import TaskOut

EMAIL_MAX_LENGTH = 100


class UserWrite(BaseModel):
    """Body of POST /users and PUT /users/{id}; PUT replaces both fields."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    password_hash: str = Field(..., alias="passwordHash")

    @field_validator("email", mode="wrap")
    @classmethod
    def email_valid(cls, v, handler):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise PydanticCustomError("email_required", "Email is required")
        if isinstance(v, str) and len(v) > EMAIL_MAX_LENGTH:
            raise PydanticCustomError(
                "email_length", "Email cannot exceed 100 characters"
            )
        # validate the address but store it exactly as sent
        handler(v)
        return v

    @field_validator("password_hash")
    @classmethod
    def password_hash_present(cls, v: str) -> str:
        if not v.strip():
            raise PydanticCustomError("password_hash_required", "Password hash is required")
        return v


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    email: str
    password_hash: str = Field(alias="passwordHash")
    tasks: list[TaskOut] = []
