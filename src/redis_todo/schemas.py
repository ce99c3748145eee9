from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _require_text(value: str, field: str) -> str:
    s = value.strip()
    if not s:
        raise ValueError(f"{field} must not be blank")
    return s


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.

    ``task`` may also be sent as ``todo``, the field name older clients post.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "John",
                "task": "Learn Redis",
            }
        }
    )

    name: str = Field(..., description="Who the todo belongs to")
    task: str = Field(
        ...,
        description="What needs doing",
        validation_alias=AliasChoices("task", "todo"),
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_text(v, "name")

    @field_validator("task")
    @classmethod
    def validate_task(cls, v: str) -> str:
        return _require_text(v, "task")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "1714558530123",
                "name": "John",
                "task": "Learn Redis",
                "done": False,
                "createdAt": "2024-05-01T10:15:30.123Z",
            }
        }
    )

    id: str = Field(..., description="Creation time in epoch milliseconds")
    name: str
    task: str
    done: bool = Field(..., description="Completion status flag")
    createdAt: str = Field(..., description="ISO-8601 UTC creation timestamp")


class SuccessOut(BaseModel):
    success: bool = True


class ErrorOut(BaseModel):
    error: str


class HealthOut(BaseModel):
    """
    Health probe payload.
    """

    status: str = Field(..., description="'healthy' when the probe ran")
    timestamp: str
    redis: str = Field(..., description="'connected' or 'disconnected'")
    redis_ping: Optional[str] = Field(default=None, description="Ping reply when connected")
