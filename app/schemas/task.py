"""Pydantic schemas for task endpoints."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from app.validation import clean_description, clean_title


class TaskStatusFilter(str, Enum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


class TaskSort(str, Enum):
    CREATED = "created"
    TITLE = "title"
    UPDATED = "updated"


class TaskCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    description: str | None = None

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        return clean_title(value)

    @field_validator("description")
    @classmethod
    def _check_description(cls, value: str | None) -> str | None:
        return clean_description(value)


class TaskUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str | None) -> str:
        # Only runs when the client sent the field, so None here is an explicit null.
        return clean_title(value)

    @field_validator("description")
    @classmethod
    def _check_description(cls, value: str | None) -> str | None:
        return clean_description(value)


class TaskResponse(BaseModel):
    id: int
    user_id: str
    title: str
    description: str | None
    completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
