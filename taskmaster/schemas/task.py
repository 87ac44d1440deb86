from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from taskmaster.models.tasks import TaskStatus, TaskPriority


def as_utc(value: datetime | None) -> datetime | None:
    # Deadlines without an offset are taken to be UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority
    deadline: datetime | None = None

    @field_validator("deadline")
    @classmethod
    def normalize_deadline(cls, v):
        return as_utc(v)


class TaskUpdate(BaseModel):
    # Omitted and null fields keep their stored value
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    deadline: datetime | None = None

    @field_validator("deadline")
    @classmethod
    def normalize_deadline(cls, v):
        return as_utc(v)

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class Task(BaseModel):
    id: int
    user_id: int
    title: str
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority
    deadline: datetime | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
