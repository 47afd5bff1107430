"""Task domain models and enums."""

from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Lane(StrEnum):
    """Board column a task occupies. The set is closed."""

    URGENT = "urgent"
    TODAY = "today"
    TOMORROW = "tomorrow"
    WAITING = "waiting"
    NOT_URGENT = "not-urgent"
    DONE = "done"

    @classmethod
    def parse(cls, value: object) -> "Lane | None":
        """Return the lane for a raw identifier, or None if it is not one of the fixed lanes."""
        try:
            return cls(value)
        except ValueError:
            return None


class ConnectivityMode(StrEnum):
    """Whether mutations are synchronized with the remote task store."""

    ONLINE = "online"
    OFFLINE = "offline"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TaskDraft(BaseModel):
    """Editable task fields as collected by a form (no id)."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description="Short task title; must be non-empty after trimming")
    description: str = Field(default="", alias="desc", description="Free text, may be empty")
    project: str = Field(default="", description="Project name; unknown names are tolerated")
    lane: Lane = Field(default=Lane.TODAY, alias="group", description="Lane the task goes into")
    due_date: date | None = Field(default=None, alias="dueDate", description="Optional calendar due date")

    @field_validator("due_date", mode="before")
    @classmethod
    def empty_due_date_is_none(cls, v: Any) -> Any:
        """Forms submit an empty string when no date is picked."""
        return _blank_to_none(v)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with task store field names (desc, group, dueDate)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Task(TaskDraft):
    """Task data transfer object.

    Instances are immutable; every change produces a new Task.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int = Field(..., description="Authoritative id from the task store, or a provisional client id")

    @classmethod
    def from_draft(cls, task_id: int, draft: TaskDraft) -> "Task":
        return cls(id=task_id, **draft.model_dump())

    def with_fields(self, draft: TaskDraft) -> "Task":
        """Replace every editable field, keeping the id."""
        return self.model_copy(update=draft.model_dump())

    def moved_to(self, lane: Lane) -> "Task":
        return self.model_copy(update={"lane": lane})

    def draft(self) -> TaskDraft:
        return TaskDraft(**self.model_dump(exclude={"id"}))

    @property
    def is_done(self) -> bool:
        return self.lane == Lane.DONE
