from pydantic import BaseModel, Field, ConfigDict
from typing import ClassVar, List
from datetime import datetime, timedelta, timezone

from tasktracker.constants.task import (
    AssignmentReason,
    TaskPriority,
    TaskStatus,
    TaskVisibility,
    DUE_SOON_DAYS,
)
from tasktracker.models.common.document import Document
from tasktracker.models.common.pyobjectid import PyObjectId


class AssignmentHistoryEntryModel(BaseModel):
    assignedTo: str | None = None
    assignedBy: str
    at: datetime
    reason: AssignmentReason | None = None

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class TaskModel(Document):
    collection_name: ClassVar[str] = "tasks"

    id: PyObjectId | None = Field(None, alias="_id")
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    tags: List[str] = Field(default_factory=list)
    dueDate: datetime | None = None
    completedAt: datetime | None = None
    createdBy: str
    team: str | None = None
    assignedTo: str | None = None
    visibility: TaskVisibility = TaskVisibility.PERSONAL
    assignmentDate: datetime | None = None
    assignmentHistory: List[AssignmentHistoryEntryModel] = Field(default_factory=list)
    isArchived: bool = False
    archivedAt: datetime | None = None
    version: int = 1
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updatedAt: datetime | None = None

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True, extra="allow")

    def is_overdue(self, now: datetime) -> bool:
        return self.status != TaskStatus.COMPLETED.value and self.dueDate is not None and self.dueDate < now

    def is_due_soon(self, now: datetime) -> bool:
        if self.status == TaskStatus.COMPLETED.value or self.dueDate is None:
            return False
        return now <= self.dueDate <= now + timedelta(days=DUE_SOON_DAYS)
