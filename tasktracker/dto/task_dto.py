from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel

from tasktracker.models.task import AssignmentHistoryEntryModel, TaskModel
from tasktracker.models.user import UserModel


class AssignmentHistoryDTO(BaseModel):
    assignedTo: str | None = None
    assignedToName: str | None = None
    assignedBy: str
    assignedByName: str | None = None
    at: datetime
    reason: str | None = None

    @classmethod
    def from_model(cls, entry: AssignmentHistoryEntryModel, users_by_id: Dict[str, UserModel]) -> "AssignmentHistoryDTO":
        assignee = users_by_id.get(entry.assignedTo) if entry.assignedTo else None
        assigner = users_by_id.get(entry.assignedBy)
        return cls(
            assignedTo=entry.assignedTo,
            assignedToName=assignee.name if assignee else None,
            assignedBy=entry.assignedBy,
            assignedByName=assigner.name if assigner else None,
            at=entry.at,
            reason=entry.reason,
        )


class TaskDTO(BaseModel):
    id: str
    title: str
    description: str | None = None
    status: str
    priority: str
    tags: List[str] = []
    dueDate: datetime | None = None
    completedAt: datetime | None = None
    createdBy: str
    team: str | None = None
    assignedTo: str | None = None
    visibility: str
    assignmentDate: datetime | None = None
    assignmentHistory: List[AssignmentHistoryEntryModel] = []
    isArchived: bool = False
    archivedAt: datetime | None = None
    isOverdue: bool
    isDueSoon: bool
    createdAt: datetime
    updatedAt: datetime | None = None

    @classmethod
    def from_model(cls, task: TaskModel, now: datetime) -> "TaskDTO":
        return cls(
            id=str(task.id),
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            tags=task.tags,
            dueDate=task.dueDate,
            completedAt=task.completedAt,
            createdBy=task.createdBy,
            team=task.team,
            assignedTo=task.assignedTo,
            visibility=task.visibility,
            assignmentDate=task.assignmentDate,
            assignmentHistory=task.assignmentHistory,
            isArchived=task.isArchived,
            archivedAt=task.archivedAt,
            isOverdue=task.is_overdue(now),
            isDueSoon=task.is_due_soon(now),
            createdAt=task.createdAt,
            updatedAt=task.updatedAt,
        )


class PaginationDTO(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrev: bool


class GetTasksResponse(BaseModel):
    tasks: List[TaskDTO] = []
    pagination: PaginationDTO


class TaskStatsDTO(BaseModel):
    total: int
    todo: int
    inProgress: int
    completed: int
    overdue: int
    archived: int
    recentTasks: List[TaskDTO] = []
    upcomingDeadlines: List[TaskDTO] = []
