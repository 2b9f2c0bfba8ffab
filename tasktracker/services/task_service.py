import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings

from tasktracker.constants.messages import ValidationErrors
from tasktracker.constants.permissions import TeamOperation
from tasktracker.constants.task import (
    DUE_SOON_DAYS,
    SORT_FIELD_CREATED_AT,
    SORT_FIELD_DUE_DATE,
    SORT_ORDER_ASC,
    SORT_ORDER_DESC,
    TASK_DESCRIPTION_MAX_LENGTH,
    TASK_TAG_MAX_LENGTH,
    TASK_TITLE_MAX_LENGTH,
    AssignmentReason,
    TaskPriority,
    TaskStatus,
    TaskVisibility,
)
from tasktracker.dto.task_dto import AssignmentHistoryDTO, GetTasksResponse, PaginationDTO, TaskDTO, TaskStatsDTO
from tasktracker.exceptions.common_exceptions import InvalidInputException
from tasktracker.exceptions.task_exceptions import TaskNotFoundException
from tasktracker.models.task import AssignmentHistoryEntryModel, TaskModel
from tasktracker.models.team import TeamModel
from tasktracker.repositories.task_analytics_repository import TaskAnalyticsRepository
from tasktracker.repositories.task_repository import TaskRepository
from tasktracker.repositories.team_repository import TeamRepository
from tasktracker.services.authorization_service import AuthorizationService
from tasktracker.services.team_service import TeamService
from tasktracker.services.user_service import UserService
from tasktracker.utils.date_utils import as_utc
from tasktracker.utils.retry_utils import retry_on_conflict

logger = logging.getLogger(__name__)

RECENT_TASKS_LIMIT = 5


@dataclass
class PaginationConfig:
    DEFAULT_PAGE: int = 1
    DEFAULT_LIMIT: int = getattr(settings, "TASKS_DEFAULT_PAGE_LIMIT", 20)
    MAX_LIMIT: int = getattr(settings, "TASKS_MAX_PAGE_LIMIT", 200)


class TaskService:
    EDITABLE_FIELDS = {"title", "description", "priority", "tags", "dueDate", "status", "assignedTo"}

    @classmethod
    def _clean_title(cls, title: Optional[str], errors: Dict[str, List[str]]) -> str:
        title = (title or "").strip()
        if not title:
            errors.setdefault("title", []).append(ValidationErrors.BLANK_TITLE)
        elif len(title) > TASK_TITLE_MAX_LENGTH:
            errors.setdefault("title", []).append(ValidationErrors.TITLE_TOO_LONG.format(TASK_TITLE_MAX_LENGTH))
        return title

    @classmethod
    def _clean_description(cls, description: Optional[str], errors: Dict[str, List[str]]) -> Optional[str]:
        if description is None:
            return None
        if len(description) > TASK_DESCRIPTION_MAX_LENGTH:
            errors.setdefault("description", []).append(
                ValidationErrors.DESCRIPTION_TOO_LONG.format(TASK_DESCRIPTION_MAX_LENGTH)
            )
        return description

    @classmethod
    def _clean_tags(cls, tags: Optional[List[str]], errors: Dict[str, List[str]]) -> List[str]:
        cleaned = []
        for tag in tags or []:
            tag = tag.strip()
            if not tag or tag in cleaned:
                continue
            if len(tag) > TASK_TAG_MAX_LENGTH:
                errors.setdefault("tags", []).append(ValidationErrors.TAG_TOO_LONG.format(tag, TASK_TAG_MAX_LENGTH))
                continue
            cleaned.append(tag)
        return cleaned

    @classmethod
    def _clean_due_date(
        cls, due_date: Optional[datetime], now: datetime, errors: Dict[str, List[str]]
    ) -> Optional[datetime]:
        if due_date is None:
            return None
        due_date = as_utc(due_date)
        if due_date.date() < as_utc(now).date():
            errors.setdefault("dueDate", []).append(ValidationErrors.PAST_DUE_DATE)
        return due_date

    @classmethod
    def _load_task(cls, task_id: str) -> TaskModel:
        task = TaskRepository.get_by_id(task_id)
        if task is None:
            raise TaskNotFoundException(task_id)
        return task

    @classmethod
    def _authorize(cls, user_id: str, task: TaskModel, operation: TeamOperation) -> Optional[TeamModel]:
        """Authorise ``operation`` on ``task`` and return its team (None for personal tasks)."""
        if task.team is None:
            AuthorizationService.require_personal_task(user_id, task)
            return None
        team = TeamRepository.get_by_id(task.team)
        if team is None:
            # Tasks of a missing or deactivated team are unreachable.
            raise TaskNotFoundException(str(task.id))
        AuthorizationService.require(user_id, team, operation, team_id=task.team, task=task)
        return team

    @classmethod
    def create_task(cls, user_id: str, payload: Dict[str, Any], now: Optional[datetime] = None) -> TaskDTO:
        now = now or datetime.now(timezone.utc)
        errors: Dict[str, List[str]] = {}

        title = cls._clean_title(payload.get("title"), errors)
        description = cls._clean_description(payload.get("description"), errors)
        tags = cls._clean_tags(payload.get("tags"), errors)
        due_date = cls._clean_due_date(payload.get("dueDate"), now, errors)
        team_id = payload.get("team")
        assigned_to = payload.get("assignedTo")

        team = None
        if team_id:
            team = TeamRepository.get_by_id(team_id)
            AuthorizationService.require(user_id, team, TeamOperation.CREATE_TEAM_TASK, team_id=team_id)
            if due_date is None and "dueDate" not in errors:
                errors.setdefault("dueDate", []).append(ValidationErrors.DUE_DATE_REQUIRED)
            if assigned_to and team.get_member(assigned_to) is None:
                errors.setdefault("assignedTo", []).append(ValidationErrors.ASSIGNEE_NOT_MEMBER.format(assigned_to))
        elif assigned_to:
            errors.setdefault("assignedTo", []).append(ValidationErrors.PERSONAL_TASK_ASSIGNEE)

        if errors:
            raise InvalidInputException(errors)

        status = payload.get("status") or TaskStatus.TODO.value
        task = TaskModel(
            title=title,
            description=description,
            status=status,
            priority=payload.get("priority") or TaskPriority.MEDIUM.value,
            tags=tags,
            dueDate=due_date,
            completedAt=now if status == TaskStatus.COMPLETED.value else None,
            createdBy=user_id,
            team=str(team.id) if team else None,
            createdAt=now,
            updatedAt=now,
        )
        if team is None:
            task.visibility = TaskVisibility.PERSONAL.value
        elif assigned_to:
            task.visibility = TaskVisibility.ASSIGNED.value
            task.assignedTo = assigned_to
            task.assignmentDate = now
            task.assignmentHistory = [
                AssignmentHistoryEntryModel(
                    assignedTo=assigned_to, assignedBy=user_id, at=now, reason=AssignmentReason.ASSIGNED
                )
            ]
        else:
            task.visibility = TaskVisibility.TEAM.value

        created_task = TaskRepository.create(task)
        logger.info(f"Task {created_task.id} created by {user_id} (team={created_task.team})")
        return TaskDTO.from_model(created_task, now)

    @classmethod
    def _build_changes(
        cls,
        user_id: str,
        task: TaskModel,
        team: Optional[TeamModel],
        patch: Dict[str, Any],
        now: datetime,
    ) -> Tuple[Dict[str, Any], Optional[AssignmentHistoryEntryModel]]:
        errors: Dict[str, List[str]] = {}
        changes: Dict[str, Any] = {}
        history_entry = None

        if "title" in patch:
            changes["title"] = cls._clean_title(patch["title"], errors)
        if "description" in patch:
            changes["description"] = cls._clean_description(patch["description"], errors)
        if "tags" in patch:
            changes["tags"] = cls._clean_tags(patch["tags"], errors)
        if "priority" in patch and patch["priority"]:
            changes["priority"] = patch["priority"]
        if "dueDate" in patch:
            if patch["dueDate"] is None and task.team:
                errors.setdefault("dueDate", []).append(ValidationErrors.DUE_DATE_REQUIRED)
            else:
                changes["dueDate"] = cls._clean_due_date(patch["dueDate"], now, errors)

        new_status = patch.get("status")
        if new_status and new_status != task.status:
            changes["status"] = new_status
            changes["completedAt"] = now if new_status == TaskStatus.COMPLETED.value else None

        if "assignedTo" in patch:
            new_assignee = patch["assignedTo"] or None
            if task.team is None:
                if new_assignee:
                    errors.setdefault("assignedTo", []).append(ValidationErrors.PERSONAL_TASK_ASSIGNEE)
            elif new_assignee != task.assignedTo:
                if new_assignee and team.get_member(new_assignee) is None:
                    errors.setdefault("assignedTo", []).append(
                        ValidationErrors.ASSIGNEE_NOT_MEMBER.format(new_assignee)
                    )
                if task.assignedTo is None:
                    reason = AssignmentReason.ASSIGNED
                elif new_assignee is None:
                    reason = AssignmentReason.UNASSIGNED
                else:
                    reason = AssignmentReason.REASSIGNED
                changes["assignedTo"] = new_assignee
                changes["visibility"] = (
                    TaskVisibility.ASSIGNED.value if new_assignee else TaskVisibility.TEAM.value
                )
                changes["assignmentDate"] = now
                history_entry = AssignmentHistoryEntryModel(
                    assignedTo=new_assignee, assignedBy=user_id, at=now, reason=reason
                )

        if errors:
            raise InvalidInputException(errors)
        return changes, history_entry

    @classmethod
    def update_task(
        cls, user_id: str, task_id: str, patch: Dict[str, Any], now: Optional[datetime] = None
    ) -> TaskDTO:
        now = now or datetime.now(timezone.utc)
        patch = {field: value for field, value in patch.items() if field in cls.EDITABLE_FIELDS}
        if not patch:
            raise InvalidInputException({"non_field_errors": ValidationErrors.EMPTY_UPDATE})

        def attempt() -> TaskModel:
            task = cls._load_task(task_id)
            team = cls._authorize(user_id, task, TeamOperation.MODIFY_TEAM_TASK)
            changes, history_entry = cls._build_changes(user_id, task, team, patch, now)
            if not changes:
                return task
            return TaskRepository.compare_and_set(task, changes, history_entry)

        updated_task = retry_on_conflict(attempt)
        logger.info(f"Task {task_id} updated by {user_id}")
        return TaskDTO.from_model(updated_task, now)

    @classmethod
    def delete_task(cls, user_id: str, task_id: str) -> None:
        task = cls._load_task(task_id)
        cls._authorize(user_id, task, TeamOperation.MODIFY_TEAM_TASK)
        if not TaskRepository.delete_by_id(task_id):
            raise TaskNotFoundException(task_id)
        logger.info(f"Task {task_id} deleted by {user_id}")

    @classmethod
    def get_task(cls, user_id: str, task_id: str, now: Optional[datetime] = None) -> TaskDTO:
        now = now or datetime.now(timezone.utc)
        task = cls._load_task(task_id)
        cls._authorize(user_id, task, TeamOperation.READ_TEAM_TASK)
        return TaskDTO.from_model(task, now)

    @classmethod
    def archive_task(cls, user_id: str, task_id: str, now: Optional[datetime] = None) -> TaskDTO:
        """Toggle the archived flag."""
        now = now or datetime.now(timezone.utc)

        def attempt() -> TaskModel:
            task = cls._load_task(task_id)
            cls._authorize(user_id, task, TeamOperation.MODIFY_TEAM_TASK)
            archived = not task.isArchived
            return TaskRepository.compare_and_set(
                task, {"isArchived": archived, "archivedAt": now if archived else None}
            )

        task = retry_on_conflict(attempt)
        logger.info(f"Task {task_id} {'archived' if task.isArchived else 'restored'} by {user_id}")
        return TaskDTO.from_model(task, now)

    @classmethod
    def get_assignment_history(cls, user_id: str, task_id: str) -> List[AssignmentHistoryDTO]:
        task = cls._load_task(task_id)
        cls._authorize(user_id, task, TeamOperation.READ_TEAM_TASK)
        users_by_id = UserService.get_users_by_ids(
            [entry.assignedTo for entry in task.assignmentHistory] + [entry.assignedBy for entry in task.assignmentHistory]
        )
        return [AssignmentHistoryDTO.from_model(entry, users_by_id) for entry in task.assignmentHistory]

    @classmethod
    def get_tasks(
        cls,
        user_id: str,
        filters: Dict[str, Any],
        page: int = PaginationConfig.DEFAULT_PAGE,
        limit: int = PaginationConfig.DEFAULT_LIMIT,
        sort_by: str = SORT_FIELD_CREATED_AT,
        order: str = SORT_ORDER_DESC,
        now: Optional[datetime] = None,
    ) -> GetTasksResponse:
        now = now or datetime.now(timezone.utc)
        team_id = filters.get("team")
        if team_id:
            team = TeamRepository.get_by_id(team_id)
            AuthorizationService.require(user_id, team, TeamOperation.READ_TEAM, team_id=team_id)
            scope = TaskRepository.build_team_read_filter(team_id, user_id, team.get_member(user_id).role)
        else:
            scope = TaskRepository.build_readable_filter(user_id, TeamService.get_memberships(user_id))

        query = TaskRepository.build_query(scope, filters, now)
        tasks = TaskRepository.list(query, page, limit, sort_by, order)
        total = TaskRepository.count(query)
        total_pages = math.ceil(total / limit) if total else 0

        return GetTasksResponse(
            tasks=[TaskDTO.from_model(task, now) for task in tasks],
            pagination=PaginationDTO(
                page=page,
                limit=limit,
                total=total,
                totalPages=total_pages,
                hasNext=page < total_pages,
                hasPrev=page > 1,
            ),
        )

    @classmethod
    def personal_scope(cls, user_id: str) -> Dict[str, Any]:
        """The user's own personal tasks plus tasks assigned to them in teams they still belong to."""
        team_ids = list(TeamService.get_memberships(user_id))
        return {
            "$or": [
                {"team": None, "createdBy": user_id},
                {"team": {"$in": team_ids}, "assignedTo": user_id},
            ]
        }

    @classmethod
    def get_task_stats(cls, user_id: str, now: Optional[datetime] = None) -> TaskStatsDTO:
        now = now or datetime.now(timezone.utc)
        scope = cls.personal_scope(user_id)

        status_counts = TaskAnalyticsRepository.status_counts(scope)
        archived = TaskRepository.count({"$and": [scope, {"isArchived": True}]})
        recent = TaskRepository.list(TaskRepository.build_query(scope, {}, now), 1, RECENT_TASKS_LIMIT)
        upcoming_query = TaskRepository.build_query(
            {"$and": [scope, {"status": {"$ne": TaskStatus.COMPLETED.value}}]},
            {"dueAfter": now, "dueBefore": now + timedelta(days=DUE_SOON_DAYS)},
            now,
        )
        upcoming = TaskRepository.list(upcoming_query, 1, RECENT_TASKS_LIMIT, SORT_FIELD_DUE_DATE, SORT_ORDER_ASC)

        return TaskStatsDTO(
            total=sum(status_counts.values()),
            todo=status_counts.get(TaskStatus.TODO.value, 0),
            inProgress=status_counts.get(TaskStatus.IN_PROGRESS.value, 0),
            completed=status_counts.get(TaskStatus.COMPLETED.value, 0),
            overdue=TaskAnalyticsRepository.overdue_count(scope, now),
            archived=archived,
            recentTasks=[TaskDTO.from_model(task, now) for task in recent],
            upcomingDeadlines=[TaskDTO.from_model(task, now) for task in upcoming],
        )
