import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from tasktracker.constants.permissions import TeamOperation
from tasktracker.constants.task import TaskPriority, TaskStatus
from tasktracker.dto.analytics_dto import (
    AnalyticsBundleDTO,
    AnalyticsMemberDTO,
    DailyCountDTO,
    MemberAnalyticsDTO,
    MemberPerformanceDTO,
    OverdueByAssigneeDTO,
    PriorityDistributionDTO,
    StatusDistributionDTO,
    TeamAnalyticsDTO,
    TeamTrendsDTO,
    TeamWorkloadDTO,
    WorkloadEntryDTO,
)
from tasktracker.exceptions.team_exceptions import MemberNotFoundException
from tasktracker.models.team import TeamModel
from tasktracker.repositories.task_analytics_repository import TaskAnalyticsRepository
from tasktracker.repositories.team_repository import TeamRepository
from tasktracker.services.authorization_service import AuthorizationService
from tasktracker.services.task_service import TaskService
from tasktracker.services.user_service import UserService
from tasktracker.utils.date_utils import last_utc_days, start_of_utc_day

logger = logging.getLogger(__name__)

TREND_DAYS = 7
CALENDAR_DAYS = 90
UNASSIGNED_LABEL = "Unassigned"
UNKNOWN_USER_LABEL = "Unknown user"
MILLIS_PER_HOUR = 3_600_000


def completion_rate(completed: int, total: int) -> Optional[float]:
    if total == 0:
        return None
    return round(completed / total * 100, 1)


def efficiency_score(rate: Optional[float], overdue: int, total: int) -> float:
    """Completion rate penalised by the overdue share, clamped to [0, 100]. Pass the unrounded rate."""
    score = (rate or 0) - overdue / max(total, 1) * 100
    return round(min(max(score, 0), 100), 1)


def hours_from_millis(millis: Optional[float]) -> Optional[float]:
    if millis is None:
        return None
    return round(millis / MILLIS_PER_HOUR, 2)


def daily_series(counts_by_day: Dict[str, int], now: datetime, days: int) -> List[DailyCountDTO]:
    """One entry per UTC day ending today, oldest first; days without completions count zero."""
    series = []
    for day in last_utc_days(now, days):
        key = day.isoformat()
        series.append(DailyCountDTO(date=key, count=counts_by_day.get(key, 0)))
    return series


def sort_member_performance(entries: List[MemberPerformanceDTO]) -> List[MemberPerformanceDTO]:
    return sorted(entries, key=lambda entry: (-entry.completed, -entry.total, entry.name))


def sort_by_count(entries: List[Any]) -> List[Any]:
    return sorted(entries, key=lambda entry: (-entry.count, entry.name))


class AnalyticsService:
    """Read-only aggregation of task data into analytics bundles."""

    @classmethod
    def _since(cls, now: datetime, days: int) -> datetime:
        return start_of_utc_day(now - timedelta(days=days - 1))

    @classmethod
    def _bundle(cls, scope: Dict[str, Any], now: datetime) -> Dict[str, Any]:
        status_counts = TaskAnalyticsRepository.status_counts(scope)
        priority_counts = TaskAnalyticsRepository.priority_counts(scope)
        overdue = TaskAnalyticsRepository.overdue_count(scope, now)

        todo = status_counts.get(TaskStatus.TODO.value, 0)
        in_progress = status_counts.get(TaskStatus.IN_PROGRESS.value, 0)
        completed = status_counts.get(TaskStatus.COMPLETED.value, 0)
        # Overdue is counted on top of the real statuses, so the rate's denominator includes it twice.
        distribution_total = todo + in_progress + completed + overdue
        rate = completion_rate(completed, distribution_total)
        exact_rate = completed / distribution_total * 100 if distribution_total else None

        return {
            "statusDistribution": StatusDistributionDTO(
                todo=todo, inProgress=in_progress, completed=completed, overdue=overdue
            ),
            "priorityDistribution": PriorityDistributionDTO(
                **{priority.value: priority_counts.get(priority.value, 0) for priority in TaskPriority}
            ),
            "totalTasks": sum(status_counts.values()),
            "completedTasks": completed,
            "completionRate": rate,
            "avgCompletionTime": hours_from_millis(TaskAnalyticsRepository.average_completion_millis(scope)),
            "tasksCompletedThisWeek": TaskAnalyticsRepository.completed_between(
                scope, now - timedelta(days=7), now
            ),
            "tasksCompletedLastWeek": TaskAnalyticsRepository.completed_between(
                scope, now - timedelta(days=14), now - timedelta(days=7)
            ),
            "efficiencyScore": efficiency_score(exact_rate, overdue, distribution_total),
            "completionTrend": cls._trend(scope, now, TREND_DAYS),
            "generatedAt": now,
        }

    @classmethod
    def _trend(cls, scope: Dict[str, Any], now: datetime, days: int) -> List[DailyCountDTO]:
        counts = TaskAnalyticsRepository.completions_by_day(scope, cls._since(now, days))
        return daily_series(counts, now, days)

    @classmethod
    def _load_team(cls, user_id: str, team_id: str, operation: TeamOperation) -> TeamModel:
        team = TeamRepository.get_by_id(team_id)
        AuthorizationService.require(user_id, team, operation, team_id=team_id)
        return team

    @classmethod
    def _member_performance(cls, team: TeamModel, totals: List[Dict[str, Any]], names: Dict[str, str]):
        by_assignee = {row["userId"]: row for row in totals}
        entries = []
        for member in team.members:
            row = by_assignee.pop(member.userId, {"total": 0, "completed": 0})
            entries.append(
                MemberPerformanceDTO(
                    userId=member.userId,
                    name=names.get(member.userId, UNKNOWN_USER_LABEL),
                    completed=row["completed"],
                    total=row["total"],
                )
            )
        for user_id, row in by_assignee.items():
            entries.append(
                MemberPerformanceDTO(
                    userId=user_id,
                    name=names.get(user_id, UNKNOWN_USER_LABEL) if user_id else UNASSIGNED_LABEL,
                    completed=row["completed"],
                    total=row["total"],
                )
            )
        return sort_member_performance(entries)

    @classmethod
    def _names(cls, user_ids) -> Dict[str, str]:
        return {user_id: user.name for user_id, user in UserService.get_users_by_ids(user_ids).items()}

    @classmethod
    def get_team_analytics(cls, user_id: str, team_id: str, now: Optional[datetime] = None) -> TeamAnalyticsDTO:
        now = now or datetime.now(timezone.utc)
        team = cls._load_team(user_id, team_id, TeamOperation.READ_TEAM_ANALYTICS)
        scope = {"team": team_id}

        totals = TaskAnalyticsRepository.totals_by_assignee(scope)
        overdue_rows = TaskAnalyticsRepository.overdue_by_assignee(scope, now)
        names = cls._names(
            [member.userId for member in team.members]
            + [row["userId"] for row in totals]
            + [row["userId"] for row in overdue_rows]
        )

        overdue_agg = sort_by_count(
            [
                OverdueByAssigneeDTO(
                    userId=row["userId"],
                    name=names.get(row["userId"], UNKNOWN_USER_LABEL) if row["userId"] else UNASSIGNED_LABEL,
                    count=row["count"],
                )
                for row in overdue_rows
            ]
        )

        logger.debug(f"Team analytics for {team_id} computed for {user_id}")
        return TeamAnalyticsDTO(
            teamId=team_id,
            completionCalendar=cls._trend(scope, now, CALENDAR_DAYS),
            memberPerfAgg=cls._member_performance(team, totals, names),
            overdueAgg=overdue_agg,
            **cls._bundle(scope, now),
        )

    @classmethod
    def get_member_analytics(
        cls, user_id: str, team_id: str, member_id: str, now: Optional[datetime] = None
    ) -> MemberAnalyticsDTO:
        now = now or datetime.now(timezone.utc)
        team = cls._load_team(user_id, team_id, TeamOperation.READ_MEMBER_ANALYTICS)
        member = team.get_member(member_id)
        if member is None:
            raise MemberNotFoundException(member_id)

        user = UserService.get_users_by_ids([member_id]).get(member_id)
        return MemberAnalyticsDTO(
            teamId=team_id,
            member=AnalyticsMemberDTO(
                id=member_id,
                name=user.name if user else None,
                email=user.email if user else None,
                role=member.role,
            ),
            **cls._bundle({"team": team_id, "assignedTo": member_id}, now),
        )

    @classmethod
    def get_team_workload(cls, user_id: str, team_id: str) -> TeamWorkloadDTO:
        cls._load_team(user_id, team_id, TeamOperation.READ_TEAM_ANALYTICS)
        totals = TaskAnalyticsRepository.totals_by_assignee({"team": team_id})
        names = cls._names(row["userId"] for row in totals)
        workload = [
            WorkloadEntryDTO(
                userId=row["userId"],
                name=names.get(row["userId"], UNKNOWN_USER_LABEL) if row["userId"] else UNASSIGNED_LABEL,
                count=row["total"],
            )
            for row in totals
        ]
        return TeamWorkloadDTO(teamId=team_id, workload=sort_by_count(workload))

    @classmethod
    def get_team_trends(cls, user_id: str, team_id: str, now: Optional[datetime] = None) -> TeamTrendsDTO:
        now = now or datetime.now(timezone.utc)
        cls._load_team(user_id, team_id, TeamOperation.READ_TEAM_ANALYTICS)
        return TeamTrendsDTO(teamId=team_id, completionTrend=cls._trend({"team": team_id}, now, TREND_DAYS))

    @classmethod
    def get_personal_analytics(cls, user_id: str, now: Optional[datetime] = None) -> AnalyticsBundleDTO:
        now = now or datetime.now(timezone.utc)
        return AnalyticsBundleDTO(**cls._bundle(TaskService.personal_scope(user_id), now))
