from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class StatusDistributionDTO(BaseModel):
    """
    Task counts per status plus a synthetic ``overdue`` bucket.

    This is not a partition: an overdue task is counted both under its real
    status and under ``overdue``.
    """

    model_config = ConfigDict(populate_by_name=True)

    todo: int = 0
    inProgress: int = Field(0, alias="in-progress")
    completed: int = 0
    overdue: int = 0


class PriorityDistributionDTO(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0
    critical: int = 0


class DailyCountDTO(BaseModel):
    date: str
    count: int


class MemberPerformanceDTO(BaseModel):
    userId: str | None = None
    name: str
    completed: int
    total: int


class OverdueByAssigneeDTO(BaseModel):
    userId: str | None = None
    name: str
    count: int


class WorkloadEntryDTO(BaseModel):
    userId: str | None = None
    name: str
    count: int


class AnalyticsMemberDTO(BaseModel):
    id: str
    name: str | None = None
    email: str | None = None
    role: str


class AnalyticsBundleDTO(BaseModel):
    """Fields shared by team, member and personal analytics."""

    statusDistribution: StatusDistributionDTO
    priorityDistribution: PriorityDistributionDTO
    totalTasks: int
    completedTasks: int
    completionRate: float | None = None
    avgCompletionTime: float | None = None
    tasksCompletedThisWeek: int
    tasksCompletedLastWeek: int
    efficiencyScore: float
    completionTrend: List[DailyCountDTO]
    generatedAt: datetime


class TeamAnalyticsDTO(AnalyticsBundleDTO):
    teamId: str
    completionCalendar: List[DailyCountDTO]
    memberPerfAgg: List[MemberPerformanceDTO]
    overdueAgg: List[OverdueByAssigneeDTO]


class MemberAnalyticsDTO(AnalyticsBundleDTO):
    teamId: str
    member: AnalyticsMemberDTO


class TeamWorkloadDTO(BaseModel):
    teamId: str
    workload: List[WorkloadEntryDTO]


class TeamTrendsDTO(BaseModel):
    teamId: str
    completionTrend: List[DailyCountDTO]
