from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.request import Request

from tasktracker.constants.messages import AppMessages
from tasktracker.dto.analytics_dto import (
    AnalyticsBundleDTO,
    MemberAnalyticsDTO,
    TeamAnalyticsDTO,
    TeamTrendsDTO,
    TeamWorkloadDTO,
)
from tasktracker.services.analytics_service import AnalyticsService
from tasktracker.views.base import EnvelopeAPIView

TEAM_ID_PARAMETER = OpenApiParameter(
    name="team_id",
    type=OpenApiTypes.STR,
    location=OpenApiParameter.PATH,
    description="Unique identifier of the team",
)


class TeamAnalyticsView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_team_analytics",
        summary="Team analytics bundle",
        description="""
        Status and priority distributions, completion rate, average completion time,
        weekly throughput, efficiency score, 7-day trend, 90-day calendar, per-member
        performance and overdue breakdown. Archived tasks are excluded.

        `statusDistribution.overdue` overlaps the real statuses; it is not a partition.
        """,
        tags=["analytics"],
        parameters=[TEAM_ID_PARAMETER],
        responses={
            200: OpenApiResponse(response=TeamAnalyticsDTO, description="Analytics fetched"),
            403: OpenApiResponse(description="Not a member of this team"),
            404: OpenApiResponse(description="Team not found"),
        },
    )
    def get(self, request: Request, team_id: str):
        analytics = AnalyticsService.get_team_analytics(request.user_id, team_id)
        return self._success(analytics, AppMessages.ANALYTICS_FETCHED)


class TeamWorkloadView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_team_workload",
        summary="Tasks per assignee",
        tags=["analytics"],
        parameters=[TEAM_ID_PARAMETER],
        responses={200: OpenApiResponse(response=TeamWorkloadDTO, description="Workload fetched")},
    )
    def get(self, request: Request, team_id: str):
        workload = AnalyticsService.get_team_workload(request.user_id, team_id)
        return self._success(workload, AppMessages.ANALYTICS_FETCHED)


class TeamTrendsView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_team_trends",
        summary="Completions per day over the last week",
        tags=["analytics"],
        parameters=[TEAM_ID_PARAMETER],
        responses={200: OpenApiResponse(response=TeamTrendsDTO, description="Trends fetched")},
    )
    def get(self, request: Request, team_id: str):
        trends = AnalyticsService.get_team_trends(request.user_id, team_id)
        return self._success(trends, AppMessages.ANALYTICS_FETCHED)


class MemberAnalyticsView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_member_analytics",
        summary="Analytics for one team member",
        description="Owners and admins only. Covers the team's tasks assigned to the member.",
        tags=["analytics"],
        parameters=[
            TEAM_ID_PARAMETER,
            OpenApiParameter(name="member_id", type=OpenApiTypes.STR, location=OpenApiParameter.PATH),
        ],
        responses={
            200: OpenApiResponse(response=MemberAnalyticsDTO, description="Analytics fetched"),
            403: OpenApiResponse(description="Only owners and admins can view member analytics"),
            404: OpenApiResponse(description="Team or member not found"),
        },
    )
    def get(self, request: Request, team_id: str, member_id: str):
        analytics = AnalyticsService.get_member_analytics(request.user_id, team_id, member_id)
        return self._success(analytics, AppMessages.ANALYTICS_FETCHED)


class PersonalAnalyticsView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_personal_analytics",
        summary="Analytics over my own tasks",
        tags=["analytics"],
        responses={200: OpenApiResponse(response=AnalyticsBundleDTO, description="Analytics fetched")},
    )
    def get(self, request: Request):
        analytics = AnalyticsService.get_personal_analytics(request.user_id)
        return self._success(analytics, AppMessages.ANALYTICS_FETCHED)
