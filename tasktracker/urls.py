from django.urls import path

from tasktracker.views.analytics import (
    MemberAnalyticsView,
    PersonalAnalyticsView,
    TeamAnalyticsView,
    TeamTrendsView,
    TeamWorkloadView,
)
from tasktracker.views.health import HealthView
from tasktracker.views.invitation import InvitationAcceptView, InvitationDeclineView, InvitationListView
from tasktracker.views.task import (
    TaskArchiveView,
    TaskDetailView,
    TaskHistoryView,
    TaskListView,
    TaskStatsView,
    TeamTaskListView,
)
from tasktracker.views.team import (
    TeamDetailView,
    TeamInvitationRevokeView,
    TeamInviteView,
    TeamLeaveView,
    TeamListView,
    TeamMemberRoleView,
    TeamMemberView,
    TeamTransferOwnershipView,
)

urlpatterns = [
    path("health", HealthView.as_view(), name="health"),
    path("teams", TeamListView.as_view(), name="teams"),
    path("teams/invitations", InvitationListView.as_view(), name="my_invitations"),
    path("teams/invitations/<str:invitation_id>/accept", InvitationAcceptView.as_view(), name="accept_invitation"),
    path("teams/invitations/<str:invitation_id>/decline", InvitationDeclineView.as_view(), name="decline_invitation"),
    path("teams/<str:team_id>", TeamDetailView.as_view(), name="team_detail"),
    path("teams/<str:team_id>/invite", TeamInviteView.as_view(), name="invite_team_member"),
    path(
        "teams/<str:team_id>/invitations/<str:invitation_id>/revoke",
        TeamInvitationRevokeView.as_view(),
        name="revoke_invitation",
    ),
    path("teams/<str:team_id>/leave", TeamLeaveView.as_view(), name="leave_team"),
    path("teams/<str:team_id>/members/<str:member_id>", TeamMemberView.as_view(), name="team_member"),
    path("teams/<str:team_id>/members/<str:member_id>/role", TeamMemberRoleView.as_view(), name="team_member_role"),
    path(
        "teams/<str:team_id>/members/<str:member_id>/analytics",
        MemberAnalyticsView.as_view(),
        name="member_analytics",
    ),
    path(
        "teams/<str:team_id>/transfer-ownership/<str:member_id>",
        TeamTransferOwnershipView.as_view(),
        name="transfer_ownership",
    ),
    path("teams/<str:team_id>/tasks", TeamTaskListView.as_view(), name="team_tasks"),
    path("teams/<str:team_id>/analytics", TeamAnalyticsView.as_view(), name="team_analytics"),
    path("teams/<str:team_id>/workload", TeamWorkloadView.as_view(), name="team_workload"),
    path("teams/<str:team_id>/trends", TeamTrendsView.as_view(), name="team_trends"),
    path("tasks", TaskListView.as_view(), name="tasks"),
    path("tasks/stats", TaskStatsView.as_view(), name="task_stats"),
    path("tasks/analytics", PersonalAnalyticsView.as_view(), name="personal_analytics"),
    path("tasks/<str:task_id>", TaskDetailView.as_view(), name="task_detail"),
    path("tasks/<str:task_id>/archive", TaskArchiveView.as_view(), name="task_archive"),
    path("tasks/<str:task_id>/history", TaskHistoryView.as_view(), name="task_history"),
]
