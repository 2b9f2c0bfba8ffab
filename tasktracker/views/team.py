from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.request import Request

from tasktracker.constants.messages import AppMessages
from tasktracker.dto.team_dto import GetUserTeamsResponse, InvitationDTO, TeamDTO
from tasktracker.serializers.create_team_serializer import CreateTeamSerializer
from tasktracker.serializers.invite_member_serializer import InviteMemberSerializer
from tasktracker.serializers.update_member_role_serializer import UpdateMemberRoleSerializer
from tasktracker.serializers.update_team_serializer import UpdateTeamSerializer
from tasktracker.services.team_service import TeamService
from tasktracker.views.base import EnvelopeAPIView

TEAM_ID_PARAMETER = OpenApiParameter(
    name="team_id",
    type=OpenApiTypes.STR,
    location=OpenApiParameter.PATH,
    description="Unique identifier of the team",
)
MEMBER_ID_PARAMETER = OpenApiParameter(
    name="member_id",
    type=OpenApiTypes.STR,
    location=OpenApiParameter.PATH,
    description="User ID of the team member",
)


class TeamListView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_user_teams",
        summary="List my teams",
        description="Active teams the authenticated user belongs to, with hydrated members.",
        tags=["teams"],
        responses={200: OpenApiResponse(response=GetUserTeamsResponse, description="Teams fetched")},
    )
    def get(self, request: Request):
        response = TeamService.get_user_teams(request.user_id)
        return self._success(response, AppMessages.TEAMS_FETCHED)

    @extend_schema(
        operation_id="create_team",
        summary="Create a new team",
        description="Create a team. The creator becomes its sole owner.",
        tags=["teams"],
        request=CreateTeamSerializer,
        responses={
            201: OpenApiResponse(response=TeamDTO, description="Team created successfully"),
            400: OpenApiResponse(description="Bad request - validation error"),
            409: OpenApiResponse(description="You already belong to a team with this name"),
            422: OpenApiResponse(description="Invalid team name or description"),
        },
    )
    def post(self, request: Request):
        serializer = CreateTeamSerializer(data=request.data)
        if not serializer.is_valid():
            return self._handle_validation_errors(serializer.errors)

        team = TeamService.create_team(
            request.user_id,
            serializer.validated_data["name"],
            serializer.validated_data.get("description"),
        )
        return self._success(team, AppMessages.TEAM_CREATED, status.HTTP_201_CREATED)


class TeamDetailView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_team_by_id",
        summary="Get team by ID",
        description="Team with hydrated members. Owners and admins also see pending invitations.",
        tags=["teams"],
        parameters=[TEAM_ID_PARAMETER],
        responses={
            200: OpenApiResponse(response=TeamDTO, description="Team fetched"),
            403: OpenApiResponse(description="Not a member of this team"),
            404: OpenApiResponse(description="Team not found"),
        },
    )
    def get(self, request: Request, team_id: str):
        team = TeamService.get_team(request.user_id, team_id)
        return self._success(team, AppMessages.TEAM_FETCHED)

    @extend_schema(
        operation_id="update_team",
        summary="Update team name or description",
        tags=["teams"],
        parameters=[TEAM_ID_PARAMETER],
        request=UpdateTeamSerializer,
        responses={
            200: OpenApiResponse(response=TeamDTO, description="Team updated"),
            403: OpenApiResponse(description="Only owners and admins can update the team"),
            404: OpenApiResponse(description="Team not found"),
            409: OpenApiResponse(description="Concurrent modification or duplicate name"),
        },
    )
    def put(self, request: Request, team_id: str):
        serializer = UpdateTeamSerializer(data=request.data)
        if not serializer.is_valid():
            return self._handle_validation_errors(serializer.errors)

        team = TeamService.update_team(
            request.user_id,
            team_id,
            name=serializer.validated_data.get("name"),
            description=serializer.validated_data.get("description"),
        )
        return self._success(team, AppMessages.TEAM_UPDATED)

    @extend_schema(
        operation_id="delete_team",
        summary="Delete (deactivate) a team",
        description="Owner only. The team stops appearing in listings and reads as not found.",
        tags=["teams"],
        parameters=[TEAM_ID_PARAMETER],
        responses={
            200: OpenApiResponse(description="Team deleted"),
            403: OpenApiResponse(description="Only the owner can delete the team"),
            404: OpenApiResponse(description="Team not found"),
        },
    )
    def delete(self, request: Request, team_id: str):
        TeamService.delete_team(request.user_id, team_id)
        return self._success(None, AppMessages.TEAM_DELETED)


class TeamInviteView(EnvelopeAPIView):
    @extend_schema(
        operation_id="invite_team_member",
        summary="Invite someone to the team by e-mail",
        tags=["teams"],
        parameters=[TEAM_ID_PARAMETER],
        request=InviteMemberSerializer,
        responses={
            201: OpenApiResponse(response=InvitationDTO, description="Invitation sent"),
            403: OpenApiResponse(description="Only owners and admins can invite"),
            409: OpenApiResponse(description="Already a member or already invited"),
        },
    )
    def post(self, request: Request, team_id: str):
        serializer = InviteMemberSerializer(data=request.data)
        if not serializer.is_valid():
            return self._handle_validation_errors(serializer.errors)

        invitation = TeamService.invite_to_team(request.user_id, team_id, serializer.validated_data["email"])
        return self._success(invitation, AppMessages.INVITATION_SENT, status.HTTP_201_CREATED)


class TeamInvitationRevokeView(EnvelopeAPIView):
    @extend_schema(
        operation_id="revoke_team_invitation",
        summary="Revoke a pending invitation",
        tags=["teams"],
        parameters=[
            TEAM_ID_PARAMETER,
            OpenApiParameter(name="invitation_id", type=OpenApiTypes.STR, location=OpenApiParameter.PATH),
        ],
        responses={
            200: OpenApiResponse(response=InvitationDTO, description="Invitation revoked"),
            404: OpenApiResponse(description="Team or invitation not found"),
            409: OpenApiResponse(description="Invitation is no longer pending"),
        },
    )
    def post(self, request: Request, team_id: str, invitation_id: str):
        invitation = TeamService.revoke_invitation(request.user_id, team_id, invitation_id)
        return self._success(invitation, AppMessages.INVITATION_REVOKED)


class TeamLeaveView(EnvelopeAPIView):
    @extend_schema(
        operation_id="leave_team",
        summary="Leave a team",
        description="Any member except the owner may leave. Their team tasks are released back to the team.",
        tags=["teams"],
        parameters=[TEAM_ID_PARAMETER],
        responses={
            200: OpenApiResponse(description="Left the team"),
            403: OpenApiResponse(description="The owner must transfer ownership first"),
        },
    )
    def post(self, request: Request, team_id: str):
        TeamService.leave_team(request.user_id, team_id)
        return self._success(None, AppMessages.TEAM_LEFT)


class TeamMemberView(EnvelopeAPIView):
    @extend_schema(
        operation_id="remove_team_member",
        summary="Remove a member from the team",
        description="Owners can remove admins and collaborators; admins can remove collaborators.",
        tags=["teams"],
        parameters=[TEAM_ID_PARAMETER, MEMBER_ID_PARAMETER],
        responses={
            200: OpenApiResponse(response=TeamDTO, description="Member removed"),
            403: OpenApiResponse(description="Not allowed to remove this member"),
            404: OpenApiResponse(description="Team or member not found"),
        },
    )
    def delete(self, request: Request, team_id: str, member_id: str):
        team = TeamService.remove_member(request.user_id, team_id, member_id)
        return self._success(team, AppMessages.MEMBER_REMOVED)


class TeamMemberRoleView(EnvelopeAPIView):
    @extend_schema(
        operation_id="update_team_member_role",
        summary="Change a member's role",
        description="Owner only. The role must be admin or collaborator.",
        tags=["teams"],
        parameters=[TEAM_ID_PARAMETER, MEMBER_ID_PARAMETER],
        request=UpdateMemberRoleSerializer,
        responses={
            200: OpenApiResponse(response=TeamDTO, description="Role updated"),
            403: OpenApiResponse(description="Not allowed to change this role"),
            404: OpenApiResponse(description="Team or member not found"),
        },
    )
    def put(self, request: Request, team_id: str, member_id: str):
        serializer = UpdateMemberRoleSerializer(data=request.data)
        if not serializer.is_valid():
            return self._handle_validation_errors(serializer.errors)

        team = TeamService.change_member_role(request.user_id, team_id, member_id, serializer.validated_data["role"])
        return self._success(team, AppMessages.MEMBER_ROLE_UPDATED)


class TeamTransferOwnershipView(EnvelopeAPIView):
    @extend_schema(
        operation_id="transfer_team_ownership",
        summary="Transfer ownership to another member",
        description="The current owner becomes an admin and the target member becomes the owner.",
        tags=["teams"],
        parameters=[TEAM_ID_PARAMETER, MEMBER_ID_PARAMETER],
        request=None,
        responses={
            200: OpenApiResponse(response=TeamDTO, description="Ownership transferred"),
            403: OpenApiResponse(description="Only the owner can transfer ownership"),
            404: OpenApiResponse(description="Team or member not found"),
        },
    )
    def put(self, request: Request, team_id: str, member_id: str):
        team = TeamService.transfer_ownership(request.user_id, team_id, member_id)
        return self._success(team, AppMessages.OWNERSHIP_TRANSFERRED)
