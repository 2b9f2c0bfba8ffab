from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.request import Request

from tasktracker.constants.messages import AppMessages
from tasktracker.dto.team_dto import InvitationDTO, TeamDTO
from tasktracker.middlewares.jwt_auth import get_current_user_info
from tasktracker.services.team_service import TeamService
from tasktracker.views.base import EnvelopeAPIView

INVITATION_ID_PARAMETER = OpenApiParameter(
    name="invitation_id",
    type=OpenApiTypes.STR,
    location=OpenApiParameter.PATH,
    description="Unique identifier of the invitation",
)


class InvitationListView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_my_invitations",
        summary="List my pending invitations",
        description="Live pending invitations addressed to the authenticated user's id or e-mail.",
        tags=["invitations"],
        responses={200: OpenApiResponse(response=InvitationDTO, description="Pending invitations")},
    )
    def get(self, request: Request):
        user = get_current_user_info(request)
        invitations = TeamService.get_pending_invitations(user["user_id"], user["email"])
        return self._success(invitations, AppMessages.INVITATIONS_FETCHED)


class InvitationAcceptView(EnvelopeAPIView):
    @extend_schema(
        operation_id="accept_invitation",
        summary="Accept an invitation",
        description="Joins the team as a collaborator.",
        tags=["invitations"],
        parameters=[INVITATION_ID_PARAMETER],
        request=None,
        responses={
            200: OpenApiResponse(response=TeamDTO, description="Invitation accepted"),
            404: OpenApiResponse(description="Invitation not found"),
            409: OpenApiResponse(description="Invitation is no longer pending"),
        },
    )
    def post(self, request: Request, invitation_id: str):
        user = get_current_user_info(request)
        team = TeamService.accept_invitation(user["user_id"], user["email"], invitation_id)
        return self._success(team, AppMessages.INVITATION_ACCEPTED)


class InvitationDeclineView(EnvelopeAPIView):
    @extend_schema(
        operation_id="decline_invitation",
        summary="Decline an invitation",
        description="Declining is final.",
        tags=["invitations"],
        parameters=[INVITATION_ID_PARAMETER],
        request=None,
        responses={
            200: OpenApiResponse(description="Invitation declined"),
            404: OpenApiResponse(description="Invitation not found"),
            409: OpenApiResponse(description="Invitation is no longer pending"),
        },
    )
    def post(self, request: Request, invitation_id: str):
        user = get_current_user_info(request)
        TeamService.decline_invitation(user["user_id"], user["email"], invitation_id)
        return self._success(None, AppMessages.INVITATION_DECLINED)
