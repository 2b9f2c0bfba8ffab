from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel

from tasktracker.models.team import InvitationModel, MemberModel, TeamModel
from tasktracker.models.user import UserModel


class MemberDTO(BaseModel):
    userId: str
    name: str | None = None
    email: str | None = None
    role: str
    joinedAt: datetime
    invitedBy: str | None = None

    @classmethod
    def from_model(cls, member: MemberModel, users_by_id: Dict[str, UserModel]) -> "MemberDTO":
        user = users_by_id.get(member.userId)
        return cls(
            userId=member.userId,
            name=user.name if user else None,
            email=user.email if user else None,
            role=member.role,
            joinedAt=member.joinedAt,
            invitedBy=member.invitedBy,
        )


class InvitationDTO(BaseModel):
    id: str
    teamId: str
    teamName: str
    inviteeEmail: str
    inviteeUserId: str | None = None
    invitedBy: str
    role: str
    status: str
    createdAt: datetime
    expiresAt: datetime
    respondedAt: datetime | None = None

    @classmethod
    def from_model(cls, invitation: InvitationModel, team: TeamModel, now: datetime) -> "InvitationDTO":
        return cls(
            id=str(invitation.id),
            teamId=str(team.id),
            teamName=team.name,
            inviteeEmail=invitation.inviteeEmail,
            inviteeUserId=invitation.inviteeUserId,
            invitedBy=invitation.invitedBy,
            role=invitation.role,
            status=invitation.effective_status(now),
            createdAt=invitation.createdAt,
            expiresAt=invitation.expiresAt,
            respondedAt=invitation.respondedAt,
        )


class TeamDTO(BaseModel):
    id: str
    name: str
    description: str | None = None
    createdBy: str
    isActive: bool
    members: List[MemberDTO] = []
    memberCount: int
    adminCount: int
    myRole: str | None = None
    pendingInvitations: List[InvitationDTO] | None = None
    createdAt: datetime
    updatedAt: datetime | None = None

    @classmethod
    def from_model(
        cls,
        team: TeamModel,
        users_by_id: Dict[str, UserModel] | None = None,
        viewer_id: str | None = None,
        pending_invitations: List[InvitationDTO] | None = None,
    ) -> "TeamDTO":
        users_by_id = users_by_id or {}
        viewer = team.get_member(viewer_id) if viewer_id else None
        return cls(
            id=str(team.id),
            name=team.name,
            description=team.description,
            createdBy=team.createdBy,
            isActive=team.isActive,
            members=[MemberDTO.from_model(member, users_by_id) for member in team.members],
            memberCount=team.member_count,
            adminCount=team.admin_count,
            myRole=viewer.role if viewer else None,
            pendingInvitations=pending_invitations,
            createdAt=team.createdAt,
            updatedAt=team.updatedAt,
        )


class GetUserTeamsResponse(BaseModel):
    teams: List[TeamDTO] = []
    total: int = 0
