from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field
from typing import ClassVar, List, Optional
from datetime import datetime, timezone

from tasktracker.constants.permissions import TeamRole
from tasktracker.constants.team import InvitationStatus, TEAM_NAME_MAX_LENGTH, TEAM_DESCRIPTION_MAX_LENGTH
from tasktracker.models.common.document import Document
from tasktracker.models.common.pyobjectid import PyObjectId


class MemberModel(BaseModel):
    userId: str
    role: TeamRole
    joinedAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    invitedBy: str | None = None

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class InvitationModel(BaseModel):
    id: PyObjectId = Field(default_factory=ObjectId)
    inviteeEmail: str
    inviteeUserId: str | None = None
    invitedBy: str
    role: TeamRole = TeamRole.COLLABORATOR
    status: InvitationStatus = InvitationStatus.PENDING
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    expiresAt: datetime
    respondedAt: datetime | None = None

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    def is_expired(self, now: datetime) -> bool:
        """A pending invitation past its expiry is treated as expired even before it is persisted as such."""
        return self.status == InvitationStatus.PENDING.value and self.expiresAt <= now

    def effective_status(self, now: datetime) -> str:
        if self.is_expired(now):
            return InvitationStatus.EXPIRED.value
        return self.status

    def is_addressed_to(self, user_id: str, email: str | None) -> bool:
        if self.inviteeUserId and self.inviteeUserId == user_id:
            return True
        return bool(email) and self.inviteeEmail == email.lower()


class TeamModel(Document):
    """
    Team aggregate. Members and invitations are embedded so that any change to
    them is a single-document write guarded by ``version``.
    """

    collection_name: ClassVar[str] = "teams"

    id: PyObjectId | None = Field(None, alias="_id")
    name: str = Field(..., min_length=1, max_length=TEAM_NAME_MAX_LENGTH)
    description: str | None = Field(None, max_length=TEAM_DESCRIPTION_MAX_LENGTH)
    createdBy: str
    isActive: bool = True
    members: List[MemberModel] = Field(default_factory=list)
    invitations: List[InvitationModel] = Field(default_factory=list)
    version: int = 1
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updatedAt: datetime | None = None

    def get_member(self, user_id: str) -> Optional[MemberModel]:
        for member in self.members:
            if member.userId == user_id:
                return member
        return None

    def get_invitation(self, invitation_id: str) -> Optional[InvitationModel]:
        for invitation in self.invitations:
            if str(invitation.id) == str(invitation_id):
                return invitation
        return None

    @property
    def owner(self) -> Optional[MemberModel]:
        return next((m for m in self.members if m.role == TeamRole.OWNER.value), None)

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def admin_count(self) -> int:
        return len([m for m in self.members if m.role in (TeamRole.ADMIN.value, TeamRole.OWNER.value)])
