from datetime import datetime, timedelta, timezone

from bson import ObjectId

from tasktracker.constants.permissions import TeamRole
from tasktracker.constants.team import InvitationStatus
from tasktracker.models.team import InvitationModel, MemberModel, TeamModel

OWNER_ID = str(ObjectId())
ADMIN_ID = str(ObjectId())
COLLABORATOR_ID = str(ObjectId())
OUTSIDER_ID = str(ObjectId())

FIXED_NOW = datetime(2024, 6, 12, 10, 0, tzinfo=timezone.utc)


def make_team(**overrides) -> TeamModel:
    """Team with one owner, one admin and one collaborator."""
    data = {
        "_id": ObjectId(),
        "name": "Platform",
        "description": "Platform squad",
        "createdBy": OWNER_ID,
        "isActive": True,
        "members": [
            MemberModel(userId=OWNER_ID, role=TeamRole.OWNER, joinedAt=FIXED_NOW),
            MemberModel(userId=ADMIN_ID, role=TeamRole.ADMIN, joinedAt=FIXED_NOW, invitedBy=OWNER_ID),
            MemberModel(userId=COLLABORATOR_ID, role=TeamRole.COLLABORATOR, joinedAt=FIXED_NOW, invitedBy=OWNER_ID),
        ],
        "invitations": [],
        "version": 3,
        "createdAt": FIXED_NOW - timedelta(days=30),
    }
    data.update(overrides)
    return TeamModel.model_validate(data)


def make_invitation(email: str = "new@example.com", **overrides) -> InvitationModel:
    data = {
        "inviteeEmail": email,
        "invitedBy": OWNER_ID,
        "role": TeamRole.COLLABORATOR,
        "status": InvitationStatus.PENDING,
        "createdAt": FIXED_NOW - timedelta(days=1),
        "expiresAt": FIXED_NOW + timedelta(days=6),
    }
    data.update(overrides)
    return InvitationModel(**data)
