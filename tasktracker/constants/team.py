from enum import Enum


class InvitationStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    REVOKED = "revoked"
    EXPIRED = "expired"


TERMINAL_INVITATION_STATUSES = {
    InvitationStatus.ACCEPTED.value,
    InvitationStatus.DECLINED.value,
    InvitationStatus.REVOKED.value,
    InvitationStatus.EXPIRED.value,
}

TEAM_NAME_MAX_LENGTH = 50
TEAM_DESCRIPTION_MAX_LENGTH = 200
DEFAULT_INVITATION_TTL_DAYS = 7


class UserRole(Enum):
    USER = "user"
    ADMIN = "admin"
