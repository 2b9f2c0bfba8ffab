from tasktracker.constants.messages import ApiErrors
from tasktracker.exceptions.common_exceptions import ConflictException


class BaseTeamException(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class TeamNotFoundException(BaseTeamException):
    def __init__(self, team_id: str | None = None):
        self.team_id = team_id
        super().__init__(ApiErrors.TEAM_NOT_FOUND.format(team_id) if team_id else ApiErrors.TEAM_NOT_FOUND_GENERIC)


class MemberNotFoundException(BaseTeamException):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(ApiErrors.MEMBER_NOT_FOUND.format(user_id))


class InvitationNotFoundException(BaseTeamException):
    def __init__(self, invitation_id: str):
        self.invitation_id = invitation_id
        super().__init__(ApiErrors.INVITATION_NOT_FOUND.format(invitation_id))


class InvalidInvitationStateException(BaseTeamException):
    def __init__(self, status: str):
        self.status = status
        super().__init__(ApiErrors.INVITATION_NOT_PENDING.format(status))


class AlreadyMemberException(ConflictException):
    reason = "already-member"

    def __init__(self, email: str):
        super().__init__(ApiErrors.ALREADY_MEMBER.format(email))


class AlreadyInvitedException(ConflictException):
    reason = "already-invited"

    def __init__(self, email: str):
        super().__init__(ApiErrors.ALREADY_INVITED.format(email))


class DuplicateTeamNameException(ConflictException):
    reason = "duplicate-team-name"

    def __init__(self, name: str):
        super().__init__(ApiErrors.DUPLICATE_TEAM_NAME.format(name))
