from tasktracker.constants.permissions import DenialReason


class PermissionDeniedError(Exception):
    """Base permission error"""

    reason = DenialReason.INSUFFICIENT_ROLE

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class TeamMembershipRequiredError(PermissionDeniedError):
    """Team membership required"""

    reason = DenialReason.NOT_MEMBER

    def __init__(self, team_id: str, action: str):
        self.team_id = team_id
        self.action = action
        message = f"Team membership required: Must be a member of team '{team_id}' to {action}"
        super().__init__(message)


class InsufficientRoleError(PermissionDeniedError):
    """Insufficient role for action"""

    reason = DenialReason.INSUFFICIENT_ROLE

    def __init__(self, action: str, current_role: str | None):
        self.action = action
        self.current_role = current_role
        message = f"Insufficient role: role '{current_role}' cannot {action}"
        super().__init__(message)


class LastOwnerError(PermissionDeniedError):
    """The team would be left without an owner"""

    reason = DenialReason.LAST_OWNER

    def __init__(self, team_id: str, action: str):
        self.team_id = team_id
        self.action = action
        message = f"The owner of team '{team_id}' cannot {action}; transfer ownership first"
        super().__init__(message)


class SelfTargetError(PermissionDeniedError):
    """Action cannot target the acting user"""

    reason = DenialReason.SELF_TARGET

    def __init__(self, action: str):
        self.action = action
        message = f"You cannot {action} on yourself"
        super().__init__(message)
