from enum import Enum
from typing import Dict, Set


class TeamRole(Enum):
    """Team role hierarchy: Owner > Admin > Collaborator"""

    OWNER = "owner"
    ADMIN = "admin"
    COLLABORATOR = "collaborator"


MANAGER_ROLES = {TeamRole.OWNER, TeamRole.ADMIN}


class TeamOperation(Enum):
    READ_TEAM = "read team"
    UPDATE_TEAM = "update team metadata"
    INVITE_MEMBER = "invite member"
    REVOKE_INVITATION = "revoke invitation"
    REMOVE_MEMBER = "remove member"
    CHANGE_ROLE = "change member role"
    TRANSFER_OWNERSHIP = "transfer ownership"
    LEAVE_TEAM = "leave team"
    DELETE_TEAM = "delete team"
    CREATE_TEAM_TASK = "create team task"
    READ_TEAM_TASK = "read team task"
    MODIFY_TEAM_TASK = "update or delete team task"
    READ_TEAM_ANALYTICS = "read team analytics"
    READ_MEMBER_ANALYTICS = "read member analytics"


class DenialReason(Enum):
    NOT_MEMBER = "not-member"
    INSUFFICIENT_ROLE = "insufficient-role"
    LAST_OWNER = "last-owner"
    SELF_TARGET = "self-target"
    NOT_FOUND = "not-found"


# Operations gated purely on the principal's role; membership is checked first.
TEAM_ROLE_PERMISSIONS: Dict[TeamRole, Set[TeamOperation]] = {
    TeamRole.OWNER: {
        TeamOperation.READ_TEAM,
        TeamOperation.UPDATE_TEAM,
        TeamOperation.INVITE_MEMBER,
        TeamOperation.REVOKE_INVITATION,
        TeamOperation.DELETE_TEAM,
        TeamOperation.CREATE_TEAM_TASK,
        TeamOperation.READ_TEAM_ANALYTICS,
        TeamOperation.READ_MEMBER_ANALYTICS,
    },
    TeamRole.ADMIN: {
        TeamOperation.READ_TEAM,
        TeamOperation.UPDATE_TEAM,
        TeamOperation.INVITE_MEMBER,
        TeamOperation.REVOKE_INVITATION,
        TeamOperation.LEAVE_TEAM,
        TeamOperation.CREATE_TEAM_TASK,
        TeamOperation.READ_TEAM_ANALYTICS,
        TeamOperation.READ_MEMBER_ANALYTICS,
    },
    TeamRole.COLLABORATOR: {
        TeamOperation.READ_TEAM,
        TeamOperation.LEAVE_TEAM,
        TeamOperation.READ_TEAM_ANALYTICS,
    },
}


def has_team_permission(user_role: TeamRole, operation: TeamOperation) -> bool:
    """Check if role has permission"""
    return operation in TEAM_ROLE_PERMISSIONS.get(user_role, set())


def can_manage_user_in_hierarchy(actor_role: TeamRole, target_role: TeamRole) -> bool:
    """Check if actor can remove target based on hierarchy"""
    if actor_role == TeamRole.OWNER:
        return target_role != TeamRole.OWNER
    if actor_role == TeamRole.ADMIN:
        return target_role == TeamRole.COLLABORATOR
    return False
