from dataclasses import dataclass
from typing import Optional

from tasktracker.constants.permissions import (
    MANAGER_ROLES,
    DenialReason,
    TeamOperation,
    TeamRole,
    can_manage_user_in_hierarchy,
    has_team_permission,
)
from tasktracker.constants.task import TaskVisibility
from tasktracker.exceptions.permission_exceptions import (
    InsufficientRoleError,
    LastOwnerError,
    SelfTargetError,
    TeamMembershipRequiredError,
)
from tasktracker.exceptions.task_exceptions import TaskNotFoundException
from tasktracker.exceptions.team_exceptions import MemberNotFoundException, TeamNotFoundException
from tasktracker.models.task import TaskModel
from tasktracker.models.team import TeamModel


@dataclass(frozen=True)
class AuthorizationDecision:
    allowed: bool
    reason: Optional[DenialReason] = None


ALLOW = AuthorizationDecision(allowed=True)


def deny(reason: DenialReason) -> AuthorizationDecision:
    return AuthorizationDecision(allowed=False, reason=reason)


class AuthorizationService:
    """
    Decides whether a principal may perform an operation on a team or one of its tasks.

    ``evaluate`` is pure: callers load the team (and task) and pass them in. Rules
    are checked top-down and the first denial wins. A missing or inactive team is
    ``not-found`` for every operation, and membership is checked before role.
    """

    @classmethod
    def evaluate(
        cls,
        principal_id: str,
        team: Optional[TeamModel],
        operation: TeamOperation,
        target_id: Optional[str] = None,
        new_role: Optional[str] = None,
        task: Optional[TaskModel] = None,
    ) -> AuthorizationDecision:
        if team is None or not team.isActive:
            return deny(DenialReason.NOT_FOUND)

        actor = team.get_member(principal_id)
        if actor is None:
            return deny(DenialReason.NOT_MEMBER)
        role = TeamRole(actor.role)

        if operation == TeamOperation.REMOVE_MEMBER:
            target = team.get_member(target_id) if target_id else None
            if target is None:
                return deny(DenialReason.NOT_FOUND)
            if target.userId == principal_id:
                return deny(DenialReason.SELF_TARGET)
            target_role = TeamRole(target.role)
            if target_role == TeamRole.OWNER:
                return deny(DenialReason.LAST_OWNER if role == TeamRole.OWNER else DenialReason.INSUFFICIENT_ROLE)
            if not can_manage_user_in_hierarchy(role, target_role):
                return deny(DenialReason.INSUFFICIENT_ROLE)
            return ALLOW

        if operation == TeamOperation.CHANGE_ROLE:
            if role != TeamRole.OWNER:
                return deny(DenialReason.INSUFFICIENT_ROLE)
            if not target_id or team.get_member(target_id) is None:
                return deny(DenialReason.NOT_FOUND)
            if target_id == principal_id:
                return deny(DenialReason.SELF_TARGET)
            if new_role == TeamRole.OWNER.value:
                return deny(DenialReason.INSUFFICIENT_ROLE)
            return ALLOW

        if operation == TeamOperation.TRANSFER_OWNERSHIP:
            if role != TeamRole.OWNER:
                return deny(DenialReason.INSUFFICIENT_ROLE)
            if not target_id or team.get_member(target_id) is None:
                return deny(DenialReason.NOT_FOUND)
            if target_id == principal_id:
                return deny(DenialReason.SELF_TARGET)
            return ALLOW

        if operation == TeamOperation.LEAVE_TEAM:
            if role == TeamRole.OWNER:
                return deny(DenialReason.LAST_OWNER)
            return ALLOW

        if operation == TeamOperation.READ_TEAM_TASK:
            if (
                role in MANAGER_ROLES
                or (task is not None and task.visibility == TaskVisibility.TEAM.value)
                or (task is not None and task.assignedTo == principal_id)
            ):
                return ALLOW
            return deny(DenialReason.INSUFFICIENT_ROLE)

        if operation == TeamOperation.MODIFY_TEAM_TASK:
            if role in MANAGER_ROLES or (task is not None and task.createdBy == principal_id):
                return ALLOW
            return deny(DenialReason.INSUFFICIENT_ROLE)

        if has_team_permission(role, operation):
            return ALLOW
        return deny(DenialReason.INSUFFICIENT_ROLE)

    @classmethod
    def evaluate_personal_task(cls, principal_id: str, task: TaskModel) -> AuthorizationDecision:
        """Personal tasks are visible to their creator only; anyone else gets not-found."""
        if task.createdBy == principal_id:
            return ALLOW
        return deny(DenialReason.NOT_FOUND)

    @classmethod
    def require(
        cls,
        principal_id: str,
        team: Optional[TeamModel],
        operation: TeamOperation,
        team_id: Optional[str] = None,
        target_id: Optional[str] = None,
        new_role: Optional[str] = None,
        task: Optional[TaskModel] = None,
    ) -> None:
        decision = cls.evaluate(principal_id, team, operation, target_id=target_id, new_role=new_role, task=task)
        if decision.allowed:
            return

        team_id = team_id or (str(team.id) if team else None)
        reason = decision.reason
        if reason == DenialReason.NOT_FOUND:
            if team is not None and team.isActive and target_id:
                raise MemberNotFoundException(target_id)
            if task is not None:
                raise TaskNotFoundException(str(task.id))
            raise TeamNotFoundException(team_id)
        if reason == DenialReason.NOT_MEMBER:
            raise TeamMembershipRequiredError(team_id, operation.value)
        if reason == DenialReason.LAST_OWNER:
            raise LastOwnerError(team_id, operation.value)
        if reason == DenialReason.SELF_TARGET:
            raise SelfTargetError(operation.value)

        actor = team.get_member(principal_id) if team else None
        raise InsufficientRoleError(operation.value, actor.role if actor else None)

    @classmethod
    def require_personal_task(cls, principal_id: str, task: TaskModel) -> None:
        if not cls.evaluate_personal_task(principal_id, task).allowed:
            raise TaskNotFoundException(str(task.id))
