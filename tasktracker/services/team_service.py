import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from django.conf import settings

from tasktracker.constants.messages import ValidationErrors
from tasktracker.constants.permissions import MANAGER_ROLES, TeamOperation, TeamRole
from tasktracker.constants.task import AssignmentReason
from tasktracker.constants.team import (
    DEFAULT_INVITATION_TTL_DAYS,
    TEAM_DESCRIPTION_MAX_LENGTH,
    TEAM_NAME_MAX_LENGTH,
    InvitationStatus,
)
from tasktracker.dto.team_dto import GetUserTeamsResponse, InvitationDTO, TeamDTO
from tasktracker.exceptions.common_exceptions import InvalidInputException
from tasktracker.exceptions.team_exceptions import (
    AlreadyInvitedException,
    AlreadyMemberException,
    DuplicateTeamNameException,
    InvalidInvitationStateException,
    InvitationNotFoundException,
)
from tasktracker.models.team import InvitationModel, MemberModel, TeamModel
from tasktracker.repositories.task_repository import TaskRepository
from tasktracker.repositories.team_repository import TeamRepository
from tasktracker.repositories.user_repository import UserRepository
from tasktracker.services.authorization_service import AuthorizationService
from tasktracker.services.user_service import UserService
from tasktracker.utils.retry_utils import retry_on_conflict

logger = logging.getLogger(__name__)


class TeamService:
    """
    Team membership and invitation workflows.

    Every mutation re-reads the team, authorises against that snapshot and writes
    back with a version compare-and-set; a lost race is retried once.
    """

    @classmethod
    def _invitation_ttl(cls) -> timedelta:
        return timedelta(days=getattr(settings, "INVITATION_TTL_DAYS", DEFAULT_INVITATION_TTL_DAYS))

    @classmethod
    def _clean_name(cls, name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise InvalidInputException({"name": ValidationErrors.BLANK_TEAM_NAME})
        if len(name) > TEAM_NAME_MAX_LENGTH:
            raise InvalidInputException({"name": ValidationErrors.TEAM_NAME_TOO_LONG.format(TEAM_NAME_MAX_LENGTH)})
        return name

    @classmethod
    def _clean_description(cls, description: Optional[str]) -> Optional[str]:
        if description is None:
            return None
        description = description.strip()
        if len(description) > TEAM_DESCRIPTION_MAX_LENGTH:
            raise InvalidInputException(
                {"description": ValidationErrors.TEAM_DESCRIPTION_TOO_LONG.format(TEAM_DESCRIPTION_MAX_LENGTH)}
            )
        return description or None

    @classmethod
    def _to_dto(cls, team: TeamModel, viewer_id: str, now: Optional[datetime] = None) -> TeamDTO:
        users_by_id = UserService.get_users_by_ids(member.userId for member in team.members)
        viewer = team.get_member(viewer_id)
        pending = None
        if viewer is not None and TeamRole(viewer.role) in MANAGER_ROLES:
            now = now or datetime.now(timezone.utc)
            pending = [
                InvitationDTO.from_model(invitation, team, now)
                for invitation in team.invitations
                if invitation.effective_status(now) == InvitationStatus.PENDING.value
            ]
        return TeamDTO.from_model(team, users_by_id, viewer_id=viewer_id, pending_invitations=pending)

    @classmethod
    def _load_team(cls, team_id: str) -> Optional[TeamModel]:
        return TeamRepository.get_by_id(team_id)

    @classmethod
    def get_memberships(cls, user_id: str) -> Dict[str, str]:
        """Map of team id to the user's role for every active team the user belongs to."""
        return {str(team.id): team.get_member(user_id).role for team in TeamRepository.list_for_member(user_id)}

    @classmethod
    def create_team(cls, user_id: str, name: str, description: Optional[str] = None) -> TeamDTO:
        name = cls._clean_name(name)
        description = cls._clean_description(description)

        if TeamRepository.exists_with_name_for_member(user_id, name):
            raise DuplicateTeamNameException(name)

        now = datetime.now(timezone.utc)
        team = TeamModel(
            name=name,
            description=description,
            createdBy=user_id,
            members=[MemberModel(userId=user_id, role=TeamRole.OWNER, joinedAt=now)],
        )
        created_team = TeamRepository.create(team)
        logger.info(f"Team {created_team.id} '{name}' created by {user_id}")
        return cls._to_dto(created_team, user_id, now)

    @classmethod
    def get_user_teams(cls, user_id: str) -> GetUserTeamsResponse:
        teams = TeamRepository.list_for_member(user_id)
        users_by_id = UserService.get_users_by_ids(member.userId for team in teams for member in team.members)
        team_dtos = [TeamDTO.from_model(team, users_by_id, viewer_id=user_id) for team in teams]
        return GetUserTeamsResponse(teams=team_dtos, total=len(team_dtos))

    @classmethod
    def get_team(cls, user_id: str, team_id: str) -> TeamDTO:
        team = cls._load_team(team_id)
        AuthorizationService.require(user_id, team, TeamOperation.READ_TEAM, team_id=team_id)
        return cls._to_dto(team, user_id)

    @classmethod
    def update_team(
        cls, user_id: str, team_id: str, name: Optional[str] = None, description: Optional[str] = None
    ) -> TeamDTO:
        changes = {}
        if name is not None:
            changes["name"] = cls._clean_name(name)
        if description is not None:
            changes["description"] = cls._clean_description(description)
        if not changes:
            raise InvalidInputException({"non_field_errors": ValidationErrors.EMPTY_UPDATE})

        def attempt() -> TeamModel:
            team = cls._load_team(team_id)
            AuthorizationService.require(user_id, team, TeamOperation.UPDATE_TEAM, team_id=team_id)
            if (
                "name" in changes
                and changes["name"].lower() != team.name.lower()
                and TeamRepository.exists_with_name_for_member(user_id, changes["name"], exclude_team_id=team_id)
            ):
                raise DuplicateTeamNameException(changes["name"])
            return TeamRepository.compare_and_set(team, changes)

        updated_team = retry_on_conflict(attempt)
        logger.info(f"Team {team_id} updated by {user_id}: {sorted(changes)}")
        return cls._to_dto(updated_team, user_id)

    @classmethod
    def delete_team(cls, user_id: str, team_id: str) -> None:
        def attempt() -> TeamModel:
            team = cls._load_team(team_id)
            AuthorizationService.require(user_id, team, TeamOperation.DELETE_TEAM, team_id=team_id)
            return TeamRepository.compare_and_set(team, {"isActive": False})

        retry_on_conflict(attempt)
        logger.info(f"Team {team_id} deactivated by {user_id}")

    @classmethod
    def invite_to_team(cls, user_id: str, team_id: str, email: str) -> InvitationDTO:
        email = email.strip().lower()
        invitee = UserRepository.get_by_email(email)
        invitee_id = str(invitee.id) if invitee else None

        def attempt() -> InvitationDTO:
            team = cls._load_team(team_id)
            AuthorizationService.require(user_id, team, TeamOperation.INVITE_MEMBER, team_id=team_id)
            if invitee_id and team.get_member(invitee_id):
                raise AlreadyMemberException(email)

            now = datetime.now(timezone.utc)
            invitations = list(team.invitations)
            for invitation in invitations:
                if invitation.is_expired(now):
                    invitation.status = InvitationStatus.EXPIRED.value
                elif invitation.status == InvitationStatus.PENDING.value and invitation.is_addressed_to(
                    invitee_id, email
                ):
                    raise AlreadyInvitedException(email)

            invitation = InvitationModel(
                inviteeEmail=email,
                inviteeUserId=invitee_id,
                invitedBy=user_id,
                role=TeamRole.COLLABORATOR,
                createdAt=now,
                expiresAt=now + cls._invitation_ttl(),
            )
            updated_team = TeamRepository.compare_and_set(team, {"invitations": invitations + [invitation]})
            return InvitationDTO.from_model(invitation, updated_team, now)

        invitation_dto = retry_on_conflict(attempt)
        logger.info(f"Invitation {invitation_dto.id} to team {team_id} sent to {email} by {user_id}")
        return invitation_dto

    @classmethod
    def get_pending_invitations(cls, user_id: str, email: Optional[str]) -> List[InvitationDTO]:
        now = datetime.now(timezone.utc)
        invitations = []
        for team in TeamRepository.list_with_pending_invitations_for(user_id, email):
            for invitation in team.invitations:
                if invitation.effective_status(
                    now
                ) == InvitationStatus.PENDING.value and invitation.is_addressed_to(user_id, email):
                    invitations.append(InvitationDTO.from_model(invitation, team, now))
        return sorted(invitations, key=lambda invitation: invitation.createdAt, reverse=True)

    @classmethod
    def _load_addressed_invitation(cls, user_id: str, email: Optional[str], invitation_id: str):
        team = TeamRepository.get_by_invitation_id(invitation_id)
        invitation = team.get_invitation(invitation_id) if team else None
        if invitation is None or not invitation.is_addressed_to(user_id, email):
            raise InvitationNotFoundException(invitation_id)
        return team, invitation

    @classmethod
    def _ensure_answerable(cls, team: TeamModel, invitation: InvitationModel, now: datetime) -> None:
        """Persist a lazily-expired invitation, then reject anything no longer pending."""
        if invitation.is_expired(now):
            invitation.status = InvitationStatus.EXPIRED.value
            TeamRepository.compare_and_set(team, {"invitations": team.invitations})
            logger.info(f"Invitation {invitation.id} of team {team.id} expired")
            raise InvalidInvitationStateException(InvitationStatus.EXPIRED.value)
        if invitation.status != InvitationStatus.PENDING.value:
            raise InvalidInvitationStateException(invitation.status)

    @classmethod
    def accept_invitation(cls, user_id: str, email: Optional[str], invitation_id: str) -> TeamDTO:
        def attempt() -> TeamModel:
            team, invitation = cls._load_addressed_invitation(user_id, email, invitation_id)
            now = datetime.now(timezone.utc)
            cls._ensure_answerable(team, invitation, now)
            if team.get_member(user_id):
                raise AlreadyMemberException(email or user_id)

            invitation.status = InvitationStatus.ACCEPTED.value
            invitation.respondedAt = now
            invitation.inviteeUserId = user_id
            member = MemberModel(userId=user_id, role=invitation.role, joinedAt=now, invitedBy=invitation.invitedBy)
            return TeamRepository.compare_and_set(
                team, {"invitations": team.invitations, "members": team.members + [member]}
            )

        team = retry_on_conflict(attempt)
        logger.info(f"Invitation {invitation_id} accepted; {user_id} joined team {team.id}")
        return cls._to_dto(team, user_id)

    @classmethod
    def decline_invitation(cls, user_id: str, email: Optional[str], invitation_id: str) -> None:
        def attempt() -> TeamModel:
            team, invitation = cls._load_addressed_invitation(user_id, email, invitation_id)
            now = datetime.now(timezone.utc)
            cls._ensure_answerable(team, invitation, now)
            invitation.status = InvitationStatus.DECLINED.value
            invitation.respondedAt = now
            invitation.inviteeUserId = invitation.inviteeUserId or user_id
            return TeamRepository.compare_and_set(team, {"invitations": team.invitations})

        team = retry_on_conflict(attempt)
        logger.info(f"Invitation {invitation_id} to team {team.id} declined by {user_id}")

    @classmethod
    def revoke_invitation(cls, user_id: str, team_id: str, invitation_id: str) -> InvitationDTO:
        def attempt() -> InvitationDTO:
            team = cls._load_team(team_id)
            AuthorizationService.require(user_id, team, TeamOperation.REVOKE_INVITATION, team_id=team_id)
            invitation = team.get_invitation(invitation_id)
            if invitation is None:
                raise InvitationNotFoundException(invitation_id)
            now = datetime.now(timezone.utc)
            cls._ensure_answerable(team, invitation, now)
            invitation.status = InvitationStatus.REVOKED.value
            invitation.respondedAt = now
            updated_team = TeamRepository.compare_and_set(team, {"invitations": team.invitations})
            return InvitationDTO.from_model(invitation, updated_team, now)

        invitation_dto = retry_on_conflict(attempt)
        logger.info(f"Invitation {invitation_id} of team {team_id} revoked by {user_id}")
        return invitation_dto

    @classmethod
    def remove_member(cls, user_id: str, team_id: str, member_id: str) -> TeamDTO:
        def attempt() -> TeamModel:
            team = cls._load_team(team_id)
            AuthorizationService.require(
                user_id, team, TeamOperation.REMOVE_MEMBER, team_id=team_id, target_id=member_id
            )
            members = [member for member in team.members if member.userId != member_id]
            return TeamRepository.compare_and_set(team, {"members": members})

        team = retry_on_conflict(attempt)
        TaskRepository.unassign_member(
            team_id, member_id, user_id, AssignmentReason.MEMBER_REMOVED.value, datetime.now(timezone.utc)
        )
        logger.info(f"Member {member_id} removed from team {team_id} by {user_id}")
        return cls._to_dto(team, user_id)

    @classmethod
    def leave_team(cls, user_id: str, team_id: str) -> None:
        def attempt() -> TeamModel:
            team = cls._load_team(team_id)
            AuthorizationService.require(user_id, team, TeamOperation.LEAVE_TEAM, team_id=team_id)
            members = [member for member in team.members if member.userId != user_id]
            return TeamRepository.compare_and_set(team, {"members": members})

        retry_on_conflict(attempt)
        TaskRepository.unassign_member(
            team_id, user_id, user_id, AssignmentReason.MEMBER_LEFT.value, datetime.now(timezone.utc)
        )
        logger.info(f"User {user_id} left team {team_id}")

    @classmethod
    def change_member_role(cls, user_id: str, team_id: str, member_id: str, new_role: str) -> TeamDTO:
        valid_roles = [role.value for role in TeamRole]
        if new_role not in valid_roles:
            raise InvalidInputException({"role": ValidationErrors.INVALID_ROLE.format(", ".join(valid_roles))})

        def attempt() -> TeamModel:
            team = cls._load_team(team_id)
            AuthorizationService.require(
                user_id, team, TeamOperation.CHANGE_ROLE, team_id=team_id, target_id=member_id, new_role=new_role
            )
            if team.get_member(member_id).role == new_role:
                return team

            members = [
                member.model_copy(update={"role": new_role}) if member.userId == member_id else member
                for member in team.members
            ]
            updated_team = TeamRepository.compare_and_set(team, {"members": members})
            logger.info(f"Member {member_id} of team {team_id} is now {new_role} (changed by {user_id})")
            return updated_team

        team = retry_on_conflict(attempt)
        return cls._to_dto(team, user_id)

    @classmethod
    def transfer_ownership(cls, user_id: str, team_id: str, member_id: str) -> TeamDTO:
        def attempt() -> TeamModel:
            team = cls._load_team(team_id)
            AuthorizationService.require(
                user_id, team, TeamOperation.TRANSFER_OWNERSHIP, team_id=team_id, target_id=member_id
            )
            members = []
            for member in team.members:
                if member.userId == user_id:
                    member = member.model_copy(update={"role": TeamRole.ADMIN.value})
                elif member.userId == member_id:
                    member = member.model_copy(update={"role": TeamRole.OWNER.value})
                members.append(member)
            return TeamRepository.compare_and_set(team, {"members": members})

        team = retry_on_conflict(attempt)
        logger.info(f"Ownership of team {team_id} transferred from {user_id} to {member_id}")
        return cls._to_dto(team, user_id)
