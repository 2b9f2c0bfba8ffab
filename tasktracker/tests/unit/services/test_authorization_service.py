from unittest import TestCase

from tasktracker.constants.permissions import DenialReason, TeamOperation
from tasktracker.exceptions.permission_exceptions import (
    InsufficientRoleError,
    LastOwnerError,
    SelfTargetError,
    TeamMembershipRequiredError,
)
from tasktracker.exceptions.task_exceptions import TaskNotFoundException
from tasktracker.exceptions.team_exceptions import MemberNotFoundException, TeamNotFoundException
from tasktracker.services.authorization_service import AuthorizationService
from tasktracker.tests.fixtures.task import make_task
from tasktracker.tests.fixtures.team import ADMIN_ID, COLLABORATOR_ID, OUTSIDER_ID, OWNER_ID, make_team


class AuthorizationEvaluateTests(TestCase):
    def setUp(self):
        self.team = make_team()
        self.team_id = str(self.team.id)

    def evaluate(self, principal_id, operation, **kwargs):
        return AuthorizationService.evaluate(principal_id, self.team, operation, **kwargs)

    def test_missing_team_is_not_found(self):
        decision = AuthorizationService.evaluate(OWNER_ID, None, TeamOperation.READ_TEAM)

        self.assertFalse(decision.allowed)
        self.assertEqual(decision.reason, DenialReason.NOT_FOUND)

    def test_inactive_team_is_not_found_even_for_owner(self):
        self.team.isActive = False

        decision = self.evaluate(OWNER_ID, TeamOperation.READ_TEAM)

        self.assertEqual(decision.reason, DenialReason.NOT_FOUND)

    def test_non_member_is_denied_before_role_checks(self):
        for operation in TeamOperation:
            decision = self.evaluate(OUTSIDER_ID, operation, target_id=COLLABORATOR_ID)
            self.assertEqual(decision.reason, DenialReason.NOT_MEMBER, operation)

    def test_every_member_can_read_team(self):
        for user_id in (OWNER_ID, ADMIN_ID, COLLABORATOR_ID):
            self.assertTrue(self.evaluate(user_id, TeamOperation.READ_TEAM).allowed)

    def test_collaborator_cannot_invite(self):
        decision = self.evaluate(COLLABORATOR_ID, TeamOperation.INVITE_MEMBER)

        self.assertEqual(decision.reason, DenialReason.INSUFFICIENT_ROLE)

    def test_admin_can_invite_and_update(self):
        self.assertTrue(self.evaluate(ADMIN_ID, TeamOperation.INVITE_MEMBER).allowed)
        self.assertTrue(self.evaluate(ADMIN_ID, TeamOperation.UPDATE_TEAM).allowed)

    def test_only_owner_can_delete_team(self):
        self.assertTrue(self.evaluate(OWNER_ID, TeamOperation.DELETE_TEAM).allowed)
        self.assertEqual(self.evaluate(ADMIN_ID, TeamOperation.DELETE_TEAM).reason, DenialReason.INSUFFICIENT_ROLE)

    def test_owner_removes_admin(self):
        self.assertTrue(self.evaluate(OWNER_ID, TeamOperation.REMOVE_MEMBER, target_id=ADMIN_ID).allowed)

    def test_admin_removes_collaborator_but_not_admin_or_owner(self):
        self.assertTrue(self.evaluate(ADMIN_ID, TeamOperation.REMOVE_MEMBER, target_id=COLLABORATOR_ID).allowed)
        self.assertEqual(
            self.evaluate(ADMIN_ID, TeamOperation.REMOVE_MEMBER, target_id=OWNER_ID).reason,
            DenialReason.INSUFFICIENT_ROLE,
        )

    def test_admin_cannot_remove_other_admin(self):
        other_admin = self.team.members[1].model_copy(update={"userId": OUTSIDER_ID})
        self.team.members.append(other_admin)

        decision = self.evaluate(ADMIN_ID, TeamOperation.REMOVE_MEMBER, target_id=OUTSIDER_ID)

        self.assertEqual(decision.reason, DenialReason.INSUFFICIENT_ROLE)

    def test_collaborator_cannot_remove_anyone(self):
        decision = self.evaluate(COLLABORATOR_ID, TeamOperation.REMOVE_MEMBER, target_id=ADMIN_ID)

        self.assertEqual(decision.reason, DenialReason.INSUFFICIENT_ROLE)

    def test_remove_self_is_self_target(self):
        decision = self.evaluate(ADMIN_ID, TeamOperation.REMOVE_MEMBER, target_id=ADMIN_ID)

        self.assertEqual(decision.reason, DenialReason.SELF_TARGET)

    def test_owner_removing_self_is_self_target(self):
        decision = self.evaluate(OWNER_ID, TeamOperation.REMOVE_MEMBER, target_id=OWNER_ID)

        self.assertEqual(decision.reason, DenialReason.SELF_TARGET)

    def test_remove_unknown_member_is_not_found(self):
        decision = self.evaluate(OWNER_ID, TeamOperation.REMOVE_MEMBER, target_id=OUTSIDER_ID)

        self.assertEqual(decision.reason, DenialReason.NOT_FOUND)

    def test_change_role_is_owner_only(self):
        self.assertTrue(
            self.evaluate(OWNER_ID, TeamOperation.CHANGE_ROLE, target_id=COLLABORATOR_ID, new_role="admin").allowed
        )
        self.assertEqual(
            self.evaluate(ADMIN_ID, TeamOperation.CHANGE_ROLE, target_id=COLLABORATOR_ID, new_role="admin").reason,
            DenialReason.INSUFFICIENT_ROLE,
        )

    def test_change_role_to_owner_is_rejected(self):
        decision = self.evaluate(OWNER_ID, TeamOperation.CHANGE_ROLE, target_id=ADMIN_ID, new_role="owner")

        self.assertEqual(decision.reason, DenialReason.INSUFFICIENT_ROLE)

    def test_change_own_role_is_self_target(self):
        decision = self.evaluate(OWNER_ID, TeamOperation.CHANGE_ROLE, target_id=OWNER_ID, new_role="admin")

        self.assertEqual(decision.reason, DenialReason.SELF_TARGET)

    def test_transfer_ownership_rules(self):
        self.assertTrue(self.evaluate(OWNER_ID, TeamOperation.TRANSFER_OWNERSHIP, target_id=ADMIN_ID).allowed)
        self.assertEqual(
            self.evaluate(ADMIN_ID, TeamOperation.TRANSFER_OWNERSHIP, target_id=COLLABORATOR_ID).reason,
            DenialReason.INSUFFICIENT_ROLE,
        )
        self.assertEqual(
            self.evaluate(OWNER_ID, TeamOperation.TRANSFER_OWNERSHIP, target_id=OUTSIDER_ID).reason,
            DenialReason.NOT_FOUND,
        )
        self.assertEqual(
            self.evaluate(OWNER_ID, TeamOperation.TRANSFER_OWNERSHIP, target_id=OWNER_ID).reason,
            DenialReason.SELF_TARGET,
        )

    def test_owner_cannot_leave(self):
        self.assertEqual(self.evaluate(OWNER_ID, TeamOperation.LEAVE_TEAM).reason, DenialReason.LAST_OWNER)
        self.assertTrue(self.evaluate(ADMIN_ID, TeamOperation.LEAVE_TEAM).allowed)
        self.assertTrue(self.evaluate(COLLABORATOR_ID, TeamOperation.LEAVE_TEAM).allowed)

    def test_collaborator_reads_team_visible_or_own_tasks_only(self):
        team_id = self.team_id
        visible = make_task(team=team_id, visibility="team")
        mine = make_task(team=team_id, visibility="assigned", assignedTo=COLLABORATOR_ID)
        someone_elses = make_task(team=team_id, visibility="assigned", assignedTo=ADMIN_ID)

        self.assertTrue(self.evaluate(COLLABORATOR_ID, TeamOperation.READ_TEAM_TASK, task=visible).allowed)
        self.assertTrue(self.evaluate(COLLABORATOR_ID, TeamOperation.READ_TEAM_TASK, task=mine).allowed)
        self.assertEqual(
            self.evaluate(COLLABORATOR_ID, TeamOperation.READ_TEAM_TASK, task=someone_elses).reason,
            DenialReason.INSUFFICIENT_ROLE,
        )

    def test_managers_read_every_team_task(self):
        task = make_task(team=self.team_id, visibility="assigned", assignedTo=COLLABORATOR_ID)

        self.assertTrue(self.evaluate(ADMIN_ID, TeamOperation.READ_TEAM_TASK, task=task).allowed)
        self.assertTrue(self.evaluate(OWNER_ID, TeamOperation.READ_TEAM_TASK, task=task).allowed)

    def test_collaborator_modifies_only_tasks_they_created(self):
        own = make_task(team=self.team_id, visibility="team", createdBy=COLLABORATOR_ID)
        other = make_task(team=self.team_id, visibility="team", createdBy=ADMIN_ID)

        self.assertTrue(self.evaluate(COLLABORATOR_ID, TeamOperation.MODIFY_TEAM_TASK, task=own).allowed)
        self.assertEqual(
            self.evaluate(COLLABORATOR_ID, TeamOperation.MODIFY_TEAM_TASK, task=other).reason,
            DenialReason.INSUFFICIENT_ROLE,
        )

    def test_collaborator_can_read_analytics_but_not_member_analytics(self):
        self.assertTrue(self.evaluate(COLLABORATOR_ID, TeamOperation.READ_TEAM_ANALYTICS).allowed)
        self.assertEqual(
            self.evaluate(COLLABORATOR_ID, TeamOperation.READ_MEMBER_ANALYTICS).reason,
            DenialReason.INSUFFICIENT_ROLE,
        )

    def test_personal_task_visible_to_creator_only(self):
        task = make_task(createdBy=OWNER_ID)

        self.assertTrue(AuthorizationService.evaluate_personal_task(OWNER_ID, task).allowed)
        self.assertEqual(
            AuthorizationService.evaluate_personal_task(ADMIN_ID, task).reason,
            DenialReason.NOT_FOUND,
        )


class AuthorizationRequireTests(TestCase):
    def setUp(self):
        self.team = make_team()

    def test_allowed_returns_none(self):
        self.assertIsNone(AuthorizationService.require(OWNER_ID, self.team, TeamOperation.UPDATE_TEAM))

    def test_missing_team_raises_team_not_found(self):
        with self.assertRaises(TeamNotFoundException):
            AuthorizationService.require(OWNER_ID, None, TeamOperation.READ_TEAM, team_id="abc")

    def test_unknown_target_raises_member_not_found(self):
        with self.assertRaises(MemberNotFoundException):
            AuthorizationService.require(OWNER_ID, self.team, TeamOperation.REMOVE_MEMBER, target_id=OUTSIDER_ID)

    def test_non_member_raises_membership_required(self):
        with self.assertRaises(TeamMembershipRequiredError) as ctx:
            AuthorizationService.require(OUTSIDER_ID, self.team, TeamOperation.READ_TEAM)

        self.assertEqual(ctx.exception.reason, DenialReason.NOT_MEMBER)

    def test_owner_leaving_raises_last_owner(self):
        with self.assertRaises(LastOwnerError):
            AuthorizationService.require(OWNER_ID, self.team, TeamOperation.LEAVE_TEAM)

    def test_self_target_raises(self):
        with self.assertRaises(SelfTargetError):
            AuthorizationService.require(ADMIN_ID, self.team, TeamOperation.REMOVE_MEMBER, target_id=ADMIN_ID)

    def test_insufficient_role_raises(self):
        with self.assertRaises(InsufficientRoleError):
            AuthorizationService.require(COLLABORATOR_ID, self.team, TeamOperation.INVITE_MEMBER)

    def test_personal_task_of_someone_else_raises_task_not_found(self):
        with self.assertRaises(TaskNotFoundException):
            AuthorizationService.require_personal_task(ADMIN_ID, make_task(createdBy=OWNER_ID))
