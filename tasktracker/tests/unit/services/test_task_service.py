from datetime import timedelta
from unittest import TestCase
from unittest.mock import patch

from bson import ObjectId

from tasktracker.exceptions.common_exceptions import InvalidInputException
from tasktracker.exceptions.permission_exceptions import InsufficientRoleError, TeamMembershipRequiredError
from tasktracker.exceptions.task_exceptions import TaskNotFoundException
from tasktracker.models.task import AssignmentHistoryEntryModel
from tasktracker.services.task_service import TaskService
from tasktracker.tests.fixtures.task import make_task
from tasktracker.tests.fixtures.team import (
    ADMIN_ID,
    COLLABORATOR_ID,
    FIXED_NOW,
    OUTSIDER_ID,
    OWNER_ID,
    make_team,
)

SERVICE = "tasktracker.services.task_service"


def apply_task_changes(task, changes, history_entry=None):
    """Stand-in for TaskRepository.compare_and_set."""
    history = list(task.assignmentHistory) + ([history_entry] if history_entry else [])
    return task.model_copy(update={**changes, "assignmentHistory": history, "version": task.version + 1})


def assign_id(task):
    task.id = ObjectId()
    return task


class CreateTaskTests(TestCase):
    def setUp(self):
        self.team = make_team()
        self.team_id = str(self.team.id)
        patcher = patch(f"{SERVICE}.TaskRepository.create", side_effect=assign_id)
        self.mock_create = patcher.start()
        self.addCleanup(patcher.stop)

    def test_personal_task_defaults(self):
        task = TaskService.create_task(OWNER_ID, {"title": "  Buy milk "}, now=FIXED_NOW)

        self.assertEqual(task.title, "Buy milk")
        self.assertEqual(task.status, "todo")
        self.assertEqual(task.priority, "medium")
        self.assertEqual(task.visibility, "personal")
        self.assertIsNone(task.team)
        self.assertIsNone(task.completedAt)

    def test_completed_on_create_sets_completed_at(self):
        task = TaskService.create_task(OWNER_ID, {"title": "Done", "status": "completed"}, now=FIXED_NOW)

        self.assertEqual(task.completedAt, FIXED_NOW)

    def test_validation_errors_are_collected(self):
        payload = {
            "title": " ",
            "description": "d" * 1001,
            "tags": ["x" * 21],
            "dueDate": FIXED_NOW - timedelta(days=2),
        }

        with self.assertRaises(InvalidInputException) as ctx:
            TaskService.create_task(OWNER_ID, payload, now=FIXED_NOW)

        self.assertEqual(set(ctx.exception.field_errors), {"title", "description", "tags", "dueDate"})
        self.mock_create.assert_not_called()

    def test_due_date_earlier_today_is_allowed(self):
        task = TaskService.create_task(
            OWNER_ID, {"title": "Today", "dueDate": FIXED_NOW - timedelta(hours=1)}, now=FIXED_NOW
        )

        self.assertTrue(task.isOverdue)

    def test_tags_are_trimmed_and_deduplicated(self):
        task = TaskService.create_task(OWNER_ID, {"title": "T", "tags": [" a ", "a", "", "b"]}, now=FIXED_NOW)

        self.assertEqual(task.tags, ["a", "b"])

    def test_personal_task_cannot_be_assigned(self):
        with self.assertRaises(InvalidInputException) as ctx:
            TaskService.create_task(OWNER_ID, {"title": "T", "assignedTo": ADMIN_ID}, now=FIXED_NOW)

        self.assertIn("assignedTo", ctx.exception.field_errors)

    @patch(f"{SERVICE}.TeamRepository.get_by_id")
    def test_team_task_assigned_to_member(self, mock_get_team):
        mock_get_team.return_value = self.team
        payload = {
            "title": "Ship it",
            "team": self.team_id,
            "assignedTo": COLLABORATOR_ID,
            "dueDate": FIXED_NOW + timedelta(days=1),
        }

        task = TaskService.create_task(ADMIN_ID, payload, now=FIXED_NOW)

        self.assertEqual(task.team, self.team_id)
        self.assertEqual(task.visibility, "assigned")
        self.assertEqual(task.assignedTo, COLLABORATOR_ID)
        self.assertEqual(task.assignmentDate, FIXED_NOW)
        self.assertEqual(task.assignmentHistory[-1].assignedTo, COLLABORATOR_ID)
        self.assertEqual(task.assignmentHistory[-1].reason, "assigned")
        self.assertTrue(task.isDueSoon)

    @patch(f"{SERVICE}.TeamRepository.get_by_id")
    def test_unassigned_team_task_is_team_visible(self, mock_get_team):
        mock_get_team.return_value = self.team

        task = TaskService.create_task(
            OWNER_ID, {"title": "Triage", "team": self.team_id, "dueDate": FIXED_NOW}, now=FIXED_NOW
        )

        self.assertEqual(task.visibility, "team")
        self.assertIsNone(task.assignedTo)
        self.assertEqual(task.assignmentHistory, [])

    @patch(f"{SERVICE}.TeamRepository.get_by_id")
    def test_team_task_requires_due_date(self, mock_get_team):
        mock_get_team.return_value = self.team

        with self.assertRaises(InvalidInputException) as ctx:
            TaskService.create_task(OWNER_ID, {"title": "T", "team": self.team_id}, now=FIXED_NOW)

        self.assertIn("dueDate", ctx.exception.field_errors)

    @patch(f"{SERVICE}.TeamRepository.get_by_id")
    def test_team_task_assignee_must_be_member(self, mock_get_team):
        mock_get_team.return_value = self.team
        payload = {"title": "T", "team": self.team_id, "assignedTo": OUTSIDER_ID, "dueDate": FIXED_NOW}

        with self.assertRaises(InvalidInputException) as ctx:
            TaskService.create_task(OWNER_ID, payload, now=FIXED_NOW)

        self.assertIn("assignedTo", ctx.exception.field_errors)

    @patch(f"{SERVICE}.TeamRepository.get_by_id")
    def test_collaborator_cannot_create_team_task(self, mock_get_team):
        mock_get_team.return_value = self.team

        with self.assertRaises(InsufficientRoleError):
            TaskService.create_task(
                COLLABORATOR_ID, {"title": "T", "team": self.team_id, "dueDate": FIXED_NOW}, now=FIXED_NOW
            )

    @patch(f"{SERVICE}.TeamRepository.get_by_id")
    def test_outsider_cannot_create_team_task(self, mock_get_team):
        mock_get_team.return_value = self.team

        with self.assertRaises(TeamMembershipRequiredError):
            TaskService.create_task(
                OUTSIDER_ID, {"title": "T", "team": self.team_id, "dueDate": FIXED_NOW}, now=FIXED_NOW
            )


class UpdateTaskTests(TestCase):
    def setUp(self):
        self.team = make_team()
        self.team_id = str(self.team.id)
        self.task = make_task(
            team=self.team_id,
            createdBy=ADMIN_ID,
            assignedTo=COLLABORATOR_ID,
            visibility="assigned",
            assignmentHistory=[
                AssignmentHistoryEntryModel(
                    assignedTo=COLLABORATOR_ID, assignedBy=ADMIN_ID, at=FIXED_NOW, reason="assigned"
                )
            ],
        )
        self.task_id = str(self.task.id)

        for target, kwargs in (
            (f"{SERVICE}.TaskRepository.get_by_id", {"return_value": self.task}),
            (f"{SERVICE}.TeamRepository.get_by_id", {"return_value": self.team}),
            (f"{SERVICE}.TaskRepository.compare_and_set", {"side_effect": apply_task_changes}),
        ):
            patcher = patch(target, **kwargs)
            mock = patcher.start()
            self.addCleanup(patcher.stop)
            if target.endswith("compare_and_set"):
                self.mock_cas = mock

    def test_completing_sets_completed_at_and_reopening_clears_it(self):
        completed = TaskService.update_task(ADMIN_ID, self.task_id, {"status": "completed"}, now=FIXED_NOW)
        self.assertEqual(completed.completedAt, FIXED_NOW)

        self.task.status = "completed"
        self.task.completedAt = FIXED_NOW
        reopened = TaskService.update_task(ADMIN_ID, self.task_id, {"status": "in-progress"}, now=FIXED_NOW)
        self.assertIsNone(reopened.completedAt)

    def test_reassignment_appends_history(self):
        task = TaskService.update_task(OWNER_ID, self.task_id, {"assignedTo": ADMIN_ID}, now=FIXED_NOW)

        self.assertEqual(task.assignedTo, ADMIN_ID)
        self.assertEqual(task.assignmentHistory[-1].assignedTo, ADMIN_ID)
        self.assertEqual(task.assignmentHistory[-1].reason, "reassigned")
        self.assertEqual(len(task.assignmentHistory), 2)

    def test_unassignment_makes_task_team_visible(self):
        task = TaskService.update_task(OWNER_ID, self.task_id, {"assignedTo": None}, now=FIXED_NOW)

        self.assertIsNone(task.assignedTo)
        self.assertEqual(task.visibility, "team")
        self.assertIsNone(task.assignmentHistory[-1].assignedTo)
        self.assertEqual(task.assignmentHistory[-1].reason, "unassigned")

    def test_same_assignee_does_not_touch_history(self):
        TaskService.update_task(OWNER_ID, self.task_id, {"assignedTo": COLLABORATOR_ID}, now=FIXED_NOW)

        self.mock_cas.assert_not_called()

    def test_reassign_to_non_member_is_invalid(self):
        with self.assertRaises(InvalidInputException):
            TaskService.update_task(OWNER_ID, self.task_id, {"assignedTo": OUTSIDER_ID}, now=FIXED_NOW)

    def test_collaborator_cannot_modify_someone_elses_task(self):
        with self.assertRaises(InsufficientRoleError):
            TaskService.update_task(COLLABORATOR_ID, self.task_id, {"title": "Mine now"}, now=FIXED_NOW)

    def test_collaborator_can_modify_own_task(self):
        self.task.createdBy = COLLABORATOR_ID

        task = TaskService.update_task(COLLABORATOR_ID, self.task_id, {"priority": "high"}, now=FIXED_NOW)

        self.assertEqual(task.priority, "high")

    def test_clearing_team_task_due_date_is_invalid(self):
        with self.assertRaises(InvalidInputException):
            TaskService.update_task(OWNER_ID, self.task_id, {"dueDate": None}, now=FIXED_NOW)

    def test_unknown_fields_only_is_empty_update(self):
        with self.assertRaises(InvalidInputException):
            TaskService.update_task(OWNER_ID, self.task_id, {"createdBy": OUTSIDER_ID}, now=FIXED_NOW)

    def test_task_of_deactivated_team_is_not_found(self):
        with patch(f"{SERVICE}.TeamRepository.get_by_id", return_value=None):
            with self.assertRaises(TaskNotFoundException):
                TaskService.get_task(OWNER_ID, self.task_id, now=FIXED_NOW)

    def test_collaborator_reads_own_assigned_task(self):
        task = TaskService.get_task(COLLABORATOR_ID, self.task_id, now=FIXED_NOW)

        self.assertEqual(task.id, self.task_id)

    def test_archive_toggles(self):
        archived = TaskService.archive_task(OWNER_ID, self.task_id, now=FIXED_NOW)
        self.assertTrue(archived.isArchived)
        self.assertEqual(archived.archivedAt, FIXED_NOW)

        self.task.isArchived = True
        restored = TaskService.archive_task(OWNER_ID, self.task_id, now=FIXED_NOW)
        self.assertFalse(restored.isArchived)
        self.assertIsNone(restored.archivedAt)

    @patch(f"{SERVICE}.TaskRepository.delete_by_id", return_value=True)
    def test_delete_requires_modify_permission(self, mock_delete):
        with self.assertRaises(InsufficientRoleError):
            TaskService.delete_task(COLLABORATOR_ID, self.task_id)
        mock_delete.assert_not_called()

        TaskService.delete_task(OWNER_ID, self.task_id)
        mock_delete.assert_called_once_with(self.task_id)

    @patch(f"{SERVICE}.UserService.get_users_by_ids", return_value={})
    def test_assignment_history_is_oldest_first(self, _):
        history = TaskService.get_assignment_history(ADMIN_ID, self.task_id)

        self.assertEqual([entry.assignedTo for entry in history], [COLLABORATOR_ID])


class PersonalTaskAccessTests(TestCase):
    @patch(f"{SERVICE}.TaskRepository.get_by_id")
    def test_someone_elses_personal_task_is_not_found(self, mock_get_task):
        task = make_task(createdBy=OWNER_ID)
        mock_get_task.return_value = task

        with self.assertRaises(TaskNotFoundException):
            TaskService.get_task(ADMIN_ID, str(task.id), now=FIXED_NOW)

    @patch(f"{SERVICE}.TaskRepository.get_by_id", return_value=None)
    def test_missing_task_is_not_found(self, _):
        with self.assertRaises(TaskNotFoundException):
            TaskService.get_task(OWNER_ID, str(ObjectId()), now=FIXED_NOW)


class ListTasksTests(TestCase):
    @patch(f"{SERVICE}.TaskRepository.count", return_value=45)
    @patch(f"{SERVICE}.TaskRepository.list")
    @patch(f"{SERVICE}.TeamService.get_memberships")
    def test_pagination_metadata(self, mock_memberships, mock_list, _):
        mock_memberships.return_value = {"t1": "collaborator"}
        mock_list.return_value = [make_task()]

        response = TaskService.get_tasks(OWNER_ID, {}, page=2, limit=20, now=FIXED_NOW)

        self.assertEqual(response.pagination.totalPages, 3)
        self.assertTrue(response.pagination.hasNext)
        self.assertTrue(response.pagination.hasPrev)
        query = mock_list.call_args[0][0]
        self.assertIn({"isArchived": {"$ne": True}}, query["$and"])

    @patch(f"{SERVICE}.TaskRepository.count", return_value=0)
    @patch(f"{SERVICE}.TaskRepository.list", return_value=[])
    @patch(f"{SERVICE}.TeamRepository.get_by_id")
    def test_team_filter_for_collaborator_limits_visibility(self, mock_get_team, mock_list, _):
        team = make_team()
        mock_get_team.return_value = team

        response = TaskService.get_tasks(COLLABORATOR_ID, {"team": str(team.id)}, now=FIXED_NOW)

        scope = mock_list.call_args[0][0]["$and"][0]
        self.assertEqual(scope["$or"], [{"visibility": "team"}, {"assignedTo": COLLABORATOR_ID}])
        self.assertEqual(response.pagination.totalPages, 0)
        self.assertFalse(response.pagination.hasNext)

    @patch(f"{SERVICE}.TeamRepository.get_by_id")
    def test_team_filter_for_outsider_is_forbidden(self, mock_get_team):
        mock_get_team.return_value = make_team()

        with self.assertRaises(TeamMembershipRequiredError):
            TaskService.get_tasks(OUTSIDER_ID, {"team": "abc"}, now=FIXED_NOW)

    @patch(f"{SERVICE}.TeamService.get_memberships", return_value={"t1": "admin", "t2": "owner"})
    def test_personal_scope(self, _):
        scope = TaskService.personal_scope(OWNER_ID)

        self.assertEqual(
            scope,
            {
                "$or": [
                    {"team": None, "createdBy": OWNER_ID},
                    {"team": {"$in": ["t1", "t2"]}, "assignedTo": OWNER_ID},
                ]
            },
        )

    @patch(f"{SERVICE}.TaskAnalyticsRepository.overdue_count", return_value=1)
    @patch(f"{SERVICE}.TaskAnalyticsRepository.status_counts", return_value={"todo": 2, "completed": 1})
    @patch(f"{SERVICE}.TaskRepository.list", return_value=[])
    @patch(f"{SERVICE}.TaskRepository.count", return_value=4)
    @patch(f"{SERVICE}.TeamService.get_memberships", return_value={})
    def test_task_stats(self, *_):
        stats = TaskService.get_task_stats(OWNER_ID, now=FIXED_NOW)

        self.assertEqual(stats.total, 3)
        self.assertEqual(stats.todo, 2)
        self.assertEqual(stats.inProgress, 0)
        self.assertEqual(stats.overdue, 1)
        self.assertEqual(stats.archived, 4)
