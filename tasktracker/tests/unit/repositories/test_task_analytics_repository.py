from unittest import TestCase
from unittest.mock import MagicMock, patch

from tasktracker.repositories.task_analytics_repository import TaskAnalyticsRepository
from tasktracker.repositories.task_repository import NOT_ARCHIVED
from tasktracker.tests.fixtures.team import FIXED_NOW


class TaskAnalyticsRepositoryTests(TestCase):
    def setUp(self):
        self.mock_collection = MagicMock()
        patcher = patch.object(TaskAnalyticsRepository, "get_collection", return_value=self.mock_collection)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.scope = {"team": "t1"}

    def test_status_counts_exclude_archived(self):
        self.mock_collection.aggregate.return_value = [{"_id": "todo", "count": 2}, {"_id": "completed", "count": 1}]

        counts = TaskAnalyticsRepository.status_counts(self.scope)

        self.assertEqual(counts, {"todo": 2, "completed": 1})
        match = self.mock_collection.aggregate.call_args[0][0][0]["$match"]
        self.assertEqual(match["$and"][:2], [self.scope, NOT_ARCHIVED])

    def test_average_completion_without_completed_tasks(self):
        self.mock_collection.aggregate.return_value = []

        self.assertIsNone(TaskAnalyticsRepository.average_completion_millis(self.scope))

    def test_completed_between_uses_half_open_window(self):
        self.mock_collection.count_documents.return_value = 4
        after = FIXED_NOW.replace(day=5)

        self.assertEqual(TaskAnalyticsRepository.completed_between(self.scope, after, FIXED_NOW), 4)

        query = self.mock_collection.count_documents.call_args[0][0]
        self.assertEqual(query["$and"][2]["completedAt"], {"$gt": after, "$lte": FIXED_NOW})

    def test_completions_by_day_groups_by_utc_date(self):
        self.mock_collection.aggregate.return_value = [{"_id": "2024-06-12", "count": 3}]

        result = TaskAnalyticsRepository.completions_by_day(self.scope, FIXED_NOW)

        group = self.mock_collection.aggregate.call_args[0][0][1]["$group"]
        self.assertEqual(group["_id"]["$dateToString"]["timezone"], "UTC")
        self.assertEqual(result, {"2024-06-12": 3})

    def test_totals_by_assignee_shape(self):
        self.mock_collection.aggregate.return_value = [{"_id": None, "total": 2, "completed": 1}]

        self.assertEqual(
            TaskAnalyticsRepository.totals_by_assignee(self.scope), [{"userId": None, "total": 2, "completed": 1}]
        )
