from datetime import datetime
from typing import Any, Dict, List

from tasktracker.constants.task import TaskStatus
from tasktracker.models.task import TaskModel
from tasktracker.repositories.common.mongo_repository import MongoRepository
from tasktracker.repositories.task_repository import NOT_ARCHIVED, TaskRepository


class TaskAnalyticsRepository(MongoRepository):
    """
    Read-only aggregation queries over the tasks collection.

    Every method takes a ``scope`` filter (team tasks, a member's tasks, a user's
    personal tasks) and never loads individual task documents. Archived tasks are
    always excluded.
    """

    collection_name = TaskModel.collection_name

    @classmethod
    def _match(cls, scope: Dict[str, Any], *extra: Dict[str, Any]) -> Dict[str, Any]:
        return {"$and": [scope, NOT_ARCHIVED, *extra]}

    @classmethod
    def _grouped_counts(cls, scope: Dict[str, Any], field: str) -> Dict[str, int]:
        pipeline = [
            {"$match": cls._match(scope)},
            {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
        ]
        return {row["_id"]: row["count"] for row in cls.get_collection().aggregate(pipeline)}

    @classmethod
    def status_counts(cls, scope: Dict[str, Any]) -> Dict[str, int]:
        return cls._grouped_counts(scope, "status")

    @classmethod
    def priority_counts(cls, scope: Dict[str, Any]) -> Dict[str, int]:
        return cls._grouped_counts(scope, "priority")

    @classmethod
    def overdue_count(cls, scope: Dict[str, Any], now: datetime) -> int:
        return cls.get_collection().count_documents(cls._match(scope, TaskRepository.overdue_filter(now)))

    @classmethod
    def average_completion_millis(cls, scope: Dict[str, Any]) -> float | None:
        pipeline = [
            {
                "$match": cls._match(
                    scope,
                    {"status": TaskStatus.COMPLETED.value, "completedAt": {"$ne": None}, "createdAt": {"$ne": None}},
                )
            },
            {"$group": {"_id": None, "avgMillis": {"$avg": {"$subtract": ["$completedAt", "$createdAt"]}}}},
        ]
        rows = list(cls.get_collection().aggregate(pipeline))
        return rows[0]["avgMillis"] if rows else None

    @classmethod
    def completed_between(cls, scope: Dict[str, Any], after: datetime, until: datetime) -> int:
        """Completed tasks with ``after < completedAt <= until``."""
        return cls.get_collection().count_documents(
            cls._match(
                scope,
                {"status": TaskStatus.COMPLETED.value, "completedAt": {"$gt": after, "$lte": until}},
            )
        )

    @classmethod
    def completions_by_day(cls, scope: Dict[str, Any], since: datetime) -> Dict[str, int]:
        """Completed-task counts keyed by UTC calendar day (``YYYY-MM-DD``) from ``since`` on."""
        pipeline = [
            {
                "$match": cls._match(
                    scope,
                    {"status": TaskStatus.COMPLETED.value, "completedAt": {"$gte": since}},
                )
            },
            {
                "$group": {
                    "_id": {"$dateToString": {"format": "%Y-%m-%d", "date": "$completedAt", "timezone": "UTC"}},
                    "count": {"$sum": 1},
                }
            },
        ]
        return {row["_id"]: row["count"] for row in cls.get_collection().aggregate(pipeline)}

    @classmethod
    def totals_by_assignee(cls, scope: Dict[str, Any]) -> List[Dict[str, Any]]:
        """``[{"userId", "total", "completed"}]``; unassigned tasks are grouped under ``userId=None``."""
        pipeline = [
            {"$match": cls._match(scope)},
            {
                "$group": {
                    "_id": {"$ifNull": ["$assignedTo", None]},
                    "total": {"$sum": 1},
                    "completed": {
                        "$sum": {"$cond": [{"$eq": ["$status", TaskStatus.COMPLETED.value]}, 1, 0]},
                    },
                }
            },
        ]
        return [
            {"userId": row["_id"], "total": row["total"], "completed": row["completed"]}
            for row in cls.get_collection().aggregate(pipeline)
        ]

    @classmethod
    def overdue_by_assignee(cls, scope: Dict[str, Any], now: datetime) -> List[Dict[str, Any]]:
        pipeline = [
            {"$match": cls._match(scope, TaskRepository.overdue_filter(now))},
            {"$group": {"_id": {"$ifNull": ["$assignedTo", None]}, "count": {"$sum": 1}}},
        ]
        return [{"userId": row["_id"], "count": row["count"]} for row in cls.get_collection().aggregate(pipeline)]
