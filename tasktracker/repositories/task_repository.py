import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from tasktracker.constants.permissions import MANAGER_ROLES, TeamRole
from tasktracker.constants.task import (
    PRIORITY_RANK,
    SORT_FIELD_CREATED_AT,
    SORT_FIELD_PRIORITY,
    SORT_ORDER_DESC,
    TaskStatus,
    TaskVisibility,
)
from tasktracker.exceptions.common_exceptions import ConcurrencyConflictException
from tasktracker.models.task import AssignmentHistoryEntryModel, TaskModel
from tasktracker.repositories.common.mongo_repository import MongoRepository
from tasktracker.repositories.team_repository import to_document_value

logger = logging.getLogger(__name__)

NOT_ARCHIVED = {"isArchived": {"$ne": True}}


class TaskRepository(MongoRepository):
    collection_name = TaskModel.collection_name

    @classmethod
    def create(cls, task: TaskModel) -> TaskModel:
        tasks_collection = cls.get_collection()
        task.version = 1
        task_dict = task.model_dump(mode="python", by_alias=True, exclude_none=True)
        insert_result = tasks_collection.insert_one(task_dict)
        task.id = insert_result.inserted_id
        return task

    @classmethod
    def get_by_id(cls, task_id: str) -> Optional[TaskModel]:
        if not ObjectId.is_valid(task_id):
            return None
        task_data = cls.get_collection().find_one({"_id": ObjectId(task_id)})
        return TaskModel(**task_data) if task_data else None

    @classmethod
    def delete_by_id(cls, task_id: str) -> bool:
        if not ObjectId.is_valid(task_id):
            return False
        result = cls.get_collection().delete_one({"_id": ObjectId(task_id)})
        return result.deleted_count == 1

    @classmethod
    def compare_and_set(
        cls,
        task: TaskModel,
        changes: Dict[str, Any],
        history_entry: AssignmentHistoryEntryModel | None = None,
    ) -> TaskModel:
        """
        Apply ``changes`` only if the stored task still carries ``task.version``.

        A history entry, when given, is appended in the same write so the tail of
        ``assignmentHistory`` always matches ``assignedTo``.
        """
        update_fields = {field: to_document_value(value) for field, value in changes.items()}
        update_fields["updatedAt"] = datetime.now(timezone.utc)

        update: Dict[str, Any] = {"$set": update_fields, "$inc": {"version": 1}}
        if history_entry is not None:
            update["$push"] = {"assignmentHistory": to_document_value(history_entry)}

        updated_doc = cls.get_collection().find_one_and_update(
            {"_id": task.id, "version": task.version},
            update,
            return_document=ReturnDocument.AFTER,
        )
        if updated_doc is None:
            raise ConcurrencyConflictException("Task", str(task.id))
        return TaskModel(**updated_doc)

    @classmethod
    def unassign_member(cls, team_id: str, user_id: str, unassigned_by: str, reason: str, now: datetime) -> int:
        """
        Release every task of ``team_id`` assigned to ``user_id`` back to the team.
        Runs as one update_many; returns the number of tasks touched.
        """
        entry = AssignmentHistoryEntryModel(assignedTo=None, assignedBy=unassigned_by, at=now, reason=reason)
        result = cls.get_collection().update_many(
            {"team": team_id, "assignedTo": user_id},
            {
                "$set": {
                    "assignedTo": None,
                    "visibility": TaskVisibility.TEAM.value,
                    "assignmentDate": now,
                    "updatedAt": now,
                },
                "$push": {"assignmentHistory": entry.model_dump(mode="python", exclude_none=False)},
                "$inc": {"version": 1},
            },
        )
        logger.info(f"Unassigned {result.modified_count} task(s) of team {team_id} from user {user_id} ({reason})")
        return result.modified_count

    @classmethod
    def build_team_read_filter(cls, team_id: str, user_id: str, role: str) -> Dict[str, Any]:
        if TeamRole(role) in MANAGER_ROLES:
            return {"team": team_id}
        return {
            "team": team_id,
            "$or": [{"visibility": TaskVisibility.TEAM.value}, {"assignedTo": user_id}],
        }

    @classmethod
    def build_readable_filter(cls, user_id: str, memberships: Dict[str, str]) -> Dict[str, Any]:
        """
        Everything ``user_id`` may read: their personal tasks plus the readable
        tasks of each active team they belong to (``memberships`` maps team id to role).
        """
        clauses: List[Dict[str, Any]] = [{"team": None, "createdBy": user_id}]
        for team_id, role in memberships.items():
            clauses.append(cls.build_team_read_filter(team_id, user_id, role))
        return {"$or": clauses}

    @classmethod
    def build_query(cls, scope_filter: Dict[str, Any], filters: Dict[str, Any], now: datetime) -> Dict[str, Any]:
        conditions: List[Dict[str, Any]] = [scope_filter]

        if not filters.get("includeArchived"):
            conditions.append(NOT_ARCHIVED)
        for field in ("status", "priority", "visibility"):
            if filters.get(field):
                conditions.append({field: filters[field]})
        if "assignedTo" in filters:
            conditions.append({"assignedTo": filters["assignedTo"]})
        if filters.get("tag"):
            conditions.append({"tags": filters["tag"]})

        due_window: Dict[str, Any] = {}
        if filters.get("dueAfter"):
            due_window["$gte"] = filters["dueAfter"]
        if filters.get("dueBefore"):
            due_window["$lte"] = filters["dueBefore"]
        if due_window:
            conditions.append({"dueDate": due_window})

        overdue = filters.get("overdue")
        if overdue is True:
            conditions.append(cls.overdue_filter(now))
        elif overdue is False:
            conditions.append(
                {
                    "$or": [
                        {"status": TaskStatus.COMPLETED.value},
                        {"dueDate": None},
                        {"dueDate": {"$gte": now}},
                    ]
                }
            )

        if filters.get("search"):
            pattern = {"$regex": re.escape(filters["search"]), "$options": "i"}
            conditions.append({"$or": [{"title": pattern}, {"description": pattern}]})

        return conditions[0] if len(conditions) == 1 else {"$and": conditions}

    @classmethod
    def overdue_filter(cls, now: datetime) -> Dict[str, Any]:
        return {"status": {"$ne": TaskStatus.COMPLETED.value}, "dueDate": {"$ne": None, "$lt": now}}

    @classmethod
    def list(
        cls,
        query: Dict[str, Any],
        page: int,
        limit: int,
        sort_by: str = SORT_FIELD_CREATED_AT,
        order: str = SORT_ORDER_DESC,
    ) -> List[TaskModel]:
        tasks_collection = cls.get_collection()
        direction = -1 if order == SORT_ORDER_DESC else 1
        skip = (page - 1) * limit

        if sort_by == SORT_FIELD_PRIORITY:
            # Priority labels do not sort lexically, so rank them before sorting.
            branches = [
                {"case": {"$eq": ["$priority", label]}, "then": rank} for label, rank in PRIORITY_RANK.items()
            ]
            pipeline = [
                {"$match": query},
                {"$addFields": {"_priorityRank": {"$switch": {"branches": branches, "default": 0}}}},
                {"$sort": {"_priorityRank": direction, "_id": direction}},
                {"$skip": skip},
                {"$limit": limit},
                {"$project": {"_priorityRank": 0}},
            ]
            return [TaskModel(**task) for task in tasks_collection.aggregate(pipeline)]

        cursor = tasks_collection.find(query).sort([(sort_by, direction), ("_id", direction)]).skip(skip).limit(limit)
        return [TaskModel(**task) for task in cursor]

    @classmethod
    def count(cls, query: Dict[str, Any]) -> int:
        return cls.get_collection().count_documents(query)
