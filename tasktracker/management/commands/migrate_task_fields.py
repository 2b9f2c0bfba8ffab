from django.core.management.base import BaseCommand

from tasktracker.constants.task import TaskStatus, TaskVisibility
from tasktracker.repositories.task_repository import TaskRepository

COMPLETED = TaskStatus.COMPLETED.value

# Each step is (description, filter, update). Updates may be aggregation pipelines.
FIXUPS = [
    (
        "team stored as a placeholder string",
        {"team": {"$in": ["null", ""]}},
        {"$set": {"team": None}},
    ),
    (
        "completed without completedAt",
        {"status": COMPLETED, "completedAt": None},
        [{"$set": {"completedAt": {"$ifNull": ["$updatedAt", "$createdAt"]}}}],
    ),
    (
        "completedAt on an unfinished task",
        {"status": {"$ne": COMPLETED}, "completedAt": {"$ne": None}},
        {"$set": {"completedAt": None}},
    ),
    (
        "missing visibility on a personal task",
        {"visibility": {"$exists": False}, "team": None},
        {"$set": {"visibility": TaskVisibility.PERSONAL.value}},
    ),
    (
        "missing visibility on an assigned team task",
        {"visibility": {"$exists": False}, "team": {"$ne": None}, "assignedTo": {"$ne": None}},
        {"$set": {"visibility": TaskVisibility.ASSIGNED.value}},
    ),
    (
        "missing visibility on an unassigned team task",
        {"visibility": {"$exists": False}, "team": {"$ne": None}},
        {"$set": {"visibility": TaskVisibility.TEAM.value}},
    ),
    (
        "missing assignmentHistory",
        {"assignmentHistory": {"$exists": False}},
        {"$set": {"assignmentHistory": []}},
    ),
    (
        "missing assignmentDate",
        {"assignmentDate": {"$exists": False}},
        {"$set": {"assignmentDate": None}},
    ),
    (
        "missing version",
        {"version": {"$exists": False}},
        {"$set": {"version": 1}},
    ),
]


class Command(BaseCommand):
    help = "Normalise legacy task documents: team placeholders, completedAt, visibility and version."

    def handle(self, *args, **options):
        collection = TaskRepository.get_collection()
        total = 0
        for description, query, update in FIXUPS:
            result = collection.update_many(query, update)
            total += result.modified_count
            self.stdout.write(f"{description}: {result.modified_count} task(s)")
        self.stdout.write(self.style.SUCCESS(f"Task migration complete. Updated {total} document(s)."))
