import logging
from typing import Dict, List, Tuple

from pymongo import ASCENDING, IndexModel

from tasktracker.models.task import TaskModel
from tasktracker.models.team import TeamModel
from tasktracker.models.user import UserModel
from tasktracker_project.db.config import DatabaseManager

logger = logging.getLogger(__name__)

INDEXES: Dict[str, List[IndexModel]] = {
    UserModel.collection_name: [
        IndexModel([("email", ASCENDING)], unique=True, name="email_unique"),
    ],
    TeamModel.collection_name: [
        IndexModel([("members.userId", ASCENDING)], name="members_user"),
        IndexModel([("createdBy", ASCENDING)], name="created_by"),
        IndexModel([("invitations.id", ASCENDING)], name="invitation_id"),
        IndexModel([("invitations.inviteeEmail", ASCENDING)], name="invitation_email"),
    ],
    TaskModel.collection_name: [
        IndexModel(
            [("team", ASCENDING), ("assignedTo", ASCENDING), ("status", ASCENDING)],
            name="team_assignee_status",
        ),
        IndexModel([("team", ASCENDING), ("visibility", ASCENDING)], name="team_visibility"),
        IndexModel([("createdBy", ASCENDING)], name="created_by"),
    ],
}


def ensure_indexes() -> List[Tuple[str, str]]:
    """
    Create the query indexes used by the repositories.
    ``create_indexes`` is a no-op for indexes that already exist with the same keys and options.

    Returns:
        List of (collection, index name) pairs that were ensured.
    """
    db_manager = DatabaseManager()
    ensured = []
    for collection_name, indexes in INDEXES.items():
        names = db_manager.get_collection(collection_name).create_indexes(indexes)
        ensured.extend((collection_name, name) for name in names)
        logger.info(f"Ensured {len(names)} indexes on {collection_name}")
    return ensured
