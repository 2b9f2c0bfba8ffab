import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel
from pymongo import ReturnDocument

from tasktracker.constants.team import InvitationStatus
from tasktracker.exceptions.common_exceptions import ConcurrencyConflictException
from tasktracker.models.team import TeamModel
from tasktracker.repositories.common.mongo_repository import MongoRepository


def to_document_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="python", by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [to_document_value(item) for item in value]
    return value


class TeamRepository(MongoRepository):
    collection_name = TeamModel.collection_name

    @classmethod
    def create(cls, team: TeamModel) -> TeamModel:
        """
        Creates a new team in the repository.
        """
        teams_collection = cls.get_collection()
        now = datetime.now(timezone.utc)
        team.createdAt = now
        team.updatedAt = now
        team.version = 1

        team_dict = team.model_dump(mode="python", by_alias=True, exclude_none=True)
        insert_result = teams_collection.insert_one(team_dict)
        team.id = insert_result.inserted_id
        return team

    @classmethod
    def get_by_id(cls, team_id: str) -> Optional[TeamModel]:
        """
        Get an active team by its ID. Inactive teams and malformed ids read as missing.
        """
        if not ObjectId.is_valid(team_id):
            return None
        team_data = cls.get_collection().find_one({"_id": ObjectId(team_id), "isActive": True})
        return TeamModel(**team_data) if team_data else None

    @classmethod
    def get_by_invitation_id(cls, invitation_id: str) -> Optional[TeamModel]:
        if not ObjectId.is_valid(invitation_id):
            return None
        team_data = cls.get_collection().find_one({"invitations.id": ObjectId(invitation_id), "isActive": True})
        return TeamModel(**team_data) if team_data else None

    @classmethod
    def list_for_member(cls, user_id: str) -> List[TeamModel]:
        cursor = cls.get_collection().find({"members.userId": user_id, "isActive": True}).sort("createdAt", 1)
        return [TeamModel(**team_data) for team_data in cursor]

    @classmethod
    def exists_with_name_for_member(cls, user_id: str, name: str, exclude_team_id: str | None = None) -> bool:
        query: Dict[str, Any] = {
            "members.userId": user_id,
            "isActive": True,
            "name": {"$regex": f"^{re.escape(name)}$", "$options": "i"},
        }
        if exclude_team_id and ObjectId.is_valid(exclude_team_id):
            query["_id"] = {"$ne": ObjectId(exclude_team_id)}
        return cls.get_collection().count_documents(query, limit=1) > 0

    @classmethod
    def list_with_pending_invitations_for(cls, user_id: str, email: str | None) -> List[TeamModel]:
        addressees: List[Dict[str, Any]] = [{"inviteeUserId": user_id}]
        if email:
            addressees.append({"inviteeEmail": email.lower()})
        cursor = cls.get_collection().find(
            {
                "isActive": True,
                "invitations": {"$elemMatch": {"status": InvitationStatus.PENDING.value, "$or": addressees}},
            }
        )
        return [TeamModel(**team_data) for team_data in cursor]

    @classmethod
    def compare_and_set(cls, team: TeamModel, changes: Dict[str, Any]) -> TeamModel:
        """
        Apply ``changes`` only if the stored team still carries ``team.version``.

        The version is bumped in the same write. Raises ConcurrencyConflictException
        when another writer got there first (or the team was deactivated meanwhile).
        """
        update_fields = {field: to_document_value(value) for field, value in changes.items()}
        update_fields["updatedAt"] = datetime.now(timezone.utc)

        updated_doc = cls.get_collection().find_one_and_update(
            {"_id": team.id, "isActive": True, "version": team.version},
            {"$set": update_fields, "$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER,
        )
        if updated_doc is None:
            raise ConcurrencyConflictException("Team", str(team.id))
        return TeamModel(**updated_doc)
