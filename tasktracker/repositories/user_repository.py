from typing import List, Optional

from bson import ObjectId

from tasktracker.models.user import UserModel
from tasktracker.repositories.common.mongo_repository import MongoRepository


class UserRepository(MongoRepository):
    collection_name = UserModel.collection_name

    @classmethod
    def get_by_id(cls, user_id: str) -> Optional[UserModel]:
        if not ObjectId.is_valid(user_id):
            return None
        doc = cls.get_collection().find_one({"_id": ObjectId(user_id)})
        return UserModel(**doc) if doc else None

    @classmethod
    def get_by_ids(cls, user_ids: List[str]) -> List[UserModel]:
        """
        Get multiple users by their IDs in a single database query.
        Returns only the users that exist; unknown or malformed ids are skipped.
        """
        object_ids = [ObjectId(user_id) for user_id in set(user_ids) if user_id and ObjectId.is_valid(user_id)]
        if not object_ids:
            return []
        cursor = cls.get_collection().find({"_id": {"$in": object_ids}})
        return [UserModel(**doc) for doc in cursor]

    @classmethod
    def get_by_email(cls, email: str) -> Optional[UserModel]:
        doc = cls.get_collection().find_one({"email": email.strip().lower(), "isDeleted": {"$ne": True}})
        return UserModel(**doc) if doc else None
