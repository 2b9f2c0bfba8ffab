from typing import Dict, Iterable

from tasktracker.models.user import UserModel
from tasktracker.repositories.user_repository import UserRepository


class UserService:
    @classmethod
    def get_users_by_ids(cls, user_ids: Iterable[str | None]) -> Dict[str, UserModel]:
        """Hydrate user references in one query, keyed by their string id."""
        ids = [user_id for user_id in user_ids if user_id]
        return {str(user.id): user for user in UserRepository.get_by_ids(ids)}
