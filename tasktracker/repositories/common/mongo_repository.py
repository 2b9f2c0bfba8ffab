from abc import ABC

from pymongo.collection import Collection

from tasktracker_project.db.config import DatabaseManager


class MongoRepository(ABC):
    collection_name: str = None

    @classmethod
    def get_collection(cls) -> Collection:
        if not cls.collection_name:
            raise ValueError(f"{cls.__name__} does not declare a collection_name")
        return DatabaseManager().get_collection(cls.collection_name)
