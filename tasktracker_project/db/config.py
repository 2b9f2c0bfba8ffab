import logging
from threading import Lock

from django.conf import settings
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Process-wide holder of the MongoDB client.

    Every instantiation returns the same object so repositories can call
    ``DatabaseManager().get_collection(...)`` freely. Tests point the manager at
    a different server by overriding settings and calling ``reset()``.
    """

    __instance = None
    __lock = Lock()

    def __new__(cls):
        if cls.__instance is None:
            with cls.__lock:
                if cls.__instance is None:
                    instance = super().__new__(cls)
                    instance._database_client = None
                    instance._db = None
                    cls.__instance = instance
        return cls.__instance

    @classmethod
    def reset(cls):
        if cls.__instance is not None and cls.__instance._database_client is not None:
            cls.__instance._database_client.close()
        cls.__instance = None

    def _get_database_client(self) -> MongoClient:
        if self._database_client is None:
            self._database_client = MongoClient(settings.MONGODB_URI, tz_aware=True)
        return self._database_client

    def get_database(self) -> Database:
        if self._db is None:
            self._db = self._get_database_client()[settings.DB_NAME]
        return self._db

    def get_collection(self, collection_name: str) -> Collection:
        return self.get_database()[collection_name]

    def check_database_health(self) -> bool:
        try:
            self._get_database_client().admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False
