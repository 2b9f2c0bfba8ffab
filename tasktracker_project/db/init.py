import logging
import time

from pymongo.errors import PyMongoError

from tasktracker_project.db.config import DatabaseManager
from tasktracker_project.db.indexes import ensure_indexes

logger = logging.getLogger(__name__)


def initialize_database(max_retries=5, retry_delay=2):
    """
    Wait for MongoDB to become reachable, then create the query indexes.
    Includes retry logic for Docker environments.
    """
    db_manager = DatabaseManager()

    for attempt in range(max_retries):
        if db_manager.check_database_health():
            break
        if attempt < max_retries - 1:
            logger.warning(
                f"Database health check failed, attempt {attempt + 1}. Retrying in {retry_delay} seconds..."
            )
            time.sleep(retry_delay)
        else:
            logger.error(f"Failed to connect to database after {max_retries} attempts")
            return False

    try:
        ensure_indexes()
    except PyMongoError as e:
        logger.error(f"Error creating database indexes: {str(e)}")
        return False

    logger.info("Database initialization completed successfully")
    return True
