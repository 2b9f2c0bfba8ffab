import logging
import sys

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class TaskTrackerConfig(AppConfig):
    name = "tasktracker"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        """Initialize application components when Django starts"""

        if getattr(settings, "TESTING", False) or "test" in sys.argv:
            logger.info("Test mode detected - skipping database initialization")
            return

        # Management commands that never touch MongoDB should not wait on it
        if len(sys.argv) > 1 and sys.argv[1] in ("makemigrations", "migrate", "collectstatic", "spectacular"):
            return

        from tasktracker_project.db.init import initialize_database

        if not initialize_database():
            logger.warning("Database initialization did not complete; requests may fail until MongoDB is reachable")
