import os

from dotenv import load_dotenv

load_dotenv()

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tasktracker_project.settings.settings")


def configure_settings_module():
    """
    Point Django at the consolidated settings module unless the environment already chose one.
    Environment-specific behaviour is driven by environment variables read in base.py.
    """
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tasktracker_project.settings.settings")
