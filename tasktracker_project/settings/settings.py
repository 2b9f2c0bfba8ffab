import os

from dotenv import load_dotenv

load_dotenv()

from .base import *  # noqa: E402,F401,F403

ENV = os.getenv("ENV", "DEVELOPMENT").upper()

DEBUG = ENV != "PRODUCTION" and os.getenv("DEBUG", "True").lower() == "true"

if ENV == "PRODUCTION":
    CSRF_COOKIE_SECURE = True
    SESSION_COOKIE_SECURE = True
