from .base import *  # noqa: F401,F403

TESTING = True

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

JWT_CONFIG = {
    "ALGORITHM": "HS256",
    "PRIVATE_KEY": "test-secret-key-for-jwt-signing-very-long-key-needed-for-security",
    "PUBLIC_KEY": "test-secret-key-for-jwt-signing-very-long-key-needed-for-security",
    "ACCESS_TOKEN_LIFETIME": 3600,
    "ISSUER": "tasktracker-test",
}

# The tests spin up their own MongoDB through testcontainers
DB_NAME = "testdb"
