import os
import sys
from pathlib import Path

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv(
    "SECRET_KEY",
    "django-insecure-5k#o2r!v7m@f1q^tasktracker^x9b(3w&n8e_l0z-c4h6j",
)

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "").split(",") if os.getenv("ALLOWED_HOSTS") else []

MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "tasktracker")

INSTALLED_APPS = [
    "django.contrib.staticfiles",
    "corsheaders",
    "rest_framework",
    "drf_spectacular",
    "tasktracker",
    "django.contrib.auth",
    "django.contrib.contenttypes",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "tasktracker.middlewares.jwt_auth.JWTAuthenticationMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "tasktracker_project.urls"
WSGI_APPLICATION = "tasktracker_project.wsgi.application"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

LANGUAGE_CODE = "en-us"

TIME_ZONE = "UTC"

USE_I18N = True

USE_TZ = True

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "tasktracker.exceptions.exception_handler.handle_exception",
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

TASKS_DEFAULT_PAGE_LIMIT = int(os.getenv("TASKS_DEFAULT_PAGE_LIMIT", "20"))
TASKS_MAX_PAGE_LIMIT = int(os.getenv("TASKS_MAX_PAGE_LIMIT", "200"))
INVITATION_TTL_DAYS = int(os.getenv("INVITATION_TTL_DAYS", "7"))

TESTING = "test" in sys.argv or "pytest" in sys.modules or os.getenv("TESTING") == "True"

if TESTING:
    # HS256 keeps test tokens self-contained
    JWT_CONFIG = {
        "ALGORITHM": "HS256",
        "PRIVATE_KEY": "test-secret-key-for-jwt-signing-very-long-key-needed-for-security",
        "PUBLIC_KEY": "test-secret-key-for-jwt-signing-very-long-key-needed-for-security",
        "ACCESS_TOKEN_LIFETIME": int(os.getenv("ACCESS_LIFETIME", "3600")),
        "ISSUER": "tasktracker-test",
    }
else:
    JWT_CONFIG = {
        "ALGORITHM": os.getenv("JWT_ALGORITHM", "RS256"),
        "PRIVATE_KEY": os.getenv("PRIVATE_KEY"),
        "PUBLIC_KEY": os.getenv("PUBLIC_KEY"),
        "ACCESS_TOKEN_LIFETIME": int(os.getenv("ACCESS_LIFETIME", "3600")),
        "ISSUER": os.getenv("JWT_ISSUER", "tasktracker"),
    }

AUTH_COOKIE_NAME = os.getenv("ACCESS_TOKEN_COOKIE_NAME", "tasktracker-access")

# Django itself only needs a relational database for contrib apps; documents live in MongoDB
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:" if TESTING else BASE_DIR.parent / "db.sqlite3",
    }
}

PUBLIC_PATHS = [
    "/favicon.ico",
    "/api/health",
    "/api/docs",
    "/api/docs/",
    "/api/schema",
    "/api/schema/",
    "/api/redoc",
    "/api/redoc/",
    "/static/",
]

BACKEND_URL = os.getenv("TASKTRACKER_BACKEND_BASE_URL", "http://localhost:8000")

# Swagger/OpenAPI Configuration
SPECTACULAR_SETTINGS = {
    "TITLE": "TaskTracker+ API",
    "DESCRIPTION": "Team task management with role-based authorisation and analytics",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/",
    "SWAGGER_UI_SETTINGS": {
        "url": os.getenv("SWAGGER_UI_PATH", "/api/schema"),
    },
    "SERVERS": [
        {
            "url": BACKEND_URL,
            "description": "Development server",
        },
    ],
    "TAGS": [
        {"name": "teams", "description": "Team and membership management"},
        {"name": "invitations", "description": "Invitations addressed to the current user"},
        {"name": "tasks", "description": "Personal and team task operations"},
        {"name": "analytics", "description": "Team, member and personal analytics"},
        {"name": "health", "description": "Health check endpoints"},
    ],
}

STATIC_URL = "/static/"

CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000").split(",")
CORS_ALLOW_CREDENTIALS = True
CORS_ALLOWED_HEADERS = [
    "accept",
    "accept-encoding",
    "authorization",
    "content-type",
    "dnt",
    "origin",
    "user-agent",
    "x-requested-with",
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": os.getenv("DJANGO_LOG_LEVEL", "WARNING").upper(),
            "propagate": False,
        },
        "pymongo": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}
