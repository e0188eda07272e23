"""Django settings for the workspace notification service.

Configuration is read from environment variables so the same image can run
locally, in CI and in production. Test overrides live in settings_test.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-insecure-change-me")

DEBUG = os.getenv("DJANGO_DEBUG", "false").lower() == "true"

ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "django_rq",
    "core",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "core.middleware.request_context.RequestContextMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "workspace_service.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "workspace_service.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("POSTGRES_DB", "workspace"),
        "USER": os.getenv("POSTGRES_USER", "workspace"),
        "PASSWORD": os.getenv("POSTGRES_PASSWORD", ""),
        "HOST": os.getenv("POSTGRES_HOST", "localhost"),
        "PORT": os.getenv("POSTGRES_PORT", "5432"),
        "OPTIONS": {
            "options": f"-c search_path={os.getenv('POSTGRES_SCHEMA', 'workspace')}",
        },
    }
}

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": REDIS_URL,
    }
}

RQ_QUEUES = {
    "default": {
        "URL": REDIS_URL,
        "DEFAULT_TIMEOUT": 300,
    },
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "core.auth.oauth2.OAuth2Authentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "EXCEPTION_HANDLER": "core.exceptions.handlers.custom_exception_handler",
    "UNAUTHENTICATED_USER": None,
}

# OAuth2 / JWT
OAUTH2_SERVICE_ENABLED = os.getenv("OAUTH2_SERVICE_ENABLED", "true").lower() == "true"
OAUTH2_INTROSPECTION_ENABLED = (
    os.getenv("OAUTH2_INTROSPECTION_ENABLED", "false").lower() == "true"
)
OAUTH2_INTROSPECT_URL = os.getenv(
    "OAUTH2_INTROSPECT_URL", "http://localhost:8080/api/v1/auth/oauth2/introspect"
)
OAUTH2_CLIENT_ID = os.getenv("OAUTH2_CLIENT_ID", "workspace-notifications")
OAUTH2_CLIENT_SECRET = os.getenv("OAUTH2_CLIENT_SECRET", "")
OAUTH2_TOKEN_CACHE_PREFIX = "workspace:token:"
OAUTH2_TOKEN_CACHE_TTL = int(os.getenv("OAUTH2_TOKEN_CACHE_TTL", "300"))
JWT_SECRET = os.getenv("JWT_SECRET", "")

# SMTP (email channel)
EMAIL_HOST = os.getenv("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))
EMAIL_HOST_USER = os.getenv("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.getenv("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = os.getenv("EMAIL_USE_TLS", "true").lower() == "true"
DEFAULT_FROM_EMAIL = os.getenv(
    "DEFAULT_FROM_EMAIL", "Workspace <noreply@workspace.app>"
)

# Base URL used to make notification action URLs absolute in e-mails
WORKSPACE_APP_URL = os.getenv("WORKSPACE_APP_URL", "http://localhost:3000")

# Web push (VAPID)
WEBPUSH_VAPID_PUBLIC_KEY = os.getenv("WEBPUSH_VAPID_PUBLIC_KEY", "")
WEBPUSH_VAPID_PRIVATE_KEY = os.getenv("WEBPUSH_VAPID_PRIVATE_KEY", "")
WEBPUSH_VAPID_SUBJECT = os.getenv("WEBPUSH_VAPID_SUBJECT", "mailto:admin@workspace.app")
WEBPUSH_TTL_SECONDS = int(os.getenv("WEBPUSH_TTL_SECONDS", str(60 * 60 * 24)))
PUSH_MAX_FAILURES = int(os.getenv("PUSH_MAX_FAILURES", "5"))

# Reminder scheduler
REMINDER_SCHEDULER_ENABLED = (
    os.getenv("REMINDER_SCHEDULER_ENABLED", "false").lower() == "true"
)
REMINDER_SCHEDULER_INTERVAL_SECONDS = int(
    os.getenv("REMINDER_SCHEDULER_INTERVAL_SECONDS", "60")
)
REMINDER_SCHEDULER_BATCH_SIZE = int(os.getenv("REMINDER_SCHEDULER_BATCH_SIZE", "500"))
REMINDER_SCHEDULER_LOCK_TTL = int(os.getenv("REMINDER_SCHEDULER_LOCK_TTL", "600"))

# Notifications
NOTIFICATION_RETENTION_DAYS = int(os.getenv("NOTIFICATION_RETENTION_DAYS", "30"))
NOTIFICATION_DEFAULT_PAGE_SIZE = int(os.getenv("NOTIFICATION_DEFAULT_PAGE_SIZE", "20"))
NOTIFICATION_MAX_PAGE_SIZE = 100
