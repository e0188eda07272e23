"""Constants used throughout the workspace notification service."""

# HTTP Headers
REQUEST_ID_HEADER = "X-Request-ID"

# OAuth2 scopes
SCOPE_USER = "notification:user"
SCOPE_PRODUCER = "notification:producer"
SCOPE_ADMIN = "notification:admin"

# RQ
DEFAULT_QUEUE_NAME = "default"
PUSH_JOB_PATH = "core.jobs.push_jobs.send_push_notification"
EMAIL_JOB_PATH = "core.jobs.email_jobs.send_email_notification"
REMINDER_TICK_JOB_PATH = "core.jobs.scheduler_jobs.run_reminder_tick"
CLEANUP_JOB_PATH = "core.jobs.scheduler_jobs.cleanup_read_notifications"

# Cache keys
REMINDER_SCHEDULER_LOCK_KEY = "workspace:reminder-scheduler:lock"

# Web push payload defaults
DEFAULT_NOTIFICATION_ICON = "/icons/icon-192x192.png"
DEFAULT_NOTIFICATION_BADGE = "/icons/badge-72x72.png"
DEFAULT_ACTION_URL = "/"
