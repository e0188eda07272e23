"""Production entry point: the workspace notification API under Gunicorn.

The reminder scheduler runs in every worker when REMINDER_SCHEDULER_ENABLED
is set; the cache lock lets only one of them tick at a time.
"""

import os
import sys

from gunicorn.app.wsgiapp import run

WSGI_APP = "workspace_service.wsgi:application"


def gunicorn_options() -> dict[str, str]:
    """Command line options, overridable through the environment."""
    return {
        "--bind": f"0.0.0.0:{os.getenv('PORT', '8000')}",
        "--workers": os.getenv("GUNICORN_WORKERS", "4"),
        "--threads": os.getenv("GUNICORN_THREADS", "2"),
        "--timeout": os.getenv("GUNICORN_TIMEOUT", "60"),
        "--access-logfile": "-",
        "--error-logfile": "-",
    }


def main():
    sys.argv = ["gunicorn", WSGI_APP]
    for option, value in gunicorn_options().items():
        sys.argv += [option, value]
    run()


if __name__ == "__main__":
    main()
