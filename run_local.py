#!/usr/bin/env python
"""Start the workspace notification service for local development."""

import os
import sys

from django.core.management import execute_from_command_line


def main():
    """Run the development server through the `runlocal` command.

    Extra arguments (for example an address:port) are passed through.
    """
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "workspace_service.settings")
    execute_from_command_line([sys.argv[0], "runlocal", *sys.argv[1:]])


if __name__ == "__main__":
    main()
