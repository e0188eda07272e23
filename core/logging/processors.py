"""structlog processors shared by the file and console outputs."""

import os
import threading

from colorama import Fore, Style, just_fix_windows_console
from structlog.typing import EventDict, WrappedLogger

from core.logging.context import get_owner_id, get_request_id

DEFAULT_SERVICE_NAME = "workspace-notifications"


def add_request_context(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Attach the current request and owner IDs.

    Values bound explicitly on the event win, so a job that logs
    `owner_id=...` for another user keeps its own value.
    """
    for key, value in (("request_id", get_request_id()), ("owner_id", get_owner_id())):
        if value:
            event_dict.setdefault(key, value)
    return event_dict


def add_runtime_context(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Attach service name, environment, process and thread.

    The reminder loop runs in its own thread; `thread_id` tells its lines
    apart from request handling.
    """
    event_dict["service_name"] = os.getenv("SERVICE_NAME", DEFAULT_SERVICE_NAME)
    event_dict["environment"] = os.getenv("ENVIRONMENT", "development")
    event_dict["process_id"] = os.getpid()
    event_dict["thread_id"] = threading.get_ident()
    return event_dict


class ConsoleRenderer:
    """One colored line per event.

    `[LEVEL   ] timestamp | request_id | logger | event key=value ...`
    """

    level_colors = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.GREEN,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.RED + Style.BRIGHT,
    }
    # In the prefix already, or runtime noise
    hidden_keys = frozenset(
        {
            "event",
            "level",
            "logger",
            "timestamp",
            "request_id",
            "service_name",
            "environment",
            "process_id",
            "thread_id",
        }
    )

    def __init__(self, colors: bool = True):
        self.colors = colors
        if colors:
            just_fix_windows_console()

    def _paint(self, color: str, text: str) -> str:
        return f"{color}{text}{Style.RESET_ALL}" if self.colors else text

    def __call__(
        self, _logger: WrappedLogger, _method_name: str, event_dict: EventDict
    ) -> str:
        level = str(event_dict.get("level", "info")).upper()
        line = " | ".join(
            [
                self._paint(self.level_colors.get(level, Fore.WHITE), f"[{level:<8}]")
                + " "
                + str(event_dict.get("timestamp", "")),
                self._paint(Fore.MAGENTA, str(event_dict.get("request_id", "-"))),
                self._paint(Fore.BLUE, str(event_dict.get("logger", "root"))),
                str(event_dict.get("event", "")),
            ]
        )
        extras = " ".join(
            f"{key}={value}"
            for key, value in event_dict.items()
            if key not in self.hidden_keys
        )
        if extras:
            line += " " + self._paint(Fore.YELLOW, extras)
        return line
