"""Cancellable periodic task standing in for a server push channel."""

import threading
from collections.abc import Callable

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 30.0


class PollingTask:
    """Run a callback now and then every `interval` seconds while visible.

    `stop()` is the cancellation point: the callback never starts after it
    returns, and a wait in progress is cut short. While hidden the interval
    keeps elapsing but the callback is skipped. Callback errors are logged
    and the next interval runs regardless.
    """

    def __init__(
        self,
        callback: Callable[[], object],
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        name: str = "PollingTask",
    ):
        """Initialize the task without starting it."""
        self.callback = callback
        self.interval = interval
        self.name = name
        self._stop_event = threading.Event()
        self._visible = threading.Event()
        self._visible.set()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        """Whether the polling thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def visible(self) -> bool:
        """Whether polls currently run."""
        return self._visible.is_set()

    def start(self) -> None:
        """Start polling; the first run happens immediately."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        """Cancel the task and wait for a running callback to finish."""
        self._stop_event.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def set_visible(self, visible: bool) -> None:
        """Pause or resume polling, e.g. when the page is hidden."""
        if visible:
            self._visible.set()
        else:
            self._visible.clear()

    def run_once(self) -> None:
        """Invoke the callback now, logging any error."""
        try:
            self.callback()
        except Exception as e:
            logger.warning(
                "poll_failed",
                task=self.name,
                error=str(e),
                error_type=type(e).__name__,
            )

    def _run(self) -> None:
        while not self._stop_event.is_set():
            if self._visible.is_set():
                self.run_once()
            self._stop_event.wait(timeout=self.interval)
