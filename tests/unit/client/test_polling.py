"""Tests for PollingTask."""

import threading
from unittest.mock import Mock

from workspace_client.polling import PollingTask


def test_runs_immediately_and_repeats():
    """Test that the task runs immediately and then repeats."""
    calls = []
    done = threading.Event()

    def callback():
        calls.append(1)
        if len(calls) >= 3:
            done.set()

    task = PollingTask(callback, interval=0.01)
    task.start()
    try:
        assert done.wait(timeout=2)
    finally:
        task.stop()

    assert task.running is False


def test_no_callback_after_stop():
    """Test that no callback runs after stop."""
    callback = Mock()
    task = PollingTask(callback, interval=0.01)
    task.start()
    task.stop()
    count = callback.call_count

    threading.Event().wait(0.05)

    assert callback.call_count == count


def test_hidden_task_skips_callback():
    """Test that a hidden task skips the callback."""
    callback = Mock()
    task = PollingTask(callback, interval=0.01)
    task.set_visible(False)
    task.start()
    threading.Event().wait(0.05)
    task.stop()

    callback.assert_not_called()
    assert task.visible is False


def test_callback_errors_are_logged():
    """Test that callback errors are logged, not raised."""
    callback = Mock(side_effect=RuntimeError("boom"))
    task = PollingTask(callback)

    task.run_once()

    callback.assert_called_once()


def test_stop_before_start():
    """Test stopping a task that never started."""
    PollingTask(Mock()).stop()


def test_start_twice_keeps_one_thread():
    """Test that starting twice keeps one thread."""
    release = threading.Event()
    task = PollingTask(lambda: release.wait(1), interval=0.01)
    task.start()
    thread = task._thread
    task.start()
    try:
        assert task._thread is thread
    finally:
        release.set()
        task.stop()
