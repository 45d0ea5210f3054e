"""Progress reporting and cooperative termination for long running algorithms."""

import logging
import threading
from typing import Callable, Optional

from .exceptions import ComputationTerminated

logger = logging.getLogger(__name__)


class ProgressLogger:
    """Thread-safe progress counter that logs percentage milestones.

    Workers call :meth:`log_progress` concurrently; the logger emits an info
    record every time the completed share crosses another ``log_interval``
    percent of the current task volume.
    """

    NULL: "ProgressLogger"

    def __init__(
        self,
        task_volume: int,
        task_name: str,
        log_interval: int = 10,
        log: Optional[logging.Logger] = None,
    ):
        self.task_name = task_name
        self.log_interval = max(1, min(100, log_interval))
        self._log = log or logger
        self._lock = threading.Lock()
        self._task_volume = max(0, task_volume)
        self._progress = 0
        self._last_logged_percentage = 0

    @property
    def progress(self) -> int:
        return self._progress

    @property
    def task_volume(self) -> int:
        return self._task_volume

    def log_message(self, message: str) -> None:
        self._log.info(f"{self.task_name} {message}")

    def log_progress(self, delta: int = 1) -> None:
        if delta <= 0:
            return
        with self._lock:
            self._progress += delta
            if self._task_volume == 0:
                return
            percentage = min(100, (self._progress * 100) // self._task_volume)
            milestone = percentage - percentage % self.log_interval
            if milestone <= self._last_logged_percentage:
                return
            self._last_logged_percentage = milestone
        self._log.info(f"{self.task_name} {milestone}%")

    def reset(self, task_volume: int) -> None:
        """Start counting a new unit of work of the given volume."""
        with self._lock:
            self._task_volume = max(0, task_volume)
            self._progress = 0
            self._last_logged_percentage = 0


class _NullProgressLogger(ProgressLogger):
    def __init__(self):
        super().__init__(0, "")

    def log_message(self, message: str) -> None:
        pass

    def log_progress(self, delta: int = 1) -> None:
        pass

    def reset(self, task_volume: int) -> None:
        pass


ProgressLogger.NULL = _NullProgressLogger()


class TerminationFlag:
    """Signals whether a computation may keep running.

    Algorithms check the flag at phase boundaries only, so a stop request
    takes effect after the phase in progress has finished.
    """

    def __init__(self, running: Optional[Callable[[], bool]] = None):
        self._running_check = running
        self._stopped = threading.Event()

    def stop(self) -> None:
        self._stopped.set()

    def running(self) -> bool:
        if self._stopped.is_set():
            return False
        return self._running_check() if self._running_check is not None else True

    def assert_running(self) -> None:
        if not self.running():
            raise ComputationTerminated("The execution has been terminated.")

