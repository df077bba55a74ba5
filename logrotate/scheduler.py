"""Per-directory rotation schedulers and the registry that keeps them unique."""

import logging
import os
import threading

from logrotate.config import RotationPolicy
from logrotate.reporting import escape_path
from logrotate.rotation import RotationResult, log_rotate

logger = logging.getLogger(__name__)


class RotationScheduler:
    """Background thread that sweeps one directory every check cycle.

    The sweep runs immediately on start, then after each ``check_cycle``
    seconds until ``stop()``. ``run_once()`` performs a single sweep on the
    caller's thread.
    """

    def __init__(self, policy: RotationPolicy, reporter=None, time_func=None):
        self._policy = policy
        self._reporter = reporter if reporter is not None else logger
        self._time_func = time_func
        self._shutdown = threading.Event()
        self._thread: threading.Thread | None = None
        self._passes = 0

    @property
    def policy(self) -> RotationPolicy:
        return self._policy

    @property
    def passes(self) -> int:
        return self._passes

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Start the background rotation thread."""
        self._thread = threading.Thread(
            target=self._loop,
            name=f"logrotate:{self._policy.log_file_dir}",
            daemon=True,
        )
        self._thread.start()
        self._reporter.info(
            f"start log rotate task for {escape_path(self._policy.log_file_dir)} "
            f"(policy={self._policy.policy}, cycle={self._policy.check_cycle:g}s)"
        )

    def stop(self, timeout: float = 5.0):
        """Signal the loop to stop; takes effect between sweeps."""
        self._shutdown.set()
        if self._thread:
            self._thread.join(timeout=timeout)

    def run_once(self) -> list[RotationResult]:
        policy = self._policy
        try:
            results = log_rotate(
                policy.log_file_dir,
                policy.size_mb,
                policy.backup_count,
                reporter=self._reporter,
                recursive=policy.recursive,
                time_func=self._time_func,
            )
        except Exception as e:
            self._reporter.error(
                f"rotation pass for {escape_path(policy.log_file_dir)} failed: {e!r}"
            )
            results = []
        self._passes += 1
        return results

    def _loop(self):
        while not self._shutdown.is_set():
            self.run_once()
            self._shutdown.wait(self._policy.check_cycle)


def _is_under(path: str, parent: str) -> bool:
    return os.path.commonpath([path, parent]) == parent


class SchedulerRegistry:
    """Maps a log directory to its single running scheduler.

    The lock only covers the check-and-insert in ``rotate``; sweeps run
    without it. Entries stay until ``stop_all``.
    """

    def __init__(self, reporter=None, scheduler_factory=None):
        self._reporter = reporter if reporter is not None else logger
        self._factory = scheduler_factory or RotationScheduler
        self._schedulers: dict[str, RotationScheduler] = {}
        self._lock = threading.Lock()

    def rotate(self, policy: RotationPolicy) -> bool:
        """Start a scheduler for the policy's directory unless one covers it.

        A directory is covered when it is registered, when it lies under a
        registered recursive directory, or, for a recursive policy, when a
        registered directory lies under it. Returns True when a new
        scheduler was started.
        """
        key = policy.log_file_dir
        with self._lock:
            covering = self._find_overlap(policy)
            if covering is not None:
                if covering != key:
                    self._reporter.info(
                        f"log rotate task for {escape_path(key)} overlaps "
                        f"{escape_path(covering)}, not started")
                return False
            scheduler = self._factory(policy, self._reporter)
            self._schedulers[key] = scheduler

        try:
            scheduler.start()
        except Exception as e:
            with self._lock:
                self._schedulers.pop(key, None)
            self._reporter.error(
                f"start log rotate task for {escape_path(key)} failed: {e!r}")
            return False
        return True

    def _find_overlap(self, policy: RotationPolicy) -> str | None:
        key = os.path.abspath(policy.log_file_dir)
        for directory, scheduler in self._schedulers.items():
            registered = os.path.abspath(directory)
            if registered == key:
                return directory
            if scheduler.policy.recursive and _is_under(key, registered):
                return directory
            if policy.recursive and _is_under(registered, key):
                return directory
        return None

    def get(self, directory: str) -> RotationScheduler | None:
        with self._lock:
            return self._schedulers.get(directory)

    def __contains__(self, directory: str) -> bool:
        with self._lock:
            return directory in self._schedulers

    def __len__(self) -> int:
        with self._lock:
            return len(self._schedulers)

    def stop_all(self, timeout: float = 5.0):
        with self._lock:
            schedulers = list(self._schedulers.values())
        for scheduler in schedulers:
            scheduler.stop(timeout=timeout)
