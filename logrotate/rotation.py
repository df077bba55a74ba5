"""One rotation pass: rollover then backup for each log file in a directory."""

import logging
from dataclasses import dataclass, field

from logrotate.backup import backup
from logrotate.matcher import list_files
from logrotate.reporting import escape_path
from logrotate.rollover import maybe_rollover

logger = logging.getLogger(__name__)

# Active log files: anything ending in .log, .trace or .out.
LOG_FILE_PATTERN = r".(\.log|\.trace|\.out)$"


@dataclass(frozen=True)
class RotationResult:
    path: str
    rotated_path: str | None = None
    archives: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def rotate_file(path: str, max_size_mb: float, max_backup_count: int,
                reporter=None, time_func=None) -> RotationResult:
    """Roll over and back up one log file. Never raises."""
    if reporter is None:
        reporter = logger
    rotated_path = None
    archives = []
    try:
        rotated_path = maybe_rollover(path, max_size_mb, max_backup_count, reporter, time_func)
        archives = backup(path, max_backup_count, reporter, time_func)
    except Exception as e:
        message = f"rotate file path: {escape_path(path)} caught an exception: {e!r}"
        reporter.error(message)
        return RotationResult(path, rotated_path, archives, error=message)
    return RotationResult(path, rotated_path, archives)


def log_rotate(directory: str, max_size_mb: float, max_backup_count: int,
               reporter=None, recursive: bool = False,
               time_func=None) -> list[RotationResult]:
    """Run a single rotation pass over every log file in *directory*.

    max_size_mb: rollover threshold in megabytes, negative disables rollover.
    max_backup_count: copies to keep per log, negative keeps everything.

    Failures are reported, never raised.
    """
    if reporter is None:
        reporter = logger
    results = []
    try:
        files = list_files(directory, LOG_FILE_PATTERN, recursive=recursive,
                           reporter=reporter)
    except OSError as e:
        reporter.error(f"walk path: {escape_path(directory)} failed: {e}")
        return results

    try:
        for path in files:
            results.append(rotate_file(path, max_size_mb, max_backup_count, reporter, time_func))
    except Exception as e:
        reporter.error(f"rotation pass over {escape_path(directory)} caught an exception: {e!r}")
    return results
