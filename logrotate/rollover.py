"""Rollover executor: copy an oversized log aside, then truncate it in place."""

import logging
import os
import shutil

from logrotate.reporting import escape_path
from logrotate.retention import ROLLOVER_STAGE, prune
from logrotate.timestamps import get_timestamp

logger = logging.getLogger(__name__)

ROTATED_FILE_MODE = 0o640


def should_rollover(path: str, max_size_mb: float, reporter=None) -> bool:
    """True when *path* is larger than *max_size_mb* megabytes.

    A negative threshold disables rollover. An unreadable file is reported
    and never rolled over.
    """
    if reporter is None:
        reporter = logger
    if max_size_mb < 0:
        return False
    try:
        size = os.stat(path).st_size
    except OSError as e:
        reporter.error(f"stat path: {escape_path(path)} failed: {e}")
        return False
    return size > max_size_mb * 1024 * 1024


def copy_file(src: str, dst: str):
    """Byte-for-byte copy of *src* to *dst* (created with mode 0640)."""
    with open(src, "rb") as f_in:
        fd = os.open(dst, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, ROTATED_FILE_MODE)
        with os.fdopen(fd, "wb") as f_out:
            shutil.copyfileobj(f_in, f_out)


def truncate_file(path: str):
    """Truncate in place so writers keep the same inode."""
    fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, ROTATED_FILE_MODE)
    os.close(fd)


def maybe_rollover(path: str, max_size_mb: float, max_backup_count: int = -1,
                   reporter=None, time_func=None) -> str | None:
    """Roll *path* over if it exceeds the size threshold.

    The content is copied to ``<path>.<timestamp>`` and the original is
    truncated, then raw rollover copies beyond *max_backup_count* are pruned.
    Returns the rollover copy path, or None when nothing was rolled over.
    Writes landing between the copy and the truncate are lost.
    """
    if reporter is None:
        reporter = logger
    if not should_rollover(path, max_size_mb, reporter):
        return None

    rotated_path = f"{path}.{get_timestamp(time_func)}"
    try:
        copy_file(path, rotated_path)
    except OSError as e:
        reporter.error(f"copy path: {escape_path(path)} failed: {e}")
        # Keep the original intact; drop the partial copy so it is not archived.
        if os.path.exists(rotated_path):
            try:
                os.remove(rotated_path)
            except OSError as remove_err:
                reporter.error(
                    f"remove partial copy: {escape_path(rotated_path)} failed: {remove_err}"
                )
        return None

    try:
        truncate_file(path)
    except OSError as e:
        reporter.error(f"truncate path: {escape_path(path)} failed: {e}")
        return rotated_path

    reporter.info(f"rolled over {escape_path(path)} to {escape_path(rotated_path)}")
    prune(os.path.dirname(path) or ".", os.path.basename(path), max_backup_count,
          ROLLOVER_STAGE, reporter)
    return rotated_path
