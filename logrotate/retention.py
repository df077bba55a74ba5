"""Retention pruner: delete the oldest rotated artifacts beyond a kept count."""

import logging
import os
import re

from logrotate.matcher import list_files
from logrotate.reporting import escape_path

logger = logging.getLogger(__name__)

ROLLOVER_STAGE = "rollover"
BACKUP_STAGE = "backup"


def rollover_pattern(base_name: str) -> str:
    """Raw rollover copies, e.g. svc.log.1 or svc.log.20240102150405000."""
    return rf"^{re.escape(base_name)}\.[0-9]{{1,17}}$"


def canonical_rollover_pattern(base_name: str) -> str:
    return rf"^{re.escape(base_name)}\.[0-9]{{17}}$"


def backup_pattern(base_name: str) -> str:
    """Compressed backups, e.g. svc.log.20240102150405000.zip."""
    return rf"^{re.escape(base_name)}\.[0-9]{{17}}\.zip$"


def remove_file(path: str):
    """Remove a file. Directories are left alone without error."""
    if os.path.isdir(path):
        return
    os.remove(path)


def prune(directory: str, base_name: str, max_kept_count: int, stage: str,
          reporter=None) -> list[str]:
    """Delete the oldest *stage* artifacts of *base_name* until at most
    *max_kept_count* remain. Returns the deleted paths, oldest first.

    A negative count means unlimited retention. The first failed delete
    ends the pass.
    """
    if reporter is None:
        reporter = logger
    if max_kept_count < 0:
        return []

    if stage == ROLLOVER_STAGE:
        pattern = rollover_pattern(base_name)
    elif stage == BACKUP_STAGE:
        pattern = backup_pattern(base_name)
    else:
        return []

    try:
        files = list_files(directory, pattern, recursive=False)
    except OSError as e:
        reporter.error(f"list path: {escape_path(directory)} failed: {e}")
        return []

    # Lexicographic order: oldest first for fixed-width timestamps.
    files.sort(key=os.path.basename)
    deleted = []
    while len(files) > max_kept_count:
        path = files[0]
        try:
            remove_file(path)
        except OSError as e:
            reporter.error(f"remove path: {escape_path(path)} failed: {e}")
            break
        deleted.append(path)
        files.pop(0)
    return deleted
