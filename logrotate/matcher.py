"""Filename matcher: list regular files whose base name matches a regex."""

import logging
import os
import re

from logrotate.reporting import escape_path

logger = logging.getLogger(__name__)


def list_files(directory: str, pattern: str, recursive: bool = True,
               reporter=None) -> list[str]:
    """Return paths under *directory* whose base name matches *pattern*.

    The pattern is applied with ``re.search`` to the base name only, so
    callers anchor it themselves. Directories are never returned. Raises
    OSError when *directory* itself cannot be listed; an unreadable
    subdirectory is reported and skipped. Results are sorted.
    """
    if reporter is None:
        reporter = logger
    regex = re.compile(pattern)
    matches = []

    if recursive:
        root_dir = os.path.normpath(directory)

        def _on_walk_error(err: OSError):
            if err.filename is None or os.path.normpath(err.filename) == root_dir:
                raise err
            reporter.error(f"walk path: {escape_path(err.filename)} failed: {err}")

        for root, _dirs, files in os.walk(directory, onerror=_on_walk_error):
            for name in files:
                if regex.search(name):
                    matches.append(os.path.join(root, name))
    else:
        with os.scandir(directory) as it:
            for entry in it:
                if entry.is_dir():
                    continue
                if regex.search(entry.name):
                    matches.append(entry.path)

    matches.sort()
    return matches
