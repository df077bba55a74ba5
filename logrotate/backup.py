"""Backup compressor: turn raw rollover copies into single-entry zip archives."""

import logging
import os
import re
import shutil
import zipfile

from logrotate.matcher import list_files
from logrotate.reporting import escape_path
from logrotate.retention import (
    BACKUP_STAGE,
    canonical_rollover_pattern,
    prune,
    rollover_pattern,
)
from logrotate.timestamps import get_timestamp

logger = logging.getLogger(__name__)

ARCHIVE_FILE_MODE = 0o600


def compress_file(file_path: str, base_name: str, replace_timestamp: bool,
                  time_func=None) -> str:
    """Zip *file_path* into a sibling archive and return the archive path.

    svc.log.20240102150405000 -> svc.log.20240102150405000.zip
    svc.log.1 (replace_timestamp) -> svc.log.<now>.zip

    The archive holds one entry named after the source file. It is created
    exclusively with owner-only permissions; an existing archive of the
    same name raises FileExistsError instead of being overwritten.
    """
    directory = os.path.dirname(file_path)
    if replace_timestamp:
        zip_path = os.path.join(directory, f"{base_name}.{get_timestamp(time_func)}.zip")
    else:
        zip_path = file_path + ".zip"

    with open(file_path, "rb") as f_in:
        fd = os.open(zip_path, os.O_CREAT | os.O_WRONLY | os.O_EXCL, ARCHIVE_FILE_MODE)
        try:
            with os.fdopen(fd, "wb") as f_out, \
                    zipfile.ZipFile(f_out, "w", zipfile.ZIP_DEFLATED) as zf:
                with zf.open(os.path.basename(file_path), "w", force_zip64=True) as entry:
                    shutil.copyfileobj(f_in, entry)
        except Exception:
            os.unlink(zip_path)
            raise
    return zip_path


def backup(path: str, max_backup_count: int, reporter=None, time_func=None) -> list[str]:
    """Compress every raw rollover copy of *path* and prune old archives.

    A count of zero or less disables backup entirely. A copy whose archive
    cannot be written is reported and left in place for the next pass.
    Returns the archive paths written.
    """
    if reporter is None:
        reporter = logger
    if max_backup_count <= 0:
        return []

    directory = os.path.dirname(path) or "."
    base_name = os.path.basename(path)
    try:
        rotated = list_files(directory, rollover_pattern(base_name), recursive=False)
    except OSError as e:
        reporter.error(f"walk path: {escape_path(path)} failed: {e}")
        return []

    canonical = re.compile(canonical_rollover_pattern(base_name))
    archives = []
    for file_path in rotated:
        # A 17-digit suffix is already a canonical timestamp; keep it.
        replace = not canonical.search(os.path.basename(file_path))
        try:
            zip_path = compress_file(file_path, base_name, replace, time_func)
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            reporter.error(f"compress path: {escape_path(file_path)} failed: {e}")
            continue
        archives.append(zip_path)
        try:
            os.remove(file_path)
        except OSError as e:
            reporter.error(f"remove path {escape_path(file_path)} failed: {e}")

    if archives:
        reporter.info(f"compressed {len(archives)} backup(s) of {escape_path(path)}")
    prune(directory, base_name, max_backup_count, BACKUP_STAGE, reporter)
    return archives
