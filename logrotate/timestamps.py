"""Canonical rotation timestamps: YYYYMMDDhhmmssmmm, 17 fixed-width digits."""

from datetime import datetime

TIMESTAMP_DIGITS = 17


def get_timestamp(time_func=None) -> str:
    """Return the current local time as a 17-digit millisecond timestamp.

    Fixed width keeps lexicographic order equal to chronological order.
    Two calls within the same millisecond return the same value.
    """
    now = (time_func or datetime.now)()
    return now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 1000:03d}"
