"""Helpers for the error reporting sink.

A reporter is any object with ``info(msg)`` and ``error(msg)`` methods.
``logging.Logger`` already satisfies this, so every module falls back to its
own module logger when no reporter is injected.
"""

_PATH_ESCAPES = str.maketrans({
    "\r": "\\r",
    "\n": "\\n",
    "\u0085": "\\u0085",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
})


def escape_path(path: str) -> str:
    """Escape line breaks in a path so it cannot forge extra log lines."""
    return str(path).translate(_PATH_ESCAPES)
