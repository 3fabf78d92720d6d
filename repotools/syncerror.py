"""Recognise harmless errors reported when syncing standard streams."""

from __future__ import annotations

import errno
import sys

_KNOWN_ERRNOS = frozenset({errno.EINVAL, errno.ENOTSUP, errno.ENOTTY, errno.EBADF})
_ERROR_INVALID_HANDLE = 6


def _is_known(exc: BaseException) -> bool:
    if not isinstance(exc, OSError):
        return False
    if sys.platform == "win32":
        return getattr(exc, "winerror", None) == _ERROR_INVALID_HANDLE
    return exc.errno in _KNOWN_ERRNOS


def known_sync_error(err: BaseException | None) -> bool:
    """Return True if err, or any error it wraps, is a non-actionable sync error."""
    seen: set[int] = set()
    current = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if _is_known(current):
            return True
        current = current.__cause__ or current.__context__
    return False