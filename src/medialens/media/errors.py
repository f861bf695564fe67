"""Media engine errors."""

from __future__ import annotations

import errno
from pathlib import Path
from typing import Literal

IOReason = Literal["not_found", "permission_denied", "other"]


class MediaLensError(Exception):
    """Base exception for media scanning and browsing operations."""


class ScanError(MediaLensError):
    """Raised when the root of a scan cannot be enumerated."""

    def __init__(self, root: Path, message: str) -> None:
        super().__init__(f"Cannot scan {root}: {message}")
        self.root = root


class MediaIOError(MediaLensError):
    """Raised when a single file read or write fails.

    Attributes:
        path: File the operation targeted.
        reason: Coarse failure category for presentation.
    """

    def __init__(self, path: Path, reason: IOReason, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.reason = reason

    @classmethod
    def from_os_error(cls, path: Path, exc: OSError) -> "MediaIOError":
        """Build an error from an ``OSError`` raised while touching ``path``."""
        if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
            reason: IOReason = "not_found"
        elif isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM):
            reason = "permission_denied"
        else:
            reason = "other"
        return cls(path, reason, exc.strerror or str(exc))


class CodecError(MediaLensError):
    """Raised when image bytes cannot be converted into a displayable form."""


__all__ = ["MediaLensError", "ScanError", "MediaIOError", "CodecError", "IOReason"]
