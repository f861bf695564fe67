"""Scoped file access for previews and transcripts."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from medialens.media.errors import MediaIOError

LOGGER = logging.getLogger(__name__)


def read_file_bytes(path: Path) -> bytes:
    """Return the full contents of ``path``.

    Raises:
        MediaIOError: If the file cannot be read.
    """
    try:
        with path.open("rb") as fh:
            return fh.read()
    except OSError as exc:
        raise MediaIOError.from_os_error(path, exc) from exc


def read_file_text(path: Path, encoding: str = "utf-8") -> str:
    """Return ``path`` decoded with ``encoding``, line endings left untouched.

    Raises:
        MediaIOError: If the file cannot be read or decoded.
    """
    try:
        with path.open("r", encoding=encoding, newline="") as fh:
            return fh.read()
    except OSError as exc:
        raise MediaIOError.from_os_error(path, exc) from exc
    except UnicodeDecodeError as exc:
        raise MediaIOError(path, "other", f"not valid {encoding} text ({exc.reason})") from exc


def write_file_text(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Replace the contents of ``path`` with ``content``.

    The text is written to a temporary sibling first and moved into place, so
    readers observe either the old or the new contents.

    Raises:
        MediaIOError: If the file cannot be written.
    """
    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding=encoding, newline="") as fh:
            fh.write(content)
        if path.exists():
            os.chmod(tmp_name, path.stat().st_mode & 0o7777)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise MediaIOError.from_os_error(path, exc) from exc
    except UnicodeEncodeError as exc:
        raise MediaIOError(path, "other", f"cannot encode text as {encoding}") from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                LOGGER.debug("Could not remove temporary file %s", tmp_name)
    LOGGER.info("Saved %d character(s) to %s", len(content), path)


__all__ = ["read_file_bytes", "read_file_text", "write_file_text"]
