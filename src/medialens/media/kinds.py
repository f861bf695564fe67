"""Extension based media classification."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath


class MediaKind(str, Enum):
    """Semantic media category derived from a file extension."""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    TRANSCRIPT = "transcript"
    OTHER = "other"


_EXTENSION_KINDS: dict[str, MediaKind] = {
    **dict.fromkeys((".jpg", ".jpeg", ".png", ".tif", ".tiff"), MediaKind.IMAGE),
    **dict.fromkeys((".mp4", ".avi", ".mov", ".mkv", ".webm"), MediaKind.VIDEO),
    **dict.fromkeys((".mp3", ".wav", ".ogg", ".m4a"), MediaKind.AUDIO),
    ".txt": MediaKind.TRANSCRIPT,
}

# Image formats a display layer cannot render without transcoding.
_TRANSCODE_EXTENSIONS = frozenset({".tif", ".tiff"})

NAVIGABLE_KINDS = frozenset({MediaKind.IMAGE, MediaKind.VIDEO, MediaKind.AUDIO})

HIDDEN_PREFIX = "."


def _extension(filename: str) -> str:
    return PurePath(filename).suffix.lower()


def classify(filename: str) -> MediaKind:
    """Return the media kind for ``filename`` based on its lowercased extension."""
    return _EXTENSION_KINDS.get(_extension(filename), MediaKind.OTHER)


def is_hidden(name: str) -> bool:
    """Return True when ``name`` carries the hidden-file marker."""
    return name.startswith(HIDDEN_PREFIX)


def is_navigable(filename: str) -> bool:
    return classify(filename) in NAVIGABLE_KINDS


def needs_transcoding(filename: str) -> bool:
    """Return True for image formats that must be re-encoded before display."""
    return _extension(filename) in _TRANSCODE_EXTENSIONS


def entry_sort_key(name: str) -> tuple[str, str]:
    """Ordering applied to directory listings at every level."""
    return (name.casefold(), name)


__all__ = [
    "MediaKind",
    "NAVIGABLE_KINDS",
    "HIDDEN_PREFIX",
    "classify",
    "is_hidden",
    "is_navigable",
    "needs_transcoding",
    "entry_sort_key",
]
