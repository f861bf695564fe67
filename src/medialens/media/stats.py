"""Aggregate counts over scanned media trees."""

from __future__ import annotations

from .kinds import MediaKind
from .models import DirectoryEntry, Entry, FileEntry, MediaStats

_BUCKETS = {
    MediaKind.VIDEO: MediaStats(video=1),
    MediaKind.AUDIO: MediaStats(audio=1),
    MediaKind.TRANSCRIPT: MediaStats(transcript=1),
}


def aggregate(tree: Entry) -> MediaStats:
    """Return video/audio/transcript counts for ``tree``.

    Images and unclassified files do not contribute to any bucket. The result
    is always derived from the tree itself; nothing is cached between calls.
    """
    if isinstance(tree, FileEntry):
        return _BUCKETS.get(tree.kind, MediaStats())
    total = MediaStats()
    for entry in tree.iter_files():
        total = total + _BUCKETS.get(entry.kind, MediaStats())
    return total


def count_files(tree: Entry) -> int:
    """Return the number of file entries in ``tree``."""
    if isinstance(tree, DirectoryEntry):
        return sum(1 for _ in tree.iter_files())
    return 1


__all__ = ["aggregate", "count_files"]
