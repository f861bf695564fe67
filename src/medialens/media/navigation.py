"""Sibling media sets for next/previous stepping."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

from .errors import MediaIOError
from .kinds import NAVIGABLE_KINDS, classify, entry_sort_key, is_hidden
from .models import FileEntry, MediaNavigationSet, NavigationItem

LOGGER = logging.getLogger(__name__)

Direction = Literal[-1, 1]


class MediaSetBuilder:
    """Compute the navigable siblings of a clicked file.

    The containing directory is listed afresh on every call, one level deep,
    using the same hidden-name filter and ordering as the directory scanner.
    """

    def build_sibling_set(self, clicked: FileEntry) -> MediaNavigationSet:
        """Return image/video/audio siblings of ``clicked`` with its position.

        Args:
            clicked: File the user selected.

        Returns:
            MediaNavigationSet: Ordered siblings; ``current_index`` is -1 and the
            set is empty when the clicked file is not itself navigable or no
            longer present.

        Raises:
            MediaIOError: If the containing directory cannot be listed.
        """
        directory = clicked.path.parent
        if clicked.kind not in NAVIGABLE_KINDS:
            return MediaNavigationSet(directory=directory)

        try:
            with os.scandir(directory) as entries:
                names = [
                    entry.name
                    for entry in entries
                    if not is_hidden(entry.name) and _is_file(entry)
                ]
        except OSError as exc:
            raise MediaIOError.from_os_error(directory, exc) from exc

        names.sort(key=entry_sort_key)
        items = tuple(
            NavigationItem(path=directory / name, kind=kind)
            for name in names
            if (kind := classify(name)) in NAVIGABLE_KINDS
        )
        index = next(
            (position for position, item in enumerate(items) if item.path == clicked.path),
            -1,
        )
        if index < 0:
            LOGGER.warning("%s is no longer present in %s", clicked.name, directory)
            return MediaNavigationSet(directory=directory)
        return MediaNavigationSet(directory=directory, entries=items, current_index=index)


def navigate(
    nav_set: MediaNavigationSet, direction: Direction
) -> tuple[MediaNavigationSet, NavigationItem | None]:
    """Step one entry backwards or forwards without wrapping.

    Returns the updated set and the newly current item. A step past either end
    returns the set unchanged and ``None``.
    """
    if direction not in (-1, 1):
        raise ValueError(f"direction must be -1 or 1, got {direction!r}")
    target = nav_set.current_index + direction
    if nav_set.current_index < 0 or not 0 <= target < len(nav_set.entries):
        return nav_set, None
    moved = nav_set.model_copy(update={"current_index": target})
    return moved, moved.entries[target]


def _is_file(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_file()
    except OSError:
        return False


__all__ = ["MediaSetBuilder", "navigate", "Direction"]
