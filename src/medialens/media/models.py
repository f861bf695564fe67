"""Data models describing scanned media trees."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Iterator, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from .kinds import MediaKind


class MediaBaseModel(BaseModel):
    """Shared configuration for immutable media models."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class FileEntry(MediaBaseModel):
    """A visible file in the scanned tree.

    Attributes:
        name: Final path segment.
        path: Fully joined filesystem path.
        kind: Classification derived from the extension.
    """

    type: Literal["file"] = "file"
    name: str
    path: Path
    kind: MediaKind


class DirectoryEntry(MediaBaseModel):
    """A directory node with its visible children in listing order.

    Attributes:
        name: Final path segment.
        path: Fully joined filesystem path.
        children: Ordered child entries.
    """

    type: Literal["directory"] = "directory"
    name: str
    path: Path
    children: tuple["Entry", ...] = ()

    def iter_files(self) -> Iterator[FileEntry]:
        """Yield every file below this directory in depth-first listing order."""
        stack: list[Entry] = list(reversed(self.children))
        while stack:
            entry = stack.pop()
            if isinstance(entry, FileEntry):
                yield entry
            else:
                stack.extend(reversed(entry.children))


Entry = Annotated[Union[FileEntry, DirectoryEntry], Field(discriminator="type")]

DirectoryEntry.model_rebuild()


class ScanIssue(MediaBaseModel):
    """A non-fatal failure encountered below the scan root."""

    path: Path
    message: str


class ScanResult(MediaBaseModel):
    """Complete outcome of a single directory scan."""

    root: DirectoryEntry
    issues: tuple[ScanIssue, ...] = ()


class MediaStats(MediaBaseModel):
    """Per-kind file counts for a scanned tree."""

    video: NonNegativeInt = 0
    audio: NonNegativeInt = 0
    transcript: NonNegativeInt = 0

    def __add__(self, other: "MediaStats") -> "MediaStats":
        return MediaStats(
            video=self.video + other.video,
            audio=self.audio + other.audio,
            transcript=self.transcript + other.transcript,
        )


class NavigationItem(MediaBaseModel):
    """One navigable sibling."""

    path: Path
    kind: MediaKind


class MediaNavigationSet(MediaBaseModel):
    """Ordered sibling media of a clicked file plus the current position."""

    directory: Path
    entries: tuple[NavigationItem, ...] = ()
    current_index: int = -1

    @property
    def current(self) -> NavigationItem | None:
        if 0 <= self.current_index < len(self.entries):
            return self.entries[self.current_index]
        return None


__all__ = [
    "MediaBaseModel",
    "FileEntry",
    "DirectoryEntry",
    "Entry",
    "ScanIssue",
    "ScanResult",
    "MediaStats",
    "NavigationItem",
    "MediaNavigationSet",
]
