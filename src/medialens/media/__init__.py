"""Folder scanning, classification, and navigation engine."""

from .discovery import DirectoryScanner
from .errors import CodecError, MediaIOError, MediaLensError, ScanError
from .grouping import FolderGroupTracker, GroupPolicy, GroupSet, GroupUnset, GroupWarning
from .kinds import MediaKind, classify
from .models import (
    DirectoryEntry,
    FileEntry,
    MediaNavigationSet,
    MediaStats,
    NavigationItem,
    ScanIssue,
    ScanResult,
)
from .navigation import MediaSetBuilder, navigate
from .stats import aggregate, count_files

__all__ = [
    "DirectoryScanner",
    "MediaLensError",
    "ScanError",
    "MediaIOError",
    "CodecError",
    "FolderGroupTracker",
    "GroupPolicy",
    "GroupUnset",
    "GroupSet",
    "GroupWarning",
    "MediaKind",
    "classify",
    "DirectoryEntry",
    "FileEntry",
    "MediaNavigationSet",
    "MediaStats",
    "NavigationItem",
    "ScanIssue",
    "ScanResult",
    "MediaSetBuilder",
    "navigate",
    "aggregate",
    "count_files",
]
