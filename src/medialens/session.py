"""Per-folder browsing session state."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from medialens.files import read_file_text, write_file_text
from medialens.media import (
    DirectoryScanner,
    FileEntry,
    FolderGroupTracker,
    GroupPolicy,
    MediaIOError,
    MediaKind,
    MediaLensError,
    MediaNavigationSet,
    MediaSetBuilder,
    MediaStats,
    NavigationItem,
    ScanResult,
    aggregate,
    navigate,
)
from medialens.media.grouping import GroupState
from medialens.media.kinds import NAVIGABLE_KINDS
from medialens.media.navigation import Direction

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionContext:
    """Everything derived from one folder selection.

    A new context replaces the old one wholesale on every selection.
    """

    root: Path
    scan: ScanResult
    stats: MediaStats
    tracker: FolderGroupTracker
    current_file: FileEntry | None = None
    navigation: MediaNavigationSet | None = None


@dataclass(slots=True)
class FileOpenOutcome:
    """Result of opening a file from the tree.

    Attributes:
        entry: File that was opened.
        group_state: Folder-group state after the click.
        warning: Cross-group warning text, if any.
        navigation: Sibling set for image/video/audio files.
        transcript: Text content for transcript files.
        errors: Human-readable failures encountered while opening.
    """

    entry: FileEntry
    group_state: GroupState
    warning: str | None = None
    navigation: MediaNavigationSet | None = None
    transcript: str | None = None
    errors: list[str] = field(default_factory=list)


class BrowserSession:
    """Own the scanned tree, group tracking, and navigation for one user.

    Only one scan result is ever visible. Starting a new selection bumps a
    generation counter; any scan that finishes for an older generation is
    dropped without touching the visible context.
    """

    def __init__(
        self,
        *,
        scanner: DirectoryScanner | None = None,
        builder: MediaSetBuilder | None = None,
        group_policy: GroupPolicy = GroupPolicy.NUMERIC_PREFIX,
    ) -> None:
        self.scanner = scanner or DirectoryScanner()
        self.builder = builder or MediaSetBuilder()
        self.group_policy = group_policy
        self._context: SessionContext | None = None
        self._generation = 0
        self._lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None

    @property
    def context(self) -> SessionContext | None:
        return self._context

    def select_folder(self, path: Path | str | None) -> ScanResult | None:
        """Scan ``path`` and make it the visible tree.

        A ``None`` path means the picker was cancelled and nothing happens.

        Raises:
            ScanError: If the root cannot be scanned; the previous tree stays.
        """
        if path is None:
            LOGGER.info("Folder selection cancelled")
            return None
        generation = self._begin()
        result = self.scanner.scan(path)
        self._apply(generation, result)
        return result

    def select_folder_async(self, path: Path | str) -> Future[ScanResult | None]:
        """Scan ``path`` on a worker thread.

        The future resolves to the scan result once it is visible, or to
        ``None`` when a later selection superseded it. A ``ScanError`` is
        raised from ``Future.result()``.
        """
        generation = self._begin()
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="medialens-scan")

        def run() -> ScanResult | None:
            result = self.scanner.scan(path)
            return result if self._apply(generation, result) else None

        return self._executor.submit(run)

    def open_file(self, entry: FileEntry) -> FileOpenOutcome:
        """Handle a click on ``entry`` in the visible tree."""
        context = self._require_context()
        state = context.tracker.observe(entry.name)
        outcome = FileOpenOutcome(
            entry=entry, group_state=state, warning=context.tracker.warning
        )
        context.current_file = entry
        context.navigation = None

        if entry.kind is MediaKind.TRANSCRIPT:
            try:
                outcome.transcript = read_file_text(entry.path)
            except MediaIOError as exc:
                LOGGER.warning("Could not read transcript: %s", exc)
                outcome.errors.append(f"Error reading transcript: {exc}")
        elif entry.kind in NAVIGABLE_KINDS:
            try:
                context.navigation = self.builder.build_sibling_set(entry)
            except MediaIOError as exc:
                LOGGER.warning("Could not list siblings: %s", exc)
                outcome.errors.append(f"Error listing {entry.path.parent}: {exc}")
            outcome.navigation = context.navigation
        return outcome

    def step(self, direction: Direction) -> NavigationItem | None:
        """Move to the previous (-1) or next (+1) sibling.

        Returns ``None`` at either end, and whenever the open file is not an
        image, video or audio file.
        """
        context = self._require_context()
        current = context.current_file
        if context.navigation is None or current is None or current.kind not in NAVIGABLE_KINDS:
            return None
        context.navigation, item = navigate(context.navigation, direction)
        if item is not None:
            context.current_file = FileEntry(name=item.path.name, path=item.path, kind=item.kind)
        return item

    def save_transcript(self, content: str) -> Path:
        """Overwrite the currently open transcript with ``content``.

        Raises:
            MediaLensError: If no transcript is open.
            MediaIOError: If writing fails.
        """
        context = self._require_context()
        current = context.current_file
        if current is None or current.kind is not MediaKind.TRANSCRIPT:
            raise MediaLensError("No transcript is open.")
        write_file_text(current.path, content)
        return current.path

    def find_entry(self, relative: str | Path) -> FileEntry | None:
        """Return the file at ``relative`` below the root, if it is in the tree."""
        context = self._require_context()
        target = context.root / relative
        return next(
            (entry for entry in context.scan.root.iter_files() if entry.path == target),
            None,
        )

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "BrowserSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _begin(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _apply(self, generation: int, result: ScanResult) -> bool:
        context = SessionContext(
            root=result.root.path,
            scan=result,
            stats=aggregate(result.root),
            tracker=FolderGroupTracker(self.group_policy),
        )
        with self._lock:
            if generation != self._generation:
                LOGGER.info("Discarding superseded scan of %s", result.root.path)
                return False
            self._context = context
        LOGGER.info("Now browsing %s", context.root)
        return True

    def _require_context(self) -> SessionContext:
        if self._context is None:
            raise MediaLensError("No folder selected.")
        return self._context


__all__ = ["BrowserSession", "SessionContext", "FileOpenOutcome"]
