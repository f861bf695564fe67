"""Directory discovery producing typed media trees."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ScanError
from .kinds import classify, entry_sort_key, is_hidden
from .models import DirectoryEntry, Entry, FileEntry, ScanIssue, ScanResult

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class _Child:
    name: str
    path: Path
    is_dir: bool


@dataclass(slots=True)
class _Frame:
    """A directory whose listing is being consumed."""

    path: Path
    name: str
    pending: list[_Child]
    ancestry: frozenset[Path]
    children: list[Entry] = field(default_factory=list)


class DirectoryScanner:
    """Walk a directory tree and build an ordered, pruned media tree.

    Hidden names are skipped at every depth, children are ordered by
    case-insensitive name, and directories without any visible file below
    them are omitted. The walk uses an explicit stack so nesting depth is
    bounded only by memory.
    """

    def __init__(self, *, follow_symlinks: bool = False) -> None:
        self.follow_symlinks = follow_symlinks

    def scan(self, root: Path | str) -> ScanResult:
        """Scan ``root`` and return the complete tree plus non-fatal issues.

        Args:
            root: Directory selected by the user.

        Returns:
            ScanResult: The root directory node and any subtree failures.

        Raises:
            ScanError: If the root itself cannot be enumerated.
        """
        root_path = Path(root).expanduser().absolute()
        if not root_path.exists():
            raise ScanError(root_path, "directory does not exist")
        if not root_path.is_dir():
            raise ScanError(root_path, "not a directory")

        issues: list[ScanIssue] = []
        try:
            root_frame = self._open(root_path, root_path.name or str(root_path), frozenset(), issues)
        except OSError as exc:
            raise ScanError(root_path, exc.strerror or str(exc)) from exc

        stack: list[_Frame] = [root_frame]
        while True:
            frame = stack[-1]
            if not frame.pending:
                stack.pop()
                node = DirectoryEntry(
                    name=frame.name, path=frame.path, children=tuple(frame.children)
                )
                if not stack:
                    LOGGER.info(
                        "Scanned %s: %d file(s), %d issue(s)",
                        root_path,
                        sum(1 for _ in node.iter_files()),
                        len(issues),
                    )
                    return ScanResult(root=node, issues=tuple(issues))
                if node.children:
                    stack[-1].children.append(node)
                else:
                    LOGGER.debug("Pruning empty directory %s", frame.path)
                continue

            child = frame.pending.pop()
            if not child.is_dir:
                frame.children.append(
                    FileEntry(name=child.name, path=child.path, kind=classify(child.name))
                )
                continue

            try:
                stack.append(self._open(child.path, child.name, frame.ancestry, issues))
            except OSError as exc:
                self._record(issues, child.path, exc.strerror or str(exc))
            except _CycleDetected:
                self._record(issues, child.path, "symbolic link loop; not followed")

    def _open(
        self,
        path: Path,
        name: str,
        ancestry: frozenset[Path],
        issues: list[ScanIssue],
    ) -> _Frame:
        """List ``path`` and return a frame with its visible children queued."""
        identity = path.resolve() if self.follow_symlinks else path
        if identity in ancestry:
            raise _CycleDetected(path)
        LOGGER.debug("Listing %s", path)
        children = self._list_children(path, issues)
        children.sort(key=lambda item: entry_sort_key(item.name), reverse=True)
        return _Frame(
            path=path,
            name=name,
            pending=children,
            ancestry=ancestry | {identity},
        )

    def _list_children(self, directory: Path, issues: list[ScanIssue]) -> list[_Child]:
        children: list[_Child] = []
        with os.scandir(directory) as entries:
            for entry in entries:
                if is_hidden(entry.name):
                    continue
                child_path = directory / entry.name
                try:
                    if entry.is_symlink() and not self.follow_symlinks:
                        if entry.is_dir(follow_symlinks=True):
                            LOGGER.debug("Skipping directory symlink %s", child_path)
                            continue
                    is_dir = entry.is_dir(follow_symlinks=self.follow_symlinks)
                    is_file = not is_dir and entry.is_file(follow_symlinks=True)
                except OSError as exc:
                    self._record(issues, child_path, exc.strerror or str(exc))
                    continue
                if not is_dir and not is_file:
                    if entry.is_symlink():
                        self._record(issues, child_path, "broken symbolic link")
                    else:
                        LOGGER.debug("Skipping special file %s", child_path)
                    continue
                children.append(_Child(name=entry.name, path=child_path, is_dir=is_dir))
        return children

    @staticmethod
    def _record(issues: list[ScanIssue], path: Path, message: str) -> None:
        LOGGER.warning("Skipping %s: %s", path, message)
        issues.append(ScanIssue(path=path, message=message))


class _CycleDetected(Exception):
    pass


__all__ = ["DirectoryScanner"]
