"""Rendering and logging helpers shared by CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.tree import Tree

from medialens.media import DirectoryEntry, FileEntry, MediaKind, MediaNavigationSet, ScanResult
from medialens.media.stats import aggregate, count_files

_KIND_ICONS = {
    MediaKind.IMAGE: "🖼️",
    MediaKind.VIDEO: "🎥",
    MediaKind.AUDIO: "🎵",
    MediaKind.TRANSCRIPT: "📝",
    MediaKind.OTHER: "📄",
}
_DIRECTORY_ICON = "📁"


def configure_logging(level: str | int, *, console: Console | None = None) -> None:
    """Route ``medialens`` log records through a single rich handler on stderr."""
    logger = logging.getLogger("medialens")
    for handler in list(logger.handlers):
        if getattr(handler, "_medialens", False):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler._medialens = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def render_tree(root: DirectoryEntry) -> Tree:
    """Build a rich tree mirroring the scanned directory structure."""
    tree = Tree(f"{_DIRECTORY_ICON} [bold]{escape(root.name)}[/bold]")
    stack: list[tuple[Tree, DirectoryEntry]] = [(tree, root)]
    while stack:
        branch, directory = stack.pop()
        for child in directory.children:
            if isinstance(child, FileEntry):
                branch.add(f"{_KIND_ICONS[child.kind]} {escape(child.name)}")
            else:
                sub = branch.add(f"{_DIRECTORY_ICON} [bold]{escape(child.name)}[/bold]")
                stack.append((sub, child))
    return tree


def format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    """Return a consistent rich-formatted summary line."""
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {escape(str(root))}: {parts}.[/green]"


def scan_metrics(result: ScanResult) -> dict[str, int]:
    stats = aggregate(result.root)
    return {
        "files": count_files(result.root),
        "video": stats.video,
        "audio": stats.audio,
        "transcript": stats.transcript,
        "issues": len(result.issues),
    }


def scan_payload(result: ScanResult) -> dict[str, Any]:
    """Return a JSON-ready payload describing a scan."""
    return {
        "root": result.root.path.as_posix(),
        "tree": result.root.model_dump(mode="json"),
        "stats": aggregate(result.root).model_dump(mode="json"),
        "files": count_files(result.root),
        "issues": [issue.model_dump(mode="json") for issue in result.issues],
    }


def navigation_payload(nav_set: MediaNavigationSet) -> dict[str, Any]:
    return {
        "directory": nav_set.directory.as_posix(),
        "current_index": nav_set.current_index,
        "entries": [
            {"path": item.path.as_posix(), "kind": item.kind.value} for item in nav_set.entries
        ],
    }


def format_navigation(nav_set: MediaNavigationSet) -> list[str]:
    """Return one display line per sibling with the current one marked."""
    lines = []
    for position, item in enumerate(nav_set.entries):
        marker = "▶" if position == nav_set.current_index else " "
        lines.append(f"{marker} {_KIND_ICONS[item.kind]} {escape(item.path.name)}")
    return lines


__all__ = [
    "configure_logging",
    "render_tree",
    "format_summary_line",
    "scan_metrics",
    "scan_payload",
    "navigation_payload",
    "format_navigation",
]
