"""Tests for sibling media sets and stepping."""

from pathlib import Path

import pytest

from medialens.media import (
    FileEntry,
    MediaIOError,
    MediaKind,
    MediaNavigationSet,
    MediaSetBuilder,
    classify,
    navigate,
)


def _entry(path: Path) -> FileEntry:
    return FileEntry(name=path.name, path=path, kind=classify(path.name))


def _populate(directory: Path, names: list[str]) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_bytes(b"")


def test_sibling_set_filters_to_navigable_kinds(tmp_path: Path) -> None:
    _populate(
        tmp_path,
        ["b.mp4", "a.JPG", "notes.txt", "data.csv", ".hidden.mp3", "c.wav"],
    )
    (tmp_path / "sub.mp4").mkdir()

    nav_set = MediaSetBuilder().build_sibling_set(_entry(tmp_path / "b.mp4"))

    assert [item.path.name for item in nav_set.entries] == ["a.JPG", "b.mp4", "c.wav"]
    assert [item.kind for item in nav_set.entries] == [
        MediaKind.IMAGE,
        MediaKind.VIDEO,
        MediaKind.AUDIO,
    ]
    assert nav_set.current_index == 1
    assert nav_set.directory == tmp_path
    kinds = {item.kind for item in nav_set.entries}
    assert MediaKind.TRANSCRIPT not in kinds and MediaKind.OTHER not in kinds


def test_sibling_set_is_single_level(tmp_path: Path) -> None:
    _populate(tmp_path, ["a.mp4"])
    _populate(tmp_path / "nested", ["b.mp4"])

    nav_set = MediaSetBuilder().build_sibling_set(_entry(tmp_path / "a.mp4"))

    assert [item.path.name for item in nav_set.entries] == ["a.mp4"]


def test_transcript_click_yields_empty_set(tmp_path: Path) -> None:
    _populate(tmp_path, ["a.mp4", "notes.txt"])

    nav_set = MediaSetBuilder().build_sibling_set(_entry(tmp_path / "notes.txt"))

    assert nav_set.entries == ()
    assert nav_set.current_index == -1


def test_vanished_file_yields_empty_set(tmp_path: Path) -> None:
    _populate(tmp_path, ["a.mp4"])

    nav_set = MediaSetBuilder().build_sibling_set(_entry(tmp_path / "gone.mp4"))

    assert nav_set.entries == ()
    assert nav_set.current is None


def test_missing_directory_raises_io_error(tmp_path: Path) -> None:
    with pytest.raises(MediaIOError) as excinfo:
        MediaSetBuilder().build_sibling_set(_entry(tmp_path / "missing" / "a.mp4"))

    assert excinfo.value.reason == "not_found"


def test_navigate_stops_at_boundaries(tmp_path: Path) -> None:
    _populate(tmp_path, ["a.mp4", "b.mp4", "c.mp4"])
    nav_set = MediaSetBuilder().build_sibling_set(_entry(tmp_path / "a.mp4"))

    unchanged, item = navigate(nav_set, -1)
    assert item is None
    assert unchanged.current_index == 0

    nav_set, item = navigate(nav_set, 1)
    nav_set, item = navigate(nav_set, 1)
    assert item is not None and item.path.name == "c.mp4"

    unchanged, item = navigate(nav_set, 1)
    assert item is None
    assert unchanged.current_index == 2


def test_navigate_rejects_other_directions(tmp_path: Path) -> None:
    nav_set = MediaNavigationSet(directory=tmp_path)

    with pytest.raises(ValueError):
        navigate(nav_set, 2)  # type: ignore[arg-type]


def test_navigate_on_empty_set_is_noop(tmp_path: Path) -> None:
    nav_set = MediaNavigationSet(directory=tmp_path)

    assert navigate(nav_set, 1) == (nav_set, None)
