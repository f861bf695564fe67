"""Tests for aggregate counts."""

from pathlib import Path

from medialens.media import DirectoryEntry, FileEntry, MediaKind, MediaStats, aggregate, count_files


def _file(name: str, kind: MediaKind) -> FileEntry:
    return FileEntry(name=name, path=Path("/media") / name, kind=kind)


def test_aggregate_folds_nested_directories() -> None:
    inner = DirectoryEntry(
        name="inner",
        path=Path("/media/inner"),
        children=(_file("a.mp3", MediaKind.AUDIO), _file("b.txt", MediaKind.TRANSCRIPT)),
    )
    root = DirectoryEntry(
        name="media",
        path=Path("/media"),
        children=(
            _file("c.mp4", MediaKind.VIDEO),
            _file("d.png", MediaKind.IMAGE),
            _file("e.bin", MediaKind.OTHER),
            inner,
        ),
    )

    assert aggregate(root) == MediaStats(video=1, audio=1, transcript=1)
    assert count_files(root) == 5


def test_aggregate_of_single_file_and_empty_tree() -> None:
    assert aggregate(_file("x.wav", MediaKind.AUDIO)) == MediaStats(audio=1)
    assert aggregate(DirectoryEntry(name="m", path=Path("/m"))) == MediaStats()
    assert count_files(_file("x.wav", MediaKind.AUDIO)) == 1


def test_tree_round_trips_through_json() -> None:
    root = DirectoryEntry(
        name="media",
        path=Path("/media"),
        children=(
            _file("c.mp4", MediaKind.VIDEO),
            DirectoryEntry(
                name="sub",
                path=Path("/media/sub"),
                children=(_file("n.txt", MediaKind.TRANSCRIPT),),
            ),
        ),
    )

    payload = root.model_dump(mode="json")

    assert payload["children"][1]["type"] == "directory"
    assert DirectoryEntry.model_validate(payload) == root
