"""Tests for extension based classification."""

import pytest

from medialens.media.kinds import (
    MediaKind,
    classify,
    entry_sort_key,
    is_hidden,
    is_navigable,
    needs_transcoding,
)


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("photo.jpg", MediaKind.IMAGE),
        ("scan.TIFF", MediaKind.IMAGE),
        ("clip.mp4", MediaKind.VIDEO),
        ("clip.webm", MediaKind.VIDEO),
        ("voice.WAV", MediaKind.AUDIO),
        ("voice.m4a", MediaKind.AUDIO),
        ("notes.txt", MediaKind.TRANSCRIPT),
        ("report.pdf", MediaKind.OTHER),
        ("Makefile", MediaKind.OTHER),
        ("archive.mp4.zip", MediaKind.OTHER),
    ],
)
def test_classify_by_extension(filename: str, expected: MediaKind) -> None:
    assert classify(filename) is expected


def test_classify_is_case_insensitive_and_idempotent() -> None:
    assert classify("A.JPG") == classify("a.jpg") == MediaKind.IMAGE
    assert classify("a.jpg") == classify("a.jpg")


def test_hidden_marker_and_navigability() -> None:
    assert is_hidden(".DS_Store")
    assert not is_hidden("visible.txt")
    assert is_navigable("song.mp3")
    assert not is_navigable("notes.txt")
    assert not is_navigable("data.csv")


def test_only_tiff_needs_transcoding() -> None:
    assert needs_transcoding("scan.tif")
    assert needs_transcoding("scan.TIFF")
    assert not needs_transcoding("photo.jpg")


def test_sort_key_is_case_insensitive() -> None:
    names = ["b.mp4", "A.mp4", "a.mp4", "C.mp4"]

    assert sorted(names, key=entry_sort_key) == ["A.mp4", "a.mp4", "b.mp4", "C.mp4"]
