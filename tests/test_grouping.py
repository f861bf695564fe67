"""Tests for folder-group extraction and tracking."""

from medialens.media.grouping import (
    FolderGroupTracker,
    GroupPolicy,
    GroupSet,
    GroupUnset,
    GroupWarning,
    group_id_of,
)


def test_numeric_prefix_policy() -> None:
    assert group_id_of("100_a.jpg") == "100"
    assert group_id_of("007-take.mp4") == "7"
    assert group_id_of("clip_100.mp4") is None


def test_batch_code_policy() -> None:
    policy = GroupPolicy.BATCH_CODE

    assert group_id_of("interview_ab1234567890_part1.wav", policy) == "AB1234567890"
    assert group_id_of("100_a.jpg", policy) is None
    assert group_id_of("ab12345.mp3", policy) is None


def test_tracker_sequence_warns_on_group_change() -> None:
    tracker = FolderGroupTracker()

    assert tracker.state == GroupUnset()
    assert tracker.observe("100_a.jpg") == GroupSet("100")
    assert tracker.observe("100_b.jpg") == GroupSet("100")
    assert tracker.warning is None
    assert tracker.observe("200_c.jpg") == GroupWarning("100", "200")
    assert tracker.warning is not None and "100" in tracker.warning


def test_tracker_clears_warning_when_back_in_group() -> None:
    tracker = FolderGroupTracker()
    tracker.observe("100_a.jpg")
    tracker.observe("200_b.jpg")
    tracker.observe("300_c.jpg")

    assert tracker.state == GroupWarning("100", "300")
    assert tracker.observe("100_d.jpg") == GroupSet("100")
    assert tracker.warning is None


def test_tracker_without_group_stays_unset_until_one_appears() -> None:
    tracker = FolderGroupTracker()

    assert tracker.observe("readme.txt") == GroupUnset()
    assert tracker.observe("5_a.mp4") == GroupSet("5")
    assert tracker.observe("notes.txt") == GroupWarning("5", None)


def test_reset_returns_to_unset() -> None:
    tracker = FolderGroupTracker()
    tracker.observe("1_a.jpg")
    tracker.observe("2_a.jpg")

    tracker.reset()

    assert tracker.state == GroupUnset()
    assert tracker.observe("2_a.jpg") == GroupSet("2")
