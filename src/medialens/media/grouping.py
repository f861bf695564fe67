"""Folder-group consistency tracking across file clicks.

Files produced by the same source batch share a group token embedded in
their names. When a user opens files whose tokens differ from the first
file opened in a session, the tracker enters a warning state so the
presentation layer can flag the mix. The signal is advisory only.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

LOGGER = logging.getLogger(__name__)

_NUMERIC_PREFIX = re.compile(r"^(\d+)")
_BATCH_CODE = re.compile(r"[A-Za-z]{2}\d{10}")


class GroupPolicy(str, Enum):
    """How a group token is extracted from a filename."""

    NUMERIC_PREFIX = "numeric_prefix"
    BATCH_CODE = "batch_code"


def group_id_of(filename: str, policy: GroupPolicy = GroupPolicy.NUMERIC_PREFIX) -> str | None:
    """Extract the group token from ``filename`` or return None when absent.

    ``numeric_prefix`` reads the leading digits and normalises them to their
    integer value, so ``007_a.jpg`` and ``7_b.jpg`` share group ``"7"``.
    ``batch_code`` finds two letters followed by ten digits anywhere in the
    name and returns it uppercased.
    """
    if policy is GroupPolicy.NUMERIC_PREFIX:
        match = _NUMERIC_PREFIX.match(filename)
        return str(int(match.group(1))) if match else None
    match = _BATCH_CODE.search(filename)
    return match.group(0).upper() if match else None


@dataclass(frozen=True, slots=True)
class GroupUnset:
    """No baseline group has been established yet."""


@dataclass(frozen=True, slots=True)
class GroupSet:
    group_id: str


@dataclass(frozen=True, slots=True)
class GroupWarning:
    """The last opened file belongs to a different group than the baseline."""

    group_id: str
    conflicting_id: str | None

    @property
    def message(self) -> str:
        other = self.conflicting_id if self.conflicting_id is not None else "no group"
        return (
            f"You are viewing files from different folder groups "
            f"(started with {self.group_id}, now {other})."
        )


GroupState = Union[GroupUnset, GroupSet, GroupWarning]


class FolderGroupTracker:
    """State machine flagging cross-group navigation within one session."""

    def __init__(self, policy: GroupPolicy = GroupPolicy.NUMERIC_PREFIX) -> None:
        self.policy = policy
        self._state: GroupState = GroupUnset()

    @property
    def state(self) -> GroupState:
        return self._state

    @property
    def warning(self) -> str | None:
        """Return the user-facing warning text while in the warning state."""
        if isinstance(self._state, GroupWarning):
            return self._state.message
        return None

    def observe(self, filename: str) -> GroupState:
        """Advance the state machine for a clicked file and return the new state."""
        group = group_id_of(filename, self.policy)
        current = self._state
        if isinstance(current, GroupUnset):
            next_state: GroupState = GroupSet(group) if group is not None else current
        elif group == current.group_id:
            next_state = GroupSet(current.group_id)
        else:
            next_state = GroupWarning(current.group_id, group)
            LOGGER.info("Group mismatch: baseline %s, opened %s", current.group_id, filename)
        self._state = next_state
        return next_state

    def reset(self) -> None:
        """Forget the baseline; called whenever a new root folder is selected."""
        self._state = GroupUnset()


__all__ = [
    "GroupPolicy",
    "group_id_of",
    "GroupUnset",
    "GroupSet",
    "GroupWarning",
    "GroupState",
    "FolderGroupTracker",
]
