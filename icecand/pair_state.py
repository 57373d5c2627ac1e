"""States of an ICE candidate pair."""

from __future__ import annotations

from enum import IntEnum

_UNKNOWN = "Unknown candidate pair state"


class CandidatePairState(IntEnum):
    """Connectivity check state of a candidate pair."""

    WAITING = 1
    IN_PROGRESS = 2
    FAILED = 3
    SUCCEEDED = 4

    def __str__(self) -> str:
        return _LABELS[self]

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


_LABELS = {
    CandidatePairState.WAITING: "waiting",
    CandidatePairState.IN_PROGRESS: "in-progress",
    CandidatePairState.FAILED: "failed",
    CandidatePairState.SUCCEEDED: "succeeded",
}


def describe_pair_state(value: int) -> str:
    """Name of a pair state given as a number, tolerating unknown values."""
    try:
        return str(CandidatePairState(value))
    except ValueError:
        return _UNKNOWN