"""Pairs of a local and a remote candidate, with their statistics."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta

from .candidate import Candidate
from .pair_state import CandidatePairState

_UINT64_MASK = (1 << 64) - 1


def _go_bool(value: bool) -> str:
    return "true" if value else "false"


class CandidatePair:
    """A local and a remote candidate checked against each other."""

    def __init__(self, local: Candidate, remote: Candidate, controlling: bool = False) -> None:
        self.local = local
        self.remote = remote
        self.ice_role_controlling = controlling
        self.state = CandidatePairState.WAITING
        self.binding_request_count = 0
        self.nominated = False
        self.nominate_on_binding_success = False

        self._lock = threading.Lock()
        self.current_round_trip_time_delta = timedelta(0)
        self.total_round_trip_time_delta = timedelta(0)

        self.packets_sent = 0
        self.packets_received = 0
        self.bytes_sent = 0
        self.bytes_received = 0
        self.last_packet_sent_at: datetime | None = None
        self.last_packet_received_at: datetime | None = None

        self.requests_received = 0
        self.requests_sent = 0
        self.responses_received = 0
        self.responses_sent = 0

        self.first_request_sent_at: datetime | None = None
        self.last_request_sent_at: datetime | None = None
        self.first_response_received_at: datetime | None = None
        self.last_response_received_at: datetime | None = None
        self.first_request_received_at: datetime | None = None
        self.last_request_received_at: datetime | None = None

    def __str__(self) -> str:
        return (
            f"prio {self.priority()} (local, prio {self.local.priority()}) "
            f"{self.local} <-> {self.remote} (remote, prio {self.remote.priority()}), "
            f"state: {self.state}, nominated: {_go_bool(self.nominated)}, "
            f"nominateOnBindingSuccess: {_go_bool(self.nominate_on_binding_success)}"
        )

    def __repr__(self) -> str:
        return f"<CandidatePair {self}>"

    def equal(self, other: CandidatePair | None) -> bool:
        """Whether both pairs join equal local and remote candidates."""
        if other is None:
            return False
        return self.local.equal(other.local) and self.remote.equal(other.remote)

    def priority(self) -> int:
        """Pair priority as in RFC 5245 section 5.7.2, wrapped to 64 bits."""
        if self.ice_role_controlling:
            g, d = self.local.priority(), self.remote.priority()
        else:
            g, d = self.remote.priority(), self.local.priority()
        value = ((1 << 32) - 1) * min(g, d) + 2 * max(g, d) + (1 if g > d else 0)
        return value & _UINT64_MASK

    @property
    def current_round_trip_time(self) -> float:
        """Latest round trip time in seconds."""
        return self.current_round_trip_time_delta.total_seconds()

    @property
    def total_round_trip_time(self) -> float:
        """Sum of all round trip times in seconds."""
        return self.total_round_trip_time_delta.total_seconds()

    def update_round_trip_time(self, rtt: timedelta) -> None:
        """Record a response's round trip time."""
        now = datetime.now()
        with self._lock:
            self.current_round_trip_time_delta = rtt
            self.total_round_trip_time_delta += rtt
            self.responses_received += 1
            if self.first_response_received_at is None:
                self.first_response_received_at = now
            self.last_response_received_at = now

    def update_packet_sent(self, n: int) -> None:
        """Count an application packet of ``n`` bytes sent; ignores n <= 0."""
        if n <= 0:
            return
        with self._lock:
            self.packets_sent = (self.packets_sent + 1) & 0xFFFFFFFF
            self.bytes_sent = (self.bytes_sent + n) & _UINT64_MASK
            self.last_packet_sent_at = datetime.now()

    def update_packet_received(self, n: int) -> None:
        """Count an application packet of ``n`` bytes received; ignores n <= 0."""
        if n <= 0:
            return
        with self._lock:
            self.packets_received = (self.packets_received + 1) & 0xFFFFFFFF
            self.bytes_received = (self.bytes_received + n) & _UINT64_MASK
            self.last_packet_received_at = datetime.now()

    def update_request_sent(self) -> None:
        """Count a connectivity check sent."""
        now = datetime.now()
        with self._lock:
            self.requests_sent += 1
            if self.first_request_sent_at is None:
                self.first_request_sent_at = now
            self.last_request_sent_at = now

    def update_response_sent(self) -> None:
        """Count a connectivity response sent."""
        with self._lock:
            self.responses_sent += 1

    def update_request_received(self) -> None:
        """Count a connectivity check received."""
        now = datetime.now()
        with self._lock:
            self.requests_received += 1
            if self.first_request_received_at is None:
                self.first_request_received_at = now
            self.last_request_received_at = now