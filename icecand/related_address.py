"""Transport addresses related to a candidate."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CandidateRelatedAddress:
    """A related transport address, used for diagnostics."""

    address: str
    port: int

    def __str__(self) -> str:
        return f" related {self.address}:{self.port}"


def related_address_equal(
    first: CandidateRelatedAddress | None, second: CandidateRelatedAddress | None
) -> bool:
    """Compare two related addresses, either of which may be absent."""
    if first is None and second is None:
        return True
    if first is None or second is None:
        return False
    return first.address == second.address and first.port == second.port


def format_related_address(related: CandidateRelatedAddress | None) -> str:
    """Render a related address, or an empty string when there is none."""
    return "" if related is None else str(related)