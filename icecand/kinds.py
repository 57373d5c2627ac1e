"""Concrete candidate kinds: host, server reflexive, peer reflexive and relay."""

from __future__ import annotations

import ipaddress
from collections.abc import Callable, Iterable

from .candidate import (
    Candidate,
    CandidateExtension,
    IPAddress,
    NetworkType,
    TCPType,
    determine_network_type,
)
from .candidate_type import CandidateType
from .errors import AddressParseError
from .related_address import CandidateRelatedAddress

RELAY_PROTOCOL_TLS = "tls"
RELAY_PROTOCOL_DTLS = "dtls"
RELAY_PROTOCOL_TCP = "tcp"


def _parse_ip(address: str) -> IPAddress:
    try:
        return ipaddress.ip_address(address)
    except ValueError:
        raise AddressParseError(address) from None


def _transport(network_type: NetworkType) -> str:
    return "tcp" if network_type.is_tcp() else "udp"


class CandidateHost(Candidate):
    """A candidate bound to a local interface address, or an mDNS name."""

    def __init__(
        self,
        *,
        network: str = "",
        address: str = "",
        port: int = 0,
        component: int = 0,
        priority: int = 0,
        foundation: str = "",
        tcp_type: TCPType = TCPType.UNSPECIFIED,
        is_location_tracked: bool = False,
        candidate_id: str = "",
        extensions: Iterable[CandidateExtension] | None = None,
    ) -> None:
        super().__init__(
            candidate_type=CandidateType.HOST,
            address=address,
            port=port,
            component=component,
            candidate_id=candidate_id,
            tcp_type=tcp_type,
            foundation_override=foundation,
            priority_override=priority,
            is_location_tracked=is_location_tracked,
            extensions=extensions,
        )
        self.network = network
        if address.endswith(".local"):
            # Until the mDNS name is resolved it is assumed to be UDP over IPv4.
            self.network_type = NetworkType.UDP4
        else:
            self._set_ip_addr(_parse_ip(address))

    def _set_ip_addr(self, ip: IPAddress) -> None:
        network_type = determine_network_type(self.network, ip)
        self.network_type = network_type
        self.resolved_addr = (_transport(network_type), ip, self.port)


class CandidatePeerReflexive(Candidate):
    """A candidate learnt from the source address of a peer's check."""

    def __init__(
        self,
        *,
        network: str = "",
        address: str = "",
        port: int = 0,
        component: int = 0,
        priority: int = 0,
        foundation: str = "",
        rel_addr: str = "",
        rel_port: int = 0,
        candidate_id: str = "",
        extensions: Iterable[CandidateExtension] | None = None,
    ) -> None:
        ip = _parse_ip(address)
        network_type = determine_network_type(network, ip)
        super().__init__(
            candidate_type=CandidateType.PEER_REFLEXIVE,
            network_type=network_type,
            address=address,
            port=port,
            component=component,
            candidate_id=candidate_id,
            resolved_addr=(_transport(network_type), ip, port),
            foundation_override=foundation,
            priority_override=priority,
            related_address=CandidateRelatedAddress(rel_addr, rel_port),
            extensions=extensions,
        )


class CandidateServerReflexive(Candidate):
    """A candidate learnt from a STUN server's view of our address."""

    def __init__(
        self,
        *,
        network: str = "",
        address: str = "",
        port: int = 0,
        component: int = 0,
        priority: int = 0,
        foundation: str = "",
        rel_addr: str = "",
        rel_port: int = 0,
        candidate_id: str = "",
        extensions: Iterable[CandidateExtension] | None = None,
    ) -> None:
        ip = _parse_ip(address)
        network_type = determine_network_type(network, ip)
        super().__init__(
            candidate_type=CandidateType.SERVER_REFLEXIVE,
            network_type=network_type,
            address=address,
            port=port,
            component=component,
            candidate_id=candidate_id,
            resolved_addr=("udp", ip, port),
            foundation_override=foundation,
            priority_override=priority,
            related_address=CandidateRelatedAddress(rel_addr, rel_port),
            extensions=extensions,
        )


class CandidateRelay(Candidate):
    """A candidate allocated on a TURN relay server."""

    def __init__(
        self,
        *,
        network: str = "",
        address: str = "",
        port: int = 0,
        component: int = 0,
        priority: int = 0,
        foundation: str = "",
        rel_addr: str = "",
        rel_port: int = 0,
        relay_protocol: str = "",
        on_close: Callable[[], None] | None = None,
        candidate_id: str = "",
        extensions: Iterable[CandidateExtension] | None = None,
    ) -> None:
        ip = _parse_ip(address)
        network_type = determine_network_type(network, ip)
        super().__init__(
            candidate_type=CandidateType.RELAY,
            network_type=network_type,
            address=address,
            port=port,
            component=component,
            candidate_id=candidate_id,
            resolved_addr=("udp", ip, port),
            foundation_override=foundation,
            priority_override=priority,
            related_address=CandidateRelatedAddress(rel_addr, rel_port),
            extensions=extensions,
        )
        self.relay_protocol = relay_protocol
        self.on_close = on_close

    def local_preference(self) -> int:
        """Local preference raised by the protocol used to reach the relay."""
        if self.relay_protocol in (RELAY_PROTOCOL_TLS, RELAY_PROTOCOL_DTLS):
            relay_preference = 2
        elif self.relay_protocol == RELAY_PROTOCOL_TCP:
            relay_preference = 1
        else:
            relay_preference = 0
        return (Candidate.local_preference(self) + relay_preference) & 0xFFFF

    def priority(self) -> int:
        """Candidate priority; the relay protocol does not enter into it."""
        if self.priority_override:
            return self.priority_override
        value = (
            (1 << 24) * self.type_preference()
            + (1 << 8) * Candidate.local_preference(self)
            + ((256 - self.component) & 0xFFFF)
        )
        return value & 0xFFFFFFFF

    def close(self) -> None:
        """Run the close callback, at most once."""
        callback, self.on_close = self.on_close, None
        if callback is not None:
            callback()