"""ICE candidates: network and TCP types, extensions and the candidate itself."""

from __future__ import annotations

import ipaddress
import secrets
import string
import zlib
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, Optional, Tuple, Union

from .candidate_type import CandidateType
from .errors import DetermineNetworkTypeError, ParseExtensionError, ParseTCPTypeError
from .related_address import (
    CandidateRelatedAddress,
    format_related_address,
    related_address_equal,
)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

# A resolved transport address: (transport, ip, port), transport being "udp" or "tcp".
ResolvedAddr = Optional[Tuple[str, IPAddress, int]]

RECEIVE_MTU = 8192
DEFAULT_LOCAL_PREFERENCE = 65535
DEFAULT_TCP_PRIORITY_OFFSET = 27
COMPONENT_RTP = 1

_UNKNOWN = "Unknown"
_ID_ALPHABET = string.ascii_letters + string.digits


class NetworkType(IntEnum):
    """The transport and IP family of a candidate."""

    UNSPECIFIED = 0
    UDP4 = 1
    UDP6 = 2
    TCP4 = 3
    TCP6 = 4

    def __str__(self) -> str:
        return _NETWORK_NAMES.get(self, _UNKNOWN)

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    def is_tcp(self) -> bool:
        """Whether the network type is a TCP one."""
        return self in (NetworkType.TCP4, NetworkType.TCP6)

    def short(self) -> str:
        """Transport name without the IP family, as used in SDP."""
        if self in (NetworkType.UDP4, NetworkType.UDP6):
            return "udp"
        if self.is_tcp():
            return "tcp"
        return _UNKNOWN

    @classmethod
    def parse(cls, value: str) -> "NetworkType":
        """Parse a name such as ``udp4``; case is ignored."""
        for member, name in _NETWORK_NAMES.items():
            if name == value.lower():
                return member
        raise DetermineNetworkTypeError(f"unknown network type {value}")


_NETWORK_NAMES = {
    NetworkType.UDP4: "udp4",
    NetworkType.UDP6: "udp6",
    NetworkType.TCP4: "tcp4",
    NetworkType.TCP6: "tcp6",
}


class TCPType(IntEnum):
    """Directionality of a TCP candidate (RFC 6544)."""

    UNSPECIFIED = 0
    ACTIVE = 1
    PASSIVE = 2
    SIMULTANEOUS_OPEN = 3

    def __str__(self) -> str:
        return _TCP_NAMES.get(self, _UNKNOWN)

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    @classmethod
    def parse(cls, value: str) -> "TCPType":
        """Parse a TCP type name; unknown names give ``UNSPECIFIED``."""
        lowered = value.lower()
        for member, name in _TCP_NAMES.items():
            if name and name == lowered:
                return member
        return cls.UNSPECIFIED


_TCP_NAMES = {
    TCPType.UNSPECIFIED: "",
    TCPType.ACTIVE: "active",
    TCPType.PASSIVE: "passive",
    TCPType.SIMULTANEOUS_OPEN: "so",
}


@dataclass(frozen=True)
class CandidateExtension:
    """One extension attribute of a candidate (RFC 5245 section 15.1)."""

    key: str
    value: str


def remove_zone_id(address: str) -> str:
    """Strip an IPv6 zone (``%eth0``) from an address."""
    return address.split("%", 1)[0]


def determine_network_type(network: str, ip: IPAddress | str) -> NetworkType:
    """Pick the network type from a transport name and an IP address."""
    if isinstance(ip, str):
        ip = ipaddress.ip_address(ip)
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    is_v4 = isinstance(ip, ipaddress.IPv4Address)
    lowered = network.lower()
    if lowered.startswith("udp"):
        return NetworkType.UDP4 if is_v4 else NetworkType.UDP6
    if lowered.startswith("tcp"):
        return NetworkType.TCP4 if is_v4 else NetworkType.TCP6
    raise DetermineNetworkTypeError(f"from {network} {ip}")


def _join_host_port(host: str, port: int) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _generate_candidate_id() -> str:
    return "candidate:" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(32))


def _direction_preference(candidate_type: CandidateType, tcp_type: TCPType) -> int:
    if candidate_type in (CandidateType.HOST, CandidateType.RELAY):
        table = {TCPType.ACTIVE: 6, TCPType.PASSIVE: 4, TCPType.SIMULTANEOUS_OPEN: 2}
    elif candidate_type in (CandidateType.PEER_REFLEXIVE, CandidateType.SERVER_REFLEXIVE):
        table = {TCPType.SIMULTANEOUS_OPEN: 6, TCPType.ACTIVE: 4, TCPType.PASSIVE: 2}
    else:
        return 0
    return table.get(tcp_type, 0)


class Candidate:
    """An ICE candidate: a transport address a peer may be reached at."""

    def __init__(
        self,
        *,
        candidate_type: CandidateType = CandidateType.UNSPECIFIED,
        network_type: NetworkType = NetworkType.UNSPECIFIED,
        address: str = "",
        port: int = 0,
        component: int = 0,
        candidate_id: str = "",
        related_address: CandidateRelatedAddress | None = None,
        tcp_type: TCPType = TCPType.UNSPECIFIED,
        resolved_addr: ResolvedAddr = None,
        foundation_override: str = "",
        priority_override: int = 0,
        extensions: Iterable[CandidateExtension] | None = None,
        is_location_tracked: bool = False,
        tcp_priority_offset: int = DEFAULT_TCP_PRIORITY_OFFSET,
    ) -> None:
        self.id = candidate_id or _generate_candidate_id()
        self.candidate_type = candidate_type
        self.network_type = network_type
        self.address = address
        self.port = port
        self.component = component
        self.related_address = related_address
        self.tcp_type = tcp_type
        self.resolved_addr = resolved_addr
        self.foundation_override = foundation_override
        self.priority_override = priority_override
        self.is_location_tracked = is_location_tracked
        self.tcp_priority_offset = tcp_priority_offset
        self.last_sent: datetime | None = None
        self.last_received: datetime | None = None
        self._extensions: list[CandidateExtension] = list(extensions or [])

    def foundation(self) -> str:
        """Foundation used to group similar candidates when freezing."""
        if self.foundation_override:
            return self.foundation_override
        data = f"{self.candidate_type}{self.address}{self.network_type}".encode()
        return str(zlib.crc32(data))

    def local_preference(self) -> int:
        """Local preference, including TCP directionality (RFC 6544 4.2)."""
        if self.network_type.is_tcp():
            other_pref = 8191
            direction = _direction_preference(self.candidate_type, self.tcp_type)
            return (1 << 13) * direction + other_pref
        return DEFAULT_LOCAL_PREFERENCE

    def type_preference(self) -> int:
        """Type preference, lowered by the TCP offset for TCP candidates."""
        pref = self.candidate_type.preference()
        if pref == 0:
            return 0
        if self.network_type.is_tcp():
            pref = (pref - self.tcp_priority_offset) & 0xFFFF
        return pref

    def priority(self) -> int:
        """Candidate priority as in RFC 8445 section 5.1.2.1."""
        if self.priority_override:
            return self.priority_override
        value = (
            (1 << 24) * self.type_preference()
            + (1 << 8) * self.local_preference()
            + ((256 - self.component) & 0xFFFF)
        )
        return value & 0xFFFFFFFF

    def extensions(self) -> list[CandidateExtension]:
        """Copy of the extensions, with ``tcptype`` first when it is set."""
        result: list[CandidateExtension] = []
        if self.tcp_type != TCPType.UNSPECIFIED:
            result.append(CandidateExtension("tcptype", str(self.tcp_type)))
        result.extend(self._extensions)
        return result

    def get_extension(self, key: str) -> CandidateExtension | None:
        """The first extension with ``key``, or None."""
        for extension in self._extensions:
            if extension.key == key:
                return CandidateExtension(key, extension.value)
        if key == "tcptype" and self.tcp_type != TCPType.UNSPECIFIED:
            return CandidateExtension(key, str(self.tcp_type))
        return None

    def add_extension(self, extension: CandidateExtension) -> None:
        """Add an extension, replacing one with the same key."""
        if extension.key == "tcptype":
            tcp_type = TCPType.parse(extension.value)
            if tcp_type == TCPType.UNSPECIFIED:
                raise ParseTCPTypeError(
                    f"invalid or unsupported TCPtype {extension.value}"
                )
            self.tcp_type = tcp_type
            return
        if not extension.key:
            raise ParseExtensionError("key is empty")
        for position, existing in enumerate(self._extensions):
            if existing.key == extension.key:
                self._extensions[position] = extension
                return
        self._extensions.append(extension)

    def remove_extension(self, key: str) -> bool:
        """Remove the first extension with ``key``; report whether one went."""
        removed = False
        if key == "tcptype":
            self.tcp_type = TCPType.UNSPECIFIED
            removed = True
        for position, existing in enumerate(self._extensions):
            if existing.key == key:
                del self._extensions[position]
                removed = True
                break
        return removed

    def set_extensions(self, extensions: Iterable[CandidateExtension]) -> None:
        """Replace the stored extensions as given."""
        self._extensions = list(extensions)

    def marshal_extensions(self) -> str:
        """Extensions as ``key value`` pairs separated by spaces."""
        return " ".join(f"{ext.key} {ext.value}" for ext in self.extensions())

    def extensions_equal(self, other: Iterable[CandidateExtension]) -> bool:
        """Compare the stored extensions with ``other``, ignoring order."""
        other_list = list(other)
        if len(self._extensions) != len(other_list):
            return False
        return Counter(self._extensions) == Counter(other_list)

    def equal(self, other: "Candidate") -> bool:
        """Compare addresses, types and related address of two candidates."""
        mine, theirs = self.resolved_addr, other.resolved_addr
        if mine != theirs:
            return False
        return (
            self.network_type == other.network_type
            and self.candidate_type == other.candidate_type
            and self.address == other.address
            and self.port == other.port
            and self.tcp_type == other.tcp_type
            and related_address_equal(self.related_address, other.related_address)
        )

    def deep_equal(self, other: "Candidate") -> bool:
        """Like :meth:`equal`, also comparing the extensions."""
        return self.equal(other) and self.extensions_equal(other.extensions())

    def seen(self, outbound: bool) -> None:
        """Record traffic sent (``outbound``) or received now."""
        now = datetime.now()
        if outbound:
            self.last_sent = now
        else:
            self.last_received = now

    def marshal(self) -> str:
        """The SDP ``candidate`` attribute value for this candidate."""
        foundation = self.foundation()
        if foundation == " ":
            foundation = ""
        value = (
            f"{foundation} {self.component} {self.network_type.short()} "
            f"{self.priority()} {remove_zone_id(self.address)} {self.port} "
            f"typ {self.candidate_type}"
        )
        related = self.related_address
        if related is not None and related.address and related.port != 0:
            value += f" raddr {related.address} rport {related.port}"
        extensions = self.marshal_extensions()
        if extensions:
            value += f" {extensions}"
        return value

    def __str__(self) -> str:
        if self.resolved_addr is None:
            resolved = "<nil>"
        else:
            _, ip, port = self.resolved_addr
            resolved = _join_host_port(str(ip), port)
        return (
            f"{self.network_type} {self.candidate_type} "
            f"{_join_host_port(self.address, self.port)}"
            f"{format_related_address(self.related_address)} (resolved: {resolved})"
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"

    def _describe(self) -> dict[str, Any]:
        return {"id": self.id, "marshal": self.marshal()}