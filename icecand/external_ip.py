"""1:1 NAT mapping from local to external IP addresses."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Union

from .candidate_type import CandidateType
from .errors import (
    ExternalMappedIPNotFoundError,
    InvalidNAT1To1IPMappingError,
    UnsupportedNAT1To1IPCandidateTypeError,
)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def validate_ip_string(ip_str: str) -> tuple[IPAddress, bool]:
    """Parse an IP address and report whether it is IPv4.

    IPv4-mapped IPv6 addresses count as IPv4.
    """
    if "%" in ip_str:
        raise InvalidNAT1To1IPMappingError(ip_str)
    try:
        ip = ipaddress.ip_address(ip_str)
    except ValueError:
        raise InvalidNAT1To1IPMappingError(ip_str) from None
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return ip, isinstance(ip, ipaddress.IPv4Address)


@dataclass
class IPMapping:
    """Local-to-external mapping for one IP family."""

    ip_sole: IPAddress | None = None
    ip_map: dict[IPAddress, IPAddress] = field(default_factory=dict)
    valid: bool = False

    def set_sole_ip(self, ip: IPAddress) -> None:
        """Use ``ip`` as the one external address for every local address."""
        if self.ip_sole is not None or self.ip_map:
            raise InvalidNAT1To1IPMappingError()
        self.ip_sole = ip
        self.valid = True

    def add_ip_mapping(self, local_ip: IPAddress, external_ip: IPAddress) -> None:
        """Map ``local_ip`` to ``external_ip``."""
        if self.ip_sole is not None or local_ip in self.ip_map:
            raise InvalidNAT1To1IPMappingError()
        self.ip_map[local_ip] = external_ip
        self.valid = True

    def find_external_ip(self, local_ip: IPAddress) -> IPAddress:
        """External address for ``local_ip``; itself when nothing is mapped."""
        if not self.valid:
            return local_ip
        if self.ip_sole is not None:
            return self.ip_sole
        try:
            return self.ip_map[local_ip]
        except KeyError:
            raise ExternalMappedIPNotFoundError(str(local_ip)) from None


@dataclass
class ExternalIPMapper:
    """Mappings for both IP families and the candidate type they produce."""

    candidate_type: CandidateType
    ipv4_mapping: IPMapping = field(default_factory=IPMapping)
    ipv6_mapping: IPMapping = field(default_factory=IPMapping)

    def find_external_ip(self, local_ip_str: str) -> IPAddress:
        """External address for the local address given as a string."""
        local_ip, is_ipv4 = validate_ip_string(local_ip_str)
        mapping = self.ipv4_mapping if is_ipv4 else self.ipv6_mapping
        return mapping.find_external_ip(local_ip)


def new_external_ip_mapper(
    candidate_type: CandidateType, ips: list[str] | None
) -> ExternalIPMapper | None:
    """Build a mapper from ``ext`` or ``ext/local`` entries; None when empty."""
    if not ips:
        return None
    if candidate_type == CandidateType.UNSPECIFIED:
        candidate_type = CandidateType.HOST
    elif candidate_type not in (CandidateType.HOST, CandidateType.SERVER_REFLEXIVE):
        raise UnsupportedNAT1To1IPCandidateTypeError(str(candidate_type))

    mapper = ExternalIPMapper(candidate_type=candidate_type)

    for entry in ips:
        parts = entry.split("/")
        if len(parts) > 2:
            raise InvalidNAT1To1IPMappingError(entry)

        external_ip, external_is_v4 = validate_ip_string(parts[0])
        mapping = mapper.ipv4_mapping if external_is_v4 else mapper.ipv6_mapping

        if len(parts) == 1:
            mapping.set_sole_ip(external_ip)
            continue

        local_ip, local_is_v4 = validate_ip_string(parts[1])
        if external_is_v4 != local_is_v4:
            raise InvalidNAT1To1IPMappingError(entry)
        mapping.add_ip_mapping(local_ip, external_ip)

    return mapper