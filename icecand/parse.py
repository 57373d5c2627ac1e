"""Parsing of SDP ``candidate`` attribute values (RFC 5245 section 15.1)."""

from __future__ import annotations

from .candidate import Candidate, CandidateExtension, TCPType, remove_zone_id
from .errors import (
    AttributeTooShortError,
    ParseComponentError,
    ParseExtensionError,
    ParseFoundationError,
    ParsePortError,
    ParsePriorityError,
    ParseRelatedAddrError,
    ParseTCPTypeError,
    UnknownCandidateTypError,
)
from .kinds import (
    CandidateHost,
    CandidatePeerReflexive,
    CandidateRelay,
    CandidateServerReflexive,
)

_SP = " "
_PREFIX = "candidate:"
_MAX_PORT = 65535


class _TokenError(ValueError):
    """A single token of a candidate string is malformed."""


def _is_ice_char(char: str) -> bool:
    return (
        ("A" <= char <= "Z")
        or ("a" <= char <= "z")
        or ("0" <= char <= "9")
        or char in "+/"
    )


def _is_byte_string_char(char: str) -> bool:
    code = ord(char)
    return 0x01 <= code <= 0x09 or 0x0B <= code <= 0x0C or 0x0E <= code <= 0xFF


def _read_char_token(raw: str, start: int, limit: int) -> tuple[str, int]:
    """Read ice-chars up to a space or the end; at most ``limit`` of them."""
    for offset, char in enumerate(raw[start:]):
        if char == _SP:
            return raw[start : start + offset], start + offset + 1
        if offset == limit:
            raise _TokenError(
                f"token too long: {raw[start:start + offset]} expected 1x{limit}"
            )
        if not _is_ice_char(char):
            raise _TokenError(f"invalid ice-char token: {char}")
    return raw[start:], len(raw)


def _read_string_token(raw: str, start: int) -> tuple[str, int]:
    """Read any characters up to a space or the end."""
    end = raw.find(_SP, start)
    if end == -1:
        return raw[start:], len(raw)
    return raw[start:end], end + 1


def _read_digit_token(raw: str, start: int, limit: int) -> tuple[int, int]:
    """Read a decimal number of at most ``limit`` digits."""
    value = 0
    for offset, char in enumerate(raw[start:]):
        if char == _SP:
            return value, start + offset + 1
        if offset == limit:
            raise _TokenError(
                f"token too long: {raw[start:start + offset]} expected 1x{limit}"
            )
        if not "0" <= char <= "9":
            raise _TokenError(f"invalid digit token: {char}")
        value = value * 10 + int(char)
    return value, len(raw)


def _read_port(raw: str, start: int) -> tuple[int, int]:
    """Read an RFC 4566 port."""
    port, pos = _read_digit_token(raw, start, 5)
    if port > _MAX_PORT:
        raise _TokenError(f"invalid RFC 4566 port {port}")
    return port, pos


def _read_byte_string(raw: str, start: int) -> tuple[str, int]:
    """Read a byte-string: any character but NUL, CR and LF, up to a space."""
    for offset, char in enumerate(raw[start:]):
        if char == _SP:
            return raw[start : start + offset], start + offset + 1
        if not _is_byte_string_char(char):
            raise _TokenError(f"invalid byte-string character: {char!r}")
    return raw[start:], len(raw)


def _read_related_address(raw: str, start: int) -> tuple[str, int, int]:
    """Read an optional ``raddr <addr> rport <port>``; return addr, port, position."""
    key, pos = _read_string_token(raw, start)
    if key != "raddr":
        return "", 0, start
    if pos >= len(raw):
        raise ParseRelatedAddrError(f"expected raddr value in {raw}")
    raddr, pos = _read_string_token(raw, pos)
    if pos >= len(raw):
        raise ParseRelatedAddrError(f"expected rport in {raw}")
    key, pos = _read_string_token(raw, pos)
    if key != "rport":
        raise ParseRelatedAddrError(f"expected rport in {raw}")
    if pos >= len(raw):
        raise ParseRelatedAddrError(f"expected rport value in {raw}")
    try:
        rport, pos = _read_port(raw, pos)
    except _TokenError as exc:
        raise ParseRelatedAddrError(str(exc)) from exc
    return raddr, rport, pos


def unmarshal_candidate_extensions(raw: str) -> tuple[list[CandidateExtension], str]:
    """Parse ``key value`` extension pairs.

    Returns the extensions other than ``tcptype`` and the raw ``tcptype``
    value, empty when absent. Empty values are accepted.
    """
    extensions: list[CandidateExtension] = []
    tcp_type_raw = ""
    if not raw:
        return extensions, tcp_type_raw
    if raw[0] == _SP:
        raise ParseExtensionError(f"unexpected space {raw}")

    position = 0
    while position < len(raw):
        try:
            key, position = _read_byte_string(raw, position)
        except _TokenError as exc:
            raise ParseExtensionError(f"failed to read key {exc}") from exc
        value = ""
        if position < len(raw):
            try:
                value, position = _read_byte_string(raw, position)
            except _TokenError as exc:
                raise ParseExtensionError(f"failed to read value {exc}") from exc
        if key == "tcptype":
            tcp_type_raw = value
            continue
        extensions.append(CandidateExtension(key, value))
    return extensions, tcp_type_raw


def unmarshal_candidate(raw: str) -> Candidate:
    """Parse a candidate attribute value, with or without ``candidate:``."""
    if raw.startswith(_PREFIX):
        raw = raw[len(_PREFIX) :]

    try:
        foundation, pos = _read_char_token(raw, 0, 32)
    except _TokenError as exc:
        raise ParseFoundationError(f"{exc} in {raw}") from exc
    # An empty foundation is not compliant but occurs in practice.
    if foundation == "":
        foundation = " "

    if pos >= len(raw):
        raise AttributeTooShortError(f"expected component in {raw}")
    try:
        component, pos = _read_digit_token(raw, pos, 5)
    except _TokenError as exc:
        raise ParseComponentError(f"{exc} in {raw}") from exc

    if pos >= len(raw):
        raise AttributeTooShortError(f"expected transport in {raw}")
    protocol, pos = _read_string_token(raw, pos)

    if pos >= len(raw):
        raise AttributeTooShortError(f"expected priority in {raw}")
    try:
        priority, pos = _read_digit_token(raw, pos, 10)
    except _TokenError as exc:
        raise ParsePriorityError(f"{exc} in {raw}") from exc

    if pos >= len(raw):
        raise AttributeTooShortError(f"expected address in {raw}")
    address, pos = _read_string_token(raw, pos)
    address = remove_zone_id(address)

    if pos >= len(raw):
        raise AttributeTooShortError(f"expected port in {raw}")
    try:
        port, pos = _read_port(raw, pos)
    except _TokenError as exc:
        raise ParsePortError(f"{exc} in {raw}") from exc

    type_key, pos = _read_string_token(raw, pos)
    if type_key != "typ":
        raise UnknownCandidateTypError(type_key)

    if pos >= len(raw):
        raise AttributeTooShortError(f"expected candidate type in {raw}")
    typ, pos = _read_string_token(raw, pos)

    raddr, rport, pos = _read_related_address(raw, pos)

    tcp_type = TCPType.UNSPECIFIED
    extensions: list[CandidateExtension] = []
    if pos < len(raw):
        extensions, tcp_type_raw = unmarshal_candidate_extensions(raw[pos:])
        if tcp_type_raw:
            tcp_type = TCPType.parse(tcp_type_raw)
            if tcp_type == TCPType.UNSPECIFIED:
                raise ParseTCPTypeError(
                    f"invalid or unsupported TCPtype {tcp_type_raw}"
                )

    common = {
        "network": protocol,
        "address": address,
        "port": port,
        "component": component & 0xFFFF,
        "priority": priority & 0xFFFFFFFF,
        "foundation": foundation,
    }
    candidate: Candidate
    if typ == "host":
        candidate = CandidateHost(tcp_type=tcp_type, **common)
    elif typ == "srflx":
        candidate = CandidateServerReflexive(rel_addr=raddr, rel_port=rport, **common)
    elif typ == "prflx":
        candidate = CandidatePeerReflexive(rel_addr=raddr, rel_port=rport, **common)
    elif typ == "relay":
        candidate = CandidateRelay(rel_addr=raddr, rel_port=rport, **common)
    else:
        raise UnknownCandidateTypError(typ)

    candidate.set_extensions(extensions)
    return candidate


def copy_candidate(candidate: Candidate) -> Candidate:
    """A fresh candidate parsed from the marshalled form of ``candidate``."""
    copied = unmarshal_candidate(candidate.marshal())
    if isinstance(candidate, CandidateRelay) and isinstance(copied, CandidateRelay):
        copied.relay_protocol = candidate.relay_protocol
    return copied