"""Exception types raised while parsing and handling ICE candidates."""

from __future__ import annotations


class IceError(Exception):
    """Base class for every error raised by this package."""

    message = "ice error"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)


class CandidateParseError(IceError, ValueError):
    """A candidate string or attribute could not be parsed."""

    message = "failed to parse candidate"


class AttributeTooShortError(CandidateParseError):
    message = "attribute not long enough to be ICE candidate"


class ParseFoundationError(CandidateParseError):
    message = "failed to parse foundation"


class ParseComponentError(CandidateParseError):
    message = "failed to parse component"


class ParsePriorityError(CandidateParseError):
    message = "failed to parse priority"


class ParsePortError(CandidateParseError):
    message = "failed to parse port"


class ParseRelatedAddrError(CandidateParseError):
    message = "failed to parse related addresses"


class ParseExtensionError(CandidateParseError):
    message = "failed to parse extension"


class ParseTCPTypeError(CandidateParseError):
    message = "failed to parse TCP type"


class UnknownCandidateTypError(CandidateParseError):
    message = "unknown candidate typ"


class AddressParseError(CandidateParseError):
    message = "failed to parse address"


class DetermineNetworkTypeError(IceError, ValueError):
    message = "unable to determine networkType"


class InvalidNAT1To1IPMappingError(IceError, ValueError):
    message = "invalid 1:1 NAT IP mapping"


class ExternalMappedIPNotFoundError(IceError, LookupError):
    message = "external mapped IP not found"


class UnsupportedNAT1To1IPCandidateTypeError(IceError, ValueError):
    message = "unsupported 1:1 NAT IP candidate type"