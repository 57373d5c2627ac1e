"""ICE candidates: parsing, marshalling, priorities, candidate pairs and 1:1 NAT address mapping."""

__version__ = "0.1.0"

__all__ = [
    "candidate",
    "candidate_type",
    "errors",
    "external_ip",
    "kinds",
    "pair",
    "pair_state",
    "parse",
    "related_address",
]