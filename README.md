# icecand

Interactive Connectivity Establishment (ICE) candidates as plain Python objects.

`icecand` lets you:

- parse candidate lines as they appear in SDP (`candidate:...`) and turn
  candidates back into that form;
- compute candidate priorities (RFC 8445 §5.1.2.1, with the TCP local
  preference rules of RFC 6544) and foundations;
- read, add and remove candidate extension attributes (`generation`,
  `network-id`, `tcptype`, ...);
- combine a local and a remote candidate into a pair, compute the pair's
  priority and keep per-pair traffic statistics;
- map local addresses to external ones for hosts behind a 1:1 NAT.

It has no dependencies outside the standard library.

## Installation

```
pip install icecand
```

## Modules

| Module | Contents |
| --- | --- |
| `icecand.candidate` | `Candidate`, `NetworkType`, `TCPType`, `CandidateExtension`, `remove_zone_id`, `determine_network_type` |
| `icecand.kinds` | `CandidateHost`, `CandidateServerReflexive`, `CandidatePeerReflexive`, `CandidateRelay` |
| `icecand.parse` | `unmarshal_candidate`, `unmarshal_candidate_extensions`, `copy_candidate` |
| `icecand.candidate_type` | `CandidateType`, `contains_candidate_type` |
| `icecand.related_address` | `CandidateRelatedAddress`, `related_address_equal`, `format_related_address` |
| `icecand.pair` | `CandidatePair` |
| `icecand.pair_state` | `CandidatePairState`, `describe_pair_state` |
| `icecand.external_ip` | `ExternalIPMapper`, `IPMapping`, `new_external_ip_mapper`, `validate_ip_string` |
| `icecand.errors` | `IceError` and its subclasses |

## Parsing and marshalling

```python
from icecand.parse import unmarshal_candidate

cand = unmarshal_candidate(
    "candidate:647372371 1 udp 1694498815 191.228.238.68 53991 "
    "typ srflx raddr 192.168.0.274 rport 53991 generation 0"
)
print(cand.priority())      # 1694498815
print(cand.extensions())    # [CandidateExtension(key='generation', value='0')]
print(cand.marshal())
# 647372371 1 udp 1694498815 191.228.238.68 53991 typ srflx raddr 192.168.0.274 rport 53991 generation 0
```

The `candidate:` prefix is optional, and an IPv6 zone (`%eth0`) on the
address is dropped. The result is a `CandidateHost`, `CandidateServerReflexive`,
`CandidatePeerReflexive` or `CandidateRelay` according to the `typ` field.

An input that cannot be parsed raises a subclass of
`icecand.errors.CandidateParseError` (itself a `ValueError`), for example
`ParsePortError`, `ParseExtensionError` or `UnknownCandidateTypError`.

`unmarshal_candidate_extensions("a b c d")` parses just the trailing
extension pairs and returns them together with the raw `tcptype` value (an
empty string when absent). `copy_candidate(cand)` returns a fresh candidate
parsed from `cand.marshal()`, keeping the relay protocol of a relay candidate.

## Building candidates

```python
from icecand.kinds import CandidateHost, CandidateRelay
from icecand.candidate import TCPType

host = CandidateHost(network="tcp4", address="192.168.0.196", port=0,
                     component=1, tcp_type=TCPType.ACTIVE)
print(host.priority())      # 1675624447
print(host.extensions())    # [CandidateExtension(key='tcptype', value='active')]

relay = CandidateRelay(network="udp4", address="50.0.0.1", port=5000,
                       component=1, rel_addr="192.168.0.1", rel_port=5001)
print(relay.priority())     # 16777215
```

The `component` defaults to 0; pass `1` for RTP. When `priority` or
`foundation` is given it is used as is; otherwise the priority is computed
from the type, local preference and component, and the foundation is a CRC-32
of the type, address and network type. For TCP candidates the type
preference is lowered by `tcp_priority_offset` (27 by default).

Host candidates whose address ends in `.local` (mDNS names) are accepted and
treated as UDP over IPv4; any other address must be a valid IP address, or
`AddressParseError` is raised.

`CandidateRelay.local_preference()` adds 2 for a `tls` or `dtls`
`relay_protocol` and 1 for `tcp`. `CandidateRelay.close()` runs the
`on_close` callback at most once.

`Candidate.seen(outbound)` stamps `last_sent` or `last_received` with the
current time.

## Extensions

```python
from icecand.candidate import CandidateExtension

host.add_extension(CandidateExtension("generation", "0"))
host.get_extension("generation")   # CandidateExtension(key='generation', value='0')
host.get_extension("missing")      # None
host.remove_extension("tcptype")   # True
host.marshal_extensions()          # 'generation 0'
```

Adding an extension whose key already exists replaces it. Adding `tcptype`
sets the candidate's TCP type and raises `ParseTCPTypeError` for an unknown
value; an empty key raises `ParseExtensionError`.

`equal` compares candidates by resolved address, network type, candidate
type, address, port, TCP type and related address; `deep_equal` also
compares the extensions, ignoring their order.

## Candidate pairs

```python
from icecand.pair import CandidatePair
from icecand.pair_state import CandidatePairState
from datetime import timedelta

pair = CandidatePair(host, relay, controlling=True)
pair.priority()
pair.state is CandidatePairState.WAITING     # True
pair.update_packet_sent(1200)
pair.bytes_sent                              # 1200
pair.update_round_trip_time(timedelta(milliseconds=20))
pair.current_round_trip_time                 # 0.02
```

The pair priority follows RFC 5245 §5.7.2. Besides packet and byte counts,
a pair counts connectivity requests and responses sent and received
(`update_request_sent`, `update_response_sent`, `update_request_received`)
and keeps the times of the first and last of each. `describe_pair_state(n)`
names a state given as a number and returns
`"Unknown candidate pair state"` for values outside the enum.

## 1:1 NAT mapping

```python
from icecand.external_ip import new_external_ip_mapper
from icecand.candidate_type import CandidateType

mapper = new_external_ip_mapper(CandidateType.UNSPECIFIED,
                                ["1.2.3.4/10.0.0.1", "2200::1/fe80::1"])
mapper.candidate_type                 # CandidateType.HOST
mapper.find_external_ip("10.0.0.1")   # IPv4Address('1.2.3.4')
```

Each entry is either a sole external address (`"1.2.3.4"`) or an
`external/local` pair; the two styles cannot be mixed within one IP family,
and both addresses of a pair must be of the same family. Invalid entries
raise `InvalidNAT1To1IPMappingError`. An empty list gives `None`. Only host
and server reflexive candidate types are accepted (unspecified means host);
others raise `UnsupportedNAT1To1IPCandidateTypeError`. Looking up an address
with no mapping in a family that has explicit pairs raises
`ExternalMappedIPNotFoundError`; in a family with no mapping at all the
local address is returned unchanged.

## What it does not do

This package models candidates and pairs only. It does not gather
candidates from network interfaces, STUN or TURN servers, open sockets,
send or receive packets, or run connectivity checks and nomination; there
is no agent and no command-line tool.

## Running the tests

```
pip install icecand[test]
pytest
```