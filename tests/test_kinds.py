import ipaddress

import pytest

from icecand.candidate import COMPONENT_RTP, CandidateExtension, NetworkType, TCPType
from icecand.candidate_type import CandidateType
from icecand.errors import AddressParseError, DetermineNetworkTypeError
from icecand.kinds import (
    CandidateHost,
    CandidatePeerReflexive,
    CandidateRelay,
    CandidateServerReflexive,
)
from icecand.related_address import CandidateRelatedAddress

LOCALHOST = "127.0.0.1"
V6 = "fcd9:e3b8:12ce:9fc5:74a5:c6bb:d8b:e08a"


@pytest.mark.parametrize(
    "candidate, expected",
    [
        (CandidateHost(network="udp", address="10.0.0.1", component=COMPONENT_RTP), 2130706431),
        (
            CandidateHost(
                network="tcp", address="10.0.0.1", component=COMPONENT_RTP, tcp_type=TCPType.ACTIVE
            ),
            1675624447,
        ),
        (
            CandidateHost(
                network="tcp", address="10.0.0.1", component=COMPONENT_RTP, tcp_type=TCPType.PASSIVE
            ),
            1671430143,
        ),
        (
            CandidateHost(
                network="tcp",
                address="10.0.0.1",
                component=COMPONENT_RTP,
                tcp_type=TCPType.SIMULTANEOUS_OPEN,
            ),
            1667235839,
        ),
        (
            CandidatePeerReflexive(network="udp", address="10.0.0.1", component=COMPONENT_RTP),
            1862270975,
        ),
        (
            CandidateServerReflexive(network="udp", address="10.0.0.1", component=COMPONENT_RTP),
            1694498815,
        ),
        (CandidateRelay(network="udp", address="10.0.0.1", component=COMPONENT_RTP), 16777215),
    ],
)
def test_candidate_priority(candidate, expected):
    assert candidate.priority() == expected


@pytest.mark.parametrize(
    "tcp_type, expected",
    [
        (TCPType.SIMULTANEOUS_OPEN, 1407188991),
        (TCPType.ACTIVE, 1402994687),
        (TCPType.PASSIVE, 1398800383),
    ],
)
def test_peer_reflexive_tcp6_priority(tcp_type, expected):
    candidate = CandidatePeerReflexive(network="tcp", address="::1", component=COMPONENT_RTP)
    candidate.tcp_type = tcp_type
    assert candidate.network_type == NetworkType.TCP6
    assert candidate.priority() == expected


@pytest.mark.parametrize(
    "candidate, expected",
    [
        (
            CandidateHost(network="udp4", address="10.0.75.1", port=53634, component=1),
            "4273957277 1 udp 2130706431 10.0.75.1 53634 typ host",
        ),
        (
            CandidateServerReflexive(
                network="udp4",
                address="191.228.238.68",
                port=53991,
                component=1,
                rel_addr="192.168.0.274",
                rel_port=53991,
            ),
            "647372371 1 udp 1694498815 191.228.238.68 53991 typ srflx raddr 192.168.0.274 rport 53991",
        ),
        (
            CandidateRelay(
                network="udp4",
                address="50.0.0.1",
                port=5000,
                component=1,
                rel_addr="192.168.0.1",
                rel_port=5001,
            ),
            "848194626 1 udp 16777215 50.0.0.1 5000 typ relay raddr 192.168.0.1 rport 5001",
        ),
        (
            CandidateHost(
                network="tcp4",
                address="192.168.0.196",
                port=0,
                component=1,
                priority=2128609279,
                tcp_type=TCPType.ACTIVE,
            ),
            "1052353102 1 tcp 2128609279 192.168.0.196 0 typ host tcptype active",
        ),
        (
            CandidateHost(
                network="udp4",
                address="e2494022-4d9a-4c1e-a750-cc48d4f8d6ee.local",
                port=60542,
                component=1,
            ),
            "1380287402 1 udp 2130706431 e2494022-4d9a-4c1e-a750-cc48d4f8d6ee.local 60542 typ host",
        ),
        (
            CandidateHost(
                network="udp4", address=LOCALHOST, port=80, component=1, priority=500, foundation=" "
            ),
            " 1 udp 500 127.0.0.1 80 typ host",
        ),
        (
            CandidateHost(
                network="udp4",
                address=LOCALHOST,
                port=80,
                component=1,
                priority=500,
                foundation="+/3713fhi",
            ),
            "+/3713fhi 1 udp 500 127.0.0.1 80 typ host",
        ),
        (
            CandidateHost(
                network="udp6", address=V6, port=53987, component=1, priority=500, foundation="750"
            ),
            f"750 1 udp 500 {V6} 53987 typ host",
        ),
    ],
)
def test_marshal(candidate, expected):
    assert candidate.marshal() == expected


def test_marshal_strips_zone_id():
    candidate = CandidateHost(
        network="udp6",
        address=V6 + "%Local Connection",
        port=53987,
        priority=500,
        foundation="750",
    )
    assert candidate.marshal() == f"750 0 udp 500 {V6} 53987 typ host"


def test_mdns_host_defaults_to_udp4_without_resolution():
    candidate = CandidateHost(network="tcp", address="name.local", port=1)
    assert candidate.network_type == NetworkType.UDP4
    assert candidate.resolved_addr is None


def test_host_resolved_address_follows_transport():
    udp = CandidateHost(network="udp", address="10.0.0.1", port=1000)
    tcp = CandidateHost(network="tcp", address="10.0.0.1", port=1000)
    assert udp.resolved_addr == ("udp", ipaddress.ip_address("10.0.0.1"), 1000)
    assert tcp.resolved_addr == ("tcp", ipaddress.ip_address("10.0.0.1"), 1000)


def test_ipv6_address_on_udp4_network_gives_udp6():
    candidate = CandidateHost(network="udp4", address=V6, port=1)
    assert candidate.network_type == NetworkType.UDP6


def test_server_reflexive_and_relay_resolve_to_udp():
    srflx = CandidateServerReflexive(network="tcp", address="10.0.0.1", port=5)
    relay = CandidateRelay(network="tcp", address="10.0.0.1", port=5)
    assert srflx.resolved_addr[0] == "udp"
    assert relay.resolved_addr[0] == "udp"
    assert srflx.network_type == NetworkType.TCP4


def test_peer_reflexive_tcp_resolves_to_tcp():
    prflx = CandidatePeerReflexive(network="tcp", address="10.0.0.1", port=5)
    assert prflx.resolved_addr[0] == "tcp"


def test_related_address_is_kept():
    srflx = CandidateServerReflexive(
        network="udp", address="10.0.0.1", port=5, rel_addr="192.168.1.1", rel_port=6
    )
    assert srflx.related_address == CandidateRelatedAddress("192.168.1.1", 6)
    assert srflx.candidate_type == CandidateType.SERVER_REFLEXIVE


@pytest.mark.parametrize(
    "factory",
    [CandidateHost, CandidatePeerReflexive, CandidateServerReflexive, CandidateRelay],
)
def test_invalid_address_raises(factory):
    with pytest.raises(AddressParseError):
        factory(network="udp", address="50.0.0.^^1", port=1)


def test_unknown_network_raises():
    with pytest.raises(DetermineNetworkTypeError):
        CandidateRelay(network="quic", address="10.0.0.1", port=1)


def test_candidate_id_is_kept_or_generated():
    named = CandidateHost(network="udp", address="10.0.0.1", candidate_id="fixed-id")
    first = CandidateHost(network="udp", address="10.0.0.1")
    second = CandidateHost(network="udp", address="10.0.0.1")
    assert named.id == "fixed-id"
    assert first.id.startswith("candidate:")
    assert first.id != second.id


def test_foundation_ignores_port_but_not_address():
    a80 = CandidateHost(network="udp", address="10.0.0.1", port=80)
    a8080 = CandidateHost(network="udp", address="10.0.0.1", port=8080)
    b80 = CandidateHost(network="udp", address="10.0.0.2", port=80)
    assert a80.foundation() == a8080.foundation()
    assert a80.foundation() != b80.foundation()


def test_equal_and_not_equal():
    first = CandidateHost(network="udp", address="10.0.0.1", port=80)
    same = CandidateHost(network="udp", address="10.0.0.1", port=80)
    other = CandidateHost(network="udp", address="10.0.0.1", port=81)
    assert first.equal(same)
    assert not first.equal(other)


def test_deep_equal_relay_ignores_extension_order():
    first = CandidateRelay(
        network="udp4",
        address="10.0.0.10",
        port=5000,
        rel_addr="10.0.0.2",
        rel_port=5001,
        extensions=[CandidateExtension("generation", "0"), CandidateExtension("network-id", "1")],
    )
    second = CandidateRelay(
        network="udp4",
        address="10.0.0.10",
        port=5000,
        rel_addr="10.0.0.2",
        rel_port=5001,
        extensions=[CandidateExtension("network-id", "1"), CandidateExtension("generation", "0")],
    )
    assert first.deep_equal(second) is True


@pytest.mark.parametrize("factory", [CandidatePeerReflexive, CandidateServerReflexive])
def test_deep_equal_same_extensions(factory):
    extensions = [
        CandidateExtension("generation", "0"),
        CandidateExtension("network-id", "2"),
        CandidateExtension("network-cost", "10"),
    ]
    first = factory(
        network="tcp4",
        address="192.0.2.15",
        port=50000,
        rel_addr="10.0.0.1",
        rel_port=12345,
        extensions=extensions,
    )
    second = factory(
        network="tcp4",
        address="192.0.2.15",
        port=50000,
        rel_addr="10.0.0.1",
        rel_port=12345,
        extensions=extensions,
    )
    assert first.deep_equal(second) is True


def test_deep_equal_different_address():
    first = CandidateHost(
        network="tcp4",
        address="192.168.0.196",
        priority=2128609279,
        foundation="1052353102",
        tcp_type=TCPType.ACTIVE,
        extensions=[CandidateExtension("tcptype", "active"), CandidateExtension("generation", "0")],
    )
    second = CandidateHost(
        network="tcp4",
        address="192.168.0.197",
        priority=2128609279,
        foundation="1052353102",
        tcp_type=TCPType.ACTIVE,
        extensions=[CandidateExtension("tcptype", "active"), CandidateExtension("generation", "0")],
    )
    assert first.deep_equal(second) is False


def test_host_tcptype_extension_reported():
    candidate = CandidateHost(
        network="tcp4", address=V6, port=53987, priority=500, foundation="750", tcp_type=TCPType.ACTIVE
    )
    assert candidate.get_extension("tcptype") == CandidateExtension("tcptype", "active")
    assert candidate.marshal_extensions() == "tcptype active"


@pytest.mark.parametrize(
    "network, protocol, expected",
    [
        ("udp", "", 65535),
        ("udp", "tcp", 0),
        ("udp", "tls", 1),
        ("udp", "dtls", 1),
        ("tcp", "", 8191),
        ("tcp", "tls", 8193),
        ("tcp", "tcp", 8192),
    ],
)
def test_relay_local_preference(network, protocol, expected):
    relay = CandidateRelay(network=network, address="10.0.0.1", port=1, relay_protocol=protocol)
    assert relay.local_preference() == expected


def test_relay_protocol_does_not_change_priority():
    relay = CandidateRelay(
        network="udp", address="10.0.0.1", port=1, component=1, relay_protocol="tls"
    )
    assert relay.priority() == 16777215


def test_relay_close_runs_callback_once():
    calls = []
    relay = CandidateRelay(
        network="udp", address="10.0.0.1", port=1, on_close=lambda: calls.append(1)
    )
    relay.close()
    relay.close()
    assert calls == [1]
    assert relay.on_close is None