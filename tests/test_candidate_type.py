import pytest

from icecand.candidate_type import CandidateType, contains_candidate_type


@pytest.mark.parametrize(
    "candidate_type, want",
    [
        (CandidateType.HOST, "host"),
        (CandidateType.SERVER_REFLEXIVE, "srflx"),
        (CandidateType.PEER_REFLEXIVE, "prflx"),
        (CandidateType.RELAY, "relay"),
        (CandidateType.UNSPECIFIED, "Unknown candidate type"),
    ],
)
def test_string_known_cases(candidate_type, want):
    assert str(candidate_type) == want
    assert f"{candidate_type}" == want


def test_out_of_bounds_value_rejected():
    with pytest.raises(ValueError):
        CandidateType(255)


@pytest.mark.parametrize(
    "candidate_type, want",
    [
        (CandidateType.HOST, 126),
        (CandidateType.PEER_REFLEXIVE, 110),
        (CandidateType.SERVER_REFLEXIVE, 100),
        (CandidateType.RELAY, 0),
        (CandidateType.UNSPECIFIED, 0),
    ],
)
def test_preference(candidate_type, want):
    assert candidate_type.preference() == want


def test_contains_candidate_type_none():
    assert contains_candidate_type(CandidateType.HOST, None) is False


def test_contains_candidate_type_membership():
    types = [CandidateType.HOST, CandidateType.RELAY]
    assert contains_candidate_type(CandidateType.HOST, types) is True
    assert contains_candidate_type(CandidateType.SERVER_REFLEXIVE, types) is False
    assert contains_candidate_type(CandidateType.HOST, []) is False