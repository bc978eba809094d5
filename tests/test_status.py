import pytest

from grpcwire.status import GrpcStatus


def test_documented_codes():
    assert GrpcStatus.from_code(0) is GrpcStatus.OK
    assert GrpcStatus.from_code(16) is GrpcStatus.UNAUTHENTICATED
    assert GrpcStatus.from_code(15) is GrpcStatus.DATA_LOSS


@pytest.mark.parametrize("status", list(GrpcStatus))
def test_round_trip(status):
    assert GrpcStatus.from_code(int(status)) is status


def test_all_codes_are_distinct():
    statuses = [GrpcStatus.from_code(c) for c in range(17)]
    assert None not in statuses
    assert len(set(statuses)) == 17


def test_unknown_code_gives_none():
    assert GrpcStatus.from_code(100) is None


def test_unknown_code_falls_back_to_unknown():
    assert GrpcStatus.from_code_or_unknown(100) is GrpcStatus.UNKNOWN


def test_known_code_is_not_replaced():
    assert GrpcStatus.from_code_or_unknown(13) is GrpcStatus.INTERNAL