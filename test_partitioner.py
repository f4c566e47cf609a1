"""パート分割のテスト"""
import pytest

from s3_bucket_tools.core.partitioner import plan_partitions
from s3_bucket_tools.exceptions import InvalidInputError

PART = 500_000_000
MIN = 5_242_880


def _assert_tiles(partitions, size):
    assert [p.part_number for p in partitions] == list(range(1, len(partitions) + 1))
    offset = 0
    for partition in partitions:
        assert partition.start_offset == offset
        assert partition.end_offset >= partition.start_offset
        offset = partition.end_offset + 1
    assert offset == size


@pytest.mark.parametrize("size", [
    MIN,
    PART - 1,
    PART,
    PART + 1,
    PART + MIN - 1,
    PART + MIN,
    3 * PART,
    3 * PART + 7,
    7 * PART + 123_456_789,
])
def test_partitions_cover_object(size):
    _assert_tiles(plan_partitions(size), size)


def test_trailing_part_appended():
    partitions = plan_partitions(1_050_000_000)

    assert [(p.start_offset, p.end_offset) for p in partitions] == [
        (0, 499_999_999),
        (500_000_000, 999_999_999),
        (1_000_000_000, 1_049_999_999),
    ]


def test_small_remainder_merged_into_last_part():
    partitions = plan_partitions(500_000_003)

    assert len(partitions) == 1
    assert partitions[0].start_offset == 0
    assert partitions[0].end_offset == 500_000_002


def test_merged_part_exceeds_part_size_by_remainder():
    remainder = MIN - 1
    partitions = plan_partitions(2 * PART + remainder)

    assert len(partitions) == 2
    assert partitions[-1].size == PART + remainder


@pytest.mark.parametrize("size", [0, 1, MIN - 1])
def test_below_minimum_returns_empty(size):
    assert plan_partitions(size) == []


def test_exact_minimum_gives_single_trailing_part():
    partitions = plan_partitions(MIN)

    assert len(partitions) == 1
    assert partitions[0].range_header == f"bytes=0-{MIN - 1}"


def test_planning_is_repeatable():
    assert plan_partitions(1_234_567_890) == plan_partitions(1_234_567_890)


def test_custom_part_size():
    partitions = plan_partitions(25, part_size=10, min_trailing_size=3)

    assert [p.range_header for p in partitions] == ["bytes=0-9", "bytes=10-19", "bytes=20-24"]


def test_zero_minimum_does_not_create_empty_part():
    partitions = plan_partitions(20, part_size=10, min_trailing_size=0)

    assert [p.range_header for p in partitions] == ["bytes=0-9", "bytes=10-19"]


@pytest.mark.parametrize("size", [-1, 1.5, "100", None, True])
def test_invalid_size_rejected(size):
    with pytest.raises(InvalidInputError):
        plan_partitions(size)


def test_invalid_part_size_rejected():
    with pytest.raises(InvalidInputError):
        plan_partitions(100, part_size=0)
