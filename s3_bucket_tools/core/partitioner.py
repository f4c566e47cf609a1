"""マルチパートコピーのパート分割"""
from typing import List

from ..exceptions import InvalidInputError
from ..models.config import DEFAULT_COPY_PART_SIZE, MIN_COPY_PART_SIZE
from ..models.storage import PartitionRange


def _check_int(name: str, value, minimum: int):
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"Integer was expected for {name}, got {type(value).__name__}")
    if value < minimum:
        raise InvalidInputError(f"Invalid {name}: {value}. Must be >= {minimum}")


def plan_partitions(
    object_size: int,
    part_size: int = DEFAULT_COPY_PART_SIZE,
    min_trailing_size: int = MIN_COPY_PART_SIZE,
) -> List[PartitionRange]:
    """オブジェクトサイズからバイト範囲のリストを作成

    最後のパートがmin_trailing_size未満になる場合は直前のパートに結合する。
    object_sizeがmin_trailing_size未満なら空のリストを返すので、
    呼び出し側は単一コピーを使うこと。
    """
    _check_int("object_size", object_size, 0)
    _check_int("part_size", part_size, 1)
    _check_int("min_trailing_size", min_trailing_size, 0)

    full_parts, remainder = divmod(object_size, part_size)
    ranges = []

    for index in range(full_parts):
        start = index * part_size
        end = (index + 1) * part_size - 1
        if index + 1 == full_parts and remainder < min_trailing_size:
            # 小さな残りを最後のフルパートに吸収
            end += remainder
        ranges.append((start, end))

    if remainder > 0 and remainder >= min_trailing_size:
        start = full_parts * part_size
        ranges.append((start, start + remainder - 1))

    return [
        PartitionRange(part_number=number, start_offset=start, end_offset=end)
        for number, (start, end) in enumerate(ranges, 1)
    ]
