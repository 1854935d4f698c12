from dataclasses import dataclass
from typing import Optional

from exceptions import QueryValidationError
from schemas.mountain import Mountain

from services.conditions import RangeCondition, SortKey

INVALID_RANGE_MESSAGE = "offsetの値が不正です。"

_SORT_FIELDS = {
    "id": lambda m: (m.id,),
    "elevation": lambda m: (m.elevation, m.id),
    "name": lambda m: (m.name_kana, m.id),
}


@dataclass
class RefinedMountains:
    mountains: list[Mountain]
    total: int
    offset: int
    limit: Optional[int]


def sort_mountains(
    mountains: list[Mountain], sort_key: Optional[SortKey] = None
) -> list[Mountain]:
    """ソート指定に従って並べ替えた新しいリストを返す

    同値の場合はidで並べる。省略時はid.asc。
    """
    sort_key = sort_key or SortKey.ID_ASC
    key = _SORT_FIELDS.get(sort_key.sort_field, _SORT_FIELDS["id"])
    return sorted(mountains, key=key, reverse=sort_key.descending)


def refine_mountains(
    mountains: list[Mountain], range_condition: RangeCondition
) -> RefinedMountains:
    """offset, limitによる絞り込み

    Args:
        mountains: ソート済みのMountainのリスト
        range_condition: offset, limit

    Returns:
        RefinedMountains

    Raises:
        QueryValidationError: offsetが件数を超えている
    """
    range_from = range_condition.offset
    range_to = len(mountains)
    if range_condition.limit is not None:
        range_to = min(range_to, range_from + range_condition.limit)

    if range_from > range_to:
        raise QueryValidationError([INVALID_RANGE_MESSAGE])

    return RefinedMountains(
        mountains=mountains[range_from:range_to],
        total=len(mountains),
        offset=range_condition.offset,
        limit=range_condition.limit,
    )


def sort_and_refine(
    mountains: list[Mountain],
    range_condition: RangeCondition,
    sort_key: Optional[SortKey] = None,
) -> RefinedMountains:
    """ソートしてから絞り込む"""
    return refine_mountains(sort_mountains(mountains, sort_key), range_condition)
