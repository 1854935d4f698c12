from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from exceptions import QueryValidationError
from utils import parse_non_negative_int, parse_positive_int

from services.codes import prefecture_value, tag_value

INVALID_PREFECTURE_MESSAGE = "不正な都道府県IDです。"
INVALID_TAG_MESSAGE = "不正なタグIDです。"
INVALID_OFFSET_MESSAGE = "offsetは0以上の整数を指定してください。"
INVALID_LIMIT_MESSAGE = "limitは1以上の整数を指定してください。"
INVALID_SORT_MESSAGE = "不正なソート指定です。"


class SearchType(str, Enum):
    NAME = "name"
    PREFECTURE = "prefecture"
    TAG = "tag"


class SortKey(str, Enum):
    ID_ASC = "id.asc"
    ID_DESC = "id.desc"
    ELEVATION_ASC = "elevation.asc"
    ELEVATION_DESC = "elevation.desc"
    NAME_ASC = "name.asc"
    NAME_DESC = "name.desc"

    @property
    def sort_field(self) -> str:
        return self.value.split(".")[0]

    @property
    def descending(self) -> bool:
        return self.value.endswith(".desc")


@dataclass(frozen=True)
class SearchCondition:
    search_type: SearchType
    value: str


@dataclass(frozen=True)
class RangeCondition:
    offset: int = 0
    limit: Optional[int] = None


@dataclass(frozen=True)
class SearchQuery:
    """検証済みの検索条件一式"""

    conditions: list[SearchCondition] = field(default_factory=list)
    range: RangeCondition = field(default_factory=RangeCondition)
    sort: SortKey = SortKey.ID_ASC


def resolve_search_query(
    prefecture: Optional[str] = None,
    tag: Optional[str] = None,
    name: Optional[str] = None,
    offset: Optional[str] = None,
    limit: Optional[str] = None,
    sort: Optional[str] = None,
) -> SearchQuery:
    """クエリパラメータを検証し、ストアの格納形式に合わせた検索条件に変換

    全てのパラメータを検証してからエラーをまとめて送出する。

    Args:
        prefecture: 都道府県コード
        tag: タグコード
        name: 山名（部分一致、検証なし）
        offset: 取得開始位置（省略時は0）
        limit: 取得件数（省略時は無制限）
        sort: ソート指定（省略時はid.asc）

    Returns:
        SearchQuery

    Raises:
        QueryValidationError: 1つ以上のパラメータが不正
    """
    conditions: list[SearchCondition] = []
    errors: list[str] = []

    # 検索条件: 都道府県
    if prefecture is not None:
        code = parse_non_negative_int(prefecture)
        value = prefecture_value(code) if code is not None else None
        if value is None:
            errors.append(INVALID_PREFECTURE_MESSAGE)
        else:
            conditions.append(SearchCondition(SearchType.PREFECTURE, value))

    # 検索条件: タグ（百名山）
    if tag is not None:
        code = parse_non_negative_int(tag)
        value = tag_value(code) if code is not None else None
        if value is None:
            errors.append(INVALID_TAG_MESSAGE)
        else:
            conditions.append(SearchCondition(SearchType.TAG, value))

    # 検索条件: 山名
    if name is not None:
        conditions.append(SearchCondition(SearchType.NAME, name))

    offset_value = 0
    if offset is not None:
        parsed = parse_non_negative_int(offset)
        if parsed is None:
            errors.append(INVALID_OFFSET_MESSAGE)
        else:
            offset_value = parsed

    limit_value: Optional[int] = None
    if limit is not None:
        limit_value = parse_positive_int(limit)
        if limit_value is None:
            errors.append(INVALID_LIMIT_MESSAGE)

    sort_key = SortKey.ID_ASC
    if sort is not None:
        try:
            sort_key = SortKey(sort)
        except ValueError:
            errors.append(INVALID_SORT_MESSAGE)

    if errors:
        raise QueryValidationError(errors)

    return SearchQuery(
        conditions=conditions,
        range=RangeCondition(offset=offset_value, limit=limit_value),
        sort=sort_key,
    )
