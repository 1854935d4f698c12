from .conditions import (
    RangeCondition,
    SearchCondition,
    SearchQuery,
    SearchType,
    SortKey,
    resolve_search_query,
)
from .decoder import decode_mountain, decode_mountains, group_rows
from .mountain import (
    get_all_mountains,
    get_mountain_by_id,
    run_search,
    search_mountains,
)
from .paging import RefinedMountains, refine_mountains, sort_mountains

__all__ = [
    "RangeCondition",
    "SearchCondition",
    "SearchQuery",
    "SearchType",
    "SortKey",
    "resolve_search_query",
    "decode_mountain",
    "decode_mountains",
    "group_rows",
    "get_all_mountains",
    "get_mountain_by_id",
    "run_search",
    "search_mountains",
    "RefinedMountains",
    "refine_mountains",
    "sort_mountains",
]
