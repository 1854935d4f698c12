import asyncio
import logging
from functools import reduce
from typing import Callable, Iterable, Optional

from config import DETAIL_FETCH_CONCURRENCY, STORE
from crud.mountain import AttributeRow, MountainStore
from exceptions import StoreError
from schemas.mountain import Mountain

from services.conditions import SearchCondition, SearchType
from services.decoder import decode_mountain, row_id

log = logging.getLogger(__name__)

# 山名検索で部分一致をかけるDataType（山名・山名かな）
NAME_DATA_TYPES = ("Name", "NameKana")


async def _run(func: Callable[..., list[AttributeRow]], *args) -> list[AttributeRow]:
    # ストア操作は同期的なのでワーカースレッドで実行する
    return await asyncio.to_thread(func, *args)


def _collect_ids(rows: Iterable[AttributeRow]) -> set[int]:
    ids = set()
    for row in rows:
        mountain_id = row_id(row)
        if mountain_id is not None:
            ids.add(mountain_id)
    return ids


async def _lookup_ids(
    label: str, func: Callable[..., list[AttributeRow]], *args
) -> set[int]:
    """1回分の検索を実行し、失敗した場合は候補0件として扱う"""
    try:
        rows = await _run(func, *args)
    except StoreError as e:
        log.warning(f"Lookup failed ({label}), treated as no candidates: {e}")
        return set()
    return _collect_ids(rows)


async def find_value_ids(store: MountainStore, value: str) -> set[int]:
    """DataValueの完全一致でIdを検索（都道府県・タグ）"""
    return await _lookup_ids(
        f"DataValue={value}",
        store.query_by_index,
        STORE.table,
        STORE.value_index,
        STORE.data_value_key,
        value,
    )


async def find_name_ids(store: MountainStore, name: str) -> set[int]:
    """山名または山名かなの部分一致でIdを検索（両者の和集合）"""
    results = await asyncio.gather(
        *(
            _lookup_ids(
                f"{data_type} contains {name}",
                store.query_by_index_filter,
                STORE.table,
                STORE.type_index,
                STORE.data_type_key,
                data_type,
                STORE.data_value_key,
                name,
            )
            for data_type in NAME_DATA_TYPES
        )
    )
    return set().union(*results)


async def collect_candidates(
    store: MountainStore, conditions: list[SearchCondition]
) -> dict[SearchType, set[int]]:
    """検索条件ごとの候補Id集合を、種別ごとにまとめて返す

    指定されていない種別はキーに含まれない。
    同じ種別の条件が複数ある場合はその積集合。
    """
    lookups = []
    for condition in conditions:
        if condition.search_type == SearchType.NAME:
            lookups.append(find_name_ids(store, condition.value))
        else:
            lookups.append(find_value_ids(store, condition.value))

    results = await asyncio.gather(*lookups)

    candidates: dict[SearchType, set[int]] = {}
    for condition, ids in zip(conditions, results):
        if condition.search_type in candidates:
            candidates[condition.search_type] &= ids
        else:
            candidates[condition.search_type] = set(ids)
    return candidates


def merge_candidates(candidates: dict[SearchType, set[int]]) -> set[int]:
    """種別ごとの候補集合の積集合をとる"""
    if not candidates:
        return set()
    return reduce(set.intersection, candidates.values())


async def fetch_mountains(
    store: MountainStore,
    ids: Iterable[int],
    concurrency: Optional[int] = None,
) -> list[Mountain]:
    """Idごとに詳細を取得してMountainを復元

    取得に失敗した、または行が存在しないIdは結果から除外する。

    Args:
        store: MountainStore
        ids: 山岳Id
        concurrency: 同時実行数の上限（省略時はDETAIL_FETCH_CONCURRENCY）

    Returns:
        Mountainのリスト（順不同）
    """
    semaphore = asyncio.Semaphore(concurrency or DETAIL_FETCH_CONCURRENCY)

    async def fetch(mountain_id: int) -> Optional[Mountain]:
        async with semaphore:
            try:
                rows = await _run(
                    store.query_by_key, STORE.table, STORE.id_key, mountain_id
                )
            except StoreError as e:
                log.warning(f"Dropped mountain {mountain_id}: {e}")
                return None
        if not rows:
            log.warning(f"Dropped mountain {mountain_id}: no rows")
            return None
        return decode_mountain(rows)

    mountains = await asyncio.gather(*(fetch(mountain_id) for mountain_id in ids))
    return [m for m in mountains if m is not None]


async def search_mountain_ids(
    store: MountainStore, conditions: list[SearchCondition]
) -> set[int]:
    """全ての検索条件（種別間はAND）を満たすIdの集合"""
    candidates = await collect_candidates(store, conditions)
    return merge_candidates(candidates)
