import asyncio
import logging
from typing import Optional

from config import REQUEST_TIMEOUT_SECONDS, STORE
from crud.mountain import MountainStore
from exceptions import MountainNotFoundError, StoreError
from schemas.mountain import Mountain

from services.conditions import RangeCondition, SearchCondition, SearchQuery, SortKey
from services.decoder import decode_mountain, decode_mountains
from services.paging import RefinedMountains, sort_and_refine
from services.search import fetch_mountains, search_mountain_ids

log = logging.getLogger(__name__)


# ============================================
# Mountain - Read
# ============================================
async def get_mountain_by_id(
    store: MountainStore,
    mountain_id: int,
    timeout: Optional[float] = REQUEST_TIMEOUT_SECONDS,
) -> Mountain:
    """IDでMountainを取得

    Args:
        store: MountainStore
        mountain_id: MountainのID
        timeout: タイムアウト（秒）

    Returns:
        Mountain

    Raises:
        MountainNotFoundError: 行が存在しない、またはストアの取得に失敗
        asyncio.TimeoutError: タイムアウト
    """
    try:
        rows = await asyncio.wait_for(
            asyncio.to_thread(store.query_by_key, STORE.table, STORE.id_key, mountain_id),
            timeout=timeout,
        )
    except StoreError as e:
        log.warning(f"Mountain {mountain_id} lookup failed: {e}")
        raise MountainNotFoundError(mountain_id) from e

    if not rows:
        raise MountainNotFoundError(mountain_id)
    return decode_mountain(rows)


async def get_all_mountains(
    store: MountainStore,
    range_condition: RangeCondition,
    sort_key: Optional[SortKey] = None,
) -> RefinedMountains:
    """全件をscanしてソート・絞り込み

    Raises:
        StoreError: scanに失敗
        QueryValidationError: offsetが件数を超えている
    """
    rows = await asyncio.to_thread(store.scan_all, STORE.table)
    mountains = decode_mountains(rows)
    return sort_and_refine(mountains, range_condition, sort_key)


async def search_mountains(
    store: MountainStore,
    search_conditions: list[SearchCondition],
    range_condition: RangeCondition,
    sort_key: Optional[SortKey] = None,
    concurrency: Optional[int] = None,
) -> RefinedMountains:
    """検索条件に一致するMountainを取得してソート・絞り込み

    検索条件が無い場合は全件scanを行う。

    Raises:
        StoreError: scanに失敗（検索条件が無い場合のみ）
        QueryValidationError: offsetが件数を超えている
    """
    if not search_conditions:
        return await get_all_mountains(store, range_condition, sort_key)

    ids = await search_mountain_ids(store, search_conditions)
    mountains = await fetch_mountains(store, sorted(ids), concurrency)
    return sort_and_refine(mountains, range_condition, sort_key)


async def run_search(
    store: MountainStore,
    query: SearchQuery,
    timeout: Optional[float] = REQUEST_TIMEOUT_SECONDS,
    concurrency: Optional[int] = None,
) -> RefinedMountains:
    """検証済みの検索条件で検索を実行（タイムアウト時は未完了の取得を全て取り消す）

    Raises:
        asyncio.TimeoutError: タイムアウト
    """
    return await asyncio.wait_for(
        search_mountains(
            store, query.conditions, query.range, query.sort, concurrency=concurrency
        ),
        timeout=timeout,
    )
