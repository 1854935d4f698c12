from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

import schemas
import services
from config import API_ABOUT, API_DOCUMENTS_URL, API_MOUNTAINS_URL
from crud.mountain import MountainStore, get_store
from services.codes import PREFECTURES, TAGS
from utils import parse_non_negative_int

router = APIRouter(
    prefix="/api/v1",
    tags=["mountains"],
)


@router.get("/", response_model=schemas.ApiInfo)
def get_api_info():
    """API情報を取得"""
    return schemas.ApiInfo(
        about=API_ABOUT, mountains=API_MOUNTAINS_URL, documents=API_DOCUMENTS_URL
    )


@router.get(
    "/mountains",
    response_model=schemas.MountainList,
    responses={400: {"model": schemas.ErrorMessages}},
)
async def list_mountains(
    prefecture: Optional[str] = None,
    tag: Optional[str] = None,
    name: Optional[str] = None,
    offset: Optional[str] = None,
    limit: Optional[str] = None,
    sort: Optional[str] = None,
    store: MountainStore = Depends(get_store),
):
    """Mountain一覧を取得（検索・ソート・ページネーション対応）

    Args:
        prefecture: 都道府県コード（1〜47）
        tag: タグコード（1: 百名山）
        name: 山名・山名かなの部分一致
        offset: 取得開始位置
        limit: 取得する最大件数
        sort: id.asc, id.desc, elevation.asc, elevation.desc, name.asc, name.desc
    """
    query = services.resolve_search_query(
        prefecture=prefecture,
        tag=tag,
        name=name,
        offset=offset,
        limit=limit,
        sort=sort,
    )
    result = await services.run_search(store, query)
    return schemas.MountainList(
        mountains=result.mountains,
        total=result.total,
        offset=result.offset,
        limit=result.limit,
    )


@router.get(
    "/mountains/{mountain_id}",
    response_model=schemas.Mountain,
    responses={404: {"model": schemas.Message}},
)
async def get_mountain(mountain_id: str, store: MountainStore = Depends(get_store)):
    """指定されたIDのMountainを取得"""
    parsed_id = parse_non_negative_int(mountain_id)
    if parsed_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid mountain id: {mountain_id}",
        )
    return await services.get_mountain_by_id(store, parsed_id)


# ============================================
# Prefecture & Tag endpoints
# ============================================
@router.get("/prefectures", response_model=list[schemas.Code], tags=["prefectures"])
def list_prefectures():
    """都道府県コード一覧を取得"""
    return [schemas.Code(id=code, name=name) for code, name in PREFECTURES.items()]


@router.get("/tags", response_model=list[schemas.Code], tags=["tags"])
def list_tags():
    """タグコード一覧を取得"""
    return [schemas.Code(id=code, name=name) for code, name in TAGS.items()]
