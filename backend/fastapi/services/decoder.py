"""属性行から山岳エンティティを復元する

Mountainsテーブルは1つの山岳を複数の行に分割して保持する（EAV形式）。
各行はDataTypeで自身が持つ属性を示す。

    Name        -> name
    NameKana    -> name_kana
    Elevation   -> elevation (ElevationValue)
    Location    -> location  (LocationValue: Latitude / Longitude / GsiUrl)
    Area_*      -> area（後勝ち）
    Prefecture_*-> prefectures
    Tag_*       -> tags

それ以外のDataTypeは無視する。復元は失敗しない。
"""

import logging
from collections import defaultdict
from typing import Any, Iterable, Optional

from config import STORE, StoreConfig
from crud.mountain import AttributeRow
from schemas.mountain import Location, Mountain
from utils import parse_float, parse_non_negative_int

from services.codes import AREA_PREFIX, PREFECTURE_PREFIX, TAG_PREFIX

log = logging.getLogger(__name__)


def _strip_prefix(value: str, prefix: str) -> str:
    if value.startswith(prefix):
        return value[len(prefix):]
    return value


def _string_value(row: AttributeRow, key: str) -> str:
    value = row.get(key)
    return value if isinstance(value, str) else ""


def row_id(row: AttributeRow, config: StoreConfig = STORE) -> Optional[int]:
    """行のIdを取得（数値として解釈できない場合はNone）"""
    return parse_non_negative_int(row.get(config.id_key))


def decode_location(value: Any) -> Location:
    """LocationValueを解釈する（解釈できない項目は既定値のまま）"""
    if not isinstance(value, dict):
        return Location()

    latitude = parse_float(value.get("Latitude"))
    longitude = parse_float(value.get("Longitude"))
    map_url = value.get("GsiUrl")
    return Location(
        latitude=latitude if latitude is not None else 0.0,
        longitude=longitude if longitude is not None else 0.0,
        map_url=map_url if isinstance(map_url, str) else "",
    )


def decode_mountain(
    rows: Iterable[AttributeRow], config: StoreConfig = STORE
) -> Mountain:
    """同じIdを持つ属性行から1件のMountainを復元

    Args:
        rows: 同一Idの属性行（順不同・重複あり）
        config: 属性名の設定

    Returns:
        Mountain（行が無い場合はid=0の空のMountain）
    """
    mountain_id = 0
    name = ""
    name_kana = ""
    area = ""
    elevation = 0
    location = Location()
    prefectures: set[str] = set()
    tags: set[str] = set()

    for row in rows:
        if mountain_id == 0:
            mountain_id = row_id(row, config) or 0

        data_type = row.get(config.data_type_key)
        if not isinstance(data_type, str):
            continue

        if data_type == "Name":
            name = _string_value(row, config.data_value_key)
        elif data_type == "NameKana":
            name_kana = _string_value(row, config.data_value_key)
        elif data_type == "Elevation":
            parsed = parse_non_negative_int(row.get(config.elevation_key))
            if parsed is not None:
                elevation = parsed
        elif data_type == "Location":
            location = decode_location(row.get(config.location_key))
        elif data_type.startswith(AREA_PREFIX):
            area = _strip_prefix(_string_value(row, config.data_value_key), AREA_PREFIX)
        elif data_type.startswith(PREFECTURE_PREFIX):
            prefectures.add(
                _strip_prefix(_string_value(row, config.data_value_key), PREFECTURE_PREFIX)
            )
        elif data_type.startswith(TAG_PREFIX):
            tags.add(_strip_prefix(_string_value(row, config.data_value_key), TAG_PREFIX))

    return Mountain(
        id=mountain_id,
        name=name,
        name_kana=name_kana,
        area=area,
        prefectures=tuple(sorted(prefectures)),
        elevation=elevation,
        location=location,
        tags=tuple(sorted(tags)),
    )


def group_rows(
    rows: Iterable[AttributeRow], config: StoreConfig = STORE
) -> dict[int, list[AttributeRow]]:
    """属性行をIdごとにまとめる（到着順に依存しない）

    Idを数値として解釈できない行は捨てる。
    """
    groups: dict[int, list[AttributeRow]] = defaultdict(list)
    skipped = 0
    for row in rows:
        mountain_id = row_id(row, config)
        if mountain_id is None:
            skipped += 1
            continue
        groups[mountain_id].append(row)

    if skipped:
        log.warning(f"Skipped {skipped} row(s) without a numeric id")
    return dict(groups)


def decode_mountains(
    rows: Iterable[AttributeRow], config: StoreConfig = STORE
) -> list[Mountain]:
    """全行をIdごとにまとめて複数のMountainを復元"""
    return [decode_mountain(group, config) for group in group_rows(rows, config).values()]
