"""Shared fixtures for the mountain API tests"""

import os
import time
from typing import Any, Callable, Optional

# テストではPostgreSQLに接続しない
os.environ["DATABASE_URL"] = "sqlite://"

import pytest

from exceptions import StoreError


def mountain_rows(
    mountain_id: int,
    name: str,
    name_kana: str,
    elevation: int,
    prefectures: tuple[str, ...] = (),
    tags: tuple[str, ...] = (),
    area: Optional[str] = None,
    latitude: float = 35.0,
    longitude: float = 138.0,
) -> list[dict[str, Any]]:
    """1つの山岳を属性行に展開する"""
    rows = [
        {"Id": mountain_id, "DataType": "Name", "DataValue": name},
        {"Id": mountain_id, "DataType": "NameKana", "DataValue": name_kana},
        {"Id": mountain_id, "DataType": "Elevation", "ElevationValue": elevation},
        {
            "Id": mountain_id,
            "DataType": "Location",
            "LocationValue": {
                "Latitude": latitude,
                "Longitude": longitude,
                "GsiUrl": f"https://maps.gsi.go.jp/#15/{latitude}/{longitude}",
            },
        },
    ]
    if area:
        rows.append(
            {"Id": mountain_id, "DataType": f"Area_{area}", "DataValue": f"Area_{area}"}
        )
    for prefecture in prefectures:
        value = f"Prefecture_{prefecture}"
        rows.append({"Id": mountain_id, "DataType": value, "DataValue": value})
    for tag in tags:
        value = f"Tag_{tag}"
        rows.append({"Id": mountain_id, "DataType": value, "DataValue": value})
    return rows


CATALOG = [
    mountain_rows(1, "富士山", "ふじさん", 3776, ("山梨県", "静岡県"), ("百名山",), "富士山周辺", 35.3606, 138.7274),
    mountain_rows(2, "高尾山", "たかおさん", 599, ("東京都",), (), "奥多摩", 35.6251, 139.2437),
    mountain_rows(3, "北岳", "きただけ", 3193, ("山梨県",), ("百名山",), "南アルプス", 35.6743, 138.2384),
    mountain_rows(4, "雲取山", "くもとりやま", 2017, ("東京都", "埼玉県", "山梨県"), ("百名山",), "奥多摩", 35.8555, 138.9437),
    mountain_rows(5, "筑波山", "つくばさん", 877, ("茨城県",), ("百名山",), "筑波山周辺", 36.2253, 140.1067),
    mountain_rows(6, "富士見台", "ふじみだい", 1739, ("長野県", "岐阜県"), (), "中央アルプス", 35.4586, 137.6231),
    mountain_rows(7, "大菩薩嶺", "だいぼさつれい", 2057, ("山梨県",), ("百名山",), "奥秩父", 35.7486, 138.8452),
]


def catalog_rows() -> list[dict[str, Any]]:
    return [row for rows in CATALOG for row in rows]


class FakeStore:
    """In-memory store implementing the four read operations"""

    def __init__(
        self,
        rows: list[dict[str, Any]],
        fail: Optional[Callable[[str, tuple], bool]] = None,
        delay: float = 0.0,
    ):
        self.rows = list(rows)
        self.fail = fail
        self.delay = delay
        self.calls: list[tuple] = []

    def _enter(self, op: str, args: tuple) -> None:
        self.calls.append((op, *args))
        if self.delay:
            time.sleep(self.delay)
        if self.fail is not None and self.fail(op, args):
            raise StoreError(f"{op} failed")

    def scan_all(self, table):
        self._enter("scan_all", (table,))
        return list(self.rows)

    def query_by_key(self, table, key, value):
        self._enter("query_by_key", (table, key, value))
        return [row for row in self.rows if row.get(key) == value]

    def query_by_index(self, table, index, key, value):
        self._enter("query_by_index", (table, index, key, value))
        return [row for row in self.rows if row.get(key) == value]

    def query_by_index_filter(self, table, index, key, value, filter_key, filter_substring):
        self._enter(
            "query_by_index_filter",
            (table, index, key, value, filter_key, filter_substring),
        )
        return [
            row
            for row in self.rows
            if row.get(key) == value and filter_substring in row.get(filter_key, "")
        ]

    def ping(self):
        self._enter("ping", ())


@pytest.fixture
def rows():
    return catalog_rows()


@pytest.fixture
def store(rows):
    return FakeStore(rows)
