#!/usr/bin/env python3
"""
山データJSONインポートスクリプト

JSONの山データを属性行（1属性1行）に変換してMountainsテーブルに格納する。

Usage:
    python scripts/import_mountains.py <json_file_path> [--create-tables] [--replace]

Example:
    python scripts/import_mountains.py data/mountains.json --create-tables
"""

import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from tqdm import tqdm

# .envファイルを読み込み（プロジェクトルートから）
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# FastAPIのルートディレクトリをパスに追加
sys.path.append(str(Path(__file__).parent.parent))

from config import STORE, StoreConfig
from crud.mountain import AttributeRow, create_attributes, delete_attributes
from database import Base, SessionLocal, engine
from models.mountain import MountainAttribute
from pydantic import ValidationError
from schemas.mountain import MountainImport
from services.codes import AREA_PREFIX, PREFECTURE_PREFIX, TAG_PREFIX
from sqlalchemy.orm import Session
from utils import parse_float, parse_non_negative_int


def _prefixed(value: str, prefix: str) -> str:
    """プレフィックスを付与（既に付いている場合はそのまま）"""
    return value if value.startswith(prefix) else f"{prefix}{value}"


def convert_to_rows(
    mountain: MountainImport, config: StoreConfig = STORE
) -> list[AttributeRow]:
    """MountainImportを属性行に変換

    Args:
        mountain: インポート用スキーマ
        config: 属性名の設定

    Returns:
        属性行のリスト
    """
    cfg = config

    def row(data_type: str, **values: Any) -> AttributeRow:
        return {cfg.id_key: mountain.id, cfg.data_type_key: data_type, **values}

    rows = [row("Name", **{cfg.data_value_key: mountain.name})]

    if mountain.name_kana:
        rows.append(row("NameKana", **{cfg.data_value_key: mountain.name_kana}))

    if mountain.area:
        area = _prefixed(mountain.area, AREA_PREFIX)
        rows.append(row(area, **{cfg.data_value_key: area}))

    for prefecture in dict.fromkeys(mountain.prefectures):
        value = _prefixed(prefecture, PREFECTURE_PREFIX)
        rows.append(row(value, **{cfg.data_value_key: value}))

    for tag in dict.fromkeys(mountain.tags):
        value = _prefixed(tag, TAG_PREFIX)
        rows.append(row(value, **{cfg.data_value_key: value}))

    # 文字列から数値への変換（解釈できない場合は行を作らない）
    elevation = parse_non_negative_int(mountain.elevation)
    if elevation is not None:
        rows.append(row("Elevation", **{cfg.elevation_key: elevation}))

    if mountain.location is not None:
        location = {
            "Latitude": parse_float(mountain.location.latitude) or 0.0,
            "Longitude": parse_float(mountain.location.longitude) or 0.0,
            "GsiUrl": mountain.location.map_url or "",
        }
        rows.append(row("Location", **{cfg.location_key: location}))

    return rows


def _record_name(mountain_data: Any) -> str:
    if isinstance(mountain_data, dict):
        return str(mountain_data.get("name", "Unknown"))
    return "Unknown"


def load_mountain_records(json_path: str) -> list[dict]:
    """JSONファイルから山データを読み込み

    Raises:
        FileNotFoundError: ファイルが存在しない
        ValueError: JSONフォーマットが不正
    """
    if not os.path.exists(json_path):
        raise FileNotFoundError(f"File not found: {json_path}")

    with open(json_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    # データ形式を判定
    if isinstance(data, dict) and "data" in data:
        # {"data": [...]} 形式
        return data["data"]
    elif isinstance(data, dict):
        # 単一オブジェクト
        return [data]
    elif isinstance(data, list):
        return data
    raise ValueError("Invalid JSON format: expected object or array")


def import_mountain_data(
    json_path: str, db: Session, replace: bool = False, batch_size: int = 100
) -> dict:
    """山データをインポート

    Args:
        json_path: JSONファイルパス
        db: DBセッション
        replace: 既存のIdの行を削除してから追加するか
        batch_size: バッチコミットのサイズ

    Returns:
        インポート結果の情報
    """
    mountains_data = load_mountain_records(json_path)

    # 統計情報
    stats = {
        "total": len(mountains_data),
        "created": 0,
        "rows": 0,
        "skipped": 0,
        "errors": 0,
    }

    for i, mountain_data in enumerate(tqdm(mountains_data, desc="Importing"), 1):
        try:
            # Pydanticでバリデーション
            mountain_import = MountainImport(**mountain_data)
            rows = convert_to_rows(mountain_import)
        except (ValidationError, TypeError) as e:
            # エラーは毎回表示
            tqdm.write(f"  [{i}/{len(mountains_data)}] Error: {_record_name(mountain_data)} - {e}")
            stats["errors"] += 1
            continue

        # 既存チェック
        exists = (
            db.query(MountainAttribute.row_id)
            .filter(MountainAttribute.id == mountain_import.id)
            .first()
        )
        if exists:
            if not replace:
                stats["skipped"] += 1
                continue
            delete_attributes(db, mountain_import.id)

        stats["rows"] += create_attributes(db, rows)
        stats["created"] += 1

        # バッチコミット
        if i % batch_size == 0:
            db.commit()

    db.commit()
    return stats


def main():
    parser = argparse.ArgumentParser(description="Import mountains into the Mountains table")
    parser.add_argument("json_path", help="Path to the mountains JSON file")
    parser.add_argument(
        "--create-tables", action="store_true", help="Create tables before import"
    )
    parser.add_argument(
        "--replace", action="store_true", help="Replace rows of existing mountains"
    )
    parser.add_argument("--batch-size", type=int, default=1000)
    args = parser.parse_args()

    if args.create_tables:
        Base.metadata.create_all(bind=engine)
        print("Tables created.")

    # DBセッションを作成
    db = SessionLocal()

    try:
        print("=" * 60)
        print("Mountain Data Import")
        print("=" * 60)

        start_time = time.time()

        result = import_mountain_data(
            args.json_path, db, replace=args.replace, batch_size=args.batch_size
        )

        elapsed_time = time.time() - start_time

        print("\n" + "=" * 60)
        print("📊 Import Summary")
        print("=" * 60)
        print(f"  File: {args.json_path}")
        print(f"  Total: {result['total']}")
        print(f"  ✅ Created: {result['created']} ({result['rows']} rows)")
        print(f"  ⏭️  Skipped: {result['skipped']}")
        print(f"  ❌ Errors: {result['errors']}")
        print(f"  ⏱️  Time: {elapsed_time:.2f} seconds")
        print("=" * 60)

        if result["errors"] > 0:
            print(f"\n⚠️  Warning: {result['errors']} errors occurred during import")

    except Exception as e:
        print(f"\n❌ Error occurred: {e}")
        import traceback

        traceback.print_exc()
        sys.exit(1)

    finally:
        db.close()


if __name__ == "__main__":
    main()
