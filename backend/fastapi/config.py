import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# .envファイルを読み込み
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Database connection settings
DATABASE_URL = os.getenv("DATABASE_URL", "postgresql://app:app@db:5432/app")

# 詳細取得（point query）の同時実行数の上限
DETAIL_FETCH_CONCURRENCY = int(os.getenv("DETAIL_FETCH_CONCURRENCY", "16"))

# 1リクエストあたりのタイムアウト（秒）
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10.0"))

# API情報
API_ABOUT = "日本の主な山岳をJSON形式で提供するAPIです。"
API_MOUNTAINS_URL = os.getenv(
    "API_MOUNTAINS_URL", "https://mountix.codemountains.org/api/v1/mountains"
)
API_DOCUMENTS_URL = os.getenv(
    "API_DOCUMENTS_URL", "https://mountix-docs.codemountains.org/"
)


@dataclass(frozen=True)
class StoreConfig:
    """Mountainsテーブルのテーブル名・インデックス名・属性名"""

    table: str = "Mountains"
    value_index: str = "DataValue_Id_Index"
    type_index: str = "DataType_Id_Index"
    id_key: str = "Id"
    data_type_key: str = "DataType"
    data_value_key: str = "DataValue"
    elevation_key: str = "ElevationValue"
    location_key: str = "LocationValue"


STORE = StoreConfig()
