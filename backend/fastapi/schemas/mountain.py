from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ============================================
# Mountain Schemas
# ============================================
class Location(BaseModel):
    """山頂の位置情報"""

    latitude: float = 0.0
    longitude: float = 0.0
    map_url: str = ""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Mountain(BaseModel):
    """MountainのAPI応答スキーマ（属性行から復元される不変オブジェクト）"""

    id: int = 0
    name: str = ""
    name_kana: str = ""
    area: str = ""
    prefectures: tuple[str, ...] = ()
    elevation: int = 0
    location: Location = Field(default_factory=Location)
    tags: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class MountainList(BaseModel):
    """Mountain検索結果の応答スキーマ"""

    mountains: list[Mountain]
    total: int
    offset: int
    limit: Optional[int] = None


# ============================================
# Code table Schemas
# ============================================
class Code(BaseModel):
    """都道府県・タグのコード"""

    id: int
    name: str


class ApiInfo(BaseModel):
    """API情報"""

    about: str
    mountains: str
    documents: str


class ErrorMessages(BaseModel):
    """検証エラー応答"""

    messages: list[str]


class Message(BaseModel):
    """単一メッセージ応答"""

    message: str


# ============================================
# JSON Import Schema
# ============================================
class MountainImportLocation(BaseModel):
    """JSON import用のlocation構造"""

    latitude: Optional[Union[float, str]] = None
    longitude: Optional[Union[float, str]] = None
    map_url: Optional[str] = ""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MountainImport(BaseModel):
    """JSON import用のスキーマ（API応答と同じ構造）"""

    id: int = Field(gt=0)
    name: str
    name_kana: Optional[str] = ""
    area: Optional[str] = ""
    prefectures: list[str] = Field(default_factory=list)
    elevation: Optional[Union[int, str]] = None
    location: Optional[MountainImportLocation] = None
    tags: list[str] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
