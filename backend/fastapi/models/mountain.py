from typing import Any, Optional

from database import Base
from sqlalchemy import JSON, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column


class MountainAttribute(Base):
    """MountainAttribute model - 山岳の属性1件を1行として保持する

    1つの山岳は同じIdを持つ複数の行に分割して格納される。
    DataTypeが行の持つ属性を表す（"Name", "NameKana", "Elevation",
    "Location", "Area_*", "Prefecture_*", "Tag_*"）。
    """

    __tablename__ = "Mountains"

    row_id: Mapped[int] = mapped_column("RowId", Integer, primary_key=True)
    id: Mapped[int] = mapped_column("Id", Integer, nullable=False, index=True)
    data_type: Mapped[str] = mapped_column("DataType", String, nullable=False)
    data_value: Mapped[Optional[str]] = mapped_column("DataValue", String, nullable=True)
    elevation_value: Mapped[Optional[int]] = mapped_column(
        "ElevationValue", Integer, nullable=True
    )
    location_value: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "LocationValue", JSON, nullable=True
    )

    # セカンダリインデックス
    __table_args__ = (
        Index("DataValue_Id_Index", "DataValue", "Id"),
        Index("DataType_Id_Index", "DataType", "Id"),
    )
