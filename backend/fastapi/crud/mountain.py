import logging
from typing import Any, Callable, Iterable, Optional

from config import STORE, StoreConfig
from database import SessionLocal
from exceptions import StoreError
from models.mountain import MountainAttribute
from sqlalchemy import Select, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

log = logging.getLogger(__name__)

# ストアが返す属性行（キーはストア上の属性名）
AttributeRow = dict[str, Any]

SCAN_BATCH_SIZE = 500


class MountainStore:
    """Mountainsテーブルへの読み取り専用アクセス

    各操作は独自のセッションを開いて閉じるため、
    ワーカースレッドから並行して呼び出してよい。
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        config: StoreConfig = STORE,
    ):
        self.session_factory = session_factory
        self.config = config
        self._tables = {config.table: MountainAttribute}
        self._columns = {
            config.id_key: MountainAttribute.id,
            config.data_type_key: MountainAttribute.data_type,
            config.data_value_key: MountainAttribute.data_value,
        }

    # ============================================
    # Read operations
    # ============================================
    def scan_all(self, table: str) -> list[AttributeRow]:
        """テーブルの全行を取得

        Args:
            table: テーブル名

        Returns:
            全ての属性行
        """
        model = self._model(table)
        stmt = (
            select(model)
            .order_by(model.id, model.row_id)
            .execution_options(yield_per=SCAN_BATCH_SIZE)
        )
        return self._fetch(stmt)

    def query_by_key(self, table: str, key: str, value: int) -> list[AttributeRow]:
        """主キーの等価条件で行を取得（0件は正常な結果）

        Args:
            table: テーブル名
            key: 主キーの属性名
            value: 主キーの値

        Returns:
            該当する属性行
        """
        model = self._model(table)
        if key != self.config.id_key:
            raise StoreError(f"{key} is not the primary key of {table}")
        stmt = select(model).where(model.id == value).order_by(model.row_id)
        return self._fetch(stmt)

    def query_by_index(
        self, table: str, index: str, key: str, value: str
    ) -> list[AttributeRow]:
        """セカンダリインデックスの等価条件で行を取得

        Args:
            table: テーブル名
            index: インデックス名
            key: インデックスのキー属性名
            value: キーの値

        Returns:
            該当する属性行
        """
        model = self._model(table)
        column = self._index_column(model, index, key)
        stmt = select(model).where(column == value).order_by(model.id, model.row_id)
        return self._fetch(stmt)

    def query_by_index_filter(
        self,
        table: str,
        index: str,
        key: str,
        value: str,
        filter_key: str,
        filter_substring: str,
    ) -> list[AttributeRow]:
        """セカンダリインデックスの等価条件に部分一致フィルタを加えて行を取得

        Args:
            table: テーブル名
            index: インデックス名
            key: インデックスのキー属性名
            value: キーの値
            filter_key: フィルタ対象の属性名
            filter_substring: 含まれるべき文字列

        Returns:
            該当する属性行
        """
        model = self._model(table)
        column = self._index_column(model, index, key)
        filter_column = self._column(filter_key)
        stmt = (
            select(model)
            .where(column == value)
            .where(filter_column.contains(filter_substring, autoescape=True))
            .order_by(model.id, model.row_id)
        )
        return self._fetch(stmt)

    def ping(self) -> None:
        """DB接続を確認"""
        try:
            with self.session_factory() as db:
                db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    # ============================================
    # Helpers
    # ============================================
    def _model(self, table: str) -> type[MountainAttribute]:
        model = self._tables.get(table)
        if model is None:
            raise StoreError(f"Unknown table: {table}")
        return model

    def _column(self, key: str):
        column = self._columns.get(key)
        if column is None:
            raise StoreError(f"Unknown attribute: {key}")
        return column

    def _index_column(self, model: type[MountainAttribute], index: str, key: str):
        indexes = {idx.name: idx for idx in model.__table__.indexes}
        if index not in indexes:
            raise StoreError(f"Unknown index: {index}")
        # インデックスの先頭カラムがキーであること
        leading = list(indexes[index].columns)[0]
        if leading.name != key:
            raise StoreError(f"{key} is not the key of index {index}")
        return self._column(key)

    def _fetch(self, stmt: Select) -> list[AttributeRow]:
        try:
            with self.session_factory() as db:
                return [self._to_row(attr) for attr in db.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            log.error(f"Store query failed: {e}")
            raise StoreError(str(e)) from e

    def _to_row(self, attr: MountainAttribute) -> AttributeRow:
        cfg = self.config
        row: AttributeRow = {cfg.id_key: attr.id, cfg.data_type_key: attr.data_type}
        if attr.data_value is not None:
            row[cfg.data_value_key] = attr.data_value
        if attr.elevation_value is not None:
            row[cfg.elevation_key] = attr.elevation_value
        if attr.location_value is not None:
            row[cfg.location_key] = attr.location_value
        return row


def get_store() -> MountainStore:
    """MountainStoreを返す（FastAPIの依存関係用）"""
    return MountainStore(SessionLocal)


# ============================================
# Import (scripts only)
# ============================================
def create_attributes(
    db: Session, rows: Iterable[AttributeRow], config: StoreConfig = STORE
) -> int:
    """属性行を追加する（コミットは呼び出し側で行う）

    Args:
        db: DBセッション
        rows: 属性行
        config: 属性名の設定

    Returns:
        追加した行数
    """
    count = 0
    for row in rows:
        location: Optional[dict[str, Any]] = row.get(config.location_key)
        db.add(
            MountainAttribute(
                id=row[config.id_key],
                data_type=row[config.data_type_key],
                data_value=row.get(config.data_value_key),
                elevation_value=row.get(config.elevation_key),
                location_value=location,
            )
        )
        count += 1
    db.flush()
    return count


def delete_attributes(db: Session, mountain_id: int) -> int:
    """指定IDの属性行を全て削除する（再インポート用）"""
    deleted = (
        db.query(MountainAttribute).filter(MountainAttribute.id == mountain_id).delete()
    )
    return deleted
