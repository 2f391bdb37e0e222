"""CRUD 基类：为各实体提供按平台隔离的通用数据访问方法。"""

from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy import delete
from sqlalchemy.orm import Query, Session

from app.packages.rbac.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """封装常见的查询、创建与保存逻辑，减少重复代码。

    所有查询都必须显式携带 ``platform_id``，平台之间的数据互不可见。
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def query(self, db: Session, *, platform_id: str) -> Query:
        return db.query(self.model).filter(self.model.platform_id == platform_id)

    def get(self, db: Session, uuid: str, *, platform_id: str) -> Optional[ModelType]:
        return self.query(db, platform_id=platform_id).filter(self.model.uuid == uuid).first()

    def list_by_ids(self, db: Session, ids: Iterable[str], *, platform_id: str) -> List[ModelType]:
        """根据主键集合批量查询，忽略空值。"""
        id_set = {item for item in ids if item}
        if not id_set:
            return []
        return self.query(db, platform_id=platform_id).filter(self.model.uuid.in_(id_set)).all()

    def exists_with(
        self,
        db: Session,
        *,
        platform_id: str,
        field: str,
        value: Any,
        exclude_id: Optional[str] = None,
    ) -> bool:
        """判断平台内是否已有记录的 ``field`` 等于 ``value``（可排除自身）。"""
        column = getattr(self.model, field)
        query = self.query(db, platform_id=platform_id).filter(column == value)
        if exclude_id is not None:
            query = query.filter(self.model.uuid != exclude_id)
        return db.query(query.exists()).scalar()

    def create(self, db: Session, obj_in: Dict[str, Any], *, auto_commit: bool = True) -> ModelType:
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        if auto_commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
        return db_obj

    def save(self, db: Session, db_obj: ModelType, *, auto_commit: bool = True) -> ModelType:
        db.add(db_obj)
        if auto_commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
        return db_obj

    def hard_delete(self, db: Session, db_obj: ModelType, *, auto_commit: bool = True) -> None:
        """物理删除行。关联表的清理由调用方在同一事务内完成。"""
        db.delete(db_obj)
        if auto_commit:
            db.commit()
        else:
            db.flush()

    def delete_by_ids(self, db: Session, ids: Iterable[str], *, platform_id: str) -> int:
        """批量物理删除，返回删除行数；不提交事务。"""
        id_set = {item for item in ids if item}
        if not id_set:
            return 0
        result = db.execute(
            delete(self.model)
            .where(self.model.platform_id == platform_id, self.model.uuid.in_(id_set))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
