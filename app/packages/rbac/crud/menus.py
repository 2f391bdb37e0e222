"""菜单的数据库访问封装。"""

from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.packages.rbac.core.enums import MenuStatusEnum
from app.packages.rbac.crud.base import CRUDBase
from app.packages.rbac.models.menu import Menu


class CRUDMenu(CRUDBase[Menu]):
    """提供菜单的便捷查询方法。"""

    def list_with_filters(
        self,
        db: Session,
        *,
        platform_id: str,
        name: Optional[str] = None,
        menu_type: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[list[Menu], int]:
        """按名称模糊匹配、类型与状态过滤菜单，按排序值升序、创建时间倒序分页。"""
        query = self.query(db, platform_id=platform_id)

        if name:
            query = query.filter(self.model.name.ilike(f"%{name.strip()}%"))
        if menu_type:
            query = query.filter(self.model.type == menu_type.strip().lower())
        if status:
            query = query.filter(self.model.status == status.strip().lower())

        total = query.count()
        items = (
            query.order_by(self.model.sort.asc(), self.model.create_time.desc(), self.model.uuid.asc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    def list_active(
        self,
        db: Session,
        *,
        platform_id: str,
        ids: Optional[Iterable[str]] = None,
    ) -> List[Menu]:
        """返回平台内启用的菜单（可限定主键集合），按排序值、创建时间升序排列。"""
        query = self.query(db, platform_id=platform_id).filter(
            self.model.status == MenuStatusEnum.ACTIVE.value
        )
        if ids is not None:
            id_set = {item for item in ids if item}
            if not id_set:
                return []
            query = query.filter(self.model.uuid.in_(id_set))
        return query.order_by(
            self.model.sort.asc(), self.model.create_time.asc(), self.model.uuid.asc()
        ).all()

    def list_permission_codes(self, db: Session, ids: Iterable[str], *, platform_id: str) -> List[str]:
        """返回给定启用菜单上声明的非空权限字符（可能重复）。"""
        id_set = {item for item in ids if item}
        if not id_set:
            return []
        rows = (
            self.query(db, platform_id=platform_id)
            .with_entities(self.model.permission)
            .filter(
                self.model.uuid.in_(id_set),
                self.model.status == MenuStatusEnum.ACTIVE.value,
                self.model.permission.isnot(None),
                func.length(func.trim(self.model.permission)) > 0,
            )
            .all()
        )
        return [row[0] for row in rows]

    def has_children(self, db: Session, menu_id: str, *, platform_id: str) -> bool:
        """判断指定菜单是否存在子级。"""
        query = (
            self.query(db, platform_id=platform_id)
            .with_entities(self.model.uuid)
            .filter(self.model.parent_id == menu_id)
        )
        return query.first() is not None

    def list_parent_links(self, db: Session, *, platform_id: str) -> dict[str, Optional[str]]:
        """返回平台内 ``uuid -> parent_id`` 映射，用于校验父级设置是否成环。"""
        rows = self.query(db, platform_id=platform_id).with_entities(self.model.uuid, self.model.parent_id).all()
        return {row[0]: row[1] for row in rows}


menu_crud = CRUDMenu(Menu)
