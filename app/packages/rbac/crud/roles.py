"""角色 CRUD：管理角色实体的常用操作。"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.packages.rbac.core.enums import RoleStatusEnum
from app.packages.rbac.crud.base import CRUDBase
from app.packages.rbac.models.role import Role


class CRUDRole(CRUDBase[Role]):
    """提供角色实体的便捷查询方法。"""

    def list_with_filters(
        self,
        db: Session,
        *,
        platform_id: str,
        name: Optional[str] = None,
        code: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[list[Role], int]:
        """综合查询角色列表并返回总数。"""
        query = self.query(db, platform_id=platform_id)

        if name:
            query = query.filter(self.model.name.ilike(f"%{name.strip()}%"))
        if code:
            query = query.filter(self.model.code.ilike(f"%{code.strip()}%"))
        if status:
            query = query.filter(self.model.status == status.strip().lower())

        total = query.count()
        items = (
            query.order_by(self.model.create_time.desc(), self.model.uuid.asc())
            .offset(max(skip, 0))
            .limit(max(limit, 1))
            .all()
        )
        return items, total

    def list_active_by_ids(self, db: Session, ids: Iterable[str], *, platform_id: str) -> List[Role]:
        """返回给定主键集合中状态为 active 的角色。"""
        id_set = {item for item in ids if item}
        if not id_set:
            return []
        return (
            self.query(db, platform_id=platform_id)
            .filter(self.model.uuid.in_(id_set), self.model.status == RoleStatusEnum.ACTIVE.value)
            .order_by(self.model.create_time.asc(), self.model.uuid.asc())
            .all()
        )


role_crud = CRUDRole(Role)
