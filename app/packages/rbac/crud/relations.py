"""关联表 CRUD：对 ``user_roles`` / ``role_menus`` 两张多对多表的批量读写。

本层只执行语句、不提交事务，事务边界由关系管理服务负责。
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from sqlalchemy import Table, delete, func, insert, select
from sqlalchemy.orm import Session

from app.packages.rbac.core.constants import SYSTEM_OPERATOR
from app.packages.rbac.core.enums import RelationStatusEnum
from app.packages.rbac.models.base import role_menus, user_roles


class CRUDRelation:
    """以 ``owner -> target`` 视角访问一张关联表（如 用户 -> 角色）。"""

    def __init__(self, table: Table, *, owner_column: str, target_column: str) -> None:
        self.table = table
        self.owner = table.c[owner_column]
        self.target = table.c[target_column]
        self.owner_column = owner_column
        self.target_column = target_column

    def list_target_ids(
        self,
        db: Session,
        owner_ids: Iterable[str],
        *,
        platform_id: Optional[str] = None,
        active_only: bool = False,
    ) -> List[str]:
        """返回一组 owner 关联的 target 主键（去重，保持首次出现顺序）。"""
        id_set = {item for item in owner_ids if item}
        if not id_set:
            return []
        stmt = select(self.target).where(self.owner.in_(id_set))
        if platform_id is not None:
            stmt = stmt.where(self.table.c.platform_id == platform_id)
        if active_only:
            stmt = stmt.where(self.table.c.status == RelationStatusEnum.ACTIVE.value)
        stmt = stmt.order_by(self.table.c.create_time.asc(), self.target.asc())
        return list(dict.fromkeys(db.execute(stmt).scalars()))

    def count_targets(self, db: Session, owner_id: str, *, active_only: bool = True) -> int:
        stmt = select(func.count()).select_from(self.table).where(self.owner == owner_id)
        if active_only:
            stmt = stmt.where(self.table.c.status == RelationStatusEnum.ACTIVE.value)
        return db.execute(stmt).scalar_one()

    def replace(
        self,
        db: Session,
        *,
        owner_id: str,
        target_ids: Sequence[str],
        platform_id: str,
        operator: str = SYSTEM_OPERATOR,
    ) -> None:
        """删除 owner 在该平台下的全部关联，再逐条写入新关联。

        重复的 target 会触发主键冲突（``IntegrityError``），由调用方回滚。
        """
        db.execute(
            delete(self.table).where(self.owner == owner_id, self.table.c.platform_id == platform_id)
        )
        if not target_ids:
            return
        rows = [
            {
                self.owner_column: owner_id,
                self.target_column: target_id,
                "platform_id": platform_id,
                "status": RelationStatusEnum.ACTIVE.value,
                "created_by": operator,
            }
            for target_id in target_ids
        ]
        db.execute(insert(self.table), rows)

    def delete_by_owners(self, db: Session, owner_ids: Iterable[str]) -> int:
        id_set = {item for item in owner_ids if item}
        if not id_set:
            return 0
        return db.execute(delete(self.table).where(self.owner.in_(id_set))).rowcount or 0

    def delete_by_targets(self, db: Session, target_ids: Iterable[str]) -> int:
        id_set = {item for item in target_ids if item}
        if not id_set:
            return 0
        return db.execute(delete(self.table).where(self.target.in_(id_set))).rowcount or 0


user_role_crud = CRUDRelation(user_roles, owner_column="user_id", target_column="role_id")
role_menu_crud = CRUDRelation(role_menus, owner_column="role_id", target_column="menu_id")
