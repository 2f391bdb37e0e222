"""关系管理服务：维护 用户-角色、角色-菜单 两类关联。

两类关联都采用“整体替换”语义：先删除 owner 在本平台下的全部关联，再写入新集合。
删除与写入在同一个数据库事务中完成，任一步失败都会回滚，原有关联保持不变。
并发请求替换同一集合时不做协调，以最后提交者为准。
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.packages.rbac.core.constants import SYSTEM_OPERATOR
from app.packages.rbac.core.exceptions import DuplicateValueError, InvalidInputError, NotFoundError
from app.packages.rbac.core.logger import logger
from app.packages.rbac.crud.base import CRUDBase
from app.packages.rbac.crud.menus import menu_crud
from app.packages.rbac.crud.relations import CRUDRelation, role_menu_crud, user_role_crud
from app.packages.rbac.crud.roles import role_crud
from app.packages.rbac.crud.users import user_crud


class RelationService:
    """聚合关联表的替换、查询与级联清理。"""

    def set_user_roles(
        self,
        db: Session,
        *,
        user_id: str,
        role_ids: Sequence[str],
        platform_id: str,
        operator: str = SYSTEM_OPERATOR,
        auto_commit: bool = True,
    ) -> List[str]:
        """把用户在本平台下的角色整体替换为 ``role_ids``，返回替换后的角色 ID。

        ``role_ids`` 的去重由调用方负责，重复项以 ``DuplicateValueError`` 失败。
        """
        self._ensure_owner_exists(db, user_crud, user_id, platform_id, "用户不存在")
        self._ensure_targets_exist(db, role_crud, role_ids, platform_id, "部分角色不存在")
        self._replace(
            db,
            relation=user_role_crud,
            owner_id=user_id,
            target_ids=role_ids,
            platform_id=platform_id,
            operator=operator,
            auto_commit=auto_commit,
        )
        logger.info("User %s roles replaced on platform %s: %s", user_id, platform_id, list(role_ids))
        return list(role_ids)

    def set_role_menus(
        self,
        db: Session,
        *,
        role_id: str,
        menu_ids: Sequence[str],
        platform_id: str,
        operator: str = SYSTEM_OPERATOR,
        auto_commit: bool = True,
    ) -> List[str]:
        """把角色在本平台下授予的菜单整体替换为 ``menu_ids``。"""
        self._ensure_owner_exists(db, role_crud, role_id, platform_id, "角色不存在")
        self._ensure_targets_exist(db, menu_crud, menu_ids, platform_id, "部分菜单不存在")
        self._replace(
            db,
            relation=role_menu_crud,
            owner_id=role_id,
            target_ids=menu_ids,
            platform_id=platform_id,
            operator=operator,
            auto_commit=auto_commit,
        )
        logger.info("Role %s menus replaced on platform %s: %s", role_id, platform_id, list(menu_ids))
        return list(menu_ids)

    def get_user_role_ids(self, db: Session, *, user_id: str, platform_id: str) -> List[str]:
        return user_role_crud.list_target_ids(db, [user_id], platform_id=platform_id)

    def get_role_menu_ids(self, db: Session, *, role_id: str, platform_id: str) -> List[str]:
        return role_menu_crud.list_target_ids(db, [role_id], platform_id=platform_id, active_only=True)

    def count_role_menus(self, db: Session, *, role_id: str) -> int:
        return role_menu_crud.count_targets(db, role_id)

    # ------------------------------------------------------------------
    # 级联清理：在实体删除的同一事务内调用，不单独提交
    # ------------------------------------------------------------------

    def purge_users(self, db: Session, user_ids: Iterable[str]) -> int:
        return user_role_crud.delete_by_owners(db, user_ids)

    def purge_roles(self, db: Session, role_ids: Iterable[str]) -> int:
        role_ids = list(role_ids)
        removed = role_menu_crud.delete_by_owners(db, role_ids)
        removed += user_role_crud.delete_by_targets(db, role_ids)
        return removed

    def purge_menus(self, db: Session, menu_ids: Iterable[str]) -> int:
        return role_menu_crud.delete_by_targets(db, menu_ids)

    # ------------------------------------------------------------------
    # 内部辅助方法
    # ------------------------------------------------------------------

    @staticmethod
    def _replace(
        db: Session,
        *,
        relation: CRUDRelation,
        owner_id: str,
        target_ids: Sequence[str],
        platform_id: str,
        operator: str,
        auto_commit: bool,
    ) -> None:
        try:
            relation.replace(
                db,
                owner_id=owner_id,
                target_ids=target_ids,
                platform_id=platform_id,
                operator=operator,
            )
            if auto_commit:
                db.commit()
            else:
                db.flush()
        except IntegrityError as exc:
            db.rollback()
            raise DuplicateValueError("关联记录重复，请勿提交重复的 ID", field=relation.target_column) from exc

    @staticmethod
    def _ensure_owner_exists(db: Session, crud: CRUDBase, owner_id: str, platform_id: str, message: str) -> None:
        if crud.get(db, owner_id, platform_id=platform_id) is None:
            raise NotFoundError(message)

    @staticmethod
    def _ensure_targets_exist(
        db: Session,
        crud: CRUDBase,
        target_ids: Sequence[str],
        platform_id: str,
        message: str,
    ) -> None:
        if any(not isinstance(item, str) or not item for item in target_ids):
            raise InvalidInputError("ID 列表格式错误")
        found = {item.uuid for item in crud.list_by_ids(db, target_ids, platform_id=platform_id)}
        missing = sorted(set(target_ids) - found)
        if missing:
            raise NotFoundError(f"{message}：{', '.join(missing)}")


relation_service = RelationService()
