"""角色管理服务：封装角色的增删改查与菜单授权。"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.packages.rbac.core.constants import SYSTEM_OPERATOR
from app.packages.rbac.core.enums import RoleStatusEnum
from app.packages.rbac.core.exceptions import DuplicateValueError, NotFoundError
from app.packages.rbac.core.logger import logger
from app.packages.rbac.core.pagination import build_page, normalize_pagination
from app.packages.rbac.core.timezone import format_datetime
from app.packages.rbac.crud.roles import role_crud
from app.packages.rbac.models.role import Role
from app.packages.rbac.services.relation_service import relation_service
from app.packages.rbac.utils.text_utils import normalize_choice, normalize_id_list, normalize_optional_text, require_text


class RoleService:
    """聚合角色管理相关的业务能力。"""

    def list_roles(
        self,
        db: Session,
        *,
        platform_id: str,
        name: Optional[str] = None,
        code: Optional[str] = None,
        status: Optional[str] = None,
        page: Any = None,
        page_size: Any = None,
    ) -> dict:
        page, page_size = normalize_pagination(page, page_size)
        items, total = role_crud.list_with_filters(
            db,
            platform_id=platform_id,
            name=name,
            code=code,
            status=status,
            skip=(page - 1) * page_size,
            limit=page_size,
        )
        payload = []
        for item in items:
            summary = self._serialize_role(item)
            summary["menuCount"] = relation_service.count_role_menus(db, role_id=item.uuid)
            payload.append(summary)
        return build_page(payload, total, page, page_size)

    def get_detail(self, db: Session, *, role_id: str, platform_id: str) -> dict:
        role = self._get_or_raise(db, role_id, platform_id)
        return self._serialize_role_detail(db, role)

    def create(
        self,
        db: Session,
        *,
        platform_id: str,
        name: str,
        code: str,
        description: Optional[str] = None,
        status: Optional[str] = None,
        menu_ids: Optional[Sequence[str]] = None,
        operator: str = SYSTEM_OPERATOR,
    ) -> dict:
        values = {
            "name": require_text(name, "角色名称不能为空"),
            "code": require_text(code, "角色代码不能为空"),
            "description": normalize_optional_text(description),
            "status": normalize_choice(status or RoleStatusEnum.ACTIVE.value, RoleStatusEnum, "角色状态取值非法"),
        }
        self._assert_unique_code(db, platform_id=platform_id, code=values["code"])

        try:
            role = role_crud.create(
                db,
                {**values, "platform_id": platform_id, "created_by": operator, "updated_by": operator},
                auto_commit=False,
            )
            if menu_ids:
                relation_service.set_role_menus(
                    db,
                    role_id=role.uuid,
                    menu_ids=menu_ids,
                    platform_id=platform_id,
                    operator=operator,
                    auto_commit=False,
                )
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise DuplicateValueError("角色代码已存在", field="code") from exc
        except Exception:
            db.rollback()
            raise

        db.refresh(role)
        logger.info("Role %s created on platform %s by %s", role.code, platform_id, operator)
        return self._serialize_role_detail(db, role)

    def update(
        self,
        db: Session,
        *,
        role_id: str,
        platform_id: str,
        changes: Dict[str, Any],
        operator: str = SYSTEM_OPERATOR,
    ) -> dict:
        """部分更新角色；``changes`` 含 ``menu_ids`` 时在同一事务内整体替换授权菜单。"""
        role = self._get_or_raise(db, role_id, platform_id)

        if "name" in changes:
            role.name = require_text(changes["name"], "角色名称不能为空")
        if "code" in changes:
            code = require_text(changes["code"], "角色代码不能为空")
            self._assert_unique_code(db, platform_id=platform_id, code=code, exclude_id=role.uuid)
            role.code = code
        if "description" in changes:
            role.description = normalize_optional_text(changes["description"])
        if "status" in changes:
            role.status = normalize_choice(changes["status"], RoleStatusEnum, "角色状态取值非法")
        role.updated_by = operator

        try:
            role_crud.save(db, role, auto_commit=False)
            menu_ids = changes.get("menu_ids")
            if menu_ids is not None:
                relation_service.set_role_menus(
                    db,
                    role_id=role.uuid,
                    menu_ids=menu_ids,
                    platform_id=platform_id,
                    operator=operator,
                    auto_commit=False,
                )
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise DuplicateValueError("角色代码已存在", field="code") from exc
        except Exception:
            db.rollback()
            raise

        db.refresh(role)
        return self._serialize_role_detail(db, role)

    def delete(self, db: Session, *, role_id: str, platform_id: str) -> dict:
        """删除角色，同时清理其菜单授权与用户持有关系。"""
        role = self._get_or_raise(db, role_id, platform_id)
        relation_service.purge_roles(db, [role.uuid])
        role_crud.hard_delete(db, role)
        logger.info("Role %s deleted on platform %s", role_id, platform_id)
        return {"uuid": role_id}

    def batch_delete(self, db: Session, *, role_ids: Iterable[str], platform_id: str) -> dict:
        ids = normalize_id_list(role_ids)
        existing = [item.uuid for item in role_crud.list_by_ids(db, ids, platform_id=platform_id)]
        relation_service.purge_roles(db, existing)
        deleted = role_crud.delete_by_ids(db, existing, platform_id=platform_id)
        db.commit()
        logger.info("Batch deleted %s roles on platform %s", deleted, platform_id)
        return {"deletedCount": deleted}

    def get_menu_ids(self, db: Session, *, role_id: str, platform_id: str) -> dict:
        role = self._get_or_raise(db, role_id, platform_id)
        return {"menuIds": relation_service.get_role_menu_ids(db, role_id=role.uuid, platform_id=platform_id)}

    def set_menus(
        self,
        db: Session,
        *,
        role_id: str,
        menu_ids: Sequence[str],
        platform_id: str,
        operator: str = SYSTEM_OPERATOR,
    ) -> dict:
        relation_service.set_role_menus(
            db,
            role_id=role_id,
            menu_ids=normalize_id_list(menu_ids),
            platform_id=platform_id,
            operator=operator,
        )
        return self.get_menu_ids(db, role_id=role_id, platform_id=platform_id)

    # ------------------------------------------------------------------
    # 内部辅助方法
    # ------------------------------------------------------------------

    @staticmethod
    def _serialize_role(role: Role) -> dict:
        return {
            "uuid": role.uuid,
            "name": role.name,
            "code": role.code,
            "description": role.description,
            "status": role.status,
            "platformId": role.platform_id,
            "createdBy": role.created_by,
            "updatedBy": role.updated_by,
            "createTime": format_datetime(role.create_time),
            "updateTime": format_datetime(role.update_time),
        }

    def _serialize_role_detail(self, db: Session, role: Role) -> dict:
        data = self._serialize_role(role)
        data["menuIds"] = relation_service.get_role_menu_ids(db, role_id=role.uuid, platform_id=role.platform_id)
        return data

    @staticmethod
    def _get_or_raise(db: Session, role_id: str, platform_id: str) -> Role:
        role = role_crud.get(db, role_id, platform_id=platform_id)
        if role is None:
            raise NotFoundError("角色不存在")
        return role

    @staticmethod
    def _assert_unique_code(
        db: Session,
        *,
        platform_id: str,
        code: str,
        exclude_id: Optional[str] = None,
    ) -> None:
        if role_crud.exists_with(db, platform_id=platform_id, field="code", value=code, exclude_id=exclude_id):
            raise DuplicateValueError("角色代码已存在", field="code")


role_service = RoleService()
