"""菜单管理服务：菜单的查询、树形视图、增删改与删除保护。"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from app.packages.rbac.core.constants import SYSTEM_OPERATOR
from app.packages.rbac.core.enums import MenuStatusEnum, MenuTypeEnum
from app.packages.rbac.core.exceptions import HasChildrenError, InvalidInputError, NotFoundError
from app.packages.rbac.core.logger import logger
from app.packages.rbac.core.pagination import build_page, normalize_pagination
from app.packages.rbac.crud.menus import menu_crud
from app.packages.rbac.models.menu import Menu
from app.packages.rbac.services.menu_tree import build_menu_tree, serialize_menu
from app.packages.rbac.services.relation_service import relation_service
from app.packages.rbac.utils.text_utils import normalize_choice, normalize_id_list, normalize_optional_text, require_text

_TEXT_FIELDS = ("path", "component", "icon", "permission")


class MenuService:
    """聚合菜单管理相关的业务能力。"""

    def list_menus(
        self,
        db: Session,
        *,
        platform_id: str,
        name: Optional[str] = None,
        menu_type: Optional[str] = None,
        status: Optional[str] = None,
        page: Any = None,
        page_size: Any = None,
    ) -> dict:
        page, page_size = normalize_pagination(page, page_size)
        items, total = menu_crud.list_with_filters(
            db,
            platform_id=platform_id,
            name=name,
            menu_type=menu_type,
            status=status,
            skip=(page - 1) * page_size,
            limit=page_size,
        )
        return build_page([serialize_menu(item) for item in items], total, page, page_size)

    def get_tree(self, db: Session, *, platform_id: str) -> List[Dict[str, Any]]:
        """平台内全部启用菜单组成的菜单树。"""
        return build_menu_tree(menu_crud.list_active(db, platform_id=platform_id))

    def get_detail(self, db: Session, *, menu_id: str, platform_id: str) -> dict:
        return serialize_menu(self._get_or_raise(db, menu_id, platform_id))

    def create(
        self,
        db: Session,
        *,
        platform_id: str,
        name: str,
        parent_id: Optional[str] = None,
        path: Optional[str] = None,
        component: Optional[str] = None,
        icon: Optional[str] = None,
        menu_type: Optional[str] = None,
        permission: Optional[str] = None,
        sort: Optional[int] = None,
        status: Optional[str] = None,
        operator: str = SYSTEM_OPERATOR,
    ) -> dict:
        parent_id = normalize_optional_text(parent_id)
        if parent_id is not None:
            self._validate_parent(db, menu_id=None, parent_id=parent_id, platform_id=platform_id)

        menu = menu_crud.create(
            db,
            {
                "platform_id": platform_id,
                "name": require_text(name, "菜单名称不能为空"),
                "parent_id": parent_id,
                "path": normalize_optional_text(path),
                "component": normalize_optional_text(component),
                "icon": normalize_optional_text(icon),
                "type": normalize_choice(menu_type or MenuTypeEnum.MENU.value, MenuTypeEnum, "菜单类型取值非法"),
                "permission": normalize_optional_text(permission),
                "sort": sort or 0,
                "status": normalize_choice(status or MenuStatusEnum.ACTIVE.value, MenuStatusEnum, "菜单状态取值非法"),
                "created_by": operator,
                "updated_by": operator,
            },
        )
        logger.info("Menu %s created on platform %s by %s", menu.uuid, platform_id, operator)
        return serialize_menu(menu)

    def update(
        self,
        db: Session,
        *,
        menu_id: str,
        platform_id: str,
        changes: Dict[str, Any],
        operator: str = SYSTEM_OPERATOR,
    ) -> dict:
        menu = self._get_or_raise(db, menu_id, platform_id)

        if "parent_id" in changes:
            parent_id = normalize_optional_text(changes["parent_id"])
            if parent_id is not None:
                self._validate_parent(db, menu_id=menu.uuid, parent_id=parent_id, platform_id=platform_id)
            menu.parent_id = parent_id
        if "name" in changes:
            menu.name = require_text(changes["name"], "菜单名称不能为空")
        for field in _TEXT_FIELDS:
            if field in changes:
                setattr(menu, field, normalize_optional_text(changes[field]))
        if "type" in changes:
            menu.type = normalize_choice(changes["type"], MenuTypeEnum, "菜单类型取值非法")
        if "sort" in changes:
            menu.sort = changes["sort"] or 0
        if "status" in changes:
            menu.status = normalize_choice(changes["status"], MenuStatusEnum, "菜单状态取值非法")
        menu.updated_by = operator

        menu_crud.save(db, menu)
        return serialize_menu(menu)

    def delete(self, db: Session, *, menu_id: str, platform_id: str) -> dict:
        """删除单个菜单；存在子菜单时拒绝删除，同时清理角色授权记录。"""
        menu = self._get_or_raise(db, menu_id, platform_id)
        if menu_crud.has_children(db, menu.uuid, platform_id=platform_id):
            raise HasChildrenError(f"菜单「{menu.name}」存在子菜单，无法删除")
        relation_service.purge_menus(db, [menu.uuid])
        menu_crud.hard_delete(db, menu)
        logger.info("Menu %s deleted on platform %s", menu_id, platform_id)
        return {"uuid": menu_id}

    def batch_delete(self, db: Session, *, menu_ids: Iterable[str], platform_id: str) -> dict:
        """批量删除：先逐个检查，任一菜单存在子菜单则整体放弃，不删除任何记录。"""
        requested = list(dict.fromkeys(normalize_id_list(menu_ids)))
        found = {item.uuid: item for item in menu_crud.list_by_ids(db, requested, platform_id=platform_id)}
        targets = [found[item] for item in requested if item in found]

        for menu in targets:
            if menu_crud.has_children(db, menu.uuid, platform_id=platform_id):
                raise HasChildrenError(f"菜单「{menu.name}」存在子菜单，无法删除")

        ids = [menu.uuid for menu in targets]
        relation_service.purge_menus(db, ids)
        deleted = menu_crud.delete_by_ids(db, ids, platform_id=platform_id)
        db.commit()
        logger.info("Batch deleted %s menus on platform %s", deleted, platform_id)
        return {"deletedCount": deleted}

    # ------------------------------------------------------------------
    # 内部辅助方法
    # ------------------------------------------------------------------

    @staticmethod
    def _get_or_raise(db: Session, menu_id: str, platform_id: str) -> Menu:
        menu = menu_crud.get(db, menu_id, platform_id=platform_id)
        if menu is None:
            raise NotFoundError("菜单不存在")
        return menu

    @staticmethod
    def _validate_parent(db: Session, *, menu_id: Optional[str], parent_id: str, platform_id: str) -> None:
        """父级必须是本平台已有菜单，且不能是自身或自身的子孙节点。"""
        if menu_id is not None and parent_id == menu_id:
            raise InvalidInputError("上级菜单不能是自身")
        links = menu_crud.list_parent_links(db, platform_id=platform_id)
        if parent_id not in links:
            raise NotFoundError("上级菜单不存在")
        if menu_id is None:
            return

        visited = set()
        current: Optional[str] = parent_id
        while current is not None and current not in visited:
            if current == menu_id:
                raise InvalidInputError("上级菜单不能是当前菜单的子菜单")
            visited.add(current)
            current = links.get(current)


menu_service = MenuService()
