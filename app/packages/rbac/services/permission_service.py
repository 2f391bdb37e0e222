"""权限解析服务：用户 -> 角色 -> 菜单 -> 权限字符 / 菜单树。

每次调用都从数据库重新计算，不做进程内缓存。
"""

from __future__ import annotations

from typing import Any, Dict, List, Set

from sqlalchemy.orm import Session

from app.packages.rbac.crud.menus import menu_crud
from app.packages.rbac.crud.relations import role_menu_crud, user_role_crud
from app.packages.rbac.crud.roles import role_crud
from app.packages.rbac.services.menu_tree import build_menu_tree


class PermissionService:
    """汇总用户在某个平台下的有效角色、菜单与权限字符。"""

    def resolve_role_ids(self, db: Session, *, user_id: str, platform_id: str) -> List[str]:
        """用户持有且当前处于 active 状态的本平台角色 ID。"""
        held = user_role_crud.list_target_ids(db, [user_id], platform_id=platform_id)
        if not held:
            return []
        return [role.uuid for role in role_crud.list_active_by_ids(db, held, platform_id=platform_id)]

    def resolve_menu_ids(self, db: Session, *, user_id: str, platform_id: str) -> List[str]:
        role_ids = self.resolve_role_ids(db, user_id=user_id, platform_id=platform_id)
        if not role_ids:
            return []
        return role_menu_crud.list_target_ids(db, role_ids, platform_id=platform_id, active_only=True)

    def resolve_permissions(self, db: Session, *, user_id: str, platform_id: str) -> Set[str]:
        """用户可用的权限字符集合；没有角色时返回空集合。"""
        menu_ids = self.resolve_menu_ids(db, user_id=user_id, platform_id=platform_id)
        if not menu_ids:
            return set()
        codes = menu_crud.list_permission_codes(db, menu_ids, platform_id=platform_id)
        return {code.strip() for code in codes}

    def resolve_user_menus(self, db: Session, *, user_id: str, platform_id: str) -> List[Dict[str, Any]]:
        """用户可见的启用菜单，按 ``sort`` 升序组装为菜单树。"""
        menu_ids = self.resolve_menu_ids(db, user_id=user_id, platform_id=platform_id)
        if not menu_ids:
            return []
        return build_menu_tree(menu_crud.list_active(db, platform_id=platform_id, ids=menu_ids))


permission_service = PermissionService()
