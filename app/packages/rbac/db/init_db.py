"""Database bootstrapping utilities."""

from __future__ import annotations

import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from app.packages.rbac.core.config import get_settings
from app.packages.rbac.core.constants import ADMIN_ROLE_CODE, SUPER_ADMIN_ROLE_CODE, USER_ROLE_CODE
from app.packages.rbac.core.security import get_password_hash
from app.packages.rbac.crud.relations import role_menu_crud, user_role_crud
from app.packages.rbac.crud.users import user_crud
from app.packages.rbac.db import session as db_session
from app.packages.rbac.models import Base, Menu, Role

logger = logging.getLogger(__name__)

_DEFAULT_ROLES = (
    {"name": "超级管理员", "code": SUPER_ADMIN_ROLE_CODE, "description": "系统超级管理员，拥有所有权限"},
    {"name": "系统管理员", "code": ADMIN_ROLE_CODE, "description": "系统管理员，拥有大部分权限"},
    {"name": "普通用户", "code": USER_ROLE_CODE, "description": "普通用户，只有基本权限"},
)

# parent 为上级菜单名称
_DEFAULT_MENUS = (
    {"name": "仪表盘", "path": "/dashboard", "component": "./pages/dashboard", "icon": "DashboardOutlined",
     "sort": 0, "permission": "dashboard:read", "parent": None},
    {"name": "系统管理", "path": "/system", "component": None, "icon": "SettingOutlined",
     "sort": 1, "permission": "system:read", "parent": None},
    {"name": "用户管理", "path": "/system/users", "component": "./pages/system/users", "icon": "UserOutlined",
     "sort": 1, "permission": "user:manage", "parent": "系统管理"},
    {"name": "角色管理", "path": "/system/roles", "component": "./pages/system/roles", "icon": "TeamOutlined",
     "sort": 2, "permission": "role:manage", "parent": "系统管理"},
    {"name": "菜单管理", "path": "/system/menus", "component": "./pages/system/menus", "icon": "MenuOutlined",
     "sort": 3, "permission": "menu:manage", "parent": "系统管理"},
)

_ROLE_GRANTS = {
    SUPER_ADMIN_ROLE_CODE: [item["name"] for item in _DEFAULT_MENUS],
    ADMIN_ROLE_CODE: ["仪表盘", "系统管理", "用户管理", "角色管理", "菜单管理"],
    USER_ROLE_CODE: ["仪表盘"],
}

_DEFAULT_USERS = (
    {"nickname": "超级管理员", "login_name": "super", "email": "super@example.com", "password": "super123",
     "phone": "13800000000", "remark": "系统超级管理员账号", "role": SUPER_ADMIN_ROLE_CODE},
    {"nickname": "系统管理员", "login_name": "admin", "email": "admin@example.com", "password": "admin123",
     "phone": "13800000001", "remark": "系统管理员账号", "role": ADMIN_ROLE_CODE},
    {"nickname": "测试用户", "login_name": "test", "email": "test@example.com", "password": "test123",
     "phone": "13800000002", "remark": "测试用户账号", "role": USER_ROLE_CODE},
)


def init_db() -> None:
    """Create all database tables if they do not exist and seed baseline data."""
    Base.metadata.create_all(bind=db_session.engine)

    settings = get_settings()
    if not settings.seed_default_data:
        return

    session = db_session.SessionLocal()
    try:
        seed_platform(session, settings.default_platform_id)
        session.commit()
    except Exception:  # pragma: no cover - initialization failures should not crash gracefully
        session.rollback()
        logger.exception("Failed to seed default data during database initialization")
        raise
    finally:
        session.close()


def seed_platform(db: Session, platform_id: str) -> None:
    """为指定平台写入默认角色、菜单、授权与账号；已存在的记录保持不变。"""
    roles = _seed_roles(db, platform_id)
    menus = _seed_menus(db, platform_id)

    for code, menu_names in _ROLE_GRANTS.items():
        role = roles[code]
        if role_menu_crud.list_target_ids(db, [role.uuid], platform_id=platform_id):
            continue
        role_menu_crud.replace(
            db,
            owner_id=role.uuid,
            target_ids=[menus[name].uuid for name in menu_names],
            platform_id=platform_id,
        )

    for item in _DEFAULT_USERS:
        if user_crud.get_by_login_name(db, item["login_name"], platform_id=platform_id) is not None:
            continue
        user = user_crud.create(
            db,
            {
                "platform_id": platform_id,
                "login_name": item["login_name"],
                "nickname": item["nickname"],
                "email": item["email"],
                "phone": item["phone"],
                "remark": item["remark"],
                "password_hash": get_password_hash(item["password"]),
            },
            auto_commit=False,
        )
        user_role_crud.replace(db, owner_id=user.uuid, target_ids=[roles[item["role"]].uuid], platform_id=platform_id)
        logger.info("Seeded default user %s on platform %s", item["login_name"], platform_id)
    db.flush()


def _seed_roles(db: Session, platform_id: str) -> Dict[str, Role]:
    roles: Dict[str, Role] = {}
    for item in _DEFAULT_ROLES:
        role = db.query(Role).filter(Role.platform_id == platform_id, Role.code == item["code"]).first()
        if role is None:
            role = Role(platform_id=platform_id, **item)
            db.add(role)
            db.flush()
        roles[item["code"]] = role
    return roles


def _seed_menus(db: Session, platform_id: str) -> Dict[str, Menu]:
    menus: Dict[str, Menu] = {}
    # 顶级菜单在前，保证子菜单创建时父级已存在
    ordered: List[dict] = sorted(_DEFAULT_MENUS, key=lambda item: item["parent"] is not None)
    for item in ordered:
        values = {key: value for key, value in item.items() if key != "parent"}
        parent = menus.get(item["parent"]) if item["parent"] else None
        menu = db.query(Menu).filter(Menu.platform_id == platform_id, Menu.name == item["name"]).first()
        if menu is None:
            menu = Menu(platform_id=platform_id, parent_id=parent.uuid if parent else None, **values)
            db.add(menu)
            db.flush()
        menus[item["name"]] = menu
    return menus
