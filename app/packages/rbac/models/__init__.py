"""模型包初始化，便于统一导入 ORM 实体并触发模型注册。"""

from app.packages.rbac.models.base import Base, role_menus, user_roles
from app.packages.rbac.models.menu import Menu
from app.packages.rbac.models.role import Role
from app.packages.rbac.models.user import User

__all__ = [
    "Base",
    "Menu",
    "Role",
    "User",
    "role_menus",
    "user_roles",
]
