"""枚举定义：约束用户、角色、菜单等实体字段的可选值。"""

from enum import Enum


class UserStatusEnum(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"
    PENDING = "pending"
    BANNED = "banned"


class GenderEnum(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class RoleStatusEnum(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"


class MenuStatusEnum(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"


class MenuTypeEnum(str, Enum):
    """菜单节点在前端渲染时的类型分类。"""

    MENU = "menu"
    BUTTON = "button"


class RelationStatusEnum(str, Enum):
    """关联表记录状态，仅 ``active`` 的记录参与权限计算。"""

    ACTIVE = "active"
    DISABLED = "disabled"
