"""菜单模型：描述菜单与按钮等权限节点，``parent_id`` 构成层级。"""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.packages.rbac.core.enums import MenuStatusEnum, MenuTypeEnum
from app.packages.rbac.models.base import (
    AuditMixin,
    Base,
    PlatformOwnedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class Menu(UUIDPrimaryKeyMixin, PlatformOwnedMixin, AuditMixin, TimestampMixin, Base):
    """用于构建菜单树的节点实体。

    ``parent_id`` 只是弱引用（不建外键），父节点被过滤掉时子节点在树中提升为根。
    """

    __tablename__ = "menus"

    name: Mapped[str] = mapped_column(String(100), index=True)
    path: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    component: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    parent_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    type: Mapped[str] = mapped_column(String(20), default=MenuTypeEnum.MENU.value)
    permission: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    sort: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(String(20), default=MenuStatusEnum.ACTIVE.value, index=True)
