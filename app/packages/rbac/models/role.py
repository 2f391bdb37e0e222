"""角色模型：定义用户可被赋予的角色。"""

from typing import Optional

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.packages.rbac.core.enums import RoleStatusEnum
from app.packages.rbac.models.base import (
    AuditMixin,
    Base,
    PlatformOwnedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class Role(UUIDPrimaryKeyMixin, PlatformOwnedMixin, AuditMixin, TimestampMixin, Base):
    """角色实体，角色代码在平台内唯一；菜单授权存放在 ``role_menus``。"""

    __tablename__ = "roles"
    __table_args__ = (
        UniqueConstraint("platform_id", "code", name="uq_roles_platform_code"),
    )

    name: Mapped[str] = mapped_column(String(50), index=True)
    code: Mapped[str] = mapped_column(String(100), index=True)
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=RoleStatusEnum.ACTIVE.value, index=True)
