"""用户模型：描述后台账号，登录名、邮箱、手机号在平台内唯一。"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.packages.rbac.core.enums import GenderEnum, UserStatusEnum
from app.packages.rbac.models.base import (
    AuditMixin,
    Base,
    PlatformOwnedMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)


class User(UUIDPrimaryKeyMixin, PlatformOwnedMixin, AuditMixin, TimestampMixin, Base):
    """后台用户实体，通过 ``user_roles`` 关联表持有角色。"""

    __tablename__ = "admin_users"
    # 手机号可空：NULL 不参与唯一性比较，因此可选字段同样适用联合唯一约束
    __table_args__ = (
        UniqueConstraint("platform_id", "login_name", name="uq_admin_users_platform_login_name"),
        UniqueConstraint("platform_id", "email", name="uq_admin_users_platform_email"),
        UniqueConstraint("platform_id", "phone", name="uq_admin_users_platform_phone"),
    )

    login_name: Mapped[str] = mapped_column(String(50), index=True)
    nickname: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    gender: Mapped[str] = mapped_column(String(10), default=GenderEnum.OTHER.value)
    birthday: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    remark: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=UserStatusEnum.ACTIVE.value, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    last_login_ip: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
