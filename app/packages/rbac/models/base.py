"""模型基类：统一声明式基类、通用审计/归属字段与多对多关联表。

本模块集中提供：
- Base：SQLAlchemy 声明式基类，带统一命名约定；
- UUIDPrimaryKeyMixin：字符串形式的 UUID4 主键 `uuid`；
- TimestampMixin：`create_time`、`update_time`；
- AuditMixin：`created_by`、`updated_by`（操作人用户 UUID，系统写入时为 `system`）；
- PlatformOwnedMixin：`platform_id`（租户/平台隔离标识）；
- 两个多对多关联表（user_roles/role_menus），以二元组为主键保证唯一。
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, MetaData, String, Table, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from app.packages.rbac.core.constants import SYSTEM_OPERATOR
from app.packages.rbac.core.enums import RelationStatusEnum

convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata_obj = MetaData(naming_convention=convention)


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """全局声明式基类，附带一致的命名约定，便于迁移与调试。"""

    metadata = metadata_obj


class UUIDPrimaryKeyMixin:
    uuid: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)


class TimestampMixin:
    """通用时间戳字段，为记录新增、更新提供审计能力。"""

    create_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    update_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class AuditMixin:
    created_by: Mapped[str] = mapped_column(String(64), default=SYSTEM_OPERATOR, nullable=False)
    updated_by: Mapped[str] = mapped_column(String(64), default=SYSTEM_OPERATOR, nullable=False)


class PlatformOwnedMixin:
    platform_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)


def _junction_table(name: str, owner_column: str, target_column: str) -> Table:
    """构造关联表：二元组主键即唯一约束，附带平台与状态字段。"""
    return Table(
        name,
        Base.metadata,
        Column(owner_column, String(36), primary_key=True, index=True),
        Column(target_column, String(36), primary_key=True, index=True),
        Column("platform_id", String(64), nullable=False, index=True),
        Column("status", String(20), nullable=False, default=RelationStatusEnum.ACTIVE.value),
        Column("created_by", String(64), nullable=False, default=SYSTEM_OPERATOR),
        Column("create_time", DateTime(timezone=True), server_default=func.now(), nullable=False),
    )


# 用户持有角色；角色授予菜单。关联记录的生命周期由关系管理服务显式维护。
user_roles = _junction_table("user_roles", "user_id", "role_id")
role_menus = _junction_table("role_menus", "role_id", "menu_id")
