"""用户服务：封装用户管理的查询、增删改与角色分配。"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.packages.rbac.core.constants import SYSTEM_OPERATOR
from app.packages.rbac.core.enums import GenderEnum, UserStatusEnum
from app.packages.rbac.core.exceptions import DuplicateValueError, InvalidInputError, NotFoundError
from app.packages.rbac.core.logger import logger
from app.packages.rbac.core.pagination import build_page, normalize_pagination
from app.packages.rbac.core.security import get_password_hash
from app.packages.rbac.core.timezone import format_datetime
from app.packages.rbac.crud.roles import role_crud
from app.packages.rbac.crud.users import user_crud
from app.packages.rbac.models.user import User
from app.packages.rbac.services.relation_service import relation_service
from app.packages.rbac.utils.text_utils import normalize_choice, normalize_id_list, normalize_optional_text, require_text

# 唯一性检查顺序即报错优先级
_UNIQUE_FIELDS = (
    ("login_name", "loginName", "登录名已存在"),
    ("email", "email", "邮箱已存在"),
    ("phone", "phone", "手机号已存在"),
)

_REQUIRED_LABELS = {"login_name": "登录名", "email": "邮箱", "nickname": "昵称"}

_EDITABLE_FIELDS = (
    "login_name",
    "nickname",
    "email",
    "phone",
    "avatar",
    "gender",
    "birthday",
    "address",
    "remark",
    "status",
)


class UserService:
    """聚合用户相关的核心业务能力。"""

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def list_users(
        self,
        db: Session,
        *,
        platform_id: str,
        name: Optional[str] = None,
        login_name: Optional[str] = None,
        status: Optional[str] = None,
        page: Any = None,
        page_size: Any = None,
    ) -> dict:
        page, page_size = normalize_pagination(page, page_size)
        items, total = user_crud.list_with_filters(
            db,
            platform_id=platform_id,
            name=name,
            login_name=login_name,
            status=status,
            skip=(page - 1) * page_size,
            limit=page_size,
        )
        return build_page([self.serialize_user(db, item) for item in items], total, page, page_size)

    def get_user(self, db: Session, *, user_id: str, platform_id: str) -> dict:
        user = self._get_or_raise(db, user_id, platform_id)
        return self.serialize_user(db, user)

    # ------------------------------------------------------------------
    # 增删改
    # ------------------------------------------------------------------

    def create_user(
        self,
        db: Session,
        *,
        platform_id: str,
        login_name: str,
        email: str,
        password: str,
        nickname: str,
        phone: Optional[str] = None,
        avatar: Optional[str] = None,
        gender: Optional[str] = None,
        birthday: Optional[str] = None,
        address: Optional[str] = None,
        remark: Optional[str] = None,
        status: Optional[str] = None,
        role_ids: Optional[Sequence[str]] = None,
        operator: str = SYSTEM_OPERATOR,
    ) -> dict:
        values = {
            "login_name": require_text(login_name, "登录名不能为空"),
            "email": require_text(email, "邮箱不能为空"),
            "nickname": require_text(nickname, "昵称不能为空"),
            "phone": normalize_optional_text(phone),
            "avatar": normalize_optional_text(avatar),
            "gender": normalize_choice(gender or GenderEnum.OTHER.value, GenderEnum, "性别取值非法"),
            "birthday": normalize_optional_text(birthday),
            "address": normalize_optional_text(address),
            "remark": normalize_optional_text(remark),
            "status": normalize_choice(status or UserStatusEnum.ACTIVE.value, UserStatusEnum, "用户状态取值非法"),
        }
        if not password:
            raise InvalidInputError("密码不能为空")
        password_hash = get_password_hash(password)
        self._assert_unique(db, platform_id=platform_id, values=values)

        try:
            user = user_crud.create(
                db,
                {
                    **values,
                    "platform_id": platform_id,
                    "password_hash": password_hash,
                    "created_by": operator,
                    "updated_by": operator,
                },
                auto_commit=False,
            )
            if role_ids:
                relation_service.set_user_roles(
                    db,
                    user_id=user.uuid,
                    role_ids=role_ids,
                    platform_id=platform_id,
                    operator=operator,
                    auto_commit=False,
                )
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise self._translate_integrity_error(exc) from exc
        except Exception:
            db.rollback()
            raise

        db.refresh(user)
        logger.info("User %s created on platform %s by %s", user.login_name, platform_id, operator)
        return self.serialize_user(db, user)

    def update_user(
        self,
        db: Session,
        *,
        user_id: str,
        platform_id: str,
        changes: Dict[str, Any],
        operator: str = SYSTEM_OPERATOR,
    ) -> dict:
        """部分更新：只处理 ``changes`` 中出现的字段，提供密码时重新哈希。"""
        user = self._get_or_raise(db, user_id, platform_id)

        values: Dict[str, Any] = {}
        for field in _EDITABLE_FIELDS:
            if field not in changes:
                continue
            raw = changes[field]
            if field in _REQUIRED_LABELS:
                values[field] = require_text(raw, f"{_REQUIRED_LABELS[field]}不能为空")
            elif field == "gender":
                values[field] = normalize_choice(raw or GenderEnum.OTHER.value, GenderEnum, "性别取值非法")
            elif field == "status":
                values[field] = normalize_choice(raw, UserStatusEnum, "用户状态取值非法")
            else:
                values[field] = normalize_optional_text(raw)

        password = changes.get("password")
        password_hash = get_password_hash(password) if password else None
        self._assert_unique(db, platform_id=platform_id, values=values, exclude_id=user.uuid)

        for field, value in values.items():
            setattr(user, field, value)
        if password_hash:
            user.password_hash = password_hash
        user.updated_by = operator

        try:
            user_crud.save(db, user, auto_commit=False)
            role_ids = changes.get("role_ids")
            if role_ids is not None:
                relation_service.set_user_roles(
                    db,
                    user_id=user.uuid,
                    role_ids=role_ids,
                    platform_id=platform_id,
                    operator=operator,
                    auto_commit=False,
                )
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise self._translate_integrity_error(exc) from exc
        except Exception:
            db.rollback()
            raise

        db.refresh(user)
        return self.serialize_user(db, user)

    def delete_user(self, db: Session, *, user_id: str, platform_id: str) -> dict:
        user = self._get_or_raise(db, user_id, platform_id)
        relation_service.purge_users(db, [user.uuid])
        user_crud.hard_delete(db, user)
        logger.info("User %s deleted on platform %s", user_id, platform_id)
        return {"uuid": user_id}

    def batch_delete_users(self, db: Session, *, user_ids: Iterable[str], platform_id: str) -> dict:
        ids = normalize_id_list(user_ids)
        # 只清理本平台内真实存在的用户的关联，避免误删其他平台数据
        existing = [item.uuid for item in user_crud.list_by_ids(db, ids, platform_id=platform_id)]
        relation_service.purge_users(db, existing)
        deleted = user_crud.delete_by_ids(db, existing, platform_id=platform_id)
        db.commit()
        logger.info("Batch deleted %s users on platform %s", deleted, platform_id)
        return {"deletedCount": deleted}

    def set_user_roles(
        self,
        db: Session,
        *,
        user_id: str,
        role_ids: Sequence[str],
        platform_id: str,
        operator: str = SYSTEM_OPERATOR,
    ) -> dict:
        relation_service.set_user_roles(
            db,
            user_id=user_id,
            role_ids=normalize_id_list(role_ids),
            platform_id=platform_id,
            operator=operator,
        )
        return self.get_user(db, user_id=user_id, platform_id=platform_id)

    # ------------------------------------------------------------------
    # 序列化
    # ------------------------------------------------------------------

    def serialize_user(self, db: Session, user: User) -> dict:
        """用户详情，不含密码哈希；``roles`` 只包含当前启用的角色。"""
        return {
            "uuid": user.uuid,
            "loginName": user.login_name,
            "nickname": user.nickname,
            "email": user.email,
            "phone": user.phone,
            "avatar": user.avatar,
            "gender": user.gender,
            "birthday": user.birthday,
            "address": user.address,
            "remark": user.remark,
            "status": user.status,
            "platformId": user.platform_id,
            "lastLoginAt": format_datetime(user.last_login_at),
            "lastLoginIp": user.last_login_ip,
            "createdBy": user.created_by,
            "updatedBy": user.updated_by,
            "createTime": format_datetime(user.create_time),
            "updateTime": format_datetime(user.update_time),
            "roles": self.list_active_roles(db, user_id=user.uuid, platform_id=user.platform_id),
        }

    @staticmethod
    def list_active_roles(db: Session, *, user_id: str, platform_id: str) -> List[dict]:
        role_ids = relation_service.get_user_role_ids(db, user_id=user_id, platform_id=platform_id)
        return [
            {
                "uuid": role.uuid,
                "name": role.name,
                "code": role.code,
                "description": role.description,
                "status": role.status,
            }
            for role in role_crud.list_active_by_ids(db, role_ids, platform_id=platform_id)
        ]

    # ------------------------------------------------------------------
    # 内部辅助方法
    # ------------------------------------------------------------------

    @staticmethod
    def _get_or_raise(db: Session, user_id: str, platform_id: str) -> User:
        user = user_crud.get(db, user_id, platform_id=platform_id)
        if user is None:
            raise NotFoundError("用户不存在")
        return user

    @staticmethod
    def _assert_unique(
        db: Session,
        *,
        platform_id: str,
        values: Dict[str, Any],
        exclude_id: Optional[str] = None,
    ) -> None:
        for field, label, message in _UNIQUE_FIELDS:
            value = values.get(field)
            if value is None:
                continue
            if user_crud.exists_with(db, platform_id=platform_id, field=field, value=value, exclude_id=exclude_id):
                raise DuplicateValueError(message, field=label)

    @staticmethod
    def _translate_integrity_error(exc: IntegrityError) -> DuplicateValueError:
        """唯一约束兜底：并发写入绕过前置检查时，根据约束名推断冲突字段。"""
        text = str(exc.orig).lower()
        for field, label, message in _UNIQUE_FIELDS:
            if field in text:
                return DuplicateValueError(message, field=label)
        return DuplicateValueError("数据重复，请检查后重试")


user_service = UserService()
