"""认证服务：封装登录与当前用户信息查询。"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.packages.rbac.core.enums import UserStatusEnum
from app.packages.rbac.core.exceptions import BadCredentialsError, DisabledError, NotFoundError
from app.packages.rbac.core.logger import logger
from app.packages.rbac.core.security import create_access_token, verify_password
from app.packages.rbac.crud.users import user_crud
from app.packages.rbac.models.user import User
from app.packages.rbac.services.permission_service import permission_service
from app.packages.rbac.services.user_service import user_service


class AuthService:
    """负责登录校验、令牌签发以及“我是谁”视图的组装。"""

    def login(
        self,
        db: Session,
        *,
        login_name: str,
        password: str,
        platform_id: str,
        client_ip: Optional[str] = None,
    ) -> dict:
        """校验用户凭证，更新最近登录信息并返回 ``{token, userInfo}``。"""
        user = user_crud.get_by_login_name(db, (login_name or "").strip(), platform_id=platform_id)
        if user is None:
            logger.info("Login rejected for unknown user %s on platform %s", login_name, platform_id)
            raise NotFoundError("用户不存在")
        if user.status != UserStatusEnum.ACTIVE.value:
            logger.info("Login rejected for %s user %s", user.status, user.login_name)
            raise DisabledError("用户已被禁用")
        if not verify_password(password or "", user.password_hash):
            logger.info("Login rejected for %s: password mismatch", user.login_name)
            raise BadCredentialsError("密码错误")

        # 统一以 UTC 写入，展示时再按配置时区格式化
        user.last_login_at = datetime.now(timezone.utc)
        user.last_login_ip = client_ip
        user_crud.save(db, user)

        token = create_access_token(
            {"user_id": user.uuid, "login_name": user.login_name, "platform_id": user.platform_id}
        )
        logger.info("User %s logged in on platform %s", user.login_name, platform_id)
        return {"token": token, "userInfo": self._build_user_info(db, user)}

    def get_user_info(self, db: Session, *, user_id: str, platform_id: str) -> dict:
        """当前用户详情，附带权限字符与菜单树。"""
        user = user_crud.get(db, user_id, platform_id=platform_id)
        if user is None:
            raise NotFoundError("用户不存在")
        data = user_service.serialize_user(db, user)
        data["permissions"] = sorted(
            permission_service.resolve_permissions(db, user_id=user.uuid, platform_id=platform_id)
        )
        data["menus"] = permission_service.resolve_user_menus(db, user_id=user.uuid, platform_id=platform_id)
        return data

    @staticmethod
    def _build_user_info(db: Session, user: User) -> dict:
        platform_id = user.platform_id
        return {
            "uuid": user.uuid,
            "nickname": user.nickname,
            "loginName": user.login_name,
            "email": user.email,
            "phone": user.phone,
            "avatar": user.avatar,
            "platformId": platform_id,
            "roles": user_service.list_active_roles(db, user_id=user.uuid, platform_id=platform_id),
            "permissions": sorted(
                permission_service.resolve_permissions(db, user_id=user.uuid, platform_id=platform_id)
            ),
            "menus": permission_service.resolve_user_menus(db, user_id=user.uuid, platform_id=platform_id),
        }


auth_service = AuthService()
