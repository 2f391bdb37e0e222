"""依赖注入模块：封装 FastAPI 中复用度高的依赖函数。"""

from collections.abc import Generator
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.packages.rbac.core.constants import ACCESS_TOKEN_TYPE
from app.packages.rbac.core.security import decode_token
from app.packages.rbac.crud.users import user_crud
from app.packages.rbac.db.session import SessionLocal

security_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentIdentity:
    """已认证的调用方身份：业务层只依赖用户 ID 与平台 ID。"""

    user_id: str
    platform_id: str
    login_name: Optional[str] = None


def get_db() -> Generator[Session, None, None]:
    """生成一个数据库会话，并在请求结束后自动关闭。"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: Session = Depends(get_db),
) -> CurrentIdentity:
    """解析 ``Authorization`` 头部，令牌缺失、非法或对应用户已不存在时抛出 401。"""
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="未提供认证令牌")

    if credentials.scheme.lower() != ACCESS_TOKEN_TYPE:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="认证类型无效")

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="无效的认证令牌")

    user_id = payload.get("user_id")
    platform_id = payload.get("platform_id")
    if not user_id or not platform_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="无效的认证令牌")

    if user_crud.get(db, user_id, platform_id=platform_id) is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="用户不存在")

    return CurrentIdentity(user_id=user_id, platform_id=platform_id, login_name=payload.get("login_name"))
