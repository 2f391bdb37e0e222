"""认证相关路由定义：登录与当前用户信息。"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.packages.rbac.api.v1.schemas.auth import LoginRequest, LoginResponse, UserInfoResponse
from app.packages.rbac.core.dependencies import CurrentIdentity, get_current_identity, get_db
from app.packages.rbac.core.exceptions import AppException
from app.packages.rbac.core.logger import logger
from app.packages.rbac.core.responses import create_response
from app.packages.rbac.services.auth_service import auth_service

router = APIRouter(prefix="/user", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)) -> LoginResponse:
    """校验凭证并签发访问令牌。"""
    data = auth_service.login(
        db,
        login_name=payload.login_name,
        password=payload.password,
        platform_id=payload.platform_id,
        client_ip=_extract_client_ip(request),
    )
    return create_response("登录成功", data)


@router.get("/info", response_model=UserInfoResponse)
def get_user_info(
    db: Session = Depends(get_db),
    identity: CurrentIdentity = Depends(get_current_identity),
) -> UserInfoResponse:
    """返回当前登录用户的详情、权限字符与菜单树。"""
    try:
        data = auth_service.get_user_info(db, user_id=identity.user_id, platform_id=identity.platform_id)
    except AppException:
        raise
    except Exception as exc:
        logger.exception("Failed to resolve user info for %s", identity.user_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="获取用户信息失败") from exc
    return create_response("获取用户信息成功", data)


def _extract_client_ip(request: Request) -> Optional[str]:
    header_keys = [
        "x-forwarded-for",
        "x-real-ip",
        "x-client-ip",
    ]
    for key in header_keys:
        raw = request.headers.get(key)
        if raw:
            return raw.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None
