"""用户管理相关的路由定义。"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.packages.rbac.api.v1.schemas.common import BatchDeleteRequest
from app.packages.rbac.api.v1.schemas.users import (
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserRolesRequest,
    UserUpdateRequest,
)
from app.packages.rbac.core.constants import DEFAULT_PLATFORM_ID
from app.packages.rbac.core.dependencies import CurrentIdentity, get_current_identity, get_db
from app.packages.rbac.core.responses import create_response
from app.packages.rbac.services.user_service import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserListResponse)
def list_users(
    page: Optional[str] = Query(None, description="页码，从 1 开始"),
    page_size: Optional[str] = Query(None, alias="pageSize", description="每页数量"),
    name: Optional[str] = Query(None, description="昵称模糊匹配"),
    login_name: Optional[str] = Query(None, alias="loginName", description="登录名模糊匹配"),
    status: Optional[str] = Query(None, description="用户状态"),
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> UserListResponse:
    data = user_service.list_users(
        db,
        platform_id=platform_id,
        name=name,
        login_name=login_name,
        status=status,
        page=page,
        page_size=page_size,
    )
    return create_response("获取用户列表成功", data)


@router.post("", response_model=UserResponse)
def create_user(
    payload: UserCreateRequest,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    identity: CurrentIdentity = Depends(get_current_identity),
) -> UserResponse:
    data = user_service.create_user(
        db,
        platform_id=platform_id,
        operator=identity.user_id,
        **payload.model_dump(),
    )
    return create_response("创建用户成功", data)


@router.post("/batch-delete", response_model=UserResponse)
def batch_delete_users(
    payload: BatchDeleteRequest,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> UserResponse:
    data = user_service.batch_delete_users(db, user_ids=payload.uuids, platform_id=platform_id)
    return create_response("批量删除用户成功", data)


@router.get("/{uuid}", response_model=UserResponse)
def get_user(
    uuid: str,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> UserResponse:
    data = user_service.get_user(db, user_id=uuid, platform_id=platform_id)
    return create_response("获取用户详情成功", data)


@router.put("/{uuid}", response_model=UserResponse)
def update_user(
    uuid: str,
    payload: UserUpdateRequest,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    identity: CurrentIdentity = Depends(get_current_identity),
) -> UserResponse:
    data = user_service.update_user(
        db,
        user_id=uuid,
        platform_id=platform_id,
        changes=payload.model_dump(exclude_unset=True),
        operator=identity.user_id,
    )
    return create_response("更新用户成功", data)


@router.delete("/{uuid}", response_model=UserResponse)
def delete_user(
    uuid: str,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> UserResponse:
    data = user_service.delete_user(db, user_id=uuid, platform_id=platform_id)
    return create_response("删除用户成功", data)


@router.put("/{uuid}/roles", response_model=UserResponse)
def update_user_roles(
    uuid: str,
    payload: UserRolesRequest,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    identity: CurrentIdentity = Depends(get_current_identity),
) -> UserResponse:
    """整体替换用户在本平台下的角色。"""
    data = user_service.set_user_roles(
        db,
        user_id=uuid,
        role_ids=payload.role_ids,
        platform_id=platform_id,
        operator=identity.user_id,
    )
    return create_response("更新用户角色成功", data)
