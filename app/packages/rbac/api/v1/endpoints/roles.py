"""角色管理相关的路由定义。"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.packages.rbac.api.v1.schemas.common import BatchDeleteRequest
from app.packages.rbac.api.v1.schemas.roles import (
    RoleCreateRequest,
    RoleListResponse,
    RoleMenusRequest,
    RoleResponse,
    RoleUpdateRequest,
)
from app.packages.rbac.core.constants import DEFAULT_PLATFORM_ID
from app.packages.rbac.core.dependencies import CurrentIdentity, get_current_identity, get_db
from app.packages.rbac.core.responses import create_response
from app.packages.rbac.services.role_service import role_service

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get("", response_model=RoleListResponse)
def list_roles(
    page: Optional[str] = Query(None, description="页码，从 1 开始"),
    page_size: Optional[str] = Query(None, alias="pageSize", description="每页数量"),
    name: Optional[str] = Query(None, description="角色名称模糊匹配"),
    code: Optional[str] = Query(None, description="角色代码模糊匹配"),
    status: Optional[str] = Query(None, description="角色状态"),
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> RoleListResponse:
    data = role_service.list_roles(
        db,
        platform_id=platform_id,
        name=name,
        code=code,
        status=status,
        page=page,
        page_size=page_size,
    )
    return create_response("获取角色列表成功", data)


@router.post("", response_model=RoleResponse)
def create_role(
    payload: RoleCreateRequest,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    identity: CurrentIdentity = Depends(get_current_identity),
) -> RoleResponse:
    data = role_service.create(db, platform_id=platform_id, operator=identity.user_id, **payload.model_dump())
    return create_response("创建角色成功", data)


@router.post("/batch-delete", response_model=RoleResponse)
def batch_delete_roles(
    payload: BatchDeleteRequest,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> RoleResponse:
    data = role_service.batch_delete(db, role_ids=payload.uuids, platform_id=platform_id)
    return create_response("批量删除角色成功", data)


@router.get("/{uuid}", response_model=RoleResponse)
def get_role_detail(
    uuid: str,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> RoleResponse:
    data = role_service.get_detail(db, role_id=uuid, platform_id=platform_id)
    return create_response("获取角色详情成功", data)


@router.put("/{uuid}", response_model=RoleResponse)
def update_role(
    uuid: str,
    payload: RoleUpdateRequest,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    identity: CurrentIdentity = Depends(get_current_identity),
) -> RoleResponse:
    data = role_service.update(
        db,
        role_id=uuid,
        platform_id=platform_id,
        changes=payload.model_dump(exclude_unset=True),
        operator=identity.user_id,
    )
    return create_response("更新角色成功", data)


@router.delete("/{uuid}", response_model=RoleResponse)
def delete_role(
    uuid: str,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> RoleResponse:
    data = role_service.delete(db, role_id=uuid, platform_id=platform_id)
    return create_response("删除角色成功", data)


@router.get("/{uuid}/menus", response_model=RoleResponse)
def get_role_menus(
    uuid: str,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> RoleResponse:
    data = role_service.get_menu_ids(db, role_id=uuid, platform_id=platform_id)
    return create_response("获取角色菜单成功", data)


@router.put("/{uuid}/menus", response_model=RoleResponse)
def update_role_menus(
    uuid: str,
    payload: RoleMenusRequest,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    identity: CurrentIdentity = Depends(get_current_identity),
) -> RoleResponse:
    """整体替换角色授权的菜单。"""
    data = role_service.set_menus(
        db,
        role_id=uuid,
        menu_ids=payload.menu_ids,
        platform_id=platform_id,
        operator=identity.user_id,
    )
    return create_response("更新角色菜单成功", data)
