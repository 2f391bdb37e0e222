"""菜单管理相关的路由定义。"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.packages.rbac.api.v1.schemas.common import BatchDeleteRequest
from app.packages.rbac.api.v1.schemas.menus import (
    MenuCreateRequest,
    MenuListResponse,
    MenuResponse,
    MenuTreeResponse,
    MenuUpdateRequest,
)
from app.packages.rbac.core.constants import DEFAULT_PLATFORM_ID
from app.packages.rbac.core.dependencies import CurrentIdentity, get_current_identity, get_db
from app.packages.rbac.core.responses import create_response
from app.packages.rbac.services.menu_service import menu_service

router = APIRouter(prefix="/menus", tags=["menus"])


@router.get("", response_model=MenuListResponse)
def list_menus(
    page: Optional[str] = Query(None, description="页码，从 1 开始"),
    page_size: Optional[str] = Query(None, alias="pageSize", description="每页数量"),
    name: Optional[str] = Query(None, description="菜单名称模糊匹配"),
    menu_type: Optional[str] = Query(None, alias="type", description="menu 或 button"),
    status: Optional[str] = Query(None, description="菜单状态"),
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> MenuListResponse:
    data = menu_service.list_menus(
        db,
        platform_id=platform_id,
        name=name,
        menu_type=menu_type,
        status=status,
        page=page,
        page_size=page_size,
    )
    return create_response("获取菜单列表成功", data)


@router.get("/tree", response_model=MenuTreeResponse)
def get_menu_tree(
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> MenuTreeResponse:
    """平台内启用菜单的树形结构。"""
    data = menu_service.get_tree(db, platform_id=platform_id)
    return create_response("获取菜单树成功", data)


@router.post("", response_model=MenuResponse)
def create_menu(
    payload: MenuCreateRequest,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    identity: CurrentIdentity = Depends(get_current_identity),
) -> MenuResponse:
    data = menu_service.create(
        db,
        platform_id=platform_id,
        name=payload.name,
        parent_id=payload.parent_id,
        path=payload.path,
        component=payload.component,
        icon=payload.icon,
        menu_type=payload.type,
        permission=payload.permission,
        sort=payload.sort,
        status=payload.status,
        operator=identity.user_id,
    )
    return create_response("创建菜单成功", data)


@router.post("/batch-delete", response_model=MenuResponse)
def batch_delete_menus(
    payload: BatchDeleteRequest,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> MenuResponse:
    data = menu_service.batch_delete(db, menu_ids=payload.uuids, platform_id=platform_id)
    return create_response("批量删除菜单成功", data)


@router.get("/{uuid}", response_model=MenuResponse)
def get_menu_detail(
    uuid: str,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> MenuResponse:
    data = menu_service.get_detail(db, menu_id=uuid, platform_id=platform_id)
    return create_response("获取菜单详情成功", data)


@router.put("/{uuid}", response_model=MenuResponse)
def update_menu(
    uuid: str,
    payload: MenuUpdateRequest,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    identity: CurrentIdentity = Depends(get_current_identity),
) -> MenuResponse:
    data = menu_service.update(
        db,
        menu_id=uuid,
        platform_id=platform_id,
        changes=payload.model_dump(exclude_unset=True),
        operator=identity.user_id,
    )
    return create_response("更新菜单成功", data)


@router.delete("/{uuid}", response_model=MenuResponse)
def delete_menu(
    uuid: str,
    platform_id: str = Query(DEFAULT_PLATFORM_ID, alias="platformId"),
    db: Session = Depends(get_db),
    _: CurrentIdentity = Depends(get_current_identity),
) -> MenuResponse:
    """删除菜单；存在子菜单时返回失败。"""
    data = menu_service.delete(db, menu_id=uuid, platform_id=platform_id)
    return create_response("删除菜单成功", data)
