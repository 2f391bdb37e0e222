"""菜单管理相关的请求与响应模型。"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from app.packages.rbac.api.v1.schemas.common import CamelModel, ResponseEnvelope


class MenuCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100, description="菜单名称")
    parent_id: Optional[str] = Field(default=None, description="上级菜单 UUID，为空表示顶级")
    path: Optional[str] = Field(default=None, max_length=255)
    component: Optional[str] = Field(default=None, max_length=255)
    icon: Optional[str] = Field(default=None, max_length=100)
    type: Optional[str] = Field(default=None, description="menu 或 button")
    permission: Optional[str] = Field(default=None, max_length=100, description="权限字符")
    sort: Optional[int] = Field(default=None, description="显示顺序，升序")
    status: Optional[str] = None


class MenuUpdateRequest(CamelModel):
    """更新菜单：只修改请求中出现的字段，``parentId`` 显式传 null 表示移到顶级。"""

    name: Optional[str] = Field(default=None, max_length=100)
    parent_id: Optional[str] = None
    path: Optional[str] = Field(default=None, max_length=255)
    component: Optional[str] = Field(default=None, max_length=255)
    icon: Optional[str] = Field(default=None, max_length=100)
    type: Optional[str] = None
    permission: Optional[str] = Field(default=None, max_length=100)
    sort: Optional[int] = None
    status: Optional[str] = None


MenuResponse = ResponseEnvelope[Dict[str, Any]]
MenuListResponse = ResponseEnvelope[Dict[str, Any]]
MenuTreeResponse = ResponseEnvelope[List[Dict[str, Any]]]
