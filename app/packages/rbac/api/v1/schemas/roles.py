"""角色管理相关的请求与响应模型。"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from app.packages.rbac.api.v1.schemas.common import CamelModel, ResponseEnvelope


class RoleCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=50, description="角色名称")
    code: str = Field(..., min_length=1, max_length=100, description="角色代码，平台内唯一")
    description: Optional[str] = Field(default=None, max_length=255)
    status: Optional[str] = None
    menu_ids: Optional[List[str]] = Field(default=None, description="授权菜单 ID 集合")


class RoleUpdateRequest(CamelModel):
    """更新角色；提供 ``menuIds`` 时整体替换授权菜单。"""

    name: Optional[str] = Field(default=None, max_length=50)
    code: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=255)
    status: Optional[str] = None
    menu_ids: Optional[List[str]] = None


class RoleMenusRequest(CamelModel):
    menu_ids: List[str]


RoleResponse = ResponseEnvelope[Dict[str, Any]]
RoleListResponse = ResponseEnvelope[Dict[str, Any]]
