"""用户管理相关的请求与响应模型。"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from app.packages.rbac.api.v1.schemas.common import CamelModel, ResponseEnvelope


class UserCreateRequest(CamelModel):
    """新建用户的请求体，``roleIds`` 可选。"""

    login_name: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    nickname: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=30)
    avatar: Optional[str] = Field(default=None, max_length=500)
    gender: Optional[str] = None
    birthday: Optional[str] = None
    address: Optional[str] = Field(default=None, max_length=255)
    remark: Optional[str] = Field(default=None, max_length=255)
    status: Optional[str] = None
    role_ids: Optional[List[str]] = None


class UserUpdateRequest(CamelModel):
    """更新用户：所有字段可选，只有请求中出现的字段会被修改。"""

    login_name: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=128)
    nickname: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=30)
    avatar: Optional[str] = Field(default=None, max_length=500)
    gender: Optional[str] = None
    birthday: Optional[str] = None
    address: Optional[str] = Field(default=None, max_length=255)
    remark: Optional[str] = Field(default=None, max_length=255)
    status: Optional[str] = None
    role_ids: Optional[List[str]] = None


class UserRolesRequest(CamelModel):
    """整体替换用户角色。"""

    role_ids: List[str]


UserResponse = ResponseEnvelope[Dict[str, Any]]
UserListResponse = ResponseEnvelope[Dict[str, Any]]
