"""认证相关的请求与响应模型。"""

from typing import Any, Dict

from pydantic import Field

from app.packages.rbac.api.v1.schemas.common import CamelModel, ResponseEnvelope
from app.packages.rbac.core.constants import DEFAULT_PLATFORM_ID


class LoginRequest(CamelModel):
    """登录请求：登录名与平台共同定位用户。"""

    login_name: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)
    platform_id: str = Field(default=DEFAULT_PLATFORM_ID, min_length=1, max_length=64)


LoginResponse = ResponseEnvelope[Dict[str, Any]]
UserInfoResponse = ResponseEnvelope[Dict[str, Any]]
