"""响应封装：构建系统统一的返回结构。"""

from typing import Any

from app.packages.rbac.core.constants import RESPONSE_CODE_FAILURE, RESPONSE_CODE_SUCCESS


def create_response(message: str = "success", data: Any = None) -> dict[str, Any]:
    """成功响应：``{"code": 200, "data": ..., "message": ...}``。"""
    return {"code": RESPONSE_CODE_SUCCESS, "data": data, "message": message}


def create_fail_response(message: str = "fail") -> dict[str, Any]:
    """失败响应：``{"code": -1, "message": ...}``，不携带堆栈或内部标识。"""
    return {"code": RESPONSE_CODE_FAILURE, "message": message}
