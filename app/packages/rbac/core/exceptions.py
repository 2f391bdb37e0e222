"""异常处理模块：定义业务异常族与统一的失败响应格式。

业务失败统一返回 HTTP 200 与 ``{"code": -1, "message": ...}``；
仅认证失败（401）与获取当前用户时的意外错误（500）会改变 HTTP 状态码。
"""

from typing import Any, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.packages.rbac.core.constants import HTTP_STATUS_OK
from app.packages.rbac.core.logger import logger
from app.packages.rbac.core.responses import create_fail_response


class AppException(HTTPException):
    """携带统一响应结构的业务异常，方便在全局处理中转换响应体。"""

    def __init__(self, msg: str, code: int = HTTP_STATUS_OK, data: Any = None) -> None:
        super().__init__(status_code=code, detail=msg)
        self.msg = msg
        self.data = data


class NotFoundError(AppException):
    """按 ID 与平台查询的实体不存在。"""


class DuplicateValueError(AppException):
    """唯一字段冲突，``field`` 指明冲突的字段名。"""

    def __init__(self, msg: str, *, field: Optional[str] = None) -> None:
        super().__init__(msg, data={"field": field} if field else None)
        self.field = field


class HasChildrenError(AppException):
    """菜单仍被子菜单引用，禁止删除。"""


class BadCredentialsError(AppException):
    """密码校验失败。"""


class DisabledError(AppException):
    """账号状态非 active，禁止登录。"""


class InvalidInputError(AppException):
    """入参格式或取值非法。"""


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:  # pragma: no cover - framework glue
    """将 ``HTTPException``（含业务异常）转换为统一失败结构。"""
    return JSONResponse(status_code=exc.status_code, content=create_fail_response(str(exc.detail)))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # pragma: no cover - framework glue
    """请求体验证失败按 ``InvalidInput`` 处理，只暴露首个错误的可读描述。"""
    errors = exc.errors()
    message = "请求参数验证失败"
    if errors:
        first = errors[0]
        location = ".".join(str(item) for item in first.get("loc", ()) if item != "body")
        detail = first.get("msg", "")
        message = f"{message}：{location} {detail}".strip()
    return JSONResponse(status_code=HTTP_STATUS_OK, content=create_fail_response(message))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # pragma: no cover - framework glue
    """兜底处理：记录堆栈，对外只返回不含内部细节的失败结构。"""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_200_OK, content=create_fail_response("服务器内部错误"))
