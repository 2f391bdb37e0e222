"""探活接口，无需认证。"""

from fastapi import APIRouter

from app.packages.rbac.core.responses import create_response

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict:
    """提供健康检查接口，便于编排器与监控系统探活。"""
    return create_response("OK", {"status": "healthy"})


@router.get("/ping")
def ping() -> dict:
    return create_response("pong", None)
