"""API v1 汇总路由：统一挂载认证、用户、角色、菜单与探活接口。"""

from fastapi import APIRouter

from app.packages.rbac.api.v1.endpoints import auth, health, menus, roles, users

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(roles.router)
api_router.include_router(menus.router)
