"""常量定义：集中维护响应码、默认平台与内置账号等魔法值。"""

HTTP_STATUS_OK = 200

# 统一响应结构中的业务码：成功沿用 200，失败统一为 -1
RESPONSE_CODE_SUCCESS = 200
RESPONSE_CODE_FAILURE = -1

ACCESS_TOKEN_TYPE = "bearer"

DEFAULT_PLATFORM_ID = "default"
SYSTEM_OPERATOR = "system"

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

SUPER_ADMIN_ROLE_CODE = "super_admin"
ADMIN_ROLE_CODE = "admin"
USER_ROLE_CODE = "user"
