"""入参规范化工具：用户、角色、菜单服务共用的文本、枚举与 ID 列表处理规则。

- 必填文本去除首尾空白后不能为空；
- 可选文本去空白后为空串时统一存为 ``None``；
- 枚举取值大小写不敏感，落库时统一为小写；
- ID 列表必须是数组，单个字符串不会被当作字符序列展开。
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Type

from app.packages.rbac.core.exceptions import InvalidInputError


def require_text(value: Optional[str], message: str) -> str:
    trimmed = (value or "").strip()
    if not trimmed:
        raise InvalidInputError(message)
    return trimmed


def normalize_optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    trimmed = str(value).strip()
    return trimmed or None


def normalize_choice(value: Optional[str], enum_cls: Type[Enum], message: str) -> str:
    normalized = (value or "").strip().lower()
    if normalized not in {item.value for item in enum_cls}:
        raise InvalidInputError(message)
    return normalized


def normalize_id_list(ids: Optional[Iterable[str]]) -> List[str]:
    if ids is None or isinstance(ids, (str, bytes)):
        raise InvalidInputError("ID 列表必须为数组")
    return list(ids)
