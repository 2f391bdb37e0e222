"""分页参数解析：缺失或非法的页码/每页数量回落到默认值，而不是报错。"""

from __future__ import annotations

from typing import Any, Tuple

from app.packages.rbac.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE


def _positive_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def normalize_pagination(page: Any = None, page_size: Any = None) -> Tuple[int, int]:
    """返回 ``(page, page_size)``，二者均为正整数。"""
    return _positive_int(page, DEFAULT_PAGE), _positive_int(page_size, DEFAULT_PAGE_SIZE)


def build_page(items: list, total: int, page: int, page_size: int) -> dict[str, Any]:
    return {"list": items, "total": total, "page": page, "pageSize": page_size}
