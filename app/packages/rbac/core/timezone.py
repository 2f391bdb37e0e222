"""时区工具方法：支持根据配置动态获取当前时区。"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from zoneinfo import ZoneInfo

from app.packages.rbac.core.config import get_settings


def get_timezone() -> ZoneInfo:
    return get_settings().timezone_info


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    """将时间格式化为配置时区下的 ``YYYY-MM-DD HH:MM:SS`` 字符串。

    数据库返回的无时区时间按 UTC 处理（``func.now()`` 的写入语义）。
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo("UTC"))
    return value.astimezone(get_timezone()).strftime("%Y-%m-%d %H:%M:%S")
