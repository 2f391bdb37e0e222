"""日志配置模块：提供彩色输出、JSON 结构化输出以及请求 ID 注入。"""

import json
import logging
import logging.config
import sys
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Optional

from .config import get_settings

_MODULE = "app.packages.rbac.core.logger"
_PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class _TZFormatter(logging.Formatter):
    """按照 ``Settings.timezone`` 渲染时间戳的格式化器基类。"""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        dt = datetime.fromtimestamp(record.created, get_settings().timezone_info)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.isoformat(sep=" ", timespec="milliseconds")


class ColorFormatter(_TZFormatter):
    """ANSI 彩色格式化器：根据不同日志级别渲染不同颜色，便于快速辨识。"""

    RESET = "\033[0m"
    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[41m",
    }

    def __init__(
        self,
        fmt: str,
        datefmt: Optional[str] = None,
        style: str = "%",
        use_colors: Optional[bool] = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self.use_colors = sys.stderr.isatty() if use_colors is None else use_colors

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = self.COLORS.get(record.levelno) if self.use_colors else None
        return f"{color}{message}{self.RESET}" if color else message


class JsonFormatter(_TZFormatter):
    """结构化 JSON 格式化器，便于日志平台采集。"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record),
            "logger": record.name,
            "level": record.levelname,
            "msg": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class RequestIdFilter(logging.Filter):
    """把上下文中的请求 ID 写入每条日志记录。"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id_ctx.get() or "-"
        return True


def _build_config() -> dict[str, Any]:
    settings = get_settings()
    console_formatter = "json" if settings.log_json else "color"
    file_formatter = "json" if settings.log_json else "plain"
    handler_names = ["console", "file"]

    handlers = {
        "console": {
            "level": settings.log_level,
            "class": "logging.StreamHandler",
            "formatter": console_formatter,
            "filters": ["request_id"],
        },
        "file": {
            "level": settings.log_level,
            "class": "logging.handlers.TimedRotatingFileHandler",
            "formatter": file_formatter,
            "filename": str(settings.log_file_path),
            "when": "midnight",
            "backupCount": 14,
            "encoding": "utf-8",
            "delay": True,
            "filters": ["request_id"],
        },
    }
    loggers = {
        name: {"handlers": handler_names, "level": settings.log_level, "propagate": False}
        for name in ("app", "uvicorn", "uvicorn.error", "uvicorn.access")
    }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "color": {"()": f"{_MODULE}.ColorFormatter", "format": _PLAIN_FORMAT},
            "plain": {"()": f"{_MODULE}._TZFormatter", "format": _PLAIN_FORMAT},
            "json": {"()": f"{_MODULE}.JsonFormatter"},
        },
        "filters": {"request_id": {"()": f"{_MODULE}.RequestIdFilter"}},
        "handlers": handlers,
        "loggers": loggers,
        "root": {"handlers": handler_names, "level": settings.log_level},
    }


def setup_logging() -> None:
    """初始化日志系统，确保项目所有模块使用统一的输出格式与级别。"""
    get_settings().log_directory.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(_build_config())


logger = logging.getLogger("app")


def set_request_id(request_id: Optional[str]) -> None:
    _request_id_ctx.set(request_id)
