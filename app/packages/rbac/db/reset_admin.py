"""重置账号密码的命令行工具。

用法::

    python -m app.packages.rbac.db.reset_admin [登录名] [新密码] [--platform-id default]

登录名默认 ``super``，新密码默认 ``super123``。
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from app.packages.rbac.core.config import get_settings
from app.packages.rbac.core.constants import SYSTEM_OPERATOR
from app.packages.rbac.core.exceptions import InvalidInputError, NotFoundError
from app.packages.rbac.core.logger import logger, setup_logging
from app.packages.rbac.core.security import get_password_hash
from app.packages.rbac.crud.users import user_crud
from app.packages.rbac.db import session as db_session

DEFAULT_LOGIN_NAME = "super"
DEFAULT_PASSWORD = "super123"


def reset_password(db: Session, *, login_name: str, password: str, platform_id: str) -> dict:
    """把指定平台内用户的密码改为 ``password``，返回用户摘要。"""
    user = user_crud.get_by_login_name(db, login_name, platform_id=platform_id)
    if user is None:
        raise NotFoundError(f"用户“{login_name}”不存在")
    user.password_hash = get_password_hash(password)
    user.updated_by = SYSTEM_OPERATOR
    user_crud.save(db, user)
    return {"uuid": user.uuid, "nickname": user.nickname, "email": user.email, "status": user.status}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="重置账号密码工具")
    parser.add_argument("login_name", nargs="?", default=DEFAULT_LOGIN_NAME, help="要重置密码的用户登录名")
    parser.add_argument("password", nargs="?", default=DEFAULT_PASSWORD, help="新的密码")
    parser.add_argument("--platform-id", default=get_settings().default_platform_id, help="用户所属平台")
    args = parser.parse_args(argv)

    setup_logging()
    with db_session.SessionLocal() as db:
        try:
            summary = reset_password(db, login_name=args.login_name, password=args.password, platform_id=args.platform_id)
        except (InvalidInputError, NotFoundError) as exc:
            logger.error("%s", exc.msg)
            return 1
    logger.info("Password reset for %s on platform %s: %s", args.login_name, args.platform_id, summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
