"""密码重置工具测试。"""

import pytest

from app.packages.rbac.core.exceptions import InvalidInputError, NotFoundError
from app.packages.rbac.core.security import verify_password
from app.packages.rbac.crud.users import user_crud
from app.packages.rbac.db.init_db import seed_platform
from app.packages.rbac.db.reset_admin import reset_password


def test_reset_password_updates_hash(db_session_fixture, platform_id):
    db = db_session_fixture
    seed_platform(db, platform_id)
    db.commit()

    summary = reset_password(db, login_name="super", password="n3w-pass", platform_id=platform_id)

    user = user_crud.get_by_login_name(db, "super", platform_id=platform_id)
    assert summary["uuid"] == user.uuid
    assert verify_password("n3w-pass", user.password_hash)
    assert not verify_password("super123", user.password_hash)


def test_reset_password_for_unknown_user(db_session_fixture, platform_id):
    with pytest.raises(NotFoundError):
        reset_password(db_session_fixture, login_name="ghost", password="x", platform_id=platform_id)


def test_seed_platform_is_idempotent(db_session_fixture, platform_id):
    db = db_session_fixture
    seed_platform(db, platform_id)
    db.commit()
    seed_platform(db, platform_id)
    db.commit()

    items, total = user_crud.list_with_filters(db, platform_id=platform_id)
    assert total == 3
    assert sorted(item.login_name for item in items) == ["admin", "super", "test"]


def test_reset_password_rejects_over_long_password(db_session_fixture, platform_id):
    db = db_session_fixture
    seed_platform(db, platform_id)
    db.commit()

    with pytest.raises(InvalidInputError):
        reset_password(db, login_name="super", password="密" * 25, platform_id=platform_id)

    db.rollback()
    user = user_crud.get_by_login_name(db, "super", platform_id=platform_id)
    assert verify_password("super123", user.password_hash)
