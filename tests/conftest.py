"""测试夹具：为 pytest 提供数据库与客户端的共享配置。"""

import os
import tempfile
import uuid
from typing import Generator

TEST_DB_PATH = os.path.join(os.path.dirname(__file__), "test.db")
TEST_DATABASE_URL = f"sqlite:///{TEST_DB_PATH}"

# 必须在导入应用之前设置，配置对象会被缓存
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "rbac-admin-test-logs"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from app.main import app  # noqa: E402
from app.packages.rbac.core.dependencies import get_db  # noqa: E402
from app.packages.rbac.db import session as db_session  # noqa: E402
from app.packages.rbac.db.init_db import init_db  # noqa: E402
from app.packages.rbac.models import Base  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_test_database() -> Generator[None, None, None]:
    """创建隔离的 SQLite 测试数据库，并在会话结束后清理。"""
    db_session.engine.dispose()
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)

    engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db_session.engine = engine
    db_session.SessionLocal = TestingSessionLocal

    Base.metadata.create_all(bind=engine)
    init_db()
    yield

    engine.dispose()
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


@pytest.fixture()
def db_session_fixture() -> Generator[Session, None, None]:
    """提供给测试用例使用的数据库会话。"""
    session = db_session.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def platform_id() -> str:
    """每个用例使用独立的平台 ID，互不干扰。"""
    return f"test-{uuid.uuid4().hex[:12]}"


@pytest.fixture()
def client(db_session_fixture):
    """构建 FastAPI TestClient，并注入测试专用的数据库依赖。"""
    def override_get_db() -> Generator[Session, None, None]:
        session = db_session.SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(client: TestClient) -> dict[str, str]:
    """使用默认平台内置的 admin 账号登录。"""
    resp = client.post("/api/user/login", json={"loginName": "admin", "password": "admin123"})
    token = resp.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}
