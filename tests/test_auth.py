"""登录与当前用户信息接口测试。"""

from __future__ import annotations

from fastapi.testclient import TestClient

from app.packages.rbac.crud.users import user_crud
from app.packages.rbac.services.permission_service import permission_service


def _create_user(client: TestClient, headers: dict, platform_id: str, login_name: str, **extra) -> dict:
    payload = {
        "loginName": login_name,
        "email": f"{login_name}@example.com",
        "password": "pass123",
        "nickname": login_name,
    }
    payload.update(extra)
    resp = client.post("/api/users", headers=headers, params={"platformId": platform_id}, json=payload)
    assert resp.json()["code"] == 200, resp.json()
    return resp.json()["data"]


def test_login_returns_token_and_user_info(client: TestClient, db_session_fixture):
    resp = client.post(
        "/api/user/login",
        json={"loginName": "admin", "password": "admin123", "platformId": "default"},
        headers={"X-Forwarded-For": "10.1.2.3, 10.0.0.1"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["code"] == 200
    info = body["data"]["userInfo"]
    assert body["data"]["token"]
    assert info["loginName"] == "admin"
    assert [role["code"] for role in info["roles"]] == ["admin"]
    assert info["permissions"] == sorted(
        ["dashboard:read", "system:read", "user:manage", "role:manage", "menu:manage"]
    )

    admin = user_crud.get_by_login_name(db_session_fixture, "admin", platform_id="default")
    expected = permission_service.resolve_user_menus(db_session_fixture, user_id=admin.uuid, platform_id="default")
    assert info["menus"] == expected
    assert [node["name"] for node in info["menus"]] == ["仪表盘", "系统管理"]
    assert admin.last_login_ip == "10.1.2.3"
    assert admin.last_login_at is not None


def test_login_failures(client: TestClient, auth_headers, platform_id):
    unknown = client.post("/api/user/login", json={"loginName": "nobody", "password": "x", "platformId": platform_id})
    assert unknown.json() == {"code": -1, "message": "用户不存在"}

    _create_user(client, auth_headers, platform_id, "nina")
    wrong = client.post("/api/user/login", json={"loginName": "nina", "password": "bad", "platformId": platform_id})
    assert wrong.json() == {"code": -1, "message": "密码错误"}

    _create_user(client, auth_headers, platform_id, "otto", status="banned")
    banned = client.post("/api/user/login", json={"loginName": "otto", "password": "pass123", "platformId": platform_id})
    assert banned.json() == {"code": -1, "message": "用户已被禁用"}

    # 登录名在其他平台存在，不影响本平台的判定
    cross = client.post("/api/user/login", json={"loginName": "admin", "password": "admin123", "platformId": platform_id})
    assert cross.json()["message"] == "用户不存在"


def test_user_info_matches_login_view(client: TestClient, auth_headers):
    login = client.post("/api/user/login", json={"loginName": "test", "password": "test123"}).json()["data"]
    headers = {"Authorization": f"Bearer {login['token']}"}

    resp = client.get("/api/user/info", headers=headers)
    assert resp.status_code == 200
    info = resp.json()["data"]
    assert info["loginName"] == "test"
    assert info["permissions"] == ["dashboard:read"]
    assert info["menus"] == login["userInfo"]["menus"]
    assert info["lastLoginAt"] is not None


def test_token_of_deleted_user_is_rejected(client: TestClient, auth_headers, platform_id):
    user = _create_user(client, auth_headers, platform_id, "paul")
    token = client.post(
        "/api/user/login", json={"loginName": "paul", "password": "pass123", "platformId": platform_id}
    ).json()["data"]["token"]
    headers = {"Authorization": f"Bearer {token}"}
    assert client.get("/api/user/info", headers=headers).json()["data"]["platformId"] == platform_id

    client.delete(f"/api/users/{user['uuid']}", headers=auth_headers, params={"platformId": platform_id})

    resp = client.get("/api/user/info", headers=headers)
    assert resp.status_code == 401
    assert resp.json() == {"code": -1, "message": "用户不存在"}


def test_health_endpoints_need_no_auth(client: TestClient):
    health = client.get("/api/health")
    assert health.json() == {"code": 200, "data": {"status": "healthy"}, "message": "OK"}
    assert health.headers["x-request-id"]

    ping = client.get("/api/ping", headers={"X-Request-ID": "abc-123"})
    assert ping.json()["code"] == 200
    assert ping.headers["x-request-id"] == "abc-123"


def test_user_info_unexpected_error_returns_500(client: TestClient, auth_headers, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("menu storage unavailable")

    monkeypatch.setattr(permission_service, "resolve_user_menus", boom)

    resp = client.get("/api/user/info", headers=auth_headers)
    assert resp.status_code == 500
    assert resp.json() == {"code": -1, "message": "获取用户信息失败"}


def test_login_with_over_long_password_is_bad_credentials(client: TestClient, auth_headers, platform_id):
    _create_user(client, auth_headers, platform_id, "quinn")
    resp = client.post(
        "/api/user/login", json={"loginName": "quinn", "password": "é" * 50, "platformId": platform_id}
    )
    assert resp.status_code == 200
    assert resp.json() == {"code": -1, "message": "密码错误"}
