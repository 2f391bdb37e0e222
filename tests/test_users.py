"""用户管理接口的集成测试。"""

from __future__ import annotations

import uuid

from fastapi.testclient import TestClient


def _user_payload(login_name: str, **extra) -> dict:
    payload = {
        "loginName": login_name,
        "email": f"{login_name}@example.com",
        "password": "secret123",
        "nickname": f"昵称-{login_name}",
    }
    payload.update(extra)
    return payload


def _create_role(client: TestClient, headers: dict, platform_id: str, code: str) -> str:
    resp = client.post(
        "/api/roles",
        headers=headers,
        params={"platformId": platform_id},
        json={"name": f"角色-{code}", "code": code},
    )
    assert resp.json()["code"] == 200, resp.json()
    return resp.json()["data"]["uuid"]


def test_user_crud_flow(client: TestClient, auth_headers, platform_id):
    params = {"platformId": platform_id}
    role_id = _create_role(client, auth_headers, platform_id, "operator")

    create_resp = client.post(
        "/api/users",
        headers=auth_headers,
        params=params,
        json=_user_payload("carol", phone="13900000000", roleIds=[role_id], unknownField="ignored"),
    )
    assert create_resp.status_code == 200
    body = create_resp.json()
    assert body["code"] == 200
    user = body["data"]
    assert user["loginName"] == "carol"
    assert user["platformId"] == platform_id
    assert user["gender"] == "other"
    assert user["status"] == "active"
    assert "passwordHash" not in user and "password" not in user
    assert [role["uuid"] for role in user["roles"]] == [role_id]

    detail = client.get(f"/api/users/{user['uuid']}", headers=auth_headers, params=params).json()
    assert detail["data"]["email"] == "carol@example.com"

    update_resp = client.put(
        f"/api/users/{user['uuid']}",
        headers=auth_headers,
        params=params,
        json={"nickname": "新昵称", "email": "carol@example.com"},
    )
    updated = update_resp.json()["data"]
    assert updated["nickname"] == "新昵称"
    assert updated["phone"] == "13900000000"
    assert [role["uuid"] for role in updated["roles"]] == [role_id]

    delete_resp = client.delete(f"/api/users/{user['uuid']}", headers=auth_headers, params=params)
    assert delete_resp.json()["code"] == 200

    missing = client.get(f"/api/users/{user['uuid']}", headers=auth_headers, params=params)
    assert missing.status_code == 200
    assert missing.json() == {"code": -1, "message": "用户不存在"}


def test_login_name_is_unique_per_platform(client: TestClient, auth_headers, platform_id):
    first = client.post("/api/users", headers=auth_headers, params={"platformId": platform_id}, json=_user_payload("dave"))
    assert first.json()["code"] == 200

    duplicate = client.post(
        "/api/users",
        headers=auth_headers,
        params={"platformId": platform_id},
        json=_user_payload("dave", email="other@example.com"),
    )
    assert duplicate.status_code == 200
    assert duplicate.json() == {"code": -1, "message": "登录名已存在"}

    elsewhere = client.post(
        "/api/users",
        headers=auth_headers,
        params={"platformId": f"{platform_id}-b"},
        json=_user_payload("dave"),
    )
    assert elsewhere.json()["code"] == 200


def test_uniqueness_checks_email_then_phone(client: TestClient, auth_headers, platform_id):
    params = {"platformId": platform_id}
    client.post("/api/users", headers=auth_headers, params=params, json=_user_payload("erin", phone="100"))

    email_clash = client.post(
        "/api/users", headers=auth_headers, params=params, json=_user_payload("frank", email="erin@example.com", phone="100")
    )
    assert email_clash.json()["message"] == "邮箱已存在"

    phone_clash = client.post("/api/users", headers=auth_headers, params=params, json=_user_payload("frank", phone="100"))
    assert phone_clash.json()["message"] == "手机号已存在"

    # 更新时排除自身，保留原邮箱不算冲突
    user = client.post("/api/users", headers=auth_headers, params=params, json=_user_payload("gina")).json()["data"]
    keep = client.put(
        f"/api/users/{user['uuid']}", headers=auth_headers, params=params, json={"email": "gina@example.com"}
    )
    assert keep.json()["code"] == 200
    steal = client.put(
        f"/api/users/{user['uuid']}", headers=auth_headers, params=params, json={"loginName": "erin"}
    )
    assert steal.json() == {"code": -1, "message": "登录名已存在"}


def test_missing_required_field_is_validation_failure(client: TestClient, auth_headers, platform_id):
    resp = client.post(
        "/api/users",
        headers=auth_headers,
        params={"platformId": platform_id},
        json={"loginName": "nomail", "password": "x", "nickname": "n"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["code"] == -1
    assert body["message"].startswith("请求参数验证失败")


def test_list_users_paginates_and_filters(client: TestClient, auth_headers, platform_id):
    params = {"platformId": platform_id}
    for name in ("henry", "hannah", "ivan"):
        client.post("/api/users", headers=auth_headers, params=params, json=_user_payload(name))

    filtered = client.get(
        "/api/users", headers=auth_headers, params={**params, "loginName": "H", "pageSize": "1"}
    ).json()["data"]
    assert filtered["total"] == 2
    assert filtered["pageSize"] == 1
    assert len(filtered["list"]) == 1

    fallback = client.get(
        "/api/users", headers=auth_headers, params={**params, "page": "abc", "pageSize": "-5"}
    ).json()["data"]
    assert fallback["page"] == 1
    assert fallback["pageSize"] == 10
    assert fallback["total"] == 3


def test_set_roles_and_batch_delete(client: TestClient, auth_headers, platform_id):
    params = {"platformId": platform_id}
    r1 = _create_role(client, auth_headers, platform_id, "r1")
    r2 = _create_role(client, auth_headers, platform_id, "r2")
    user = client.post("/api/users", headers=auth_headers, params=params, json=_user_payload("judy")).json()["data"]
    other = client.post("/api/users", headers=auth_headers, params=params, json=_user_payload("kim")).json()["data"]

    resp = client.put(
        f"/api/users/{user['uuid']}/roles", headers=auth_headers, params=params, json={"roleIds": [r1, r2]}
    )
    assert sorted(role["uuid"] for role in resp.json()["data"]["roles"]) == sorted([r1, r2])

    not_array = client.put(
        f"/api/users/{user['uuid']}/roles", headers=auth_headers, params=params, json={"roleIds": "r1"}
    )
    assert not_array.json()["code"] == -1

    unknown = client.put(
        f"/api/users/{user['uuid']}/roles", headers=auth_headers, params=params, json={"roleIds": [str(uuid.uuid4())]}
    )
    assert unknown.json()["code"] == -1
    kept = client.get(f"/api/users/{user['uuid']}", headers=auth_headers, params=params).json()["data"]
    assert len(kept["roles"]) == 2

    batch = client.post(
        "/api/users/batch-delete",
        headers=auth_headers,
        params=params,
        json={"uuids": [user["uuid"], other["uuid"], str(uuid.uuid4())]},
    )
    assert batch.json()["data"] == {"deletedCount": 2}
    listing = client.get("/api/users", headers=auth_headers, params=params).json()["data"]
    assert listing["total"] == 0


def test_requests_without_token_are_rejected(client: TestClient):
    resp = client.get("/api/users")
    assert resp.status_code == 401
    assert resp.json() == {"code": -1, "message": "未提供认证令牌"}

    bad = client.get("/api/users", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401
    assert bad.json()["message"] == "无效的认证令牌"


def test_create_with_unknown_role_writes_nothing(client: TestClient, auth_headers, platform_id):
    params = {"platformId": platform_id}
    ghost = str(uuid.uuid4())
    resp = client.post(
        "/api/users", headers=auth_headers, params=params, json=_user_payload("mia", roleIds=[ghost])
    )
    assert resp.status_code == 200
    assert resp.json() == {"code": -1, "message": f"部分角色不存在：{ghost}"}

    listing = client.get("/api/users", headers=auth_headers, params=params).json()["data"]
    assert listing["total"] == 0


def test_create_with_repeated_role_writes_nothing(client: TestClient, auth_headers, platform_id):
    params = {"platformId": platform_id}
    role_id = _create_role(client, auth_headers, platform_id, "twice")
    resp = client.post(
        "/api/users", headers=auth_headers, params=params, json=_user_payload("ned", roleIds=[role_id, role_id])
    )
    assert resp.status_code == 200
    assert resp.json() == {"code": -1, "message": "关联记录重复，请勿提交重复的 ID"}

    listing = client.get("/api/users", headers=auth_headers, params=params).json()["data"]
    assert listing["total"] == 0

    # 失败的创建不占用登录名
    retry = client.post("/api/users", headers=auth_headers, params=params, json=_user_payload("ned", roleIds=[role_id]))
    assert retry.json()["code"] == 200


def test_password_over_bcrypt_limit_is_rejected(client: TestClient, auth_headers, platform_id):
    params = {"platformId": platform_id}
    too_long = {"code": -1, "message": "密码长度不能超过 72 字节"}

    created = client.post("/api/users", headers=auth_headers, params=params, json=_user_payload("olga", password="a" * 100))
    assert created.status_code == 200
    assert created.json() == too_long
    assert client.get("/api/users", headers=auth_headers, params=params).json()["data"]["total"] == 0

    # 24 个汉字恰好 72 字节，仍可接受
    user = client.post(
        "/api/users", headers=auth_headers, params=params, json=_user_payload("olga", password="密" * 24)
    ).json()["data"]

    # 50 个字符、100 字节
    updated = client.put(
        f"/api/users/{user['uuid']}", headers=auth_headers, params=params, json={"password": "é" * 50, "nickname": "改名"}
    )
    assert updated.status_code == 200
    assert updated.json() == too_long

    kept = client.get(f"/api/users/{user['uuid']}", headers=auth_headers, params=params).json()["data"]
    assert kept["nickname"] == "昵称-olga"
    login = client.post("/api/user/login", json={"loginName": "olga", "password": "密" * 24, "platformId": platform_id})
    assert login.json()["code"] == 200
