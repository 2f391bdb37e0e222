"""角色管理接口的集成测试。"""

from __future__ import annotations

import uuid

from fastapi.testclient import TestClient


def _create_menu(client: TestClient, headers: dict, platform_id: str, name: str, **extra) -> str:
    resp = client.post(
        "/api/menus", headers=headers, params={"platformId": platform_id}, json={"name": name, **extra}
    )
    assert resp.json()["code"] == 200, resp.json()
    return resp.json()["data"]["uuid"]


def test_role_crud_flow_with_menus(client: TestClient, auth_headers, platform_id):
    params = {"platformId": platform_id}
    m1 = _create_menu(client, auth_headers, platform_id, "文章", permission="article:read")
    m2 = _create_menu(client, auth_headers, platform_id, "评论", permission="comment:read")

    create_resp = client.post(
        "/api/roles",
        headers=auth_headers,
        params=params,
        json={"name": "编辑", "code": "editor", "description": "内容编辑", "menuIds": [m1, m2]},
    )
    role = create_resp.json()["data"]
    assert role["code"] == "editor"
    assert sorted(role["menuIds"]) == sorted([m1, m2])

    listing = client.get("/api/roles", headers=auth_headers, params=params).json()["data"]
    assert listing["total"] == 1
    assert listing["list"][0]["menuCount"] == 2

    update_resp = client.put(
        f"/api/roles/{role['uuid']}", headers=auth_headers, params=params, json={"name": "资深编辑", "menuIds": [m2]}
    )
    updated = update_resp.json()["data"]
    assert updated["name"] == "资深编辑"
    assert updated["menuIds"] == [m2]

    # 不传 menuIds 时保持原授权
    client.put(f"/api/roles/{role['uuid']}", headers=auth_headers, params=params, json={"description": None})
    menus = client.get(f"/api/roles/{role['uuid']}/menus", headers=auth_headers, params=params).json()["data"]
    assert menus == {"menuIds": [m2]}

    replaced = client.put(
        f"/api/roles/{role['uuid']}/menus", headers=auth_headers, params=params, json={"menuIds": []}
    ).json()["data"]
    assert replaced == {"menuIds": []}


def test_role_code_is_unique_per_platform(client: TestClient, auth_headers, platform_id):
    params = {"platformId": platform_id}
    client.post("/api/roles", headers=auth_headers, params=params, json={"name": "A", "code": "dup"})

    duplicate = client.post("/api/roles", headers=auth_headers, params=params, json={"name": "B", "code": "dup"})
    assert duplicate.json() == {"code": -1, "message": "角色代码已存在"}

    other_platform = client.post(
        "/api/roles", headers=auth_headers, params={"platformId": f"{platform_id}-b"}, json={"name": "B", "code": "dup"}
    )
    assert other_platform.json()["code"] == 200


def test_create_with_unknown_menu_writes_nothing(client: TestClient, auth_headers, platform_id):
    params = {"platformId": platform_id}
    resp = client.post(
        "/api/roles",
        headers=auth_headers,
        params=params,
        json={"name": "幽灵", "code": "ghost", "menuIds": [str(uuid.uuid4())]},
    )
    assert resp.json()["code"] == -1

    listing = client.get("/api/roles", headers=auth_headers, params=params).json()["data"]
    assert listing["total"] == 0


def test_delete_role_cascades_user_roles(client: TestClient, auth_headers, platform_id):
    params = {"platformId": platform_id}
    role = client.post("/api/roles", headers=auth_headers, params=params, json={"name": "临时", "code": "tmp"}).json()["data"]
    keep = client.post("/api/roles", headers=auth_headers, params=params, json={"name": "保留", "code": "keep"}).json()["data"]
    user = client.post(
        "/api/users",
        headers=auth_headers,
        params=params,
        json={
            "loginName": "leo",
            "email": "leo@example.com",
            "password": "pw",
            "nickname": "leo",
            "roleIds": [role["uuid"], keep["uuid"]],
        },
    ).json()["data"]
    assert len(user["roles"]) == 2

    deleted = client.delete(f"/api/roles/{role['uuid']}", headers=auth_headers, params=params)
    assert deleted.json()["code"] == 200

    detail = client.get(f"/api/users/{user['uuid']}", headers=auth_headers, params=params).json()["data"]
    assert [item["uuid"] for item in detail["roles"]] == [keep["uuid"]]

    batch = client.post(
        "/api/roles/batch-delete", headers=auth_headers, params=params, json={"uuids": [keep["uuid"]]}
    ).json()
    assert batch["data"] == {"deletedCount": 1}
    detail = client.get(f"/api/users/{user['uuid']}", headers=auth_headers, params=params).json()["data"]
    assert detail["roles"] == []


def test_disabled_role_is_hidden_from_user_roles(client: TestClient, auth_headers, platform_id):
    params = {"platformId": platform_id}
    role = client.post("/api/roles", headers=auth_headers, params=params, json={"name": "停用", "code": "off"}).json()["data"]
    user = client.post(
        "/api/users",
        headers=auth_headers,
        params=params,
        json={"loginName": "mia", "email": "mia@example.com", "password": "pw", "nickname": "mia", "roleIds": [role["uuid"]]},
    ).json()["data"]

    client.put(f"/api/roles/{role['uuid']}", headers=auth_headers, params=params, json={"status": "disabled"})

    detail = client.get(f"/api/users/{user['uuid']}", headers=auth_headers, params=params).json()["data"]
    assert detail["roles"] == []

    invalid = client.put(f"/api/roles/{role['uuid']}", headers=auth_headers, params=params, json={"status": "paused"})
    assert invalid.json() == {"code": -1, "message": "角色状态取值非法"}
