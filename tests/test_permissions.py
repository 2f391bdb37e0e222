"""权限解析服务测试。"""

from app.packages.rbac.crud.menus import menu_crud
from app.packages.rbac.crud.roles import role_crud
from app.packages.rbac.crud.users import user_crud
from app.packages.rbac.services.permission_service import permission_service
from app.packages.rbac.services.relation_service import relation_service


def _seed(db, platform_id):
    """两个角色（一个停用）与一组菜单，返回用户与菜单索引。"""
    user = user_crud.create(
        db,
        {
            "platform_id": platform_id,
            "login_name": "bob",
            "nickname": "bob",
            "email": "bob@example.com",
            "password_hash": "x",
        },
    )
    editor = role_crud.create(db, {"platform_id": platform_id, "name": "编辑", "code": "editor"})
    viewer = role_crud.create(db, {"platform_id": platform_id, "name": "访客", "code": "viewer"})
    retired = role_crud.create(
        db, {"platform_id": platform_id, "name": "停用角色", "code": "retired", "status": "disabled"}
    )

    menus = {}
    for name, extra in (
        ("root", {"sort": 0, "permission": "root:read"}),
        ("articles", {"sort": 1, "permission": "article:edit"}),
        ("reports", {"sort": 2, "permission": "report:read"}),
        ("blank", {"sort": 3, "permission": "   "}),
        ("hidden", {"sort": 4, "permission": "hidden:read", "status": "disabled"}),
        ("secret", {"sort": 5, "permission": "secret:read"}),
    ):
        menus[name] = menu_crud.create(db, {"platform_id": platform_id, "name": name, **extra})
    menus["articles"].parent_id = menus["root"].uuid
    menu_crud.save(db, menus["articles"])

    relation_service.set_role_menus(
        db,
        role_id=editor.uuid,
        menu_ids=[menus["root"].uuid, menus["articles"].uuid, menus["blank"].uuid, menus["hidden"].uuid],
        platform_id=platform_id,
    )
    relation_service.set_role_menus(
        db, role_id=viewer.uuid, menu_ids=[menus["root"].uuid, menus["reports"].uuid], platform_id=platform_id
    )
    relation_service.set_role_menus(db, role_id=retired.uuid, menu_ids=[menus["secret"].uuid], platform_id=platform_id)
    return user, [editor, viewer, retired], menus


def test_user_without_roles_has_no_permissions(db_session_fixture, platform_id):
    db = db_session_fixture
    user, _, _ = _seed(db, platform_id)

    assert permission_service.resolve_permissions(db, user_id=user.uuid, platform_id=platform_id) == set()
    assert permission_service.resolve_user_menus(db, user_id=user.uuid, platform_id=platform_id) == []


def test_permissions_are_union_of_active_roles(db_session_fixture, platform_id):
    db = db_session_fixture
    user, roles, _ = _seed(db, platform_id)
    relation_service.set_user_roles(db, user_id=user.uuid, role_ids=[role.uuid for role in roles], platform_id=platform_id)

    permissions = permission_service.resolve_permissions(db, user_id=user.uuid, platform_id=platform_id)

    assert permissions == {"root:read", "article:edit", "report:read"}
    role_ids = permission_service.resolve_role_ids(db, user_id=user.uuid, platform_id=platform_id)
    assert sorted(role_ids) == sorted([roles[0].uuid, roles[1].uuid])


def test_user_menus_form_sorted_tree(db_session_fixture, platform_id):
    db = db_session_fixture
    user, roles, menus = _seed(db, platform_id)
    relation_service.set_user_roles(db, user_id=user.uuid, role_ids=[roles[0].uuid, roles[1].uuid], platform_id=platform_id)

    forest = permission_service.resolve_user_menus(db, user_id=user.uuid, platform_id=platform_id)

    assert [node["name"] for node in forest] == ["root", "reports", "blank"]
    assert [child["name"] for child in forest[0]["children"]] == ["articles"]


def test_resolution_is_platform_scoped(db_session_fixture, platform_id):
    db = db_session_fixture
    user, roles, _ = _seed(db, platform_id)
    relation_service.set_user_roles(db, user_id=user.uuid, role_ids=[roles[0].uuid], platform_id=platform_id)

    other = f"{platform_id}-other"
    assert permission_service.resolve_permissions(db, user_id=user.uuid, platform_id=other) == set()
