"""菜单树构建的纯函数测试。"""

from types import SimpleNamespace

from app.packages.rbac.services.menu_tree import build_menu_tree


def _menu(uuid, parent_id=None, sort=0, status="active", permission=None):
    return SimpleNamespace(
        uuid=uuid,
        parent_id=parent_id,
        name=f"菜单{uuid}",
        path=f"/{uuid}",
        component=None,
        icon=None,
        type="menu",
        permission=permission,
        sort=sort,
        status=status,
    )


def _flatten(forest):
    for node in forest:
        yield node["uuid"]
        yield from _flatten(node["children"])


def test_empty_input_returns_empty_forest():
    assert build_menu_tree([]) == []


def test_children_follow_input_order():
    menus = [_menu("root"), _menu("b", "root", sort=1), _menu("a", "root", sort=2), _menu("leaf", "a")]

    forest = build_menu_tree(menus)

    assert [node["uuid"] for node in forest] == ["root"]
    assert [child["uuid"] for child in forest[0]["children"]] == ["b", "a"]
    assert forest[0]["children"][1]["children"][0]["uuid"] == "leaf"
    assert forest[0]["children"][0]["parentId"] == "root"


def test_every_node_appears_exactly_once():
    menus = [_menu("1"), _menu("2", "1"), _menu("3", "2"), _menu("4", "missing"), _menu("5", "1")]

    ids = list(_flatten(build_menu_tree(menus)))

    assert sorted(ids) == ["1", "2", "3", "4", "5"]
    assert len(ids) == len(menus)


def test_orphaned_by_filter_surfaces_as_root():
    menus = [_menu("A"), _menu("B", "A", status="disabled"), _menu("C", "B")]
    active = [menu for menu in menus if menu.status == "active"]

    forest = build_menu_tree(active)

    assert [node["uuid"] for node in forest] == ["A", "C"]
    assert forest[0]["children"] == []


def test_cycle_terminates_and_keeps_every_node():
    menus = [_menu("A", "B"), _menu("B", "A"), _menu("C", "C"), _menu("D", "A")]

    forest = build_menu_tree(menus)
    ids = list(_flatten(forest))

    assert sorted(ids) == ["A", "B", "C", "D"]
    # A 先挂到 B 下，B 再挂 A 会成环，因此 B 成为根；自引用的 C 同理
    assert [node["uuid"] for node in forest] == ["B", "C"]
    assert forest[0]["children"][0]["uuid"] == "A"
    assert forest[0]["children"][0]["children"][0]["uuid"] == "D"


def test_builder_does_not_share_state_between_calls():
    first = build_menu_tree([_menu("x")])
    second = build_menu_tree([_menu("y", "x")])

    assert [node["uuid"] for node in first] == ["x"]
    assert [node["uuid"] for node in second] == ["y"]
