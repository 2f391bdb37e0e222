"""菜单树构建：把扁平、按平台过滤后的菜单集合转换为父子层级结构。

约定：
- 输入已按 ``sort`` 升序（及次级键）排好，子节点顺序沿用输入顺序；
- ``parent_id`` 指向不在输入集合中的节点（例如父级被停用而过滤掉）时，
  该节点作为根节点出现，而不是被丢弃；
- 若挂载某节点会让父链回到其自身（数据中存在环），该节点同样作为根节点，
  因此每个输入节点在结果中恰好出现一次，且构建过程必然结束。
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from app.packages.rbac.core.timezone import format_datetime


def serialize_menu_node(menu: Any) -> Dict[str, Any]:
    """菜单节点的展示字段，``children`` 初始为空。"""
    return {
        "uuid": menu.uuid,
        "parentId": menu.parent_id,
        "name": menu.name,
        "path": menu.path,
        "component": menu.component,
        "icon": menu.icon,
        "type": menu.type,
        "permission": menu.permission,
        "sort": menu.sort,
        "status": menu.status,
        "children": [],
    }


def _creates_cycle(node_id: str, parent_id: str, attached_to: Dict[str, str]) -> bool:
    current: Optional[str] = parent_id
    while current is not None:
        if current == node_id:
            return True
        current = attached_to.get(current)
    return False


def build_menu_tree(menus: Iterable[Any]) -> List[Dict[str, Any]]:
    """构建菜单森林，返回根节点列表。空输入返回空列表。"""
    ordered = list(menus)
    nodes: Dict[str, Dict[str, Any]] = {}
    for menu in ordered:
        nodes[menu.uuid] = serialize_menu_node(menu)

    # 已挂载节点 -> 其父节点；由于只在不成环时写入，沿此映射向上必然终止
    attached_to: Dict[str, str] = {}
    roots: List[Dict[str, Any]] = []
    for menu in ordered:
        node = nodes[menu.uuid]
        parent_id = menu.parent_id
        if parent_id and parent_id in nodes and not _creates_cycle(menu.uuid, parent_id, attached_to):
            nodes[parent_id]["children"].append(node)
            attached_to[menu.uuid] = parent_id
        else:
            roots.append(node)
    return roots


def serialize_menu(menu: Any) -> Dict[str, Any]:
    """菜单详情/列表项：在节点字段基础上附加审计信息，不含 ``children``。"""
    payload = serialize_menu_node(menu)
    payload.pop("children")
    payload.update(
        {
            "platformId": menu.platform_id,
            "createdBy": menu.created_by,
            "updatedBy": menu.updated_by,
            "createTime": format_datetime(menu.create_time),
            "updateTime": format_datetime(menu.update_time),
        }
    )
    return payload
