"""
Category tree assembly and recursive product counts.

All functions work on plain dict rows (``Category.to_dict()`` output or any
mapping with ``id``, ``parent_id``, ``order_position`` and ``name``), so the
tree logic can be exercised without a database.
"""

from collections import defaultdict


def _sort_key(row):
    return (row.get("order_position") or 0, row.get("name") or "")


def _children_by_parent(rows):
    children = defaultdict(list)
    for row in rows:
        children[row.get("parent_id")].append(row)
    return children


def collect_reachable(rows):
    """Rows reachable from the roots, each tagged with its depth as ``level``.

    Walks level by level from ``parent_id is None``. Rows whose parent chain
    never reaches a root (orphans, or corrupt cycles) are left out, and a row
    is visited at most once.

    Result order is (level, order_position, name).
    """
    children = _children_by_parent(rows)
    visited = set()
    reachable = []

    level = 0
    frontier = list(children.get(None, []))
    while frontier:
        next_frontier = []
        for row in sorted(frontier, key=_sort_key):
            if row["id"] in visited:
                continue
            visited.add(row["id"])
            reachable.append({**row, "level": level})
            next_frontier.extend(children.get(row["id"], []))
        frontier = next_frontier
        level += 1

    return reachable


def build_category_tree(rows):
    """Nest reachable rows under their parents. Returns the list of roots.

    Every node gets a ``children`` list; sibling order follows the input
    ordering of ``collect_reachable``.
    """
    nodes = [{**row, "children": []} for row in collect_reachable(rows)]
    lookup = {node["id"]: node for node in nodes}
    tree = []

    for node in nodes:
        if node.get("parent_id") is None:
            tree.append(node)
        else:
            parent = lookup.get(node["parent_id"])
            if parent:
                parent["children"].append(node)

    return tree


def recursive_product_counts(rows, direct_counts):
    """Map category id -> own direct count plus every descendant's direct count.

    ``direct_counts`` maps category id -> number of product associations.
    Only categories reachable from a root get an entry.
    """
    reachable = collect_reachable(rows)
    totals = {row["id"]: direct_counts.get(row["id"], 0) for row in reachable}

    # deepest levels first, so every child total is final before its parent reads it
    for row in reversed(reachable):
        parent_id = row.get("parent_id")
        if parent_id is not None and parent_id in totals:
            totals[parent_id] += totals[row["id"]]

    return totals


def build_counted_tree(rows, direct_counts):
    """Category tree with ``product_count`` set to the recursive count on every node"""
    totals = recursive_product_counts(rows, direct_counts)
    tree = build_category_tree(rows)

    stack = list(tree)
    while stack:
        node = stack.pop()
        node["product_count"] = totals.get(node["id"], 0)
        stack.extend(node["children"])

    return tree


def collect_descendant_ids(rows, category_id):
    """Ids of every transitive child of ``category_id`` (not including itself)"""
    children = _children_by_parent(rows)
    descendants = set()
    stack = [row["id"] for row in children.get(category_id, [])]

    while stack:
        current = stack.pop()
        if current in descendants or current == category_id:
            continue
        descendants.add(current)
        stack.extend(row["id"] for row in children.get(current, []))

    return descendants
