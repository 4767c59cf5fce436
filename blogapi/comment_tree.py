"""
Reconstruct the reply tree of an article from its flat comment rows.

Rows arrive already in chronological order and that order is kept at every
level. Building is O(n): one pass indexes children by parent id, a second
pass walks down from the roots.
"""
from collections import defaultdict, deque
from typing import Dict, List
import logging

logger = logging.getLogger(__name__)


def build_comment_tree(comments: List[dict]) -> List[dict]:
    """Nest `comments` (dicts with `id` and `parent_id`) into `replies` lists.

    Every input comment appears exactly once in the output. A comment whose
    parent is not in the set, or that only hangs off a parent cycle, is
    promoted to a root instead of being dropped, so corrupt data can neither
    lose comments nor loop forever.
    """
    nodes: Dict[int, dict] = {}
    for c in comments:
        node = dict(c)
        node['replies'] = []
        nodes[node['id']] = node

    children = defaultdict(list)
    roots = []
    for node in nodes.values():
        parent_id = node.get('parent_id')
        if parent_id is None or parent_id not in nodes:
            roots.append(node)
        else:
            children[parent_id].append(node)

    visited = set()

    def attach(root):
        visited.add(root['id'])
        queue = deque([root])
        while queue:
            node = queue.popleft()
            for child in children.get(node['id'], ()):
                if child['id'] in visited:
                    continue
                visited.add(child['id'])
                node['replies'].append(child)
                queue.append(child)

    for root in roots:
        if root.get('parent_id') is not None:
            logger.warning(f"comment {root['id']} references missing parent {root['parent_id']}")
        attach(root)

    if len(visited) < len(nodes):
        for node in nodes.values():
            if node['id'] in visited:
                continue
            logger.warning(f"comment {node['id']} is part of a parent cycle; treating it as a root")
            roots.append(node)
            attach(node)

    return roots


def flatten_two_levels(root_id: int, comments: List[dict]) -> List[dict]:
    """Direct replies to `root_id` and the replies to those, as one flat list.

    Deeper descendants are deliberately left out; `comments` is expected in
    chronological order and the result keeps it.
    """
    direct = {c['id'] for c in comments if c.get('parent_id') == root_id and c['id'] != root_id}
    return [
        c for c in comments
        if c['id'] != root_id and (c['id'] in direct or c.get('parent_id') in direct)
    ]
