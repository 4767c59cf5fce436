from blogapi.comment_tree import build_comment_tree, flatten_two_levels


def c(id, parent_id=None):
    return {'id': id, 'parent_id': parent_id, 'content': f'comment {id}'}


def walk(nodes):
    for node in nodes:
        yield node
        yield from walk(node['replies'])


def test_replies_nest_under_their_parent_in_fetch_order():
    tree = build_comment_tree([c(1), c(2), c(3, 1), c(4, 3), c(5, 1), c(6, 2)])
    assert [n['id'] for n in tree] == [1, 2]
    first, second = tree
    assert [n['id'] for n in first['replies']] == [3, 5]
    assert [n['id'] for n in first['replies'][0]['replies']] == [4]
    assert [n['id'] for n in second['replies']] == [6]
    assert tree[0]['replies'][1]['replies'] == []


def test_every_comment_appears_exactly_once():
    flat = [c(1), c(2, 1), c(3, 2), c(4), c(5, 4), c(6, 2), c(7)]
    ids = [n['id'] for n in walk(build_comment_tree(flat))]
    assert sorted(ids) == [1, 2, 3, 4, 5, 6, 7]
    assert len(ids) == len(set(ids))


def test_deep_chain_does_not_hit_recursion_limit():
    depth = 5000
    flat = [c(1)] + [c(i, i - 1) for i in range(2, depth + 1)]
    tree = build_comment_tree(flat)
    assert len(tree) == 1
    assert sum(1 for _ in walk_iter(tree)) == depth


def walk_iter(nodes):
    stack = list(nodes)
    while stack:
        node = stack.pop()
        yield node
        stack.extend(node['replies'])


def test_cycle_is_broken_instead_of_looping():
    # 2 -> 3 -> 2 never reaches a root
    flat = [c(1), c(2, 3), c(3, 2), c(4, 2)]
    tree = build_comment_tree(flat)
    ids = [n['id'] for n in walk_iter(tree)]
    assert sorted(ids) == [1, 2, 3, 4]
    assert [n['id'] for n in tree] == [1, 2]
    assert [n['id'] for n in tree[1]['replies']] == [3, 4]


def test_self_parent_is_treated_as_root():
    tree = build_comment_tree([c(1, 1)])
    assert [n['id'] for n in tree] == [1]
    assert tree[0]['replies'] == []


def test_dangling_parent_becomes_root():
    tree = build_comment_tree([c(1), c(2, 99), c(3, 2)])
    assert [n['id'] for n in tree] == [1, 2]
    assert [n['id'] for n in tree[1]['replies']] == [3]


def test_input_rows_are_not_mutated():
    flat = [c(1), c(2, 1)]
    build_comment_tree(flat)
    assert 'replies' not in flat[0]


def test_empty_input():
    assert build_comment_tree([]) == []


def test_flatten_two_levels_stops_at_grandchildren():
    flat = [c(1), c(2, 1), c(3, 2), c(4, 3), c(5, 1), c(6), c(7, 6)]
    assert [x['id'] for x in flatten_two_levels(1, flat)] == [2, 3, 5]


def test_flatten_two_levels_keeps_chronological_order():
    flat = [c(1), c(2, 1), c(3, 1), c(4, 2), c(5, 3), c(6, 2)]
    assert [x['id'] for x in flatten_two_levels(1, flat)] == [2, 3, 4, 5, 6]


def test_flatten_two_levels_of_a_reply():
    flat = [c(1), c(2, 1), c(3, 2), c(4, 3), c(5, 4)]
    assert [x['id'] for x in flatten_two_levels(2, flat)] == [3, 4]
