import pytest

from fadungeon.mst import minimum_spanning_tree


def _reaches_root(parent):
    for start in range(len(parent)):
        seen = set()
        node = start
        while parent[node] is not None:
            if node in seen:
                return False
            seen.add(node)
            node = parent[node]
        if node != 0:
            return False
    return True


def test_triangle_picks_two_cheapest_edges():
    graph = [[0, 2, 6], [2, 0, 3], [6, 3, 0]]
    assert minimum_spanning_tree(graph) == [None, 0, 1]


def test_single_vertex():
    assert minimum_spanning_tree([[0]]) == [None]


def test_unreachable_vertex_keeps_parent_zero():
    assert minimum_spanning_tree([[0, 0], [0, 0]]) == [None, 0]


def test_tree_is_connected_to_root():
    graph = [
        [0, 4, 1, 9, 7],
        [4, 0, 2, 5, 3],
        [1, 2, 0, 8, 6],
        [9, 5, 8, 0, 2],
        [7, 3, 6, 2, 0],
    ]
    parent = minimum_spanning_tree(graph)
    assert len(parent) == 5
    assert parent[0] is None
    assert _reaches_root(parent)


def test_tree_weight_not_worse_than_star():
    graph = [
        [0, 4, 1, 9, 7],
        [4, 0, 2, 5, 3],
        [1, 2, 0, 8, 6],
        [9, 5, 8, 0, 2],
        [7, 3, 6, 2, 0],
    ]
    parent = minimum_spanning_tree(graph)
    tree_weight = sum(graph[v][p] for v, p in enumerate(parent) if p is not None)
    star_weight = sum(graph[0][v] for v in range(1, 5))
    assert tree_weight <= star_weight


def test_every_tree_edge_exists():
    graph = [
        [0, 3, 0, 0],
        [3, 0, 1, 0],
        [0, 1, 0, 5],
        [0, 0, 5, 0],
    ]
    parent = minimum_spanning_tree(graph)
    assert all(graph[v][p] > 0 for v, p in enumerate(parent) if p is not None)
    assert _reaches_root(parent)


def test_empty_graph_rejected():
    with pytest.raises(ValueError):
        minimum_spanning_tree([])


def test_non_square_graph_rejected():
    with pytest.raises(ValueError):
        minimum_spanning_tree([[0, 1], [1]])