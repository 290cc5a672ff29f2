from parlab.bfs import NOT_VISITED_MARKER, bfs_top_down, top_down_step
from parlab.graph import Graph


def _from_adjacency(adj):
    starts, edges = [], []
    for targets in adj:
        starts.append(len(edges))
        edges.extend(targets)
    return Graph.from_outgoing(len(adj), starts, edges)


def _grid(n):
    adj = []
    for y in range(n):
        for x in range(n):
            nbrs = []
            if x > 0:
                nbrs.append(y * n + x - 1)
            if x < n - 1:
                nbrs.append(y * n + x + 1)
            if y > 0:
                nbrs.append((y - 1) * n + x)
            if y < n - 1:
                nbrs.append((y + 1) * n + x)
            adj.append(nbrs)
    return _from_adjacency(adj)


def _check_bfs_invariants(graph, dist):
    assert dist[0] == 0
    for u in range(graph.num_nodes):
        if dist[u] < 0:
            continue
        for v in graph.outgoing(u):
            assert dist[v] != NOT_VISITED_MARKER
            assert dist[v] <= dist[u] + 1
        if u != 0:
            assert any(dist[p] == dist[u] - 1 for p in graph.incoming(u))


def test_path_graph():
    g = _from_adjacency([[1], [2], [3], []])
    assert bfs_top_down(g) == [0, 1, 2, 3]


def test_unreachable_vertex():
    g = _from_adjacency([[1], [], [0]])
    dist = bfs_top_down(g)
    assert dist[2] == NOT_VISITED_MARKER
    _check_bfs_invariants(g, dist)


def test_grid_invariants():
    g = _grid(6)
    dist = bfs_top_down(g)
    _check_bfs_invariants(g, dist)
    assert all(d >= 0 for d in dist)
    assert dist[-1] == max(dist)


def test_top_down_step_order_and_distances():
    g = _from_adjacency([[2, 1, 2], [], []])
    dist = [0, NOT_VISITED_MARKER, NOT_VISITED_MARKER]
    frontier = top_down_step(g, [0], dist)
    assert frontier == [2, 1]
    assert dist[1] == dist[2] == dist[0] + 1


def test_top_down_step_empty_frontier():
    g = _from_adjacency([[1], []])
    dist = [0, NOT_VISITED_MARKER]
    assert top_down_step(g, [], dist) == []
    assert dist[1] == NOT_VISITED_MARKER


def test_empty_graph():
    assert bfs_top_down(Graph.from_outgoing(0, [], [])) == []