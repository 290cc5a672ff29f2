"""Top-down breadth-first search computing hop distances from vertex 0."""

from __future__ import annotations

from typing import MutableSequence, Sequence

from .graph import Graph

ROOT_NODE_ID = 0
NOT_VISITED_MARKER = -1


def top_down_step(
    graph: Graph, frontier: Sequence[int], distances: MutableSequence[int]
) -> list[int]:
    """Visit the unvisited neighbours of ``frontier`` and return them in order.

    ``distances`` is updated for every vertex newly reached.
    """
    new_frontier: list[int] = []
    for node in frontier:
        next_distance = distances[node] + 1
        for neighbor in graph.outgoing(node):
            if distances[neighbor] == NOT_VISITED_MARKER:
                distances[neighbor] = next_distance
                new_frontier.append(neighbor)
    return new_frontier


def bfs_top_down(graph: Graph) -> list[int]:
    """Distance of every vertex from the root, or -1 where unreachable."""
    distances = [NOT_VISITED_MARKER] * graph.num_nodes
    if not distances:
        return distances
    distances[ROOT_NODE_ID] = 0
    frontier = [ROOT_NODE_ID]
    while frontier:
        frontier = top_down_step(graph, frontier, distances)
    return distances