"""Command-line utilities for inspecting and converting graph files."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Callable

from .graph import (
    Graph,
    GraphFormatError,
    format_graph,
    load_graph,
    load_graph_binary,
    store_graph_binary,
)

INT_MAX = 2147483647
_PROG = "graphtools"
_RULE = "=" * 57


@dataclass(frozen=True)
class EdgeStats:
    """Edge-count statistics over all vertices of a graph."""

    total_outgoing: int
    avg_outgoing: float
    min_outgoing: int
    max_outgoing: int
    total_incoming: int
    avg_incoming: float
    min_incoming: int
    max_incoming: int
    is_symmetric: bool

    def report(self) -> str:
        """The summary printed by the ``edgestats`` command."""
        verdict = "IS " if self.is_symmetric else "IS NOT "
        return (
            f"{_RULE}\n"
            "Edge statistics for this graph:\n"
            f"{_RULE}\n"
            f"The graph {verdict}symmetric.\n"
            f"Outgoing edges: total={self.total_outgoing} avg={self.avg_outgoing:g}"
            f" min={self.min_outgoing} max={self.max_outgoing}\n"
            f"Incoming edges: total={self.total_incoming} avg={self.avg_incoming:g}"
            f" min={self.min_incoming} max={self.max_incoming}\n"
        )


def nodes_without_outgoing(graph: Graph) -> list[int]:
    """Vertices that have no outgoing edges, in ascending order."""
    return [v for v in range(graph.num_nodes) if graph.outgoing_size(v) == 0]


def nodes_without_incoming(graph: Graph) -> list[int]:
    """Vertices that have no incoming edges, in ascending order."""
    return [v for v in range(graph.num_nodes) if graph.incoming_size(v) == 0]


def _average(total: int, count: int) -> float:
    return total / count if count else math.nan


def edge_stats(graph: Graph) -> EdgeStats:
    """Compute edge statistics and test whether every edge has a reverse edge.

    Raises GraphFormatError if an outgoing edge has no matching incoming
    entry at its target.
    """
    out_sizes = [graph.outgoing_size(v) for v in range(graph.num_nodes)]
    in_sizes = [graph.incoming_size(v) for v in range(graph.num_nodes)]
    symmetric = True
    for v in range(graph.num_nodes):
        sources_of_v = graph.incoming(v)
        for target in graph.outgoing(v):
            if v not in graph.incoming(target):
                raise GraphFormatError(
                    "GRAPH DID NOT PASS SANITY CHECK:\n"
                    f"vertex {v} has outgoing edge to {target},\n but "
                    f"vertex {target} has no incoming edge from {v}"
                )
            if target not in sources_of_v:
                symmetric = False

    total_out = sum(out_sizes)
    total_in = sum(in_sizes)
    return EdgeStats(
        total_outgoing=total_out,
        avg_outgoing=_average(total_out, graph.num_nodes),
        min_outgoing=min(out_sizes, default=INT_MAX),
        max_outgoing=max(out_sizes, default=0),
        total_incoming=total_in,
        avg_incoming=_average(total_in, graph.num_nodes),
        min_incoming=min(in_sizes, default=INT_MAX),
        max_incoming=max(in_sizes, default=0),
        is_symmetric=symmetric,
    )


def _help() -> str:
    return (
        f"Usage: {_PROG} cmd args\n"
        f"Use '{_PROG} cmd' to get command-specific help.\n"
        "\n"
        "Valid cmds are:\n\n"
        "text2bin: text file to binary file conversion\n"
        "info: print graph metadata\n"
        "print: print graph topology (careful with big graphs)\n"
        "noout: detect vertices with no outgoing edges\n"
        "noin: detect vertices with no incoming edges\n"
        "edgestats: print stats on graph edges: e.g., min/max edges per node, etc.\n"
    )


def _load(filename: str, loader: Callable[[str], Graph], done: str = "Done loading.") -> Graph:
    print(f"Loading graph: {filename}")
    graph = loader(filename)
    print(done)
    return graph


def _percent(count: int, total: int) -> float:
    return 100.0 * count / total if total else math.nan


def _list_nodes(nodes: list[int], total: int, kind: str) -> None:
    print(f"Nodes with no {kind} edges:")
    print("".join(f"{v} " for v in nodes))
    print(
        f"{len(nodes)} of {total} nodes have zero {kind} edges "
        f"({_percent(len(nodes), total):.2g}%)."
    )


def _cmd_text2bin(args: list[str]) -> None:
    graph = _load(args[0], load_graph)
    store_graph_binary(args[1], graph)


def _cmd_info(args: list[str]) -> None:
    graph = _load(args[0], load_graph_binary)
    print(f"Num vertices: {graph.num_nodes}")
    print(f"Num edges:    {graph.num_edges}")


def _cmd_print(args: list[str]) -> None:
    graph = _load(args[0], load_graph_binary)
    print(format_graph(graph), end="")


def _cmd_noout(args: list[str]) -> None:
    graph = _load(args[0], load_graph_binary)
    _list_nodes(nodes_without_outgoing(graph), graph.num_nodes, "outgoing")


def _cmd_noin(args: list[str]) -> None:
    graph = _load(args[0], load_graph_binary)
    _list_nodes(nodes_without_incoming(graph), graph.num_nodes, "incoming")


def _cmd_edgestats(args: list[str]) -> None:
    graph = _load(args[0], load_graph_binary, "Done loading. Now analyzing graph...")
    print(edge_stats(graph).report(), end="")


_COMMANDS: dict[str, tuple[Callable[[list[str]], None], str, str]] = {
    "text2bin": (
        _cmd_text2bin,
        "textfilename binfilename",
        "Converts a graph from text file format to binary file format",
    ),
    "info": (_cmd_info, "filename", "Pretty-prints graph info (num vertices, num edges)"),
    "print": (
        _cmd_print,
        "filename",
        "Pretty-prints graph, including edge information (be careful with large graphs)",
    ),
    "noout": (_cmd_noout, "filename", "Lists all vertices without outgoing edges."),
    "noin": (_cmd_noin, "filename", "Lists all edges without incoming edges."),
    "edgestats": (_cmd_edgestats, "filename", "Print basic stats about edges."),
}


def main(argv=None) -> int:
    """Run one graph tool command; returns the process exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print(_help(), end="", file=sys.stderr)
        return 1

    cmd, rest = args[0], args[1:]
    entry = _COMMANDS.get(cmd)
    if entry is None:
        print(_help(), end="", file=sys.stderr)
        return 0

    handler, arg_names, description = entry
    if len(rest) < len(arg_names.split()):
        print(f"Usage: {_PROG} {cmd} {arg_names}", file=sys.stderr)
        print(description, file=sys.stderr)
        return 1

    try:
        handler(rest)
    except (GraphFormatError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())