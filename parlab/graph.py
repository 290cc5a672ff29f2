"""Directed graphs in compressed adjacency form, with text and binary loaders."""

from __future__ import annotations

import os
import re
import struct
from dataclasses import dataclass

GRAPH_HEADER_MAGIC = struct.unpack("<i", struct.pack("<I", 0xDEADBEEF))[0]
_TEXT_MAGIC = "AdjacencyGraph"
_INT = struct.Struct("<i")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)


class GraphFormatError(ValueError):
    """Raised when graph data is malformed or truncated."""


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _span(starts: tuple[int, ...], total: int, v: int) -> tuple[int, int]:
    end = total if v == len(starts) - 1 else starts[v + 1]
    return starts[v], end


@dataclass(frozen=True)
class Graph:
    """A directed graph stored as outgoing and incoming adjacency arrays.

    The outgoing edges of vertex ``v`` are
    ``outgoing_edges[outgoing_starts[v]:outgoing_starts[v + 1]]``,
    with the last vertex running to the end of the edge array.
    """

    outgoing_starts: tuple[int, ...]
    outgoing_edges: tuple[int, ...]
    incoming_starts: tuple[int, ...]
    incoming_edges: tuple[int, ...]

    @property
    def num_nodes(self) -> int:
        return len(self.outgoing_starts)

    @property
    def num_edges(self) -> int:
        return len(self.outgoing_edges)

    def _check_vertex(self, v: int) -> None:
        if not 0 <= v < self.num_nodes:
            raise IndexError(f"vertex {v} outside graph of {self.num_nodes} nodes")

    def outgoing(self, v: int) -> tuple[int, ...]:
        """Targets of the edges leaving ``v``."""
        self._check_vertex(v)
        start, end = _span(self.outgoing_starts, self.num_edges, v)
        return self.outgoing_edges[start:end]

    def incoming(self, v: int) -> tuple[int, ...]:
        """Sources of the edges entering ``v``."""
        self._check_vertex(v)
        start, end = _span(self.incoming_starts, self.num_edges, v)
        return self.incoming_edges[start:end]

    def outgoing_size(self, v: int) -> int:
        self._check_vertex(v)
        start, end = _span(self.outgoing_starts, self.num_edges, v)
        return end - start

    def incoming_size(self, v: int) -> int:
        self._check_vertex(v)
        start, end = _span(self.incoming_starts, self.num_edges, v)
        return end - start

    @classmethod
    def from_outgoing(cls, num_nodes, outgoing_starts, outgoing_edges) -> "Graph":
        """Build a graph from its outgoing arrays, deriving the incoming ones."""
        starts = tuple(int(s) for s in outgoing_starts)
        edges = tuple(int(e) for e in outgoing_edges)
        if len(starts) != num_nodes:
            raise GraphFormatError(
                f"expected {num_nodes} start offsets, got {len(starts)}"
            )
        previous = 0
        for s in starts:
            if s < previous or s > len(edges):
                raise GraphFormatError(f"invalid start offset {s}")
            previous = s
        if starts and starts[0] != 0:
            raise GraphFormatError("first start offset must be 0")
        for target in edges:
            if not 0 <= target < num_nodes:
                raise GraphFormatError(f"edge target {target} out of range")

        sources: list[list[int]] = [[] for _ in range(num_nodes)]
        for node in range(num_nodes):
            begin, end = _span(starts, len(edges), node)
            for target in edges[begin:end]:
                sources[target].append(node)

        incoming_starts = []
        offset = 0
        for group in sources:
            incoming_starts.append(offset)
            offset += len(group)
        incoming_edges = tuple(src for group in sources for src in group)
        return cls(starts, edges, tuple(incoming_starts), incoming_edges)


def _next_content_line(lines, filename: str) -> str:
    for line in lines:
        line = line.rstrip("\r\n")
        if line and not line.startswith("#"):
            return line
    raise GraphFormatError(f"unexpected end of graph file {filename}")


def load_graph(filename: str | os.PathLike) -> Graph:
    """Load a graph from the ``AdjacencyGraph`` text format."""
    name = os.fspath(filename)
    with open(name, "r", encoding="ascii") as fh:
        lines = iter(fh.read().splitlines())

    header = next(lines, "")
    if header.rstrip("\r") != _TEXT_MAGIC:
        raise GraphFormatError(f"Invalid input file{header}")
    num_nodes = _atoi(_next_content_line(lines, name))
    num_edges = _atoi(_next_content_line(lines, name))
    if num_nodes < 0 or num_edges < 0:
        raise GraphFormatError("node and edge counts must be non-negative")

    values: list[int] = []
    for line in lines:
        if line.startswith("#"):
            continue
        for item in line.split():
            try:
                values.append(int(item))
            except ValueError:
                break

    needed = num_nodes + num_edges
    if len(values) < needed:
        raise GraphFormatError(
            f"expected {needed} values in {name}, found {len(values)}"
        )
    return Graph.from_outgoing(num_nodes, values[:num_nodes], values[num_nodes:needed])


def _read_ints(data: bytes, offset: int, count: int, what: str) -> tuple[int, ...]:
    end = offset + _INT.size * count
    if count < 0 or end > len(data):
        raise GraphFormatError(f"Error reading {what}.")
    return struct.unpack_from(f"<{count}i", data, offset)


def load_graph_binary(filename: str | os.PathLike) -> Graph:
    """Load a graph written by :func:`store_graph_binary`."""
    with open(filename, "rb") as fh:
        data = fh.read()
    magic, num_nodes, num_edges = _read_ints(data, 0, 3, "header")
    if magic != GRAPH_HEADER_MAGIC:
        raise GraphFormatError("Invalid graph file header. File may be corrupt.")
    offset = 3 * _INT.size
    starts = _read_ints(data, offset, num_nodes, "nodes")
    offset += _INT.size * num_nodes
    edges = _read_ints(data, offset, num_edges, "edges")
    return Graph.from_outgoing(num_nodes, starts, edges)


def store_graph_binary(filename: str | os.PathLike, graph: Graph) -> None:
    """Write the header and outgoing arrays of ``graph`` as 32-bit integers."""
    values = (
        GRAPH_HEADER_MAGIC,
        graph.num_nodes,
        graph.num_edges,
        *graph.outgoing_starts,
        *graph.outgoing_edges,
    )
    with open(filename, "wb") as fh:
        fh.write(struct.pack(f"<{len(values)}i", *values))


def format_graph(graph: Graph) -> str:
    """Render every vertex with its outgoing and incoming neighbours."""
    parts = [
        "Graph pretty print:\n",
        f"num_nodes={graph.num_nodes}\n",
        f"num_edges={graph.num_edges}\n",
    ]
    for v in range(graph.num_nodes):
        out = graph.outgoing(v)
        parts.append(f"node {v:02d}: out={len(out)}: ")
        parts.extend(f"{t} " for t in out)
        parts.append("\n")
        inc = graph.incoming(v)
        parts.append(f"         in={len(inc)}: ")
        parts.extend(f"{s} " for s in inc)
        parts.append("\n")
    return "".join(parts)