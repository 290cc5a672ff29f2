"""Reference circle renderer, graph utilities, BFS and scan primitives."""

__version__ = "0.1.0"

__all__ = [
    "benchmark",
    "bfs",
    "cli",
    "crand",
    "graph",
    "graphtools",
    "image",
    "noise",
    "ppm",
    "renderer",
    "scan",
    "scenes",
]