# parlab

A small toolkit built around a reference circle renderer and a set of graph
utilities:

- a CPU circle renderer (`parlab.renderer.RefRenderer`) with animated scenes
  (snowflakes, fireworks, bouncing balls, hypnosis) and static test scenes,
  writing binary PPM frames (`parlab.ppm`);
- a benchmark harness (`parlab.benchmark`) that times the clear / advance /
  render phases and can compare two renderers' final images pixel by pixel;
- a compressed-adjacency directed graph (`parlab.graph.Graph`) with text and
  binary loaders, and a command-line tool for inspecting graph files;
- top-down breadth-first search (`parlab.bfs`);
- exclusive scan and find-repeats primitives (`parlab.scan`).

It has no dependencies beyond the Python standard library (3.10 or later).

## Installation

```
pip install .
```

Tests need the `test` extra: `pip install .[test]`, then `pytest`.

## Rendering scenes

```
parlab-render [options] scenename
```

Scene names: `rgb`, `rgby`, `rand10k`, `rand100k`, `biglittle`, `littlebig`,
`pattern`, `bouncingballs`, `fireworks`, `hypnosis`, `snow`, `snowsingle`.

Options:

- `-r`, `--renderer NAME` — renderer to use; `cpuref` is the only one
  available (and the default)
- `-s`, `--size INT` — image size in pixels, square (default 1024)
- `-b`, `--bench START:END` — run frames `[0, END)` and time those in
  `[START, END)` (default `0:1`)
- `-f`, `--file NAME` — write each timed frame to `NAME_xxxx.ppm`
  (default `output`)
- `-c`, `--check` — render one frame with the reference renderer and the
  selected renderer, then compare the images (colour channels within 0.1,
  up to five mismatches tolerated)
- `-?`, `--help` — print usage

After the run the per-frame average time of each phase is printed in
milliseconds, with the overall wall time in seconds. The command exits with
status 1 on bad options, an unknown scene, or an image mismatch.

For example, to render the RGB test scene at 512×512 and write
`rgb_0000.ppm`:

```
parlab-render -s 512 -f rgb rgb
```

The `snowsingle` scene reads particle data from `snow.par` in the current
directory: a circle count on the first line, then one line per circle with
position (x y z), velocity (x y z) and radius. `RefRenderer.dump_particles`
writes a file in that format.

From Python:

```python
from parlab.renderer import RefRenderer
from parlab.scenes import SceneName
from parlab.ppm import write_ppm

renderer = RefRenderer()
renderer.alloc_output_image(256, 256)
renderer.load_scene(SceneName.CIRCLE_RGB)
renderer.setup()
renderer.clear_image()
renderer.advance_animation()
renderer.render()
write_ppm(renderer.image, "frame.ppm")
```

Scene generation is deterministic: `parlab.crand.CRandom` reproduces the C
library `rand()` sequence, so a given scene always yields the same circles.

## Graph tools

```
parlab-graphtools cmd args
```

Commands:

- `text2bin TEXTFILE BINFILE` — convert a text `AdjacencyGraph` file to the
  binary format
- `info FILE` — number of vertices and edges
- `print FILE` — print every node's outgoing and incoming edges
- `noout FILE` — list vertices with no outgoing edges
- `noin FILE` — list vertices with no incoming edges
- `edgestats FILE` — total / min / max / average edge counts and a symmetry
  check

All commands except `text2bin` read the binary format.

From Python:

```python
from parlab.graph import Graph
from parlab.bfs import bfs_top_down

graph = Graph.from_outgoing(4, [0, 1, 2, 3], [1, 2, 3])
print(bfs_top_down(graph))   # [0, 1, 2, 3]; -1 marks unreachable vertices
```

`parlab.graphtools` also offers `nodes_without_outgoing`,
`nodes_without_incoming` and `edge_stats` as functions.

## Scan primitives

```python
from parlab.scan import exclusive_scan, exclusive_scan_tree, find_repeats

exclusive_scan([1, 2, 3, 4])        # [0, 1, 3, 6]
exclusive_scan_tree([1, 2, 3, 4])   # same result; length must be a power of two
find_repeats([1, 1, 2, 3, 3])       # [0, 3]
```

## What is not included

- There is no interactive display window; frames are only written as PPM
  files.
- The only renderer is the sequential CPU reference renderer, so `--check`
  compares it with itself.
- Breadth-first search is top-down only; there is no bottom-up or hybrid
  search, no PageRank, and no grading or thread-scaling harness for the graph
  algorithms.