#!/usr/bin/env python3
"""
  ∞  C U B E S  ∞
  Conway's Game of Life, unfolded into three and four dimensions.

  A flat 2D slice of `#` (active) and `.` (inactive) cells is dropped into
  an infinite integer lattice at the origin. Every generation, an active
  cell survives with 2 or 3 active neighbours and an inactive cell comes
  alive with exactly 3. Neighbours are the full Moore neighbourhood:
  26 in 3D, 80 in 4D, 3**D - 1 in general.

  Only the cells that are alive are ever stored, so the universe has no
  edges. After six generations the program reports how many cubes glow.

  Run:
    python3 cubes.py          # prints part 1 (3D) and part 2 (4D)
    python3 cubes_bench.py    # profiling harness, see --help
"""

from __future__ import annotations

import time
from functools import lru_cache
from pathlib import Path
from typing import IO, ClassVar, Iterable

import numpy as np
from numpy.typing import NDArray
from scipy.ndimage import convolve as _convolve

Coord = tuple[int, ...]

# ── Rules ───────────────────────────────────────────────────────────────
ACTIVE = "#"
SURVIVE: frozenset[int] = frozenset({2, 3})
BIRTH: frozenset[int] = frozenset({3})

GENERATIONS = 6

# ── Engines ─────────────────────────────────────────────────────────────
# sparse: set iteration over active cells and their neighbourhoods
# dense:  ndimage convolution over each cluster's padded bounding box
ENGINES: tuple[str, ...] = ("sparse", "dense")

# ── Puzzle input ────────────────────────────────────────────────────────
PUZZLE_INPUT = """\
...#..#.
..##.##.
..#.....
....#...
#.##...#
####..##
...##.#.
#.#.#...
"""


# ═══════════════════════════════════════════════════════════════════════
#  Neighbourhoods
# ═══════════════════════════════════════════════════════════════════════

@lru_cache(maxsize=None)
def neighbour_offsets(dims: int) -> tuple[Coord, ...]:
    """All non-zero offsets in {-1, 0, 1}**dims (3**dims - 1 of them)."""
    if dims < 1:
        raise ValueError(f"dims must be >= 1, got {dims}")
    # (dims, 3, 3, ...) index grid → one row per offset
    table = np.indices((3,) * dims).reshape(dims, -1).T - 1
    return tuple(tuple(int(v) for v in row) for row in table if row.any())


def neighbours(coord: Coord) -> list[Coord]:
    """Moore neighbourhood of ``coord``, excluding ``coord`` itself."""
    return [
        tuple(c + d for c, d in zip(coord, off))
        for off in neighbour_offsets(len(coord))
    ]


def neighbours_3d(x: int, y: int, z: int) -> list[Coord]:
    """The 26 neighbours of a 3D cube."""
    return neighbours((x, y, z))


def neighbours_4d(x: int, y: int, z: int, w: int) -> list[Coord]:
    """The 80 neighbours of a 4D hypercube."""
    return neighbours((x, y, z, w))


@lru_cache(maxsize=None)
def _kernel(dims: int) -> NDArray[np.int16]:
    k = np.ones((3,) * dims, dtype=np.int16)
    k[(1,) * dims] = 0
    return k


def _clusters(pts: NDArray[np.int64]) -> list[NDArray[np.int64]]:
    """Split points into groups that cannot influence each other.

    Two groups separated by a gap of more than 2 along any axis share no
    examined cell, so each can be stepped on its own bounding box.
    """
    pending = [pts]
    done: list[NDArray[np.int64]] = []
    while pending:
        group = pending.pop()
        for axis in range(group.shape[1]):
            ordered = group[np.argsort(group[:, axis], kind="stable")]
            cuts = np.nonzero(np.diff(ordered[:, axis]) > 2)[0] + 1
            if len(cuts):
                pending.extend(np.split(ordered, cuts))
                break
        else:
            done.append(group)
    return done


# ═══════════════════════════════════════════════════════════════════════
#  Parsing
# ═══════════════════════════════════════════════════════════════════════

def parse_rows(text: str) -> list[str]:
    """Split a text block into grid rows.

    Rows are taken as-is: leading spaces are inactive columns and blank
    lines, leading ones included, still occupy a row. Only the final
    newline is dropped.
    """
    return text.splitlines()


# ═══════════════════════════════════════════════════════════════════════
#  The lattice
# ═══════════════════════════════════════════════════════════════════════

class Space:
    """
    An unbounded D-dimensional lattice of cubes.

    The whole state is ``active``, the set of coordinates that are alive.
    Rows of the seed text run along axis 1, columns along axis 0, and
    every higher axis starts at zero.
    """

    DIMS: ClassVar[int] = 0

    def __init__(
        self,
        rows: Iterable[str] = (),
        dims: int | None = None,
        engine: str = "sparse",
    ) -> None:
        dims = self.DIMS if dims is None else dims
        if dims < 2:
            raise ValueError(f"a space needs at least 2 dimensions, got {dims}")
        if engine not in ENGINES:
            raise ValueError(f"unknown engine {engine!r}, expected one of {ENGINES}")

        self.dims: int = dims
        self.engine: str = engine
        self.active: set[Coord] = set()

        pad = (0,) * (dims - 2)
        for y, line in enumerate(rows):
            for x, ch in enumerate(line):
                if ch == ACTIVE:
                    self.active.add((x, y) + pad)

    @classmethod
    def from_text(cls, text: str, **kwargs) -> Space:
        return cls(parse_rows(text), **kwargs)

    @classmethod
    def from_coords(cls, coords: Iterable[Coord], **kwargs) -> Space:
        space = cls(**kwargs)
        for coord in coords:
            if len(coord) != space.dims:
                raise ValueError(
                    f"coordinate {coord!r} does not have {space.dims} axes"
                )
            space.active.add(tuple(coord))
        return space

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(dims={self.dims}, engine={self.engine!r}, "
            f"active={len(self.active)})"
        )

    # ── Simulation ──────────────────────────────────────────────────

    def cycle(self) -> None:
        """Advance one generation. Counts always read the previous set."""
        if self.engine == "dense":
            self.active = self._dense_step()
            return

        next_active: set[Coord] = set()
        for coord in self.coords_to_examine():
            n = self.active_neighbour_count(coord)
            if n in BIRTH or (n in SURVIVE and coord in self.active):
                next_active.add(coord)
        self.active = next_active

    def cycle_n_times(self, n: int) -> None:
        if n < 0:
            raise ValueError(f"cannot run a negative number of generations ({n})")
        for _ in range(n):
            self.cycle()

    def coords_to_examine(self) -> set[Coord]:
        """Every cell adjacent to an active cell (active cells included,
        since each one neighbours its own neighbours)."""
        examine: set[Coord] = set()
        for coord in self.active:
            examine.update(neighbours(coord))
        return examine

    def active_neighbour_count(self, coord: Coord) -> int:
        active = self.active
        return sum(1 for n in neighbours(coord) if n in active)

    def _dense_step(self) -> set[Coord]:
        if not self.active:
            return set()
        pts = np.array(list(self.active), dtype=np.int64)
        next_active: set[Coord] = set()
        for group in _clusters(pts):
            next_active |= self._dense_block(group)
        return next_active

    def _dense_block(self, pts: NDArray[np.int64]) -> set[Coord]:
        # One cell of padding holds every possible birth; beyond it the
        # constant-zero border matches the empty lattice.
        origin = pts.min(axis=0) - 1
        shape = tuple(int(v) for v in pts.max(axis=0) - origin + 2)

        grid = np.zeros(shape, dtype=np.int16)
        grid[tuple((pts - origin).T)] = 1
        counts = _convolve(grid, _kernel(self.dims), mode="constant", cval=0)

        alive = grid.astype(np.bool_)
        birth = np.isin(counts, list(BIRTH))
        survive = alive & np.isin(counts, list(SURVIVE))
        return {
            tuple(int(v) for v in idx)
            for idx in np.argwhere(birth | survive) + origin
        }

    # ── Queries ─────────────────────────────────────────────────────

    def get_active_count(self) -> int:
        return len(self.active)

    def is_active(self, coord: Coord) -> bool:
        return tuple(coord) in self.active

    def bounds(self) -> tuple[NDArray[np.int64], NDArray[np.int64]] | None:
        """Per-axis (min, max) of the active cells, or None when empty."""
        if not self.active:
            return None
        pts = np.array(list(self.active), dtype=np.int64)
        return pts.min(axis=0), pts.max(axis=0)

    def extent(self) -> tuple[int, ...]:
        """Side lengths of the bounding box (all zero when empty)."""
        b = self.bounds()
        if b is None:
            return (0,) * self.dims
        lo, hi = b
        return tuple(int(v) for v in hi - lo + 1)


class ThreeSpace(Space):
    DIMS: ClassVar[int] = 3


class FourSpace(Space):
    DIMS: ClassVar[int] = 4


# ═══════════════════════════════════════════════════════════════════════
#  Stats logger
# ═══════════════════════════════════════════════════════════════════════

class StatsLogger:
    """Writes per-generation telemetry to CSV for post-hoc inspection."""

    HEADER: ClassVar[str] = "dims,engine,gen,time_s,active,examined,extent\n"

    def __init__(self, path: Path) -> None:
        self._path = path
        self._fh: IO[str] | None = None
        self._t0: float = time.monotonic()

    def open(self) -> None:
        try:
            self._fh = open(self._path, "w")
            self._fh.write(self.HEADER)
            self._fh.flush()
        except OSError:
            self._fh = None

    def log(
        self,
        dims: int,
        engine: str,
        gen: int,
        active: int,
        examined: int,
        extent: Iterable[int],
    ) -> None:
        if self._fh is None:
            return
        t = time.monotonic() - self._t0
        box = "x".join(str(v) for v in extent)
        try:
            self._fh.write(f"{dims},{engine},{gen},{t:.4f},{active},{examined},{box}\n")
            if gen % 10 == 0:
                self._fh.flush()
        except OSError:
            self.close()

    def close(self) -> None:
        if self._fh is not None:
            try:
                self._fh.close()
            except OSError:
                pass
            self._fh = None


# ═══════════════════════════════════════════════════════════════════════
#  Entry point
# ═══════════════════════════════════════════════════════════════════════

def main() -> None:
    rows = parse_rows(PUZZLE_INPUT)

    space = ThreeSpace(rows)
    space.cycle_n_times(GENERATIONS)
    print(f"part 1 answer: {space.get_active_count()}")

    four_space = FourSpace(rows)
    four_space.cycle_n_times(GENERATIONS)
    print(f"part 2 answer: {four_space.get_active_count()}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
