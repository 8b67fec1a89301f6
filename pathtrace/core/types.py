# pathtrace/core/types.py
#!/usr/bin/env python3
import random
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Any, Set, Iterable

Cell = Tuple[int, int]  # (row, col)

# down, up, right, left
DIRS: Tuple[Cell, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))

MARKERS = ("start", "end")


@dataclass
class Grid:
    rows: int
    cols: int
    walls: Set[Cell] = field(default_factory=set)
    start: Optional[Cell] = None
    end: Optional[Cell] = None
    revision: int = 0                  # bumped on every edit

    def __post_init__(self):
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"grid must be at least 1x1, got {self.rows}x{self.cols}")
        self.walls = {tuple(w) for w in self.walls}
        if self.start is not None:
            self.start = tuple(self.start)
        if self.end is not None:
            self.end = tuple(self.end)

    # -------------------- queries --------------------

    @property
    def size(self) -> int:
        return self.rows * self.cols

    def in_bounds(self, c: Cell) -> bool:
        r, col = c
        return 0 <= r < self.rows and 0 <= col < self.cols

    def is_wall(self, c: Cell) -> bool:
        return c in self.walls

    def is_open(self, c: Cell) -> bool:
        return self.in_bounds(c) and c not in self.walls

    def neighbors4(self, c: Cell) -> List[Cell]:
        r, col = c
        out: List[Cell] = []
        for dr, dc in DIRS:
            n = (r + dr, col + dc)
            if self.in_bounds(n) and n not in self.walls:
                out.append(n)
        return out

    def cells(self) -> Iterable[Cell]:
        """Row-major iteration over every coordinate."""
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def index(self, c: Cell) -> int:
        return c[0] * self.cols + c[1]

    def cell_at(self, v: int) -> Cell:
        return divmod(v, self.cols)

    # -------------------- editing --------------------

    def _check(self, c: Cell) -> Cell:
        c = (int(c[0]), int(c[1]))
        if not self.in_bounds(c):
            raise ValueError(f"cell {c} outside {self.rows}x{self.cols} grid")
        return c

    def _touch(self) -> None:
        self.revision += 1

    def add_wall(self, c: Cell) -> None:
        self.walls.add(self._check(c))
        self._touch()

    def remove_wall(self, c: Cell) -> None:
        self.walls.discard(self._check(c))
        self._touch()

    def toggle_wall(self, c: Cell) -> bool:
        """Flip a cell; returns True if it is now a wall."""
        c = self._check(c)
        if c in self.walls:
            self.walls.remove(c)
        else:
            self.walls.add(c)
        self._touch()
        return c in self.walls

    def set_marker(self, kind: str, c: Cell) -> None:
        if kind not in MARKERS:
            raise ValueError(f"unknown marker {kind!r}")
        setattr(self, kind, self._check(c))
        self._touch()

    def clear_marker(self, kind: str) -> None:
        if kind not in MARKERS:
            raise ValueError(f"unknown marker {kind!r}")
        setattr(self, kind, None)
        self._touch()

    def clear(self) -> None:
        self.walls.clear()
        self._touch()

    def random_fill(self, prob: float = 0.3, rng: Optional[random.Random] = None) -> None:
        """Replace all walls with random ones; start/end are never walled."""
        rng = rng or random.Random()
        keep = {self.start, self.end}
        self.walls = {c for c in self.cells() if c not in keep and rng.random() < prob}
        self._touch()


@dataclass
class GridResult:
    path: List[Cell] = field(default_factory=list)
    branches: List[List[Cell]] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return bool(self.path)
