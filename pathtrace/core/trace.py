# pathtrace/core/trace.py
#!/usr/bin/env python3
"""
Branch tracing shared by the grid algorithms.

Each algorithm appends tagged events to a TraceLog at the moment they
happen (a cell popped from the frontier, a cell first reached, a
destination improved from start). After the search, every logged cell
that is not on the final path is turned into a branch by walking the
algorithm's own links back to start (predecessors) or forward from
start (next hops).

All walks are bounded by the model size. A walk that overruns or hits a
missing link is malformed and yields [] instead of looping.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple, TypeVar

from loguru import logger

from pathtrace.core.types import Grid, GridResult, Cell

K = TypeVar("K", bound=Hashable)

# event tags
POPPED = "popped"        # removed from the frontier and expanded
REACHED = "reached"      # best distance first improved from unreached
IMPROVED = "improved"    # distance from start improved (all-pairs form)


@dataclass
class TraceLog:
    events: List[Tuple[str, Any]] = field(default_factory=list)

    def record(self, kind: str, item: Any) -> None:
        self.events.append((kind, item))

    def first_seen(self, kind: str) -> List[Any]:
        """Items tagged `kind`, in order of first occurrence."""
        seen = set()
        out = []
        for k, item in self.events:
            if k == kind and item not in seen:
                seen.add(item)
                out.append(item)
        return out

    def count(self, kind: str) -> int:
        return sum(1 for k, _ in self.events if k == kind)


def walk_back(prev: Dict[K, K], start: K, end: K, limit: int,
              partial: bool = False) -> List[K]:
    """Follow came-from links from end to start, returned start-first.

    `limit` is the most nodes a simple path can hold. With partial=True a
    broken link keeps the part walked so far (it just won't begin at start);
    an overrun is always malformed.
    """
    out = [end]
    cur = end
    for _ in range(limit):
        if cur == start:
            out.reverse()
            return out
        nxt = prev.get(cur)
        if nxt is None:
            if partial:
                out.reverse()
                return out
            logger.warning("Predecessor chain from {} broke at {}", end, cur)
            return []
        cur = nxt
        out.append(cur)
    logger.warning("Predecessor chain from {} exceeded {} steps", end, limit)
    return []


def walk_forward(hop: Callable[[K, K], Optional[K]], start: K, dest: K,
                 limit: int) -> List[K]:
    """Follow next-hop links from start toward dest, returned start-first."""
    out = [start]
    cur = start
    for _ in range(limit):
        if cur == dest:
            return out
        cur = hop(cur, dest)
        if cur is None:
            logger.warning("Next-hop chain {} -> {} broke", start, dest)
            return []
        out.append(cur)
    logger.warning("Next-hop chain {} -> {} exceeded {} steps", start, dest, limit)
    return []


def collect_branches(order: List[K], path: List[K],
                     trace: Callable[[K], List[K]]) -> List[List[K]]:
    """One branch per logged item off the final path, in log order."""
    on_path = set(path)
    branches: List[List[K]] = []
    for item in order:
        if item in on_path:
            continue
        branch = trace(item)
        if branch:
            branches.append(branch)
    return branches


# -------------------- shared result policy --------------------

def precheck(grid: Grid, name: str) -> Optional[GridResult]:
    """Result for inputs that need no search, else None.

    Unset endpoints, and walled or out-of-bounds endpoints, are unreachable.
    start == end is a one-cell path with no branches.
    """
    s, t = grid.start, grid.end
    if s is None or t is None:
        return GridResult(metrics=metrics(name))
    if not grid.is_open(s) or not grid.is_open(t):
        logger.debug("{}: endpoint blocked (start={}, end={})", name, s, t)
        return GridResult(metrics=metrics(name))
    if s == t:
        return GridResult(path=[s], metrics=metrics(name, path=[s]))
    return None


def metrics(name: str, path: Optional[List[Cell]] = None,
            branches: Optional[List[List[Cell]]] = None, explored: int = 0,
            **extra) -> Dict[str, Any]:
    path = path or []
    out = {
        "algo": name,
        "explored": explored,
        "path_len": len(path),
        "branch_count": len(branches or []),
        "total_cost": len(path) - 1 if path else None,
    }
    out.update(extra)
    return out


def finish_with_predecessors(grid: Grid, name: str, prev: Dict[Cell, Cell],
                             reached: bool, order: List[Cell],
                             with_branches: bool, explored: int,
                             partial_branches: bool = False) -> GridResult:
    """Build the result from a predecessor table.

    The path is the predecessor walk from end, so it always agrees with
    the distances that produced the table.
    """
    if not reached:
        logger.debug("{}: end {} unreached after {} cells", name, grid.end, explored)
        return GridResult(metrics=metrics(name, explored=explored))

    path = walk_back(prev, grid.start, grid.end, grid.size)
    if not path:
        return GridResult(metrics=metrics(name, explored=explored))

    branches: List[List[Cell]] = []
    if with_branches:
        branches = collect_branches(
            order, path,
            lambda c: walk_back(prev, grid.start, c, grid.size, partial=partial_branches))

    logger.debug("{}: path of {} cells, {} branches, {} explored",
                 name, len(path), len(branches), explored)
    return GridResult(path=path, branches=branches,
                      metrics=metrics(name, path, branches, explored))
