"""
Configuration for the pathtrace viewer.

Defaults can be set through environment variables and overridden on the
command line:

    PATHTRACE_ALGO           grid algorithm (dijkstra | astar | bellman_ford | floyd_warshall)
    PATHTRACE_GRAPH_ALGO     node-graph algorithm (bfs | dfs | dijkstra)
    PATHTRACE_STEP_MS        milliseconds per path step
    PATHTRACE_SHOW_BRANCHES  1/true/yes to reveal rejected branches
    PATHTRACE_LOG_LEVEL      loguru level name
"""

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from loguru import logger

from pathtrace.core.playback import DEFAULT_STEP_MS
from pathtrace.core.registry import GRAPH_ALGORITHMS, GRID_ALGORITHMS, normalize

# =============================================================================
# Paths
# =============================================================================

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MAP_DIR = PROJECT_ROOT / "maps"

# =============================================================================
# Grid defaults
# =============================================================================

DEFAULT_ROWS = 19
DEFAULT_COLS = 22
DEFAULT_WALL_PROB = 0.3

MIN_STEP_MS = 10
MAX_STEP_MS = 500

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    algo: str = "dijkstra"
    graph_algo: str = "dijkstra"
    step_ms: float = DEFAULT_STEP_MS
    show_branches: bool = False
    log_level: str = "INFO"
    map_path: Optional[Path] = None


def _env_algo(env: Mapping[str, str], key: str, table, fallback: str) -> str:
    raw = env.get(key)
    if raw is None:
        return fallback
    name = normalize(raw)
    if name not in table:
        logger.warning("{}={!r} is not a known algorithm, using {}", key, raw, fallback)
        return fallback
    return name


def _env_step(env: Mapping[str, str]) -> float:
    raw = env.get("PATHTRACE_STEP_MS")
    if raw is None:
        return DEFAULT_STEP_MS
    try:
        return clamp_step(float(raw))
    except ValueError:
        logger.warning("PATHTRACE_STEP_MS={!r} is not a number, using {}", raw, DEFAULT_STEP_MS)
        return DEFAULT_STEP_MS


def clamp_step(ms: float) -> float:
    return float(max(MIN_STEP_MS, min(MAX_STEP_MS, ms)))


def from_env(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    return Settings(
        algo=_env_algo(env, "PATHTRACE_ALGO", GRID_ALGORITHMS, "dijkstra"),
        graph_algo=_env_algo(env, "PATHTRACE_GRAPH_ALGO", GRAPH_ALGORITHMS, "dijkstra"),
        step_ms=_env_step(env),
        show_branches=env.get("PATHTRACE_SHOW_BRANCHES", "").strip().lower() in _TRUE,
        log_level=env.get("PATHTRACE_LOG_LEVEL", "INFO").upper(),
    )


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathtrace",
        description="Watch shortest-path algorithms explore a grid or node graph.",
    )
    parser.add_argument("--algo", type=normalize, default=defaults.algo,
                        choices=sorted(GRID_ALGORITHMS), help="grid algorithm")
    parser.add_argument("--graph-algo", type=normalize, default=defaults.graph_algo,
                        choices=sorted(GRAPH_ALGORITHMS), help="node-graph algorithm")
    parser.add_argument("--step-ms", type=float, default=defaults.step_ms,
                        help=f"milliseconds per step ({MIN_STEP_MS}-{MAX_STEP_MS})")
    parser.add_argument("--branches", action=argparse.BooleanOptionalAction,
                        default=defaults.show_branches, help="reveal rejected branches")
    parser.add_argument("--map", type=Path, default=None, help="scene JSON to open")
    parser.add_argument("--log-level", default=defaults.log_level, help="log level")
    return parser


def resolve_settings(argv: Optional[Sequence[str]] = None,
                     env: Optional[Mapping[str, str]] = None) -> Settings:
    defaults = from_env(env)
    args = build_parser(defaults).parse_args(argv)
    return Settings(
        algo=args.algo,
        graph_algo=args.graph_algo,
        step_ms=clamp_step(args.step_ms),
        show_branches=args.branches,
        log_level=args.log_level.upper(),
        map_path=args.map,
    )
