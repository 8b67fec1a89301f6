"""Shortest-path playground: grid and node-graph search with branch playback."""

__version__ = "0.1.0"
