# src/pathrank/build/errors.py

"""
Error taxonomy shared by every pathrank module.

Configuration and consistency problems raise immediately. "Nothing found"
outcomes (no path, absent neighbour list) are returned as None instead.
"""

from __future__ import annotations


class GraphError(Exception):
    """Base class for graph consistency errors."""


class InvalidNodeError(GraphError):
    """A node id was referenced that is not present in the graph."""


class InvalidEdgeError(GraphError):
    """An edge references a missing endpoint or reuses an existing edge id."""


class PlantingError(ValueError):
    """A planting precondition was violated (empty graph, bad template, ...)."""


class ConfigError(ValueError):
    """An experiment or ranking configuration is invalid."""
