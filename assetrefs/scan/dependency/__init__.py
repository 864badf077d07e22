"""
Asset dependency graph implementation.

This module turns scan records into a bidirectional reference graph and
detects reference cycles without touching the records themselves.
"""
from .graph import AssetDependencyGraph, CycleStatus, GraphNode

__all__ = ["AssetDependencyGraph", "CycleStatus", "GraphNode"]
