"""
Dependency graph over scanned asset records.

This module turns a batch of AssetRecords into a graph with both
directions of every edge, so callers can ask what an asset references and
what references it, detect reference cycles, and order assets bottom-up.
"""
import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from pydantic import BaseModel, Field

from assetrefs.scan.records import AssetRecord

logger = logging.getLogger("AssetDependencyGraph")


class CycleStatus(Enum):
    """Status of cycle detection."""
    NO_CYCLE = 0
    CYCLE_DETECTED = 1


class GraphNode(BaseModel):
    """Represents one asset in the dependency graph."""
    asset_id: str
    path: Optional[str] = None  # None for referenced assets outside the batch
    dependencies: Set[str] = Field(default_factory=set)  # ids this asset references
    dependents: Set[str] = Field(default_factory=set)  # ids that reference this asset

    def add_dependency(self, dep_id: str) -> None:
        self.dependencies.add(dep_id)

    def add_dependent(self, dep_id: str) -> None:
        self.dependents.add(dep_id)

    def __str__(self) -> str:
        return f"Node({self.asset_id}, deps={len(self.dependencies)}, dependents={len(self.dependents)})"

    def __repr__(self) -> str:
        return self.__str__()


class AssetDependencyGraph(BaseModel):
    """
    Computes and maintains the reference graph of a scanned batch.

    This class provides methods to:
    1. Build the graph from scan records
    2. Detect reference cycles
    3. Get a topological order (referenced assets first)
    4. Query referencing/referenced assets
    """
    nodes: Dict[str, GraphNode] = Field(default_factory=dict)
    cycles: List[List[str]] = Field(default_factory=list)

    @classmethod
    def from_records(cls, records: Iterable[AssetRecord]) -> "AssetDependencyGraph":
        graph = cls()
        graph.build_graph(records)
        return graph

    def build_graph(self, records: Iterable[AssetRecord]) -> CycleStatus:
        """
        Rebuild the graph from records and run cycle detection.

        Args:
            records: Scan output; records without an id are skipped

        Returns:
            CycleStatus indicating if any cycles were detected
        """
        self.nodes.clear()
        self.cycles.clear()

        for record in records:
            if not record.id:
                logger.debug(f"Skipping record without id: {record.path}")
                continue
            node = self._ensure_node(record.id)
            node.path = record.path
            for ref_id in record.references:
                self.add_edge(record.id, ref_id)

        status = self._detect_cycles()
        logger.info(f"Built dependency graph with {len(self.nodes)} nodes")
        if self.cycles:
            logger.warning(f"Detected {len(self.cycles)} cycles in the graph")
        return status

    def _ensure_node(self, asset_id: str) -> GraphNode:
        node = self.nodes.get(asset_id)
        if node is None:
            node = GraphNode(asset_id=asset_id)
            self.nodes[asset_id] = node
        return node

    def add_edge(self, from_id: str, to_id: str) -> None:
        """Record that ``from_id`` references ``to_id``."""
        self._ensure_node(from_id).add_dependency(to_id)
        self._ensure_node(to_id).add_dependent(from_id)

    def _detect_cycles(self) -> CycleStatus:
        visited: Set[str] = set()
        path: List[str] = []
        on_path: Set[str] = set()

        def visit(node_id: str) -> None:
            if node_id in on_path:
                cycle = path[path.index(node_id):] + [node_id]
                logger.warning(f"Detected cycle: {cycle}")
                self.cycles.append(cycle)
                return
            if node_id in visited:
                return

            path.append(node_id)
            on_path.add(node_id)
            for dep_id in sorted(self.nodes[node_id].dependencies):
                visit(dep_id)
            on_path.remove(node_id)
            path.pop()
            visited.add(node_id)

        for node_id in sorted(self.nodes):
            visit(node_id)

        return CycleStatus.CYCLE_DETECTED if self.cycles else CycleStatus.NO_CYCLE

    def get_node(self, asset_id: str) -> Optional[GraphNode]:
        return self.nodes.get(asset_id)

    def get_dependency_ids(self, asset_id: str) -> Set[str]:
        node = self.get_node(asset_id)
        return set(node.dependencies) if node else set()

    def get_dependent_ids(self, asset_id: str) -> Set[str]:
        """IDs of assets that reference ``asset_id``."""
        node = self.get_node(asset_id)
        return set(node.dependents) if node else set()

    def is_graph_root(self, asset_id: str) -> bool:
        """True when nothing in the graph references the asset (unknown ids count as roots)."""
        node = self.get_node(asset_id)
        if node:
            return len(node.dependents) == 0
        return True

    def unreferenced(self) -> List[str]:
        """Scanned assets (those with a path) that nothing references, sorted."""
        return sorted(
            node_id for node_id, node in self.nodes.items()
            if node.path is not None and not node.dependents
        )

    def get_topological_sort(self) -> List[str]:
        """
        Return asset ids with referenced assets before the assets referencing them.

        Nodes on a cycle are ordered by their depth ignoring the back edge.
        Ties are broken by id so the order is deterministic.
        """
        depths: Dict[str, int] = {}

        def calculate_depth(node_id: str, path: Set[str]) -> int:
            if node_id in path:
                return 0
            if node_id in depths:
                return depths[node_id]

            node = self.nodes.get(node_id)
            if not node or not node.dependencies:
                depths[node_id] = 0
                return 0

            inner = path | {node_id}
            depth = max(calculate_depth(dep_id, inner) + 1 for dep_id in node.dependencies)
            depths[node_id] = depth
            return depth

        for node_id in self.nodes:
            if node_id not in depths:
                calculate_depth(node_id, set())

        return sorted(self.nodes, key=lambda node_id: (depths.get(node_id, 0), node_id))

    def get_cycles(self) -> List[List[str]]:
        return self.cycles
