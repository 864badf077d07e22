"""
Common fixtures for scan tests.
Provides an in-memory host, the default ignore rules and a small content tree.
"""
from typing import Dict, List, Optional, Tuple

import pytest
from pydantic import Field

from assetrefs.scan import AssetGraphBuilder, IgnoreRules, ScanSettings
from assetrefs.scan.memory_host import (
    AnimLayer,
    AnimState,
    AssetObject,
    Behaviour,
    Component,
    DataAsset,
    InMemoryAssetHost,
    Motion,
    Node,
    StateMachine,
    Transform,
    default_ignore_rules,
)

# ========================================================================
# Test kinds
# ========================================================================

class Holder(Component):
    """Component with a single plain reference field."""
    target: Optional[AssetObject] = None


class Spawner(Behaviour):
    """Script-backed component referencing a structure and a list of assets."""
    prefab: Optional[Node] = None
    extras: List[AssetObject] = Field(default_factory=list)


class RecordingSink:
    """Progress sink that remembers every call."""

    def __init__(self) -> None:
        self.reports: List[Tuple[str, float]] = []
        self.closed = 0

    def report(self, path: str, fraction: float) -> None:
        self.reports.append((path, fraction))

    def close(self) -> None:
        self.closed += 1


# ========================================================================
# Fixtures
# ========================================================================

@pytest.fixture
def host() -> InMemoryAssetHost:
    return InMemoryAssetHost()


@pytest.fixture
def rules() -> IgnoreRules:
    return default_ignore_rules()


@pytest.fixture
def builder(host, rules) -> AssetGraphBuilder:
    return AssetGraphBuilder(host, rules, ScanSettings())


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def scenario(host) -> Dict[str, str]:
    """
    A.struct references X through a plain member,
    B.scene holds one instance of A,
    C.controller has a single state whose motion is Y.
    Returns a mapping of short name to asset id.
    """
    ids: Dict[str, str] = {}

    x = DataAsset(name="X")
    ids["X"] = host.add_asset("X.asset", x)

    root = Node(name="A")
    root.add_component(Transform())
    root.add_component(Holder(target=x))
    ids["A"] = host.add_asset("A.struct", root)

    ids["B"] = host.add_scene("B.scene")
    host.place_instance("B.scene", "A.struct")

    y = Motion(name="Y")
    ids["Y"] = host.add_asset("Y.anim", y)
    controller = StateMachine(layers=[AnimLayer(states=[AnimState(motion=y)])])
    ids["C"] = host.add_asset("C.controller", controller)

    return ids
