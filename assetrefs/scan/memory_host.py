"""
In-memory host used by tests, examples and embedding applications that
keep their content tree as Python objects.

Object kinds are small pydantic models. Any object stored through
``add_asset`` (and every object it owns, e.g. the nodes and components of
a structure) gets that asset's path. Transient instances and scene-placed
copies are clones that get no path of their own; scene-placed copies
remember their origin structure.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from assetrefs.scan.rules import IgnoreRules

##############################
# Object kinds
##############################

class AssetObject(BaseModel):
    """Base kind for everything that can be referenced."""
    name: str = ""
    object_id: UUID = Field(default_factory=uuid4)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __hash__(self) -> int:
        return hash(self.object_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AssetObject):
            return NotImplemented
        return self.object_id == other.object_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name or self.object_id})"


class Script(AssetObject):
    """A reusable code unit backing behaviors and scriptable data."""


class Mesh(AssetObject):
    pass


class Texture(AssetObject):
    pass


class Material(AssetObject):
    texture: Optional[Texture] = None


class Motion(AssetObject):
    pass


class DataAsset(AssetObject):
    """Plain data object holding arbitrary references."""
    refs: List[AssetObject] = Field(default_factory=list)


class ScriptableData(AssetObject):
    script: Optional[Script] = None


class Node(AssetObject):
    components: List["Component"] = Field(default_factory=list)
    children: List["Node"] = Field(default_factory=list)

    def add_component(self, component: "Component") -> "Component":
        component.owner = self
        self.components.append(component)
        return component


class Component(AssetObject):
    owner: Optional[Node] = None


class Transform(Component):
    pass


class RigidBody(Component):
    mass: float = 1.0


class NavAgent(Component):
    speed: float = 3.5


class MeshFilter(Component):
    shared_mesh: Optional[Mesh] = None

    @property
    def mesh(self) -> Optional[Mesh]:
        return self.shared_mesh


class Renderer(Component):
    shared_materials: List[Material] = Field(default_factory=list)

    @property
    def material(self) -> Optional[Material]:
        return self.shared_materials[0] if self.shared_materials else None


class Collider(Component):
    shared_material: Optional[Material] = None

    @property
    def material(self) -> Optional[Material]:
        return self.shared_material


class Behaviour(Component):
    """Script-backed component."""
    script: Optional[Script] = None


class AnimState(AssetObject):
    motion: Optional[Motion] = None


class AnimLayer(AssetObject):
    states: List[AnimState] = Field(default_factory=list)


class StateMachine(AssetObject):
    layers: List[AnimLayer] = Field(default_factory=list)


for _kind in (Node, Component, Transform, RigidBody, NavAgent, MeshFilter, Renderer, Collider, Behaviour):
    _kind.model_rebuild()


def default_ignore_rules() -> IgnoreRules:
    """Exclusions for the built-in kinds."""
    return IgnoreRules.build(
        kinds=[AssetObject, RigidBody, Transform],
        subtype_kinds=[NavAgent],
        members=[
            (MeshFilter, "mesh"),
            (Renderer, "material"),
            (Collider, "material"),
        ],
    )


def _owned_objects(obj: AssetObject) -> List[AssetObject]:
    """The object plus every sub-object stored with it."""
    owned: List[AssetObject] = [obj]
    if isinstance(obj, Node):
        owned.extend(obj.components)
        for child in obj.children:
            owned.extend(_owned_objects(child))
    elif isinstance(obj, StateMachine):
        for layer in obj.layers:
            owned.append(layer)
            owned.extend(layer.states)
    return owned


##############################
# Host
##############################

class InMemoryAssetHost:
    """
    AssetHost over in-memory objects.

    Identifiers default to a uuid5 of the path, so they are stable across runs.
    """
    thread_safe = False

    def __init__(self) -> None:
        self._logger = logging.getLogger("InMemoryAssetHost")
        self._assets: Dict[str, AssetObject] = {}
        self._ids: Dict[str, str] = {}
        self._object_paths: Dict[UUID, str] = {}
        self._scenes: Dict[str, List[Node]] = {}
        self._origins: Dict[UUID, AssetObject] = {}
        self._live: Dict[UUID, Node] = {}
        self._active_scene: Optional[str] = None

    # ---- content setup ----

    def _register_path(self, path: str, asset_id: Optional[str]) -> str:
        self._ids[path] = asset_id or uuid.uuid5(uuid.NAMESPACE_URL, path).hex
        return self._ids[path]

    def add_asset(self, path: str, obj: AssetObject, asset_id: Optional[str] = None) -> str:
        """Store an object (and what it owns) under ``path``. Returns the asset id."""
        self._assets[path] = obj
        for owned in _owned_objects(obj):
            self._object_paths[owned.object_id] = path
        self._logger.debug(f"Stored {obj!r} at {path}")
        return self._register_path(path, asset_id)

    def add_scene(self, path: str, roots: Optional[List[Node]] = None, asset_id: Optional[str] = None) -> str:
        self._scenes[path] = list(roots or [])
        return self._register_path(path, asset_id)

    def place_instance(self, scene_path: str, structure_path: str, parent: Optional[Node] = None) -> Node:
        """Place a copy of a stored structure into a scene; the copy remembers its origin."""
        origin = self._assets[structure_path]
        if not isinstance(origin, Node):
            raise TypeError(f"{structure_path} is not a structure")
        copy, cloned = self._clone_tree(origin)
        for obj in cloned:
            self._origins[obj.object_id] = origin
        if parent is None:
            self._scenes[scene_path].append(copy)
        else:
            parent.children.append(copy)
        return copy

    @property
    def live_instances(self) -> List[Node]:
        return list(self._live.values())

    @property
    def active_scene(self) -> Optional[str]:
        return self._active_scene

    # ---- identifiers ----

    def path_to_id(self, path: str) -> str:
        return self._ids.get(path, "")

    def id_exists(self, path: str) -> bool:
        return path in self._ids

    def path_of(self, obj: Any) -> Optional[str]:
        if not isinstance(obj, AssetObject):
            return None
        return self._object_paths.get(obj.object_id)

    # ---- loading and transient instances ----

    def load_asset(self, path: str) -> Any:
        return self._assets.get(path)

    def instantiate(self, handle: Any) -> Any:
        if not isinstance(handle, Node):
            raise TypeError(f"Cannot instantiate {handle!r}")
        copy, _ = self._clone_tree(handle)
        self._live[copy.object_id] = copy
        return copy

    def release(self, instance: Any) -> None:
        self._live.pop(instance.object_id, None)

    # ---- scene containers ----

    def open_container(self, path: str) -> bool:
        if path not in self._scenes:
            return False
        self._active_scene = path
        return True

    def enumerate_top_level_nodes(self) -> Sequence[Any]:
        if self._active_scene is None:
            return []
        return list(self._scenes[self._active_scene])

    def components_of(self, node: Any) -> Sequence[Any]:
        return node.components

    def children_of(self, node: Any) -> Sequence[Any]:
        return node.children

    def origin_of(self, obj: Any) -> Optional[Any]:
        if not isinstance(obj, AssetObject):
            return None
        return self._origins.get(obj.object_id)

    # ---- object model ----

    def is_asset_object(self, value: Any) -> bool:
        return isinstance(value, AssetObject)

    def is_reference_kind(self, kind: type) -> bool:
        return issubclass(kind, AssetObject)

    def is_behavior(self, obj: Any) -> bool:
        return isinstance(obj, Behaviour)

    def is_scriptable(self, obj: Any) -> bool:
        return isinstance(obj, ScriptableData)

    def backing_script_of(self, obj: Any) -> Optional[Any]:
        return getattr(obj, "script", None)

    # ---- state machines ----

    def layers(self, container: Any) -> Sequence[Any]:
        return container.layers

    def states(self, layer: Any) -> Sequence[Any]:
        return layer.states

    def motion_of(self, state: Any) -> Optional[Any]:
        return state.motion

    # ---- cloning ----

    def _clone_tree(self, root: Node) -> Tuple[Node, List[AssetObject]]:
        memo: Dict[UUID, AssetObject] = {}

        def clone(obj: AssetObject) -> AssetObject:
            copy = obj.model_copy(update={"object_id": uuid4()})
            memo[obj.object_id] = copy
            return copy

        def clone_node(node: Node) -> Node:
            copy = clone(node)
            copy.components = [clone(c) for c in node.components]
            copy.children = [clone_node(c) for c in node.children]
            return copy

        root_copy = clone_node(root)

        # point references inside the tree at the copies
        for copy in memo.values():
            if not isinstance(copy, Component):
                continue
            for name, value in list(vars(copy).items()):
                if isinstance(value, AssetObject) and value.object_id in memo:
                    setattr(copy, name, memo[value.object_id])
                elif isinstance(value, list):
                    setattr(copy, name, [
                        memo[v.object_id] if isinstance(v, AssetObject) and v.object_id in memo else v
                        for v in value
                    ])

        return root_copy, list(memo.values())
