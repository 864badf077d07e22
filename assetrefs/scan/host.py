"""
Contracts the scanner expects from its host environment.

Loading, instantiation, scene activation and path/identifier mapping all
belong to the host. The scanner only talks to these protocols.
"""
from enum import Enum
from typing import Any, Iterable, Optional, Protocol, Sequence, Tuple, runtime_checkable


class MemberKind(str, Enum):
    """Where a member value came from. Member rules only apply to properties."""
    FIELD = "field"
    PROPERTY = "property"


@runtime_checkable
class ReferenceBearing(Protocol):
    """Capability for kinds that list their own reference members instead of being reflected."""
    def list_reference_members(self) -> Iterable[Tuple[str, Any, MemberKind]]: ...


class ProgressSink(Protocol):
    """Receives (path, fraction) reports, closed once per batch."""
    def report(self, path: str, fraction: float) -> None: ...
    def close(self) -> None: ...


class AssetHost(Protocol):
    """All host-provided services used during a scan."""
    thread_safe: bool

    # identifiers
    def path_to_id(self, path: str) -> str: ...
    def id_exists(self, path: str) -> bool: ...
    def path_of(self, obj: Any) -> Optional[str]: ...

    # loading and transient instances
    def load_asset(self, path: str) -> Any: ...
    def instantiate(self, handle: Any) -> Any: ...
    def release(self, instance: Any) -> None: ...

    # scene containers
    def open_container(self, path: str) -> bool: ...
    def enumerate_top_level_nodes(self) -> Sequence[Any]: ...
    def components_of(self, node: Any) -> Sequence[Any]: ...
    def children_of(self, node: Any) -> Sequence[Any]: ...
    def origin_of(self, obj: Any) -> Optional[Any]: ...

    # object model
    def is_asset_object(self, value: Any) -> bool: ...
    def is_reference_kind(self, kind: type) -> bool: ...
    def is_behavior(self, obj: Any) -> bool: ...
    def is_scriptable(self, obj: Any) -> bool: ...
    def backing_script_of(self, obj: Any) -> Optional[Any]: ...

    # state machines
    def layers(self, container: Any) -> Sequence[Any]: ...
    def states(self, layer: Any) -> Sequence[Any]: ...
    def motion_of(self, state: Any) -> Optional[Any]: ...
