"""
Object-graph traversal that collects asset references.

Members of a composite are discovered either through the ReferenceBearing
capability or, failing that, by reflection:

- fields: every instance attribute, underscore-prefixed ones included
- properties: readable ``property`` objects along the MRO whose declared
  return type can hold a reference (unannotated properties are read)

Reflected property tables are computed once per concrete kind.
"""
import logging
import types
import typing
from collections.abc import Sequence as SequenceABC
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Union, get_args, get_origin

from assetrefs.scan.host import AssetHost, MemberKind, ReferenceBearing
from assetrefs.scan.records import AssetRecord
from assetrefs.scan.resolver import ReferenceResolver
from assetrefs.scan.rules import IgnoreRules

Member = Tuple[str, Any, MemberKind]


def _stops_reflection(klass: type) -> bool:
    """Framework base classes never contribute reference properties."""
    return klass is object or klass.__module__.split(".")[0] in {"pydantic", "pydantic_core"}


class ObjectGraphTraverser:
    """
    Walks composites, hierarchy nodes and state-machine containers and adds
    every resolvable reference to the caller's AssetRecord.

    Holds no per-scan state; everything is accumulated into the record.
    """

    def __init__(
        self,
        host: AssetHost,
        rules: Optional[IgnoreRules] = None,
        resolver: Optional[ReferenceResolver] = None,
    ):
        self.host = host
        self.rules = rules if rules is not None else IgnoreRules()
        self.resolver = resolver if resolver is not None else ReferenceResolver(host)
        self._logger = logging.getLogger("ObjectGraphTraverser")
        self._property_cache: Dict[type, Tuple[Tuple[str, property], ...]] = {}

    ##############################
    # Entry points
    ##############################

    def traverse(self, composite: Any, record: AssetRecord, scene_context: bool = False) -> None:
        """Resolve every reference-typed member value of a single composite."""
        if composite is None:
            return
        kind = type(composite)
        if self.rules.is_excluded_kind(kind):
            self._logger.debug(f"Kind {kind.__name__} is excluded, not traversing {composite!r}")
            return

        for name, value, member_kind in self.iter_members(composite):
            if member_kind is MemberKind.PROPERTY and self.rules.is_excluded_member(kind, name):
                self._logger.debug(f"Skipping excluded member {kind.__name__}.{name}")
                continue
            for candidate in self._expand(value):
                self.add_reference(candidate, record, scene_context)

    def traverse_hierarchy(self, root: Any, record: AssetRecord, scene_context: bool = False) -> None:
        """
        Depth-first walk of a hierarchy node.

        For every node: each attached component is resolved as a direct
        reference, then its members are traversed; child nodes follow.
        """
        stack: List[Any] = [root]
        visited: Set[int] = set()

        while stack:
            node = stack.pop()
            if node is None or id(node) in visited:
                continue
            visited.add(id(node))
            self._logger.debug(f"Visiting node {node!r}")

            for component in self.host.components_of(node):
                if component is None:
                    continue
                self.add_reference(component, record, scene_context)
                self.traverse(component, record, scene_context)

            # reversed so the first child is visited first
            stack.extend(reversed(list(self.host.children_of(node))))

    def traverse_state_machine(self, container: Any, record: AssetRecord) -> None:
        """Resolve the motion of every state in every layer of a state-machine container."""
        for layer in self.host.layers(container):
            for state in self.host.states(layer):
                motion = self.host.motion_of(state)
                if motion is not None:
                    self.add_reference(motion, record, False)

    ##############################
    # Helpers
    ##############################

    def add_reference(self, value: Any, record: AssetRecord, scene_context: bool) -> Optional[str]:
        ref_id = self.resolver.resolve(value, scene_context)
        if ref_id is not None and record.add_reference(ref_id):
            self._logger.debug(f"{record.path} -> {ref_id}")
        return ref_id

    def iter_members(self, composite: Any) -> List[Member]:
        if isinstance(composite, ReferenceBearing):
            return list(composite.list_reference_members())
        return list(self._reflect_members(composite))

    def _reflect_members(self, composite: Any) -> Iterator[Member]:
        for name, value in getattr(composite, "__dict__", {}).items():
            if name.startswith("__"):
                continue
            yield name, value, MemberKind.FIELD

        kind = type(composite)
        for name, prop in self._reference_properties(kind):
            # excluded properties are never read
            if self.rules.is_excluded_member(kind, name):
                continue
            yield name, prop.fget(composite), MemberKind.PROPERTY

    def _reference_properties(self, kind: type) -> Tuple[Tuple[str, property], ...]:
        cached = self._property_cache.get(kind)
        if cached is not None:
            return cached

        found: Dict[str, property] = {}
        seen: Set[str] = set()
        for klass in kind.__mro__:
            if _stops_reflection(klass):
                continue
            for name, attr in vars(klass).items():
                if name in seen or name.startswith("__"):
                    continue
                seen.add(name)
                if isinstance(attr, property) and attr.fget is not None and self._declares_reference(attr):
                    found[name] = attr

        cached = tuple(found.items())
        self._property_cache[kind] = cached
        self._logger.debug(f"Reference properties of {kind.__name__}: {[n for n, _ in cached]}")
        return cached

    def _declares_reference(self, prop: property) -> bool:
        try:
            hints = typing.get_type_hints(prop.fget)
        except (NameError, TypeError):
            return True
        if "return" not in hints:
            return True
        return self._annotation_holds_reference(hints["return"])

    def _annotation_holds_reference(self, annotation: Any) -> bool:
        if annotation is type(None):
            return False
        origin = get_origin(annotation)
        if origin is Union or origin is types.UnionType:
            return any(self._annotation_holds_reference(a) for a in get_args(annotation))
        if origin is not None:
            if isinstance(origin, type) and issubclass(origin, SequenceABC):
                args = [a for a in get_args(annotation) if a is not Ellipsis]
                return not args or any(self._annotation_holds_reference(a) for a in args)
            return False
        if isinstance(annotation, type):
            if issubclass(annotation, (list, tuple)):
                return True
            return self.host.is_reference_kind(annotation)
        return True

    @staticmethod
    def _expand(value: Any) -> List[Any]:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [v for v in value if v is not None]
        return [value]
