"""
Exclusion rules that prune the object-graph traversal.

Two rule shapes exist:

- KindRule: an object kind whose members are never traversed.
- MemberRule: a (kind, member) pair whose value is a shared default
  rather than a per-instance reference. Member rules name accessor
  properties; a plain field with the same name is still collected.

Rule answers are computed once per concrete kind and cached, so repeated
lookups never walk the class hierarchy again.
"""
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, PrivateAttr


class KindRule(BaseModel):
    """Exclude a kind from member traversal."""
    kind: type
    include_subtypes: bool = False

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def matches(self, kind: type) -> bool:
        if kind is self.kind:
            return True
        return self.include_subtypes and issubclass(kind, self.kind)


class MemberRule(BaseModel):
    """Exclude one named accessor property of a kind (and, by default, its subtypes)."""
    kind: type
    member: str
    include_subtypes: bool = True

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def matches(self, kind: type) -> bool:
        if kind is self.kind:
            return True
        return self.include_subtypes and issubclass(kind, self.kind)


class IgnoreRules(BaseModel):
    """
    Immutable set of exclusion rules.

    Pure lookups: an unmatched kind or member simply answers False.
    Member rules apply to accessor properties only, never to plain fields.
    """
    kinds: Tuple[KindRule, ...] = ()
    members: Tuple[MemberRule, ...] = ()

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    _kind_cache: Dict[type, bool] = PrivateAttr(default_factory=dict)
    _member_cache: Dict[type, FrozenSet[str]] = PrivateAttr(default_factory=dict)

    @classmethod
    def build(
        cls,
        kinds: Optional[Iterable[type]] = None,
        members: Optional[Iterable[Tuple[type, str]]] = None,
        subtype_kinds: Optional[Iterable[type]] = None,
    ) -> "IgnoreRules":
        """Shorthand constructor from plain kinds and (kind, member) pairs."""
        kind_rules = [KindRule(kind=k) for k in kinds or ()]
        kind_rules.extend(KindRule(kind=k, include_subtypes=True) for k in subtype_kinds or ())
        member_rules = [MemberRule(kind=k, member=m) for k, m in members or ()]
        return cls(kinds=tuple(kind_rules), members=tuple(member_rules))

    def merged(self, other: "IgnoreRules") -> "IgnoreRules":
        return IgnoreRules(kinds=self.kinds + other.kinds, members=self.members + other.members)

    def is_excluded_kind(self, kind: type) -> bool:
        cached = self._kind_cache.get(kind)
        if cached is None:
            cached = any(rule.matches(kind) for rule in self.kinds)
            self._kind_cache[kind] = cached
        return cached

    def excluded_members(self, kind: type) -> FrozenSet[str]:
        """All member names excluded for a concrete kind."""
        cached = self._member_cache.get(kind)
        if cached is None:
            cached = frozenset(rule.member for rule in self.members if rule.matches(kind))
            self._member_cache[kind] = cached
        return cached

    def is_excluded_member(self, kind: type, member_name: str) -> bool:
        return member_name in self.excluded_members(kind)

    def __len__(self) -> int:
        return len(self.kinds) + len(self.members)
