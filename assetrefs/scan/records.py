"""
Result records produced by a scan.

One AssetRecord is emitted per input identifier. ScanFailure is the
diagnostic side channel: a failed scan still yields its (partial) record,
the failure itself is reported here.
"""
from enum import Enum
from typing import FrozenSet, List, Set, Union

from pydantic import BaseModel, Field, field_serializer


class AssetKind(str, Enum):
    """How an asset is entered by the builder."""
    STRUCTURE = "structure"
    SCENE = "scene"
    STATE_MACHINE = "state_machine"
    GENERIC = "generic"


class AssetRecord(BaseModel):
    """
    References found for a single asset.

    Attributes:
        path: Storage location of the asset (host defined)
        id: Canonical identifier of the asset
        kind: Entry kind used to scan the asset
        references: Canonical identifiers this asset references

    The builder hands out sealed records: their reference set is a
    frozenset and can no longer grow.
    """
    path: str
    id: str
    kind: AssetKind = AssetKind.GENERIC
    references: Union[Set[str], FrozenSet[str]] = Field(default_factory=set)

    def add_reference(self, ref_id: str) -> bool:
        """Add a reference. Returns True if the set grew."""
        if isinstance(self.references, frozenset):
            raise TypeError(f"Record for {self.path} is sealed")
        if not ref_id or ref_id == self.id:
            return False
        if ref_id in self.references:
            return False
        self.references.add(ref_id)
        return True

    def sealed(self) -> "AssetRecord":
        """Copy of this record whose reference set is frozen."""
        return self.model_copy(update={"references": frozenset(self.references)})

    @field_serializer("references")
    def serialize_references(self, references: Union[Set[str], FrozenSet[str]]) -> List[str]:
        return sorted(references)

    def __repr__(self) -> str:
        return f"AssetRecord({self.path}, refs={len(self.references)})"


class ScanFailure(BaseModel):
    """A failure raised while scanning one asset."""
    path: str
    stage: str
    error: str

    def __str__(self) -> str:
        return f"{self.path} [{self.stage}]: {self.error}"
