"""assetrefs - extract the asset reference graph of a content tree."""
from assetrefs.scan import (
    AssetGraphBuilder,
    AssetKind,
    AssetRecord,
    IgnoreRules,
    ReferenceResolver,
    ObjectGraphTraverser,
    ScanSettings,
)
from assetrefs.scan.dependency import AssetDependencyGraph

__version__ = "0.1.0"

__all__ = [
    "AssetDependencyGraph",
    "AssetGraphBuilder",
    "AssetKind",
    "AssetRecord",
    "IgnoreRules",
    "ObjectGraphTraverser",
    "ReferenceResolver",
    "ScanSettings",
]
