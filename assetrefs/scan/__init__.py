"""
Reference scanning.

    host = InMemoryAssetHost()
    builder = AssetGraphBuilder(host, default_ignore_rules())
    records = builder.build(paths, LoggingProgressSink())
"""
from .builder import AssetGraphBuilder, transient_instance
from .host import AssetHost, MemberKind, ProgressSink, ReferenceBearing
from .progress import CallbackProgressSink, LoggingProgressSink, NullProgressSink
from .records import AssetKind, AssetRecord, ScanFailure
from .resolver import ReferenceResolver
from .rules import IgnoreRules, KindRule, MemberRule
from .settings import ScanSettings
from .traverser import ObjectGraphTraverser

__all__ = [
    "AssetGraphBuilder",
    "AssetHost",
    "AssetKind",
    "AssetRecord",
    "CallbackProgressSink",
    "IgnoreRules",
    "KindRule",
    "LoggingProgressSink",
    "MemberKind",
    "MemberRule",
    "NullProgressSink",
    "ObjectGraphTraverser",
    "ProgressSink",
    "ReferenceBearing",
    "ReferenceResolver",
    "ScanFailure",
    "ScanSettings",
    "transient_instance",
]
