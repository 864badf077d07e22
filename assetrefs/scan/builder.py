"""
Batch orchestration: one AssetRecord per input path, in input order.

Each path is classified by suffix and entered through the matching path:

- STRUCTURE: load, instantiate a transient copy, walk its hierarchy, release
- SCENE: open the container, walk every top-level node in scene context
- STATE_MACHINE: load, resolve the motion of every state
- GENERIC: load, traverse the loaded object's members

A failure while scanning one path is logged and recorded in ``failures``;
the partial record is still emitted and the batch continues.
"""
import asyncio
import contextlib
import logging
import threading
from typing import Any, Callable, ContextManager, Iterator, List, Optional, Sequence

from assetrefs.scan.host import AssetHost, ProgressSink
from assetrefs.scan.progress import NullProgressSink
from assetrefs.scan.records import AssetKind, AssetRecord, ScanFailure
from assetrefs.scan.resolver import ReferenceResolver
from assetrefs.scan.rules import IgnoreRules
from assetrefs.scan.settings import ScanSettings
from assetrefs.scan.traverser import ObjectGraphTraverser

ResultSink = Callable[[List[AssetRecord]], None]


@contextlib.contextmanager
def transient_instance(host: AssetHost, handle: Any) -> Iterator[Any]:
    """Instantiate ``handle`` and release it on every exit path."""
    instance = host.instantiate(handle)
    try:
        yield instance
    finally:
        if instance is not None:
            host.release(instance)


class AssetGraphBuilder:
    """
    Produces the reference set of every asset in a batch.

    Args:
        host: Host services (loader, environment, identifiers)
        rules: Exclusion rules handed to the traverser
        settings: Classification suffixes, worker bound, log level
    """

    def __init__(
        self,
        host: AssetHost,
        rules: Optional[IgnoreRules] = None,
        settings: Optional[ScanSettings] = None,
    ):
        self.host = host
        self.settings = settings or ScanSettings()
        self.resolver = ReferenceResolver(host)
        self.traverser = ObjectGraphTraverser(host, rules, self.resolver)
        self.failures: List[ScanFailure] = []
        self._logger = logging.getLogger("AssetGraphBuilder")
        self._failures_lock = threading.Lock()
        self._host_lock = threading.Lock()
        # the host has one active container, whatever thread_safe says
        self._scene_lock = threading.Lock()

    ##############################
    # Batch entry points
    ##############################

    def build(
        self,
        paths: Sequence[str],
        progress: Optional[ProgressSink] = None,
        result: Optional[ResultSink] = None,
    ) -> List[AssetRecord]:
        """Scan every path sequentially. Reports ``i / total`` before scanning item ``i``."""
        progress = progress or NullProgressSink()
        total = len(paths)
        self.failures = []
        self._logger.info(f"Scanning {total} assets")

        records: List[Optional[AssetRecord]] = [None] * total
        for index, path in enumerate(paths):
            progress.report(path, index / total)
            records[index] = self.scan(path)

        return self._finish(records, progress, result)

    async def build_async(
        self,
        paths: Sequence[str],
        progress: Optional[ProgressSink] = None,
        result: Optional[ResultSink] = None,
        max_workers: Optional[int] = None,
    ) -> List[AssetRecord]:
        """
        Scan paths on a bounded pool of worker threads.

        Results keep input order. Progress reports carry ``completed / total``
        at the moment each scan starts. Host calls are serialized unless the
        host declares itself thread safe; scene scans are always serialized.
        """
        progress = progress or NullProgressSink()
        workers = max_workers or self.settings.max_workers
        total = len(paths)
        self.failures = []
        self._logger.info(f"Scanning {total} assets with up to {workers} workers")

        semaphore = asyncio.Semaphore(workers)
        progress_lock = threading.Lock()
        completed = 0

        def run(path: str) -> AssetRecord:
            nonlocal completed
            with progress_lock:
                progress.report(path, completed / total)
            try:
                with self._host_guard():
                    return self.scan(path)
            finally:
                with progress_lock:
                    completed += 1

        async def bounded(path: str) -> AssetRecord:
            async with semaphore:
                return await asyncio.to_thread(run, path)

        records = await asyncio.gather(*(bounded(p) for p in paths))
        return self._finish(list(records), progress, result)

    def _finish(
        self,
        records: List[Optional[AssetRecord]],
        progress: ProgressSink,
        result: Optional[ResultSink],
    ) -> List[AssetRecord]:
        finished = [r for r in records if r is not None]
        if self.failures:
            self._logger.warning(f"{len(self.failures)} of {len(finished)} assets failed to scan completely")
        if result is not None:
            result(finished)
        progress.close()
        return finished

    def _host_guard(self) -> ContextManager[Any]:
        if getattr(self.host, "thread_safe", False):
            return contextlib.nullcontext()
        return self._host_lock

    ##############################
    # Single asset
    ##############################

    def scan(self, path: str) -> AssetRecord:
        """Scan one path. Never raises for traversal errors."""
        kind = self.settings.classify(path)
        record = AssetRecord(path=path, id="", kind=kind)
        self._logger.debug(f"Scanning {path} as {kind.value}")

        try:
            record.id = self._asset_id(path)
            if kind is AssetKind.STRUCTURE:
                self._scan_structure(record)
            elif kind is AssetKind.SCENE:
                self._scan_scene(record)
            elif kind is AssetKind.STATE_MACHINE:
                self._scan_state_machine(record)
            else:
                self._scan_generic(record)
        except Exception as e:
            self._logger.exception(f"Scan of {path} failed, emitting partial record")
            self._fail(path, "traverse", f"{type(e).__name__}: {e}")

        self._logger.info(f"{path}: {len(record.references)} references")
        return record.sealed()

    def _asset_id(self, path: str) -> str:
        if not self.host.id_exists(path):
            self._logger.warning(f"No identifier registered for {path}")
        return self.host.path_to_id(path)

    def _load(self, record: AssetRecord) -> Any:
        handle = self.host.load_asset(record.path)
        if handle is None:
            self._logger.warning(f"Could not load asset: {record.path}")
            self._fail(record.path, "load", "loader returned nothing")
        return handle

    def _scan_structure(self, record: AssetRecord) -> None:
        handle = self._load(record)
        if handle is None:
            return
        with transient_instance(self.host, handle) as instance:
            self.traverser.traverse_hierarchy(instance, record, scene_context=False)

    def _scan_scene(self, record: AssetRecord) -> None:
        """Open the scene and walk its top-level nodes under the scene lock."""
        with self._scene_lock:
            if not self.host.open_container(record.path):
                self._logger.warning(f"Could not open scene container: {record.path}")
                self._fail(record.path, "open", "container could not be opened")
                return
            for node in self.host.enumerate_top_level_nodes():
                self.traverser.traverse_hierarchy(node, record, scene_context=True)

    def _scan_state_machine(self, record: AssetRecord) -> None:
        container = self._load(record)
        if container is None:
            return
        self.traverser.traverse_state_machine(container, record)

    def _scan_generic(self, record: AssetRecord) -> None:
        obj = self._load(record)
        if obj is None:
            return
        self.traverser.traverse(obj, record, scene_context=False)

    def _fail(self, path: str, stage: str, error: str) -> None:
        with self._failures_lock:
            self.failures.append(ScanFailure(path=path, stage=stage, error=error))
