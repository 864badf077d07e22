"""Progress sinks for AssetGraphBuilder."""
import logging
import math
import os
from typing import Callable, Optional


class NullProgressSink:
    """Discards all reports."""

    def report(self, path: str, fraction: float) -> None:
        pass

    def close(self) -> None:
        pass


class LoggingProgressSink:
    """Logs ``NN% - file`` lines, one per report."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("ScanProgress")
        self.reports = 0

    def report(self, path: str, fraction: float) -> None:
        self.reports += 1
        name = os.path.basename(path)
        self._logger.info(f"{math.floor(fraction * 100)}% - {name}")

    def close(self) -> None:
        self._logger.info(f"Scan finished after {self.reports} assets")


class CallbackProgressSink:
    """Adapts plain callables to the ProgressSink protocol."""

    def __init__(
        self,
        on_report: Callable[[str, float], None],
        on_close: Optional[Callable[[], None]] = None,
    ):
        self._on_report = on_report
        self._on_close = on_close

    def report(self, path: str, fraction: float) -> None:
        self._on_report(path, fraction)

    def close(self) -> None:
        if self._on_close is not None:
            self._on_close()
