"""
Maps a raw referenced object to its canonical identifier.
"""
import logging
from typing import Any, Optional

from assetrefs.scan.host import AssetHost


class ReferenceResolver:
    """
    Best-effort resolution of one candidate value.

    Substitutions applied before the path lookup:
    1. behavior instance -> its backing script
    2. scriptable data instance -> its backing script
    3. (scene context only) instanced copy -> its stored origin

    A value without a persisted path resolves to None. Host lookup errors
    also resolve to None; they never propagate.
    """

    def __init__(self, host: AssetHost):
        self.host = host
        self._logger = logging.getLogger("ReferenceResolver")

    def resolve(self, value: Any, scene_context: bool = False) -> Optional[str]:
        if value is None:
            return None
        try:
            if not self.host.is_asset_object(value):
                return None
            target = self._substitute(value, scene_context)
            if target is None:
                return None
            path = self.host.path_of(target)
            if not path:
                self._logger.debug(f"No stored path for {target!r}, skipping")
                return None
            ref_id = self.host.path_to_id(path)
        except Exception as e:
            self._logger.debug(f"Could not resolve {value!r}: {e}")
            return None
        return ref_id or None

    def _substitute(self, value: Any, scene_context: bool) -> Optional[Any]:
        if self.host.is_behavior(value) or self.host.is_scriptable(value):
            script = self.host.backing_script_of(value)
            self._logger.debug(f"Substituted {value!r} with script {script!r}")
            return script
        if scene_context:
            origin = self.host.origin_of(value)
            if origin is not None:
                self._logger.debug(f"Substituted instance {value!r} with origin {origin!r}")
                return origin
        return value
