"""
Scan configuration.

Values come from the constructor or, through ``ScanSettings.from_env()``,
from the environment (a ``.env`` file is honored).
"""
import logging
import os
from typing import Dict, FrozenSet, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from assetrefs.scan.records import AssetKind

PACKAGE_LOGGERS = (
    "AssetGraphBuilder",
    "ObjectGraphTraverser",
    "ReferenceResolver",
    "AssetDependencyGraph",
    "ScanProgress",
    "InMemoryAssetHost",
)


def _split_suffixes(raw: Optional[str]) -> Optional[FrozenSet[str]]:
    if raw is None:
        return None
    items = [s.strip().lower() for s in raw.split(",") if s.strip()]
    return frozenset(s if s.startswith(".") else f".{s}" for s in items)


class ScanSettings(BaseModel):
    """Tunables for AssetGraphBuilder."""
    max_workers: int = Field(default=4, ge=1, description="Upper bound on concurrent scans in build_async")
    structure_suffixes: FrozenSet[str] = frozenset({".prefab", ".struct"})
    scene_suffixes: FrozenSet[str] = frozenset({".unity", ".scene"})
    state_machine_suffixes: FrozenSet[str] = frozenset({".controller"})
    log_level: str = "INFO"

    model_config = ConfigDict(frozen=True)

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_env(cls, **overrides) -> "ScanSettings":
        """Build settings from ASSETREFS_* environment variables."""
        load_dotenv(find_dotenv(usecwd=True))
        values: Dict[str, object] = {}
        if os.getenv("ASSETREFS_MAX_WORKERS"):
            values["max_workers"] = os.getenv("ASSETREFS_MAX_WORKERS")
        for field_name, env_name in (
            ("structure_suffixes", "ASSETREFS_STRUCTURE_SUFFIXES"),
            ("scene_suffixes", "ASSETREFS_SCENE_SUFFIXES"),
            ("state_machine_suffixes", "ASSETREFS_STATE_MACHINE_SUFFIXES"),
        ):
            suffixes = _split_suffixes(os.getenv(env_name))
            if suffixes is not None:
                values[field_name] = suffixes
        if os.getenv("ASSETREFS_LOG_LEVEL"):
            values["log_level"] = os.getenv("ASSETREFS_LOG_LEVEL")
        values.update(overrides)
        return cls(**values)

    def classify(self, path: str) -> AssetKind:
        """Pick the entry kind from the path suffix."""
        _, ext = os.path.splitext(path)
        ext = ext.lower()
        if ext in self.structure_suffixes:
            return AssetKind.STRUCTURE
        if ext in self.scene_suffixes:
            return AssetKind.SCENE
        if ext in self.state_machine_suffixes:
            return AssetKind.STATE_MACHINE
        return AssetKind.GENERIC

    def apply_logging(self) -> None:
        for name in PACKAGE_LOGGERS:
            logging.getLogger(name).setLevel(self.log_level)
