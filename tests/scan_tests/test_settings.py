"""
Tests for ScanSettings: defaults, environment loading and classification.
"""
import logging

import pytest
from pydantic import ValidationError

from assetrefs.scan import AssetKind, ScanSettings


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate from any real .env file and ASSETREFS_* variables."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "ASSETREFS_MAX_WORKERS",
        "ASSETREFS_STRUCTURE_SUFFIXES",
        "ASSETREFS_SCENE_SUFFIXES",
        "ASSETREFS_STATE_MACHINE_SUFFIXES",
        "ASSETREFS_LOG_LEVEL",
    ):
        # set then delete so the variable is removed again on teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestClassification:
    @pytest.mark.parametrize("path,kind", [
        ("Assets/Hero.prefab", AssetKind.STRUCTURE),
        ("A.struct", AssetKind.STRUCTURE),
        ("Levels/Main.unity", AssetKind.SCENE),
        ("B.scene", AssetKind.SCENE),
        ("Anim/Hero.controller", AssetKind.STATE_MACHINE),
        ("Data/Table.asset", AssetKind.GENERIC),
        ("README", AssetKind.GENERIC),
        ("HERO.PREFAB", AssetKind.STRUCTURE),
    ])
    def test_default_suffixes(self, path, kind):
        assert ScanSettings().classify(path) is kind


class TestEnvironment:
    def test_defaults(self, clean_env):
        settings = ScanSettings.from_env()
        assert settings.max_workers == 4
        assert settings.log_level == "INFO"
        assert ".prefab" in settings.structure_suffixes

    def test_values_from_environment(self, clean_env):
        clean_env.setenv("ASSETREFS_MAX_WORKERS", "8")
        clean_env.setenv("ASSETREFS_STRUCTURE_SUFFIXES", "blueprint, .tmpl")
        clean_env.setenv("ASSETREFS_LOG_LEVEL", "debug")
        settings = ScanSettings.from_env()
        assert settings.max_workers == 8
        assert settings.structure_suffixes == frozenset({".blueprint", ".tmpl"})
        assert settings.log_level == "DEBUG"
        assert settings.classify("x.blueprint") is AssetKind.STRUCTURE
        assert settings.classify("x.prefab") is AssetKind.GENERIC

    def test_dotenv_file(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("ASSETREFS_SCENE_SUFFIXES=.level\n")
        settings = ScanSettings.from_env()
        assert settings.scene_suffixes == frozenset({".level"})

    def test_overrides_win(self, clean_env):
        clean_env.setenv("ASSETREFS_MAX_WORKERS", "8")
        assert ScanSettings.from_env(max_workers=2).max_workers == 2

    def test_invalid_worker_count(self, clean_env):
        clean_env.setenv("ASSETREFS_MAX_WORKERS", "0")
        with pytest.raises(ValidationError):
            ScanSettings.from_env()

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            ScanSettings(log_level="chatty")


def test_apply_logging():
    ScanSettings(log_level="WARNING").apply_logging()
    assert logging.getLogger("ObjectGraphTraverser").level == logging.WARNING
    ScanSettings(log_level="INFO").apply_logging()
    assert logging.getLogger("AssetGraphBuilder").level == logging.INFO
