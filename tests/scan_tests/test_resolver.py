"""
Tests for ReferenceResolver substitutions and best-effort failure handling.
"""
import pytest

from assetrefs.scan.resolver import ReferenceResolver
from assetrefs.scan.memory_host import (
    Behaviour,
    DataAsset,
    Node,
    Script,
    ScriptableData,
    Transform,
)


@pytest.fixture
def resolver(host):
    return ReferenceResolver(host)


@pytest.fixture
def script(host):
    script = Script(name="Mover")
    host.add_asset("Mover.py", script)
    return script


class TestPlainResolution:
    def test_none_resolves_to_none(self, resolver):
        assert resolver.resolve(None) is None

    def test_non_asset_values_resolve_to_none(self, resolver):
        assert resolver.resolve("X.asset") is None
        assert resolver.resolve(42) is None
        assert resolver.resolve([DataAsset()]) is None

    def test_stored_object_resolves_to_its_id(self, host, resolver):
        x = DataAsset(name="X")
        x_id = host.add_asset("X.asset", x)
        assert resolver.resolve(x) == x_id

    def test_transient_object_resolves_to_none(self, resolver):
        assert resolver.resolve(DataAsset(name="procedural")) is None

    def test_sub_object_resolves_to_owning_asset(self, host, resolver):
        root = Node(name="A")
        transform = root.add_component(Transform())
        a_id = host.add_asset("A.struct", root)
        assert resolver.resolve(transform) == a_id

    def test_empty_id_is_dropped(self, host, resolver, monkeypatch):
        x = DataAsset()
        host.add_asset("X.asset", x)
        monkeypatch.setattr(host, "path_to_id", lambda path: "")
        assert resolver.resolve(x) is None

    def test_host_errors_degrade_to_none(self, host, resolver, monkeypatch):
        x = DataAsset()
        host.add_asset("X.asset", x)

        def boom(path):
            raise RuntimeError("identifier service down")

        monkeypatch.setattr(host, "path_to_id", boom)
        assert resolver.resolve(x) is None


class TestScriptSubstitution:
    def test_behavior_resolves_to_script(self, resolver, script, host):
        behaviour = Behaviour(script=script)
        assert resolver.resolve(behaviour) == host.path_to_id("Mover.py")

    def test_scriptable_resolves_to_script(self, resolver, script, host):
        data = ScriptableData(script=script)
        host.add_asset("Settings.asset", data)
        assert resolver.resolve(data) == host.path_to_id("Mover.py")

    def test_behavior_and_scriptable_share_identity(self, resolver, script):
        assert resolver.resolve(Behaviour(script=script)) == resolver.resolve(ScriptableData(script=script))

    def test_behavior_without_script_resolves_to_none(self, resolver):
        assert resolver.resolve(Behaviour()) is None

    def test_substitution_applies_before_scene_origin(self, host, resolver, script):
        root = Node(name="A")
        root.add_component(Behaviour(script=script))
        host.add_asset("A.struct", root)
        host.add_scene("B.scene")
        copy = host.place_instance("B.scene", "A.struct")
        assert resolver.resolve(copy.components[0], scene_context=True) == host.path_to_id("Mover.py")


class TestSceneOrigin:
    @pytest.fixture
    def placed(self, host):
        root = Node(name="A")
        root.add_component(Transform())
        a_id = host.add_asset("A.struct", root)
        host.add_scene("B.scene")
        return a_id, host.place_instance("B.scene", "A.struct")

    def test_instance_resolves_to_origin_in_scene(self, resolver, placed):
        a_id, copy = placed
        assert resolver.resolve(copy, scene_context=True) == a_id
        assert resolver.resolve(copy.components[0], scene_context=True) == a_id

    def test_instance_unchanged_outside_scene(self, resolver, placed):
        _, copy = placed
        # the copy itself has no stored path
        assert resolver.resolve(copy, scene_context=False) is None

    def test_non_instance_unchanged_in_scene(self, host, resolver):
        x = DataAsset()
        x_id = host.add_asset("X.asset", x)
        assert resolver.resolve(x, scene_context=True) == x_id
