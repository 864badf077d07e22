"""
Scan a small in-memory content tree and print the reference graph.

Run with ASSETREFS_LOG_LEVEL=DEBUG to see every resolved member.
"""
import asyncio
import logging

from assetrefs.scan import AssetGraphBuilder, LoggingProgressSink, ScanSettings
from assetrefs.scan.dependency import AssetDependencyGraph
from assetrefs.scan.memory_host import (
    AnimLayer,
    AnimState,
    Behaviour,
    DataAsset,
    InMemoryAssetHost,
    Material,
    Motion,
    Node,
    Renderer,
    Script,
    StateMachine,
    Texture,
    Transform,
    default_ignore_rules,
)

logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")


def build_content(host: InMemoryAssetHost) -> list:
    texture = Texture(name="bricks")
    host.add_asset("Textures/bricks.png", texture)
    material = Material(name="wall", texture=texture)
    host.add_asset("Materials/wall.mat", material)
    mover = Script(name="Mover")
    host.add_asset("Scripts/Mover.py", mover)

    wall = Node(name="Wall")
    wall.add_component(Transform())
    wall.add_component(Renderer(shared_materials=[material]))
    wall.add_component(Behaviour(script=mover))
    host.add_asset("Prefabs/Wall.prefab", wall)

    host.add_scene("Levels/Main.unity")
    host.place_instance("Levels/Main.unity", "Prefabs/Wall.prefab")
    host.place_instance("Levels/Main.unity", "Prefabs/Wall.prefab")

    run = Motion(name="run")
    host.add_asset("Anim/run.anim", run)
    host.add_asset("Anim/Hero.controller", StateMachine(layers=[AnimLayer(states=[AnimState(motion=run)])]))

    host.add_asset("Data/Palette.asset", DataAsset(refs=[material, texture]))

    return [
        "Prefabs/Wall.prefab",
        "Levels/Main.unity",
        "Anim/Hero.controller",
        "Materials/wall.mat",
        "Data/Palette.asset",
    ]


async def main() -> None:
    settings = ScanSettings.from_env()
    settings.apply_logging()

    host = InMemoryAssetHost()
    paths = build_content(host)
    builder = AssetGraphBuilder(host, default_ignore_rules(), settings)

    records = builder.build(paths, LoggingProgressSink())
    for record in records:
        print(record.model_dump_json())

    # same batch on the worker pool
    parallel = await builder.build_async(paths)
    assert [r.model_dump() for r in parallel] == [r.model_dump() for r in records]

    graph = AssetDependencyGraph.from_records(records)
    print("Scan order (referenced first):", graph.get_topological_sort())
    print("Not referenced by anything:", graph.unreferenced())


if __name__ == "__main__":
    asyncio.run(main())
