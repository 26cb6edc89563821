#!/usr/bin/env python3
"""Populate a world, move one shape with the placement controller, and render the result."""

from __future__ import annotations

import argparse
import random

from voxelplace.core.config import Config
from voxelplace.interaction.controller import FrameInput, PlacementController, ViewRay
from voxelplace.interaction.raypick import VoxelRayPicker
from voxelplace.interaction.session import HoldState
from voxelplace.shapes.spawner import Spawner
from voxelplace.utils.display import LiveLogger, StatusDisplay
from voxelplace.visualizer import render_world_image
from voxelplace.world import World


def top_down(x: int, z: int, height: float) -> ViewRay:
    return ViewRay(origin=(x + 0.5, height, z + 0.5), direction=(0.0, -1.0, 0.0))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scripted voxelplace session.")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    parser.add_argument("--output", default="scripted_session.png", help="Rendered image path")
    return parser


def main() -> int:
    args = build_parser().parse_args()
    logger = LiveLogger(verbose=True)

    config = Config()
    world = World.from_config(config, logger=logger)
    Spawner(world, config.spawner, config.generator, random.Random(args.seed), logger).spawn_initial_set()

    controller = PlacementController(
        world.grid, VoxelRayPicker(world), world.get_instance, config.interaction, logger
    )
    height = world.bounds.y + 3.0

    shape = world.instances[0]
    view = top_down(shape.pivot.x, shape.pivot.z, height)
    controller.tick(FrameInput(view=view, pick=True), 1 / 60)
    controller.tick(FrameInput(view=view, rotate_y=True), 1.0)

    target = top_down(world.bounds.x - 3, world.bounds.z - 3, height)
    report = controller.tick(FrameInput(view=target), 1.0)
    report = controller.tick(FrameInput(view=target, place=True), 1 / 60)
    if controller.state is not HoldState.IDLE:
        report = controller.tick(FrameInput(view=target, cancel=True), 1 / 60)

    StatusDisplay.print_results({
        "shape": shape.instance_id,
        "pivot": shape.pivot.to_tuple(),
        "events": ", ".join(e.value for e in report.events),
    }, title="Scripted Session")

    render_world_image(world, title="scripted session").save(args.output)
    logger.log_result(f"Saved render to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())


# python examples/scripted_session.py --seed 3 --output world.png
