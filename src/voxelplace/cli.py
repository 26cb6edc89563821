"""
Command-line interface for voxelplace.

Generates shapes, populates and saves worlds, prints and renders saved worlds,
and runs a line-driven placement session against a saved world.
"""

import argparse
import random
import sys
from typing import List, Optional

from voxelplace.core.config import (
    Config, SpawnMode, create_default_config, load_config, validate_config
)
from voxelplace.core.types import Vec3
from voxelplace.interaction.controller import FeedbackReport, FrameInput, PlacementController, ViewRay
from voxelplace.interaction.raypick import VoxelRayPicker
from voxelplace.interaction.session import HoldState
from voxelplace.persistence import SaveSlotStore
from voxelplace.shapes.generator import ShapeGenerator
from voxelplace.shapes.spawner import Spawner
from voxelplace.utils.display import LiveLogger, StatusDisplay
from voxelplace.world import World


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="voxelplace: pick up, rotate and place polycubes on a voxel grid",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create default configuration
  voxelplace create-config --output voxelplace.yaml

  # Generate a few procedural shapes
  voxelplace generate --count 5 --seed 7

  # Populate a world and save it to slot 1
  voxelplace spawn --config voxelplace.yaml --slot 1

  # Inspect, render or play a saved world
  voxelplace show --slot 1
  voxelplace render --slot 1 --output world.png
  voxelplace play --slot 1
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    config_parser = subparsers.add_parser("create-config", help="Create default configuration file")
    config_parser.add_argument("--output", "-o", default="voxelplace.yaml", help="Output configuration file")

    validate_parser = subparsers.add_parser("validate-config", help="Validate configuration file")
    validate_parser.add_argument("config", help="Configuration file to validate")
    validate_parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")

    generate_parser = subparsers.add_parser("generate", help="Generate procedural shapes")
    generate_parser.add_argument("--config", "-c", help="Path to configuration file")
    generate_parser.add_argument("--count", "-n", type=int, default=3, help="Number of shapes")
    generate_parser.add_argument("--cubes", type=int, help="Fixed cube count per shape")
    generate_parser.add_argument("--seed", type=int, help="Random seed")

    spawn_parser = subparsers.add_parser("spawn", help="Populate a world and save it")
    spawn_parser.add_argument("--config", "-c", help="Path to configuration file")
    spawn_parser.add_argument("--slot", type=int, default=1, help="Save slot")
    spawn_parser.add_argument("--mode", choices=[m.value for m in SpawnMode], help="Override spawn mode")
    spawn_parser.add_argument("--seed", type=int, help="Random seed")
    spawn_parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")

    show_parser = subparsers.add_parser("show", help="Print a saved world")
    show_parser.add_argument("--config", "-c", help="Path to configuration file")
    show_parser.add_argument("--slot", type=int, default=1, help="Save slot")

    render_parser = subparsers.add_parser("render", help="Render a saved world to an image")
    render_parser.add_argument("--config", "-c", help="Path to configuration file")
    render_parser.add_argument("--slot", type=int, default=1, help="Save slot")
    render_parser.add_argument("--output", "-o", default="world.png", help="Output image file")
    render_parser.add_argument("--dpi", type=int, default=100, help="Image resolution")

    play_parser = subparsers.add_parser("play", help="Interactive placement session")
    play_parser.add_argument("--config", "-c", help="Path to configuration file")
    play_parser.add_argument("--slot", type=int, default=1, help="Save slot to load and save")
    play_parser.add_argument("--seed", type=int, help="Random seed when spawning a fresh world")
    play_parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")

    return parser


def _load_and_validate_config(args, logger: LiveLogger) -> Optional[Config]:
    """Load the configuration (defaults when no file is given) and report issues."""
    path = getattr(args, "config", None)
    if not path:
        return Config()

    try:
        config = load_config(path)
    except FileNotFoundError:
        logger.log_error(f"Configuration file not found: {path}")
        return None
    except ValueError as e:
        logger.log_error(f"Invalid configuration: {e}")
        return None

    issues = validate_config(config)
    errors = [issue for issue in issues if issue.startswith("ERROR")]
    for issue in issues:
        if issue.startswith("ERROR"):
            logger.log_error(issue.replace("ERROR: ", ""))
        else:
            logger.log_warning(issue.replace("WARNING: ", ""))
    if errors:
        return None
    return config


def _make_rng(config: Config, args) -> random.Random:
    seed = getattr(args, "seed", None)
    return random.Random(seed if seed is not None else config.seed)


def _load_world(config: Config, slot: int, logger: LiveLogger) -> Optional[World]:
    store = SaveSlotStore(config.world, logger)
    snapshot = store.load(slot)
    if snapshot is None:
        return None
    try:
        world = World.from_config(config, logger=logger)
    except (FileNotFoundError, ValueError) as e:
        logger.log_error(f"Failed to load shape library: {e}")
        return None
    world.import_snapshot(snapshot)
    return world


def _world_summary(world: World) -> dict:
    bounds = world.bounds
    return {
        "bounds": bounds.to_tuple(),
        "shapes": len(world),
        "occupied cells": len(world.grid),
    }


def create_config_command(args) -> int:
    """Execute create-config command."""
    logger = LiveLogger(verbose=True)
    try:
        create_default_config(args.output)
    except OSError as e:
        logger.log_error(f"Failed to write configuration: {e}")
        return 1
    logger.log_result(f"Configuration written to {args.output}")
    return 0


def validate_config_command(args) -> int:
    """Execute validate-config command."""
    logger = LiveLogger(verbose=True)
    try:
        config = load_config(args.config)
    except FileNotFoundError:
        logger.log_error(f"Configuration file not found: {args.config}")
        return 1
    except ValueError as e:
        logger.log_error(f"Invalid configuration: {e}")
        return 1

    issues = validate_config(config)
    if not issues:
        logger.log_result("Configuration is valid")
        return 0

    StatusDisplay.print_section("Configuration Issues")
    StatusDisplay.print_lines(issues)
    has_errors = any(issue.startswith("ERROR") for issue in issues)
    if has_errors or args.strict:
        return 1
    return 0


def generate_command(args) -> int:
    """Execute generate command."""
    logger = LiveLogger(verbose=True)
    config = _load_and_validate_config(args, logger)
    if config is None:
        return 1

    generator = ShapeGenerator(config.generator, _make_rng(config, args))
    StatusDisplay.print_header("Procedural Shapes")

    failures = 0
    for i in range(args.count):
        definition = generator.create_definition(i, cube_count=args.cubes)
        if definition is None:
            failures += 1
            logger.log_warning(f"Shape {i + 1}: generation failed")
            continue

        heights = [c.y for c in definition.cells]
        StatusDisplay.print_section(definition.id)
        StatusDisplay.print_results({
            "cubes": definition.size,
            "height": max(heights) - min(heights) + 1,
        })
        StatusDisplay.print_lines(str(c.to_tuple()) for c in definition.cells)

    return 1 if failures == args.count else 0


def spawn_command(args) -> int:
    """Execute spawn command."""
    logger = LiveLogger(verbose=getattr(args, "verbose", False))
    config = _load_and_validate_config(args, logger)
    if config is None:
        return 1
    if args.mode:
        config.spawner.mode = SpawnMode(args.mode)

    try:
        world = World.from_config(config, logger=logger)
    except (FileNotFoundError, ValueError) as e:
        logger.log_error(f"Failed to load shape library: {e}")
        return 1

    StatusDisplay.print_config({
        "size": config.world.size,
        "mode": config.spawner.mode.value,
        "shapes": f"{config.spawner.min_spawn_count}..{config.spawner.max_spawn_count}",
        "seed": args.seed if args.seed is not None else config.seed,
    }, title="Spawn Settings")

    logger.log_step_start(1, "Populate world")
    spawner = Spawner(world, config.spawner, config.generator, _make_rng(config, args), logger)
    report = spawner.spawn_initial_set()
    logger.log_step_end(1, f"{report.placed}/{report.target} shape(s) placed", success=report.complete)

    StatusDisplay.print_results({
        "target": report.target,
        "placed": report.placed,
        "attempts": report.attempts,
        "complete": report.complete,
    }, title="Spawn")

    path = SaveSlotStore(config.world, logger).save(args.slot, world.export_snapshot())
    if path is None:
        return 1
    StatusDisplay.print_status(f"World saved to {path}", "success")
    return 0


def show_command(args) -> int:
    """Execute show command."""
    logger = LiveLogger(verbose=True)
    config = _load_and_validate_config(args, logger)
    if config is None:
        return 1

    world = _load_world(config, args.slot, logger)
    if world is None:
        return 1

    StatusDisplay.print_header(f"Slot {args.slot}")
    StatusDisplay.print_results(_world_summary(world), title="World")
    StatusDisplay.print_section("Shapes")
    for index, inst in enumerate(world.instances, start=1):
        print(f"  {index:>3}  {inst.instance_id:<32} pivot={inst.pivot.to_tuple()} rot={inst.rotation}")
    StatusDisplay.print_section("Layers")
    from voxelplace.visualizer import layer_view
    StatusDisplay.print_lines(layer_view(world))
    return 0


def render_command(args) -> int:
    """Execute render command."""
    logger = LiveLogger(verbose=True)
    config = _load_and_validate_config(args, logger)
    if config is None:
        return 1

    world = _load_world(config, args.slot, logger)
    if world is None:
        return 1

    from voxelplace.visualizer import render_world_image
    image = render_world_image(world, dpi=args.dpi, title=f"Slot {args.slot}")
    try:
        image.save(args.output)
    except OSError as e:
        logger.log_error(f"Failed to write image: {e}")
        return 1
    logger.log_result(f"Rendered {len(world)} shape(s) to {args.output}")
    return 0


class PlaySession:
    """
    Line-driven placement session with a top-down camera.

    ``aim x z`` points the camera straight down at a column; the other commands
    feed one frame of input to the controller and then let the held shape
    settle.
    """

    CAMERA_HEIGHT = 3.0
    FRAME_DT = 1.0 / 60.0
    MAX_SETTLE_FRAMES = 600

    BUTTON_COMMANDS = {
        "pick": "pick",
        "place": "place",
        "cancel": "cancel",
    }
    ROTATE_BUTTONS = {"x": "rotate_x", "y": "rotate_y", "z": "rotate_z"}

    def __init__(self, world: World, config: Config, store: SaveSlotStore, slot: int,
                 logger: LiveLogger):
        self.world = world
        self.config = config
        self.store = store
        self.slot = slot
        self.logger = logger
        self.controller = PlacementController(
            world.grid, VoxelRayPicker(world), world.get_instance, config.interaction, logger
        )
        self.aim = Vec3(world.bounds.x // 2, 0, world.bounds.z // 2)
        self.last_report: Optional[FeedbackReport] = None

    def view(self) -> ViewRay:
        origin = (self.aim.x + 0.5, self.world.bounds.y + self.CAMERA_HEIGHT, self.aim.z + 0.5)
        return ViewRay(origin=origin, direction=(0.0, -1.0, 0.0))

    def step(self, pressed=()) -> FeedbackReport:
        frame = FrameInput.from_pressed(self.view(), pressed)
        self.last_report = self.controller.tick(frame, self.FRAME_DT)
        return self.last_report

    def settle(self) -> List:
        """Run empty frames until the held shape has caught up with its target."""
        events = []
        for _ in range(self.MAX_SETTLE_FRAMES):
            report = self.step()
            events.extend(report.events)
            if report.state is not HoldState.ROTATING:
                transform = report.target_transform
                if transform is None:
                    break
                target = transform.pivot
                at_rest = all(abs(p - (c + 0.5)) < 1e-9 for p, c in zip(transform.position, target.to_tuple()))
                if at_rest:
                    break
        return events

    def press(self, button: str) -> List:
        report = self.step([button])
        return report.events + self.settle()

    def describe(self) -> List[str]:
        report = self.last_report or self.step()
        lines = [f"aim: x={self.aim.x} z={self.aim.z}", f"state: {report.state.value}"]
        if report.hovered_shape_id:
            lines.append(f"hovering: {report.hovered_shape_id}")
        held = self.controller.held_shape
        if held is not None and report.target_transform is not None:
            t = report.target_transform
            lines.append(f"holding: {held.instance_id}")
            lines.append(f"target: pivot={t.pivot.to_tuple()} rot={t.rotation} valid={report.valid}")
        return lines

    def save(self, slot: Optional[int] = None) -> bool:
        snapshot = self.world.export_snapshot(self.controller.resting_overrides())
        return self.store.save(slot or self.slot, snapshot) is not None

    def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the session should end."""
        parts = line.strip().lower().split()
        if not parts:
            return True
        command = parts[0]

        if command in ("quit", "exit"):
            return False
        elif command == "help":
            self.show_help()
        elif command == "aim":
            if len(parts) != 3:
                print("Usage: aim <x> <z>")
            else:
                self.aim = Vec3(int(parts[1]), 0, int(parts[2]))
                self.step()
                self._print_events(self.settle())
                StatusDisplay.print_lines(self.describe())
        elif command in self.BUTTON_COMMANDS:
            self._print_events(self.press(self.BUTTON_COMMANDS[command]))
            StatusDisplay.print_lines(self.describe())
        elif command == "rotate":
            if len(parts) != 2 or parts[1] not in self.ROTATE_BUTTONS:
                print("Usage: rotate <x|y|z>")
            else:
                self._print_events(self.press(self.ROTATE_BUTTONS[parts[1]]))
                StatusDisplay.print_lines(self.describe())
        elif command == "state":
            StatusDisplay.print_lines(self.describe())
        elif command == "view":
            from voxelplace.visualizer import layer_view
            StatusDisplay.print_lines(layer_view(self.world))
        elif command == "save":
            slot = int(parts[1]) if len(parts) > 1 else None
            self.save(slot)
        else:
            print(f"Unknown command: {command}")
            print("Type 'help' for commands")
        return True

    def _print_events(self, events):
        for event in events:
            StatusDisplay.print_status(event.value.replace("_", " "), "info")

    @staticmethod
    def show_help():
        print("""
Available commands:
  aim <x> <z>             - Point the top-down camera at a column
  pick                    - Pick up the shape under the camera
  rotate <x|y|z>          - Turn the held shape a quarter turn
  place                   - Place the held shape at its target
  cancel                  - Return the held shape to where it was picked up
  state                   - Show the session state
  view                    - Show the world layer by layer
  save [slot]             - Save the world (a held shape is saved where it was picked up)
  quit/exit               - Leave the session
        """)

    def run(self):
        print("=== voxelplace ===")
        print("Type 'help' for commands")
        while True:
            try:
                line = input("\n> ")
            except EOFError:
                break
            except KeyboardInterrupt:
                print("\nUse 'quit' to exit")
                continue
            try:
                if not self.execute(line):
                    break
            except ValueError as e:
                print(f"Error: {e}")


def play_command(args) -> int:
    """Execute play command."""
    logger = LiveLogger(verbose=getattr(args, "verbose", False))
    config = _load_and_validate_config(args, logger)
    if config is None:
        return 1

    store = SaveSlotStore(config.world, logger)
    try:
        world = World.from_config(config, logger=logger)
    except (FileNotFoundError, ValueError) as e:
        logger.log_error(f"Failed to load shape library: {e}")
        return 1

    snapshot = store.load(args.slot) if store.exists(args.slot) else None
    if snapshot is not None:
        logger.log_info(f"Loading slot {args.slot}")
        world.import_snapshot(snapshot)
    else:
        logger.log_info(f"Slot {args.slot} is empty; spawning a new world")
        Spawner(world, config.spawner, config.generator, _make_rng(config, args), logger).spawn_initial_set()

    PlaySession(world, config, store, args.slot, logger).run()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    try:
        parser = create_parser()
        argv = sys.argv[1:] if argv is None else argv

        if not argv:
            parser.print_help()
            return 1

        args = parser.parse_args(argv)

        command_handlers = {
            "create-config": create_config_command,
            "validate-config": validate_config_command,
            "generate": generate_command,
            "spawn": spawn_command,
            "show": show_command,
            "render": render_command,
            "play": play_command,
        }

        handler = command_handlers.get(args.command)
        if handler:
            return handler(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
