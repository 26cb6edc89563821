import pytest

from voxelplace.cli import PlaySession, main
from voxelplace.core.config import Config, WorldConfig
from voxelplace.core.types import Vec3
from voxelplace.interaction.session import HoldState
from voxelplace.persistence import SaveSlotStore
from voxelplace.world import World


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "voxelplace.yaml"
    path.write_text(
        "world:\n"
        "  size: [8, 4, 8]\n"
        f"  save_dir: {tmp_path / 'saves'}\n"
        "spawner:\n"
        "  min_spawn_count: 3\n"
        "  max_spawn_count: 3\n"
    )
    return str(path)


def test_no_arguments_prints_help():
    assert main([]) == 1


def test_create_and_validate_config(tmp_path):
    path = tmp_path / "out.yaml"
    assert main(["create-config", "--output", str(path)]) == 0
    assert path.exists()
    assert main(["validate-config", str(path)]) == 0
    assert main(["validate-config", str(tmp_path / "missing.yaml")]) == 1


def test_generate(capsys):
    assert main(["generate", "--count", "2", "--cubes", "4", "--seed", "1"]) == 0
    out = capsys.readouterr().out
    assert "R_01_N4" in out
    assert "R_02_N4" in out


def test_spawn_show_render(config_path, tmp_path, capsys):
    assert main(["spawn", "--config", config_path, "--slot", "2", "--seed", "3"]) == 0
    assert (tmp_path / "saves" / "save_slot_02.json").exists()

    assert main(["show", "--config", config_path, "--slot", "2"]) == 0
    out = capsys.readouterr().out
    assert "Layer y=0:" in out
    assert "Polycube_Load_01_" in out

    image = tmp_path / "world.png"
    assert main(["render", "--config", config_path, "--slot", "2", "--output", str(image), "--dpi", "40"]) == 0
    assert image.exists()


def test_show_missing_slot_fails(config_path):
    assert main(["show", "--config", config_path, "--slot", "9"]) == 1


def test_missing_config_fails(tmp_path):
    assert main(["spawn", "--config", str(tmp_path / "nope.yaml")]) == 1


def test_play_session_moves_a_shape(tmp_path, domino, small_library, capsys):
    config = Config(world=WorldConfig(size=(4, 4, 4), save_dir=str(tmp_path / "saves")))
    world = World(bounds=(4, 4, 4), library=small_library)
    inst = world.add_instance(domino, Vec3(0, 0, 0))
    store = SaveSlotStore(config.world, world.logger)
    session = PlaySession(world, config, store, 1, world.logger)

    assert session.execute("aim 0 0")
    assert session.execute("pick")
    assert session.controller.state is HoldState.FLOATING

    session.execute("rotate y")
    assert session.controller.state is HoldState.FLOATING
    session.execute("rotate y")

    session.execute("aim 2 3")
    session.execute("place")
    assert session.controller.state is HoldState.IDLE
    assert inst.pivot == Vec3(2, 0, 3)
    assert set(world.grid.world_cells(domino, inst.pivot, inst.rotation)) == world.grid.occupied

    assert session.execute("save")
    assert store.exists(1)
    assert not session.execute("quit")

    out = capsys.readouterr().out
    assert "picked up" in out
    assert "placed" in out
