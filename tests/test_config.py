import pytest
import yaml

from voxelplace.core.config import (
    Config, GeneratorConfig, InteractionConfig, SpawnerConfig, SpawnMode, WorldConfig,
    create_default_config, load_config, validate_config
)


def test_defaults():
    config = Config()
    assert config.world.size == (32, 16, 32)
    assert config.interaction.ray_distance == 200
    assert config.interaction.fallback_depth == 7
    assert config.interaction.rotate_duration == pytest.approx(0.12)
    assert config.generator.size_weights == [0, 1, 1, 1, 2, 7, 9, 10, 12, 12]
    assert config.spawner.mode is SpawnMode.PREDEFINED
    assert validate_config(config) == []


def test_invalid_values_raise():
    with pytest.raises(ValueError):
        WorldConfig(size=(0, 4, 4))
    with pytest.raises(ValueError):
        InteractionConfig(snap_epsilon=-1)
    with pytest.raises(ValueError):
        GeneratorConfig(min_cubes=0)
    with pytest.raises(ValueError):
        SpawnerConfig(min_spawn_count=5, max_spawn_count=2)
    with pytest.raises(ValueError):
        SpawnerConfig(mode="sideways")


def test_suspicious_values_warn():
    with pytest.warns(UserWarning):
        config = GeneratorConfig(min_cubes=5, max_cubes=3)
    assert config.max_cubes == 5
    with pytest.warns(UserWarning):
        WorldConfig(size=(200, 200, 200))


def test_default_config_file_round_trip(tmp_path):
    path = tmp_path / "voxelplace.yaml"
    created = create_default_config(str(path))
    loaded = load_config(str(path))
    assert loaded == created
    assert yaml.safe_load(path.read_text())["spawner"]["mode"] == "predefined"


def test_partial_config_file(tmp_path):
    path = tmp_path / "c.yaml"
    path.write_text(
        "world:\n  size: [8, 4, 8]\n"
        "spawner:\n  mode: procedural\n  max_spawn_count: 3\n  min_spawn_count: 1\n"
        "seed: 4\n"
    )
    config = load_config(str(path))
    assert config.world.size == (8, 4, 8)
    assert config.spawner.mode is SpawnMode.PROCEDURAL
    assert config.seed == 4
    assert config.generator.max_cubes == 9


def test_load_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))

    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    with pytest.raises(ValueError):
        load_config(str(empty))

    broken = tmp_path / "broken.yaml"
    broken.write_text("world: [unclosed\n")
    with pytest.raises(ValueError):
        load_config(str(broken))

    unknown = tmp_path / "unknown.yaml"
    unknown.write_text("world:\n  colour: red\n")
    with pytest.raises(ValueError):
        load_config(str(unknown))


def test_validate_config_reports_issues(tmp_path):
    config = Config(
        world=WorldConfig(size=(2, 1, 2)),
        generator=GeneratorConfig(max_cubes=9, size_weights=[1, 1]),
        spawner=SpawnerConfig(library_path=str(tmp_path / "nope.yaml")),
        interaction=InteractionConfig(ray_distance=5, fallback_depth=7),
    )
    issues = validate_config(config)
    assert any(i.startswith("ERROR") and "max_cubes" in i for i in issues)
    assert any(i.startswith("ERROR") and "library" in i for i in issues)
    assert any("Ground area" in i for i in issues)
    assert any("size_weights" in i for i in issues)
    assert any("fallback_depth" in i for i in issues)
