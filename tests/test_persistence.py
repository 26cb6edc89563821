import json

import pytest

from voxelplace.core.config import WorldConfig
from voxelplace.core.types import Vec3
from voxelplace.persistence import SaveSlotStore
from voxelplace.snapshot import PlacementRecord, PredefinedShape, WorldSnapshot
from voxelplace.utils.display import LiveLogger


@pytest.fixture
def store(tmp_path):
    return SaveSlotStore(WorldConfig(save_dir=str(tmp_path / "saves")), LiveLogger(verbose=False))


@pytest.fixture
def snapshot():
    return WorldSnapshot(
        world_bounds=Vec3(8, 4, 8),
        placements=[PlacementRecord(PredefinedShape("P_Mono"), Vec3(1, 0, 1), 0, (0.5, 0.5, 0.5))],
    )


def test_slot_paths(store, tmp_path):
    assert store.slot_path(3).name == "save_slot_03.json"
    assert store.slot_path(0) == store.slot_path(1)
    assert store.slot_path(-4).name == "save_slot_01.json"


def test_save_and_load(store, snapshot):
    path = store.save(2, snapshot)

    assert path is not None and path.exists()
    assert store.exists(2)
    assert not store.exists(3)

    data = json.loads(path.read_text())
    assert data["version"] == 1
    assert data["world_bounds"] == [8, 4, 8]

    loaded = store.load(2)
    assert loaded.placements == snapshot.placements
    assert loaded.saved_at == snapshot.saved_at
    assert store.timestamp(2) == snapshot.saved_at
    assert len(snapshot.saved_at) == len("2024-01-01 12:00:00")


def test_missing_slot(store):
    assert store.load(5) is None
    assert store.timestamp(5) is None
    assert not store.delete(5)
    assert store.logger.messages("warning")


def test_corrupt_slot_is_reported_not_raised(store):
    path = store.slot_path(1)
    path.parent.mkdir(parents=True)
    path.write_text("{ not json")
    assert store.load(1) is None
    assert store.logger.messages("error")

    path.write_text(json.dumps({"world_bounds": [1, 2]}))
    assert store.load(1) is None


def test_slot_with_wrong_value_types_is_reported_not_raised(store):
    path = store.slot_path(1)
    path.parent.mkdir(parents=True)

    for payload in ({"world_bounds": 5, "placements": []},
                    {"world_bounds": [4, 4, 4], "version": [1]}):
        path.write_text(json.dumps(payload))
        assert store.load(1) is None

    assert len(store.logger.messages("error")) == 2


def test_delete(store, snapshot):
    store.save(1, snapshot)
    assert store.delete(1)
    assert not store.exists(1)


def test_unwritable_save_dir_returns_none(tmp_path, snapshot):
    blocker = tmp_path / "file"
    blocker.write_text("")
    store = SaveSlotStore(WorldConfig(save_dir=str(blocker / "saves")), LiveLogger(verbose=False))
    assert store.save(1, snapshot) is None
    assert store.logger.messages("error")
