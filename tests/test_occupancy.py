import pytest

from voxelplace.core.occupancy import OccupancyGrid
from voxelplace.core.rotation import NUM_ROTATIONS, Axis, rotate_about_axis
from voxelplace.core.types import Vec3


def test_domino_at_origin_fits(grid4, domino):
    assert grid4.can_place(domino, Vec3(0, 0, 0), 0)
    assert set(grid4.world_cells(domino, Vec3(0, 0, 0), 0)) == {Vec3(0, 0, 0), Vec3(1, 0, 0)}


def test_domino_past_upper_bound_does_not_fit(grid4, domino):
    assert not grid4.can_place(domino, Vec3(3, 0, 0), 0)


def test_negative_cells_are_out_of_bounds(grid4, mono):
    assert not grid4.can_place(mono, Vec3(-1, 0, 0), 0)
    assert not grid4.in_bounds(Vec3(0, -1, 0))


def test_vertical_quarter_turn_moves_offset_onto_z(grid4, domino):
    r = rotate_about_axis(0, Axis.Y)
    cells = grid4.world_cells(domino, Vec3(1, 1, 1), r)
    assert cells == [Vec3(1, 1, 1), Vec3(1, 1, 0)]


def test_register_unregister_round_trip(grid4, tri_l, domino):
    grid4.register(domino, Vec3(0, 3, 0), 0)
    before = grid4.occupied

    for r in range(NUM_ROTATIONS):
        pivot = Vec3(1, 1, 1)
        if not grid4.can_place(tri_l, pivot, r):
            continue
        grid4.register(tri_l, pivot, r)
        grid4.unregister(tri_l, pivot, r)
        assert grid4.occupied == before


def test_overlap_is_rejected(grid4, domino, mono):
    grid4.register(domino, Vec3(0, 0, 0), 0)
    assert not grid4.can_place(mono, Vec3(1, 0, 0), 0)
    assert grid4.can_place(mono, Vec3(2, 0, 0), 0)


def test_placing_does_not_corrupt_unrelated_cells(grid4, domino, tri_l):
    assert grid4.can_place(tri_l, Vec3(2, 0, 2), 0)
    grid4.register(domino, Vec3(0, 0, 0), 0)
    assert grid4.can_place(tri_l, Vec3(2, 0, 2), 0)


def test_null_definition_is_a_no_op(grid4):
    grid4.register(None, Vec3(0, 0, 0), 0)
    grid4.unregister(None, Vec3(0, 0, 0), 0)
    assert len(grid4) == 0
    assert not grid4.can_place(None, Vec3(0, 0, 0), 0)
    assert grid4.world_cells(None, Vec3(0, 0, 0), 0) == []
    assert grid4.clamp_pivot_to_bounds(None, Vec3(9, 9, 9), 0) == Vec3(9, 9, 9)


def test_unregister_ignores_missing_cells(grid4, domino, mono):
    grid4.register(mono, Vec3(0, 0, 0), 0)
    grid4.unregister(domino, Vec3(0, 0, 0), 0)
    assert len(grid4) == 0


def test_register_is_unconditional(grid4, domino):
    grid4.register(domino, Vec3(3, 0, 0), 0)
    assert Vec3(4, 0, 0) in grid4


def test_occupied_is_a_read_only_copy(grid4, mono):
    grid4.register(mono, Vec3(1, 1, 1), 0)
    snapshot = grid4.occupied
    grid4.clear()
    assert Vec3(1, 1, 1) in snapshot
    assert len(grid4) == 0


def test_clamp_keeps_rotated_shape_inside(grid4, tri_l):
    for r in range(NUM_ROTATIONS):
        pivot = grid4.clamp_pivot_to_bounds(tri_l, Vec3(10, -5, 7), r)
        assert grid4.can_place(tri_l, pivot, r)


def test_clamp_is_idempotent(grid4, tri_l):
    for r in range(NUM_ROTATIONS):
        for raw in (Vec3(10, -5, 7), Vec3(-3, 20, 2), Vec3(1, 1, 1)):
            once = grid4.clamp_pivot_to_bounds(tri_l, raw, r)
            assert grid4.clamp_pivot_to_bounds(tri_l, once, r) == once


def test_clamp_leaves_inside_pivot_alone(grid4, domino):
    assert grid4.clamp_pivot_to_bounds(domino, Vec3(1, 2, 3), 0) == Vec3(1, 2, 3)


def test_inverted_clamp_resolves_to_floor(domino):
    grid = OccupancyGrid((1, 4, 4))
    assert grid.clamp_pivot_to_bounds(domino, Vec3(0, 1, 1), 0) == Vec3(0, 1, 1)
    assert grid.clamp_pivot_to_bounds(domino, Vec3(5, 1, 1), 0).x == 0


def test_rotated_extents(grid4, tri_l):
    lo, hi = grid4.rotated_extents(tri_l, 0)
    assert lo == Vec3(0, 0, 0)
    assert hi == Vec3(1, 1, 0)


def test_bounds_must_be_positive():
    with pytest.raises(ValueError):
        OccupancyGrid((0, 4, 4))
    with pytest.raises(ValueError):
        OccupancyGrid((4, -1, 4))


def test_resize_clears(grid4, mono):
    grid4.register(mono, Vec3(0, 0, 0), 0)
    grid4.resize((8, 8, 8))
    assert grid4.bounds == Vec3(8, 8, 8)
    assert len(grid4) == 0
    with pytest.raises(ValueError):
        grid4.resize((8, 0, 8))
