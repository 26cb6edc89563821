import numpy as np
import pytest

from voxelplace.core.types import Vec3
from voxelplace.interaction.raypick import VoxelRayPicker


@pytest.fixture
def picker(world4):
    return VoxelRayPicker(world4)


def test_top_down_ray_hits_shape_top(world4, picker, tri_l):
    inst = world4.add_instance(tri_l, Vec3(1, 0, 1))

    hit = picker.pick((1.5, 10.0, 1.5), (0.0, -1.0, 0.0), 200)

    assert hit.shape_id == inst.instance_id
    assert np.allclose(hit.point, [1.5, 2.0, 1.5])
    assert np.allclose(hit.normal, [0.0, 1.0, 0.0])


def test_side_ray_reports_face_normal(world4, picker, mono):
    inst = world4.add_instance(mono, Vec3(2, 0, 0))

    hit = picker.pick((-5.0, 0.5, 0.5), (1.0, 0.0, 0.0), 200)

    assert hit.shape_id == inst.instance_id
    assert np.allclose(hit.point, [2.0, 0.5, 0.5])
    assert np.allclose(hit.normal, [-1.0, 0.0, 0.0])


def test_ground_hit_when_no_shape(picker):
    hit = picker.pick((2.5, 6.0, 3.5), (0.0, -2.0, 0.0), 200)
    assert hit.shape_id is None
    assert np.allclose(hit.point, [2.5, 0.0, 3.5])
    assert np.allclose(hit.normal, [0.0, 1.0, 0.0])


def test_ground_outside_world_is_not_hit(picker):
    assert picker.pick((9.5, 6.0, 9.5), (0.0, -1.0, 0.0), 200) is None


def test_max_distance_limits_hits(world4, picker, mono):
    world4.add_instance(mono, Vec3(0, 0, 0))
    assert picker.pick((0.5, 10.0, 0.5), (0.0, -1.0, 0.0), 5) is None


def test_non_collidable_shapes_are_ignored(world4, picker, mono):
    inst = world4.add_instance(mono, Vec3(0, 0, 0))
    inst.set_collision_enabled(False)
    hit = picker.pick((0.5, 10.0, 0.5), (0.0, -1.0, 0.0), 200)
    assert hit.shape_id is None


def test_zero_direction(picker):
    assert picker.pick((0.5, 1.0, 0.5), (0.0, 0.0, 0.0), 200) is None
