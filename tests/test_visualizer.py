import matplotlib.pyplot as plt
from PIL import Image

from voxelplace.core.types import Vec3
from voxelplace.visualizer import create_cube_vertices, layer_view, render_world_image, visualize_world


def test_cube_vertices_map_world_up_to_plot_z():
    v = create_cube_vertices(Vec3(1, 2, 3), size=1.0)
    assert v[:, 0].min() == 1.0 and v[:, 0].max() == 2.0
    assert v[:, 1].min() == 3.0 and v[:, 1].max() == 4.0
    assert v[:, 2].min() == 2.0 and v[:, 2].max() == 3.0


def test_visualize_world_returns_figure(world4, domino):
    inst = world4.add_instance(domino, Vec3(0, 0, 0))
    fig = visualize_world(world4, highlight=inst.instance_id)
    ax = fig.axes[0]
    assert ax.get_title() == "voxelplace world"
    assert len(ax.collections) == 1
    plt.close(fig)


def test_render_world_image(world4, mono):
    world4.add_instance(mono, Vec3(1, 1, 1))
    image = render_world_image(world4, dpi=40, figsize=(3, 3))
    assert isinstance(image, Image.Image)
    assert image.mode == "RGB"
    assert image.size[0] > 0


def test_layer_view(world4, domino, mono):
    world4.add_instance(domino, Vec3(0, 0, 0))
    world4.add_instance(mono, Vec3(3, 2, 3))

    lines = layer_view(world4)

    assert lines[0] == "Layer y=2:"
    assert lines[1] == "  .  .  .  2"
    assert "Layer y=0:" in lines
    assert lines[-1] == "  1  1  .  ."
