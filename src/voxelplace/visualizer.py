"""
Debug rendering of a world with matplotlib.

World ``y`` is up, so it is drawn on the plot's vertical axis: a world cell
``(x, y, z)`` occupies plot coordinates ``(x, z, y)``.
"""

import io
import os
from typing import Iterable, List, Optional, Tuple

os.environ.setdefault("MPLBACKEND", "Agg")

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import to_rgba
from mpl_toolkits.mplot3d.art3d import Poly3DCollection
from PIL import Image

from voxelplace.core.types import Vec3


def create_cube_vertices(cell: Vec3, size: float = 0.9) -> np.ndarray:
    """
    Corners of a slightly shrunken cube centred in a grid cell.

    Args:
        cell: Grid cell (world coordinates)
        size: Edge length, below 1 to leave a visible gap between cubes

    Returns:
        8x3 vertex array in plot coordinates
    """
    cx, cy, cz = cell.x + 0.5, cell.z + 0.5, cell.y + 0.5
    d = size / 2.0

    return np.array([
        [cx - d, cy - d, cz - d],
        [cx + d, cy - d, cz - d],
        [cx + d, cy + d, cz - d],
        [cx - d, cy + d, cz - d],
        [cx - d, cy - d, cz + d],
        [cx + d, cy - d, cz + d],
        [cx + d, cy + d, cz + d],
        [cx - d, cy + d, cz + d],
    ])


def create_cube_faces(vertices: np.ndarray) -> List[List[np.ndarray]]:
    return [
        [vertices[0], vertices[1], vertices[2], vertices[3]],  # bottom
        [vertices[4], vertices[5], vertices[6], vertices[7]],  # top
        [vertices[0], vertices[1], vertices[5], vertices[4]],
        [vertices[2], vertices[3], vertices[7], vertices[6]],
        [vertices[0], vertices[3], vertices[7], vertices[4]],
        [vertices[1], vertices[2], vertices[6], vertices[5]],
    ]


def draw_cells(ax, cells: Iterable[Vec3], color, alpha: float = 0.85,
               edge_color: str = 'black', linewidth: float = 0.5):
    """Draw a group of cubes as one Poly3DCollection."""
    faces = []
    for cell in cells:
        faces.extend(create_cube_faces(create_cube_vertices(cell)))
    if not faces:
        return

    ax.add_collection3d(Poly3DCollection(
        faces,
        facecolors=to_rgba(color, alpha),
        edgecolors=edge_color,
        linewidths=linewidth,
    ))


def draw_world_frame(ax, bounds: Vec3, color: str = 'gray', linewidth: float = 2.0):
    """Wireframe of the world box."""
    A, B, C = bounds.x, bounds.z, bounds.y

    vertices = np.array([
        [0, 0, 0], [A, 0, 0], [A, B, 0], [0, B, 0],
        [0, 0, C], [A, 0, C], [A, B, C], [0, B, C],
    ])
    edges = [
        [0, 1], [1, 2], [2, 3], [3, 0],
        [4, 5], [5, 6], [6, 7], [7, 4],
        [0, 4], [1, 5], [2, 6], [3, 7],
    ]

    for edge in edges:
        points = vertices[edge]
        ax.plot3D(*points.T, color=color, linewidth=linewidth, alpha=0.3)


def visualize_world(world, title: str = "voxelplace world",
                    figsize: Tuple[int, int] = (8, 8),
                    highlight: Optional[str] = None,
                    elev: float = 25, azim: float = 45) -> plt.Figure:
    """
    Draw every resting shape in the world.

    Args:
        world: The ``World`` to draw
        title: Figure title
        figsize: Figure size in inches
        highlight: Instance id drawn with a red outline (e.g. the hovered shape)
        elev: Camera elevation
        azim: Camera azimuth

    Returns:
        matplotlib Figure
    """
    bounds = world.bounds
    fig = plt.figure(figsize=figsize)
    ax = fig.add_subplot(111, projection='3d')

    draw_world_frame(ax, bounds)

    for inst in world.instances:
        if not inst.is_available():
            continue
        cells = world.grid.world_cells(inst.definition, inst.pivot, inst.rotation)
        alpha = 0.85 if inst.collidable else 0.35
        edge = 'red' if inst.instance_id == highlight else 'black'
        draw_cells(ax, cells, inst.color, alpha=alpha, edge_color=edge)

    ax.set_xlim(0, bounds.x)
    ax.set_ylim(0, bounds.z)
    ax.set_zlim(0, bounds.y)
    ax.set_box_aspect((bounds.x, bounds.z, bounds.y))
    ax.set_xlabel('X')
    ax.set_ylabel('Z')
    ax.set_zlabel('Y (up)')
    ax.set_title(title)
    ax.view_init(elev=elev, azim=azim)

    plt.tight_layout()
    return fig


def figure_to_image(fig: plt.Figure, dpi: int = 100) -> Image.Image:
    """Rasterise a figure to an RGB Pillow image and close it."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=dpi)
    buf.seek(0)
    img = Image.open(buf).convert("RGB")
    plt.close(fig)
    return img


def render_world_image(world, dpi: int = 100, **kwargs) -> Image.Image:
    """``visualize_world`` rendered straight to a Pillow image."""
    return figure_to_image(visualize_world(world, **kwargs), dpi=dpi)


def layer_view(world) -> List[str]:
    """
    Text view of the world, one block per ``y`` layer from the top down.

    Occupied cells show the 1-based index of the owning shape in
    ``world.instances``; free cells show ``.``.
    """
    bounds = world.bounds
    owner = {}
    for index, inst in enumerate(world.instances, start=1):
        if not inst.is_available() or not inst.collidable:
            continue
        for cell in world.grid.world_cells(inst.definition, inst.pivot, inst.rotation):
            owner[cell] = index

    lines = []
    for y in range(bounds.y - 1, -1, -1):
        rows = []
        for z in range(bounds.z - 1, -1, -1):
            row = ""
            for x in range(bounds.x):
                idx = owner.get(Vec3(x, y, z))
                row += f"{idx:>3}" if idx is not None else "  ."
            rows.append(row)
        if any(r.strip(" .") for r in rows):
            lines.append(f"Layer y={y}:")
            lines.extend(rows)
    return lines
