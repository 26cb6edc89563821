"""
Library of authored (predefined) polycube shapes.
"""

import random
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import yaml

from voxelplace.core.types import ShapeDefinition, ShapeOrigin, Vec3


DEFAULT_SHAPES = {
    "P_Mono": [[0, 0, 0]],
    "P_Domino": [[0, 0, 0], [1, 0, 0]],
    "P_TriI": [[0, 0, 0], [1, 0, 0], [2, 0, 0]],
    "P_TriL": [[0, 0, 0], [1, 0, 0], [0, 1, 0]],
    "P_Tower": [[0, 0, 0], [0, 1, 0], [0, 2, 0]],
    "P_TetI": [[0, 0, 0], [1, 0, 0], [2, 0, 0], [3, 0, 0]],
    "P_TetO": [[0, 0, 0], [1, 0, 0], [0, 0, 1], [1, 0, 1]],
    "P_TetT": [[0, 0, 0], [1, 0, 0], [2, 0, 0], [1, 1, 0]],
    "P_TetL": [[0, 0, 0], [1, 0, 0], [2, 0, 0], [2, 1, 0]],
    "P_TetS": [[0, 0, 0], [1, 0, 0], [1, 1, 0], [2, 1, 0]],
    "P_Tripod": [[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]],
    "P_Plus": [[0, 0, 0], [1, 0, 0], [-1, 0, 0], [0, 0, 1], [0, 0, -1]],
}


class ShapeLibrary:
    """Ordered collection of predefined shape definitions, addressable by id."""

    def __init__(self, definitions: Optional[Iterable[ShapeDefinition]] = None):
        self._definitions: List[ShapeDefinition] = []
        self._by_id: Dict[str, ShapeDefinition] = {}
        for definition in definitions or []:
            self.add(definition)

    def add(self, definition: ShapeDefinition):
        if definition.origin is not ShapeOrigin.PREDEFINED:
            raise ValueError(f"Only predefined shapes belong in a library, got '{definition.id}'")
        if definition.id in self._by_id:
            raise ValueError(f"Duplicate shape id '{definition.id}'")
        self._definitions.append(definition)
        self._by_id[definition.id] = definition

    @property
    def definitions(self) -> List[ShapeDefinition]:
        return list(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, shape_id: str) -> bool:
        return shape_id in self._by_id

    def get_definition_by_id(self, shape_id: Optional[str]) -> Optional[ShapeDefinition]:
        if not shape_id:
            return None
        return self._by_id.get(shape_id)

    def pick_definition(self, rng: random.Random, weight_by_size: bool = True,
                        weight_exponent: float = 2.0) -> Optional[ShapeDefinition]:
        """
        Draw a definition, favouring larger shapes when ``weight_by_size`` is set.

        Each shape weighs ``max(1, size) ** weight_exponent``.
        """
        if not self._definitions:
            return None

        if not weight_by_size:
            return self._definitions[rng.randrange(len(self._definitions))]

        weights = [max(1, d.size) ** weight_exponent for d in self._definitions]
        total = sum(weights)
        if total <= 0.0001:
            return self._definitions[rng.randrange(len(self._definitions))]

        r = rng.random() * total
        acc = 0.0
        for definition, weight in zip(self._definitions, weights):
            acc += weight
            if r <= acc:
                return definition

        return self._definitions[-1]


def default_library() -> ShapeLibrary:
    """Library of the built-in shapes."""
    return ShapeLibrary(
        ShapeDefinition.from_cells(shape_id, cells, origin=ShapeOrigin.PREDEFINED)
        for shape_id, cells in DEFAULT_SHAPES.items()
    )


def load_shape_library(path: str) -> ShapeLibrary:
    """
    Load predefined shapes from a YAML or JSON file.

    Expected layout::

        shapes:
          - id: P_Step
            cells: [[0, 0, 0], [1, 0, 0], [1, 1, 0]]

    Args:
        path: Library file path

    Returns:
        ShapeLibrary with the file's shapes, in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is malformed or a shape is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Shape library not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing shape library: {e}")

    if not isinstance(data, dict) or not isinstance(data.get("shapes"), list):
        raise ValueError("Shape library must contain a 'shapes' list")

    library = ShapeLibrary()
    for i, entry in enumerate(data["shapes"]):
        if not isinstance(entry, dict) or not entry.get("cells"):
            raise ValueError(f"Shape entry {i} has no cells")
        try:
            definition = ShapeDefinition(
                id=str(entry.get("id") or f"P_{i:02d}"),
                cells=tuple(Vec3.from_list(c) for c in entry["cells"]),
                origin=ShapeOrigin.PREDEFINED,
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid shape entry {i}: {e}")
        library.add(definition)

    return library
