# gateway_world/forest.py

"""
================================================================================
FOREST GENERATION
================================================================================
This module draws the two tree template shapes and places the forest around
the gateway. Templates and placements share one stream, and the templates are
drawn first, so the whole forest is fixed by the stream's starting state.

Data Contract:
---------------
- Inputs:
    - prng (SeededRandom), height_field, and the tree settings (count, spread,
      minimum distance from the centre).
- Outputs:
    - A Forest holding both templates and the placed instances.
- Side Effects: Advances the stream.
- Invariants: Trunk and foliage of the same tree always share one transform.
================================================================================
"""
import logging
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from . import placement
from .placement import PlacedInstance, PlacementConfig, VariantSpec
from .prng import SeededRandom

DECIDUOUS = "deciduous"
CONIFEROUS = "coniferous"


@dataclass(frozen=True)
class TreeTemplate:
    """
    Dimensions of one tree shape in local space (y up, base at the origin).
    The foliage is a sphere for deciduous trees and a cone for coniferous ones.
    """
    kind: str
    trunk_height: float
    trunk_radius_top: float
    trunk_radius_bottom: float
    foliage_radius: float
    foliage_height: float
    foliage_center: tuple[float, float, float]


def create_deciduous_template(prng: SeededRandom) -> TreeTemplate:
    """Draws a deciduous shape: trunk height, then the foliage x and z offsets."""
    trunk_height = prng.next_in_range(1.5, 2.5)
    trunk_radius = trunk_height * 0.1
    foliage_radius = trunk_height * 0.5
    offset_x = prng.next_in_range(-trunk_radius * 0.5, trunk_radius * 0.5)
    foliage_y = trunk_height + foliage_radius * 0.6
    offset_z = prng.next_in_range(-trunk_radius * 0.5, trunk_radius * 0.5)
    return TreeTemplate(
        kind=DECIDUOUS,
        trunk_height=trunk_height,
        trunk_radius_top=trunk_radius * 0.7,
        trunk_radius_bottom=trunk_radius,
        foliage_radius=foliage_radius,
        foliage_height=foliage_radius * 2.0,
        foliage_center=(offset_x, foliage_y, offset_z),
    )


def create_coniferous_template(prng: SeededRandom) -> TreeTemplate:
    """Draws a coniferous shape. Only the trunk height is random."""
    trunk_height = prng.next_in_range(2.0, 3.5)
    trunk_radius = trunk_height * 0.08
    cone_radius = trunk_height * 0.3
    cone_height = trunk_height * 0.9
    return TreeTemplate(
        kind=CONIFEROUS,
        trunk_height=trunk_height,
        trunk_radius_top=trunk_radius * 0.7,
        trunk_radius_bottom=trunk_radius,
        foliage_radius=cone_radius,
        foliage_height=cone_height,
        foliage_center=(0.0, trunk_height + cone_height / 2 - trunk_height * 0.1, 0.0),
    )


@dataclass(frozen=True)
class Forest:
    templates: dict[str, TreeTemplate]
    instances: list[PlacedInstance]

    def batches(self) -> dict[str, np.ndarray]:
        """
        Transform matrices per render batch. Each variant yields a trunk batch
        and a foliage batch holding identical matrices.
        """
        result = {}
        groups = placement.group_by_variant(self.instances)
        for kind in self.templates:
            matrices = placement.instance_matrices(groups.get(kind, []))
            result[f"{kind}_trunk"] = matrices
            result[f"{kind}_foliage"] = matrices.copy()
        return result


def tree_placement_config(
    tree_count: int = DEFAULTS.TREE_COUNT,
    spread: float = DEFAULTS.SPREAD,
    min_distance: float = DEFAULTS.MIN_DISTANCE_FROM_CENTER_TREES,
    max_attempts: int = DEFAULTS.MAX_PLACEMENT_ATTEMPTS
) -> PlacementConfig:
    """Deciduous trees take the lower half of the count, coniferous the rest."""
    deciduous_count = tree_count // 2
    return PlacementConfig(
        total_count=tree_count,
        variants=[
            VariantSpec(DECIDUOUS, DEFAULTS.DECIDUOUS_SCALE_RANGE, deciduous_count),
            VariantSpec(CONIFEROUS, DEFAULTS.CONIFEROUS_SCALE_RANGE, tree_count - deciduous_count),
        ],
        spread=spread,
        min_distance=min_distance,
        max_distance=None,
        shuffle_variants=False,
        max_attempts=max_attempts,
    )


def create_forest(
    prng: SeededRandom,
    height_field: placement.SupportsHeight,
    tree_count: int = DEFAULTS.TREE_COUNT,
    spread: float = DEFAULTS.SPREAD,
    min_distance: float = DEFAULTS.MIN_DISTANCE_FROM_CENTER_TREES,
    max_attempts: int = DEFAULTS.MAX_PLACEMENT_ATTEMPTS,
    logger: logging.Logger = None
) -> Forest:
    """Draws both templates, then places all deciduous trees followed by all coniferous ones."""
    logger = logger or logging.getLogger(__name__)
    config = tree_placement_config(tree_count, spread, min_distance, max_attempts)
    # Fail before the templates consume any draws.
    placement.validate_placement_config(config)

    templates = {
        DECIDUOUS: create_deciduous_template(prng),
        CONIFEROUS: create_coniferous_template(prng),
    }
    logger.info(f"Placing {tree_count} trees (spread={spread}, min_distance={min_distance}).")
    instances = placement.generate(config, prng, height_field, logger=logger)
    return Forest(templates=templates, instances=instances)
