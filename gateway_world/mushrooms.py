# gateway_world/mushrooms.py

"""
================================================================================
MUSHROOM GENERATION AND SPAWNING
================================================================================
This module places the mushroom population around the gateway and spawns
extra mushrooms out of the portal on demand.

Data Contract:
---------------
- Inputs:
    - prng (SeededRandom): The stream for the placement pass, or a separate
      stream owned by a MushroomSpawner.
    - height_field: Anything with a height(x, z) method.
- Outputs:
    - MushroomPatch: the fixed templates plus the placed instances.
    - SpawnedMushroom records from MushroomSpawner.spawn().
- Side Effects: Advances the given stream.
- Invariants:
    - The three types share one population. Counts follow the remainder rule
      and the type order is shuffled by the same stream before placement.
    - Every mushroom lies within [min_distance, 0.9 * spread] of the origin.
    - Stem and cap of the same mushroom share one transform.
================================================================================
"""
import collections
import logging
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from . import placement
from .errors import ConfigurationError
from .placement import PlacedInstance, PlacementConfig, VariantSpec
from .prng import SeededRandom


@dataclass(frozen=True)
class MushroomTemplate:
    """Local-space stem and cap dimensions for one mushroom type (1-based)."""
    type: int
    stem_radius_top: float
    stem_radius_bottom: float
    stem_height: float
    cap_shape: str
    cap_radius: float
    cap_height: float
    cap_center_y: float

    @property
    def tag(self) -> str:
        return f"type_{self.type}"


# --- Fixed Mushroom Shapes (Rule 1) ---
MUSHROOM_TEMPLATES = (
    # Squat dome cap.
    MushroomTemplate(1, 0.05, 0.08, 0.3, "dome", 0.2, 0.2 * 0.7, 0.3 + 0.02),
    # Tall thin stem with a pointed cap.
    MushroomTemplate(2, 0.03, 0.04, 0.5, "cone", 0.1, 0.25, 0.5 - 0.07 - 0.05),
    # Stubby stem with a round cap.
    MushroomTemplate(3, 0.06, 0.06, 0.15, "sphere", 0.12, 0.24, 0.15 + 0.07 + 0.03),
)


def create_mushroom_templates() -> list[MushroomTemplate]:
    return list(MUSHROOM_TEMPLATES)


@dataclass(frozen=True)
class MushroomPatch:
    templates: list[MushroomTemplate]
    instances: list[PlacedInstance]

    def counts(self) -> dict[str, int]:
        groups = placement.group_by_variant(self.instances)
        return {template.tag: len(groups.get(template.tag, [])) for template in self.templates}

    def batches(self) -> dict[str, np.ndarray]:
        """
        Transform matrices per render batch: one shared stem batch in placement
        order, and one cap batch per type. Types with no instances get no cap batch.
        """
        result = {"stem": placement.instance_matrices(self.instances)}
        groups = placement.group_by_variant(self.instances)
        for template in self.templates:
            group = groups.get(template.tag)
            if group:
                result[f"cap_{template.type}"] = placement.instance_matrices(group)
        return result


def mushroom_placement_config(
    mushroom_count: int = DEFAULTS.MUSHROOM_COUNT,
    spread: float = DEFAULTS.SPREAD,
    min_distance: float = DEFAULTS.MIN_DISTANCE_FROM_GATEWAY_CENTER,
    max_distance_factor: float = DEFAULTS.MUSHROOM_MAX_DISTANCE_FACTOR,
    templates: list[MushroomTemplate] = None,
    max_attempts: int = DEFAULTS.MAX_PLACEMENT_ATTEMPTS
) -> PlacementConfig:
    templates = templates if templates is not None else create_mushroom_templates()
    return PlacementConfig(
        total_count=mushroom_count,
        variants=[VariantSpec(template.tag, DEFAULTS.MUSHROOM_SCALE_RANGE) for template in templates],
        spread=spread,
        min_distance=min_distance,
        max_distance=spread * max_distance_factor,
        shuffle_variants=True,
        max_attempts=max_attempts,
    )


def create_mushroom_patch(
    prng: SeededRandom,
    height_field: placement.SupportsHeight,
    mushroom_count: int = DEFAULTS.MUSHROOM_COUNT,
    spread: float = DEFAULTS.SPREAD,
    min_distance: float = DEFAULTS.MIN_DISTANCE_FROM_GATEWAY_CENTER,
    max_distance_factor: float = DEFAULTS.MUSHROOM_MAX_DISTANCE_FACTOR,
    max_attempts: int = DEFAULTS.MAX_PLACEMENT_ATTEMPTS,
    logger: logging.Logger = None
) -> MushroomPatch:
    logger = logger or logging.getLogger(__name__)
    templates = create_mushroom_templates()
    config = mushroom_placement_config(
        mushroom_count, spread, min_distance, max_distance_factor, templates, max_attempts
    )
    logger.info(
        f"Placing {mushroom_count} mushrooms across {len(templates)} types "
        f"(distance {min_distance} to {config.max_distance:.2f})."
    )
    instances = placement.generate(config, prng, height_field, logger=logger)
    return MushroomPatch(templates=templates, instances=instances)


@dataclass
class SpawnedMushroom:
    """A mushroom launched from the portal. Motion after launch belongs to the caller."""
    template: MushroomTemplate
    position: tuple[float, float, float]
    velocity: tuple[float, float, float]
    rotation_speed: tuple[float, float, float]
    airborne: bool = True


class MushroomSpawner:
    """
    Launches mushrooms out of the portal, keeping at most max_spawned alive.
    When full, the oldest mushroom is evicted before the new one is added.
    """

    def __init__(
        self,
        prng: SeededRandom,
        height_field: placement.SupportsHeight,
        portal_position: tuple[float, float, float] = DEFAULTS.PORTAL_POSITION,
        max_spawned: int = DEFAULTS.MAX_SPAWNED_MUSHROOMS,
        templates: list[MushroomTemplate] = None
    ):
        if max_spawned < 1:
            raise ConfigurationError(f"max_spawned must be at least 1, got {max_spawned}")

        self.prng = prng
        self.height_field = height_field
        self.portal_position = tuple(portal_position)
        self.max_spawned = max_spawned
        self.templates = templates if templates is not None else create_mushroom_templates()
        self.spawned = collections.deque()
        self.logger = logging.getLogger(__name__)

    def spawn(self) -> SpawnedMushroom:
        """
        Spawns one mushroom. Draw order: template index, velocity x, y, z,
        then tumble speed x, y, z.
        """
        if len(self.spawned) >= self.max_spawned:
            evicted = self.spawned.popleft()
            self.logger.debug(f"Spawn limit {self.max_spawned} reached; evicted a type {evicted.template.type} mushroom.")

        rng = self.prng
        template = self.templates[rng.next_int_in_range(0, len(self.templates))]

        px, py, pz = self.portal_position
        position = (px, py + DEFAULTS.SPAWN_HEIGHT_OFFSET, pz)
        velocity = (
            (rng.next() - 0.5) * 4,
            rng.next() * 3 + 7,
            (rng.next() * -3) - 5,
        )
        rotation_speed = (
            (rng.next() - 0.5) * 8,
            (rng.next() - 0.5) * 8,
            (rng.next() - 0.5) * 8,
        )

        mushroom = SpawnedMushroom(template, position, velocity, rotation_speed)
        self.spawned.append(mushroom)
        return mushroom

    def terrain_height_below(self, mushroom: SpawnedMushroom) -> float:
        """Ground elevation under the mushroom's current (x, z)."""
        x, _, z = mushroom.position
        return self.height_field.height(x, z)

    def __len__(self) -> int:
        return len(self.spawned)
