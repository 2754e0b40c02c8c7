# gateway_world/placement.py

"""
================================================================================
INSTANCE PLACEMENT
================================================================================
This module scatters instanced objects (trees, mushrooms) over the terrain.
Positions are drawn by rejection sampling inside a square of half-width
`spread`, keeping only candidates whose planar distance from the origin lies
in [min_distance, max_distance]. Every accepted position is snapped to the
terrain height and given a random yaw and uniform scale.

Data Contract:
---------------
- Inputs:
    - config (PlacementConfig): counts, variants, region and attempt limits.
    - prng (SeededRandom): The stream to draw from. Owned by the caller for
      the duration of the pass.
    - height_field: Anything with a height(x, z) method.
- Outputs:
    - A list of PlacedInstance records, in placement order.
- Side Effects: Advances the stream. Logs a summary of the pass.
- Invariants: Given the same stream state and configuration, the output is
  identical. Draws are consumed in a fixed order: (optional) variant shuffle,
  then per instance: x, z (repeated until accepted), scale, yaw.
================================================================================
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

import numpy as np

from . import config as DEFAULTS
from .errors import ConfigurationError
from .prng import SeededRandom

TWO_PI = math.pi * 2.0


class SupportsHeight(Protocol):
    def height(self, x: float, z: float) -> float: ...


@dataclass(frozen=True)
class PlacedInstance:
    """One placed object: world position, yaw (radians), uniform scale and variant tag."""
    position: tuple[float, float, float]
    yaw: float
    scale: float
    variant: str

    @property
    def planar_distance(self) -> float:
        x, _, z = self.position
        return math.sqrt(x * x + z * z)


@dataclass(frozen=True)
class VariantSpec:
    """
    A kind of instance placed by a pass.

    If count is None for every variant in a pass, counts are derived from the
    pass total; otherwise every variant must carry an explicit count.
    """
    tag: str
    scale_range: tuple[float, float]
    count: Optional[int] = None


@dataclass
class PlacementConfig:
    total_count: int
    variants: Sequence[VariantSpec]
    spread: float
    min_distance: float
    max_distance: Optional[float] = None
    # Mixed passes shuffle variant tags so types interleave across the region.
    shuffle_variants: bool = False
    max_attempts: int = DEFAULTS.MAX_PLACEMENT_ATTEMPTS


def distribute_counts(total: int, num_variants: int) -> list[int]:
    """
    Splits total across num_variants by integer division, handing the
    remainder out one by one to the earliest variants.
    """
    if num_variants <= 0:
        return []
    base, remainder = divmod(total, num_variants)
    return [base + (1 if index < remainder else 0) for index in range(num_variants)]


def shuffle_in_place(items: list, prng: SeededRandom) -> list:
    """
    Fisher-Yates shuffle driven by the stream. Walks from the last index down
    to 1, swapping with floor(next() * (i + 1)), so the draw order is fixed.
    """
    for i in range(len(items) - 1, 0, -1):
        j = math.floor(prng.next() * (i + 1))
        items[i], items[j] = items[j], items[i]
    return items


def reachable_extent(spread: float, max_distance: Optional[float] = None) -> float:
    """The largest planar distance a candidate can have and still be accepted."""
    corner = spread * math.sqrt(2.0)
    if max_distance is None:
        return corner
    return min(max_distance, corner)


def validate_placement_config(config: PlacementConfig) -> list[int]:
    """
    Checks that the configuration can be satisfied and returns the per-variant
    counts. Raises ConfigurationError before any draw is made otherwise.
    """
    if config.spread <= 0:
        raise ConfigurationError(f"spread must be positive, got {config.spread}")
    if config.min_distance < 0:
        raise ConfigurationError(f"min_distance must be non-negative, got {config.min_distance}")
    if config.max_distance is not None and config.max_distance <= config.min_distance:
        raise ConfigurationError(
            f"max_distance ({config.max_distance}) must be greater than "
            f"min_distance ({config.min_distance})"
        )

    extent = reachable_extent(config.spread, config.max_distance)
    if config.min_distance >= extent:
        raise ConfigurationError(
            f"min_distance ({config.min_distance}) leaves no room inside the "
            f"reachable extent ({extent:.3f}) of a spread of {config.spread}"
        )
    if config.max_attempts < 1:
        raise ConfigurationError(f"max_attempts must be at least 1, got {config.max_attempts}")
    if config.total_count < 0:
        raise ConfigurationError(f"total_count must be non-negative, got {config.total_count}")
    if not config.variants and config.total_count > 0:
        raise ConfigurationError("A non-empty placement pass needs at least one variant.")

    for variant in config.variants:
        low, high = variant.scale_range
        if low > high:
            raise ConfigurationError(
                f"Variant '{variant.tag}' has an inverted scale range ({low}, {high})"
            )

    explicit = [variant.count for variant in config.variants]
    if all(count is None for count in explicit):
        return distribute_counts(config.total_count, len(config.variants))
    if any(count is None for count in explicit):
        raise ConfigurationError("Either every variant has an explicit count or none does.")
    if any(count < 0 for count in explicit):
        raise ConfigurationError(f"Variant counts must be non-negative, got {explicit}")
    if sum(explicit) != config.total_count:
        raise ConfigurationError(
            f"Variant counts {explicit} do not add up to total_count {config.total_count}"
        )
    return list(explicit)


def sample_position(
    prng: SeededRandom,
    spread: float,
    min_distance: float,
    max_distance: Optional[float] = None,
    max_attempts: int = DEFAULTS.MAX_PLACEMENT_ATTEMPTS
) -> tuple[float, float, int]:
    """
    Draws (x, z) uniformly in [-spread, spread) until the planar distance from
    the origin is within bounds. Returns x, z and the number of candidates drawn.
    """
    for attempt in range(1, max_attempts + 1):
        x = prng.next_in_range(-spread, spread)
        z = prng.next_in_range(-spread, spread)
        dist = math.sqrt(x * x + z * z)
        if dist < min_distance:
            continue
        if max_distance is not None and dist > max_distance:
            continue
        return x, z, attempt

    raise ConfigurationError(
        f"No position found after {max_attempts} candidates "
        f"(spread={spread}, min_distance={min_distance}, max_distance={max_distance})"
    )


def _place_one(
    prng: SeededRandom,
    height_field: SupportsHeight,
    config: PlacementConfig,
    variant: VariantSpec
) -> tuple[PlacedInstance, int]:
    x, z, attempts = sample_position(
        prng, config.spread, config.min_distance, config.max_distance, config.max_attempts
    )
    y = height_field.height(x, z)
    scale = prng.next_in_range(*variant.scale_range)
    yaw = prng.next() * TWO_PI
    return PlacedInstance(position=(x, y, z), yaw=yaw, scale=scale, variant=variant.tag), attempts


def generate(
    config: PlacementConfig,
    prng: SeededRandom,
    height_field: SupportsHeight,
    logger: logging.Logger = None
) -> list[PlacedInstance]:
    """
    Runs one placement pass and returns the placed instances in order.

    Sequential passes place every instance of the first variant, then the
    second, and so on. Mixed passes build the full list of variant tags,
    shuffle it with the stream, and place one instance per shuffled tag.
    """
    logger = logger or logging.getLogger(__name__)

    # --- 1. Validate up front so the rejection loop is known to be satisfiable ---
    counts = validate_placement_config(config)
    by_tag = {variant.tag: variant for variant in config.variants}

    # --- 2. Decide the order in which variants are placed ---
    order = []
    for variant, count in zip(config.variants, counts):
        order.extend([variant.tag] * count)
    if config.shuffle_variants:
        shuffle_in_place(order, prng)

    # --- 3. Place ---
    instances = []
    total_attempts = 0
    for tag in order:
        instance, attempts = _place_one(prng, height_field, config, by_tag[tag])
        instances.append(instance)
        total_attempts += attempts

    rejected = total_attempts - len(instances)
    logger.debug(f"Placement pass drew {total_attempts} candidates, rejected {rejected}.")
    summary = ", ".join(f"{variant.tag}={count}" for variant, count in zip(config.variants, counts))
    logger.info(f"Placed {len(instances)} instances ({summary}).")
    return instances


def group_by_variant(instances: Sequence[PlacedInstance]) -> dict[str, list[PlacedInstance]]:
    """Groups instances by variant tag, keeping placement order within each group."""
    groups = {}
    for instance in instances:
        groups.setdefault(instance.variant, []).append(instance)
    return groups


def instance_matrices(instances: Sequence[PlacedInstance]) -> np.ndarray:
    """
    Builds (N, 4, 4) column-vector transform matrices: translate * rotate_y(yaw) * scale.
    """
    count = len(instances)
    matrices = np.zeros((count, 4, 4))
    if count == 0:
        return matrices

    positions = np.array([instance.position for instance in instances], dtype=np.float64)
    yaws = np.array([instance.yaw for instance in instances], dtype=np.float64)
    scales = np.array([instance.scale for instance in instances], dtype=np.float64)
    cos_y = np.cos(yaws) * scales
    sin_y = np.sin(yaws) * scales

    matrices[:, 0, 0] = cos_y
    matrices[:, 0, 2] = sin_y
    matrices[:, 1, 1] = scales
    matrices[:, 2, 0] = -sin_y
    matrices[:, 2, 2] = cos_y
    matrices[:, :3, 3] = positions
    matrices[:, 3, 3] = 1.0
    return matrices
