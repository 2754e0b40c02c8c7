# bake_scene.py

"""
================================================================================
OFFLINE SCENE BAKER SCRIPT
================================================================================
This script is a command-line tool for baking a gateway scene to disk: the
consolidated generation config, a heightmap, every placed instance and a
top-down preview image. The baked package can be reloaded with
`World.from_package`, which regenerates the identical scene from its
generation_config.json.

Usage:
    python bake_scene.py --config scene_config.json --output baked_scenes/my_scene
================================================================================
"""
import argparse
import dataclasses
import json
import logging
import logging.config
import os
import sys
import time

import numpy as np
from PIL import Image
from tqdm import tqdm

from gateway_world import color_maps
from gateway_world import config as DEFAULTS
from gateway_world.errors import ConfigurationError
from gateway_world.generator import GeneratedScene, SceneGenerator
from gateway_world.runtime.world import GENERATION_CONFIG_FILENAME

LOG_CONFIG_PATH = 'logging_config.json'
LOG_DIR = 'logs'


def setup_logging(log_config_path: str = LOG_CONFIG_PATH, log_filename: str = 'bake_scene.log') -> logging.Logger:
    """Initializes the logging system from a config file, or a basic console setup without one."""
    if not os.path.exists(log_config_path):
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
        return logging.getLogger("SceneBaker")

    if not os.path.exists(LOG_DIR):
        os.makedirs(LOG_DIR)

    with open(log_config_path, 'rt') as f:
        log_config = json.load(f)

    # Tell the logger where to create its file, overriding the JSON path.
    log_config['handlers']['file']['filename'] = os.path.join(LOG_DIR, log_filename)

    logging.config.dictConfig(log_config)
    return logging.getLogger("SceneBaker")


def load_config(config_path: str, logger: logging.Logger) -> dict:
    """Loads scene parameters from the config file."""
    logger.info(f"Loading configuration from {config_path}")
    with open(config_path, 'r') as f:
        config = json.load(f)
    return config.get('scene_generation_parameters', {})


def bake_heightmap(generator: SceneGenerator, resolution: int) -> np.ndarray:
    """
    Samples the terrain over the ground plane at resolution x resolution.
    Rows run along z, columns along x.
    """
    half = generator.settings['ground_size'] / 2.0
    coords = np.linspace(-half, half, resolution)
    heightmap = np.empty((resolution, resolution), dtype=np.float32)

    for row, z in enumerate(tqdm(coords, desc="Baking Heightmap")):
        heightmap[row] = generator.get_elevation(coords, np.full_like(coords, z))

    return heightmap


def _world_to_pixel(x: float, z: float, ground_size: float, resolution: int) -> tuple[int, int]:
    half = ground_size / 2.0
    px = int(round((x + half) / ground_size * (resolution - 1)))
    py = int(round((z + half) / ground_size * (resolution - 1)))
    return min(max(px, 0), resolution - 1), min(max(py, 0), resolution - 1)


def render_preview(heightmap: np.ndarray, scene: GeneratedScene, settings: dict) -> Image.Image:
    """Renders a height-coloured top view with trees and mushrooms marked."""
    lut = color_maps.create_height_lut()
    pixels = color_maps.get_height_color_array(heightmap, lut, settings['terrain_max_height']).copy()
    resolution = heightmap.shape[0]

    markers = [(scene.forest.instances, color_maps.COLOR_TREE), (scene.mushrooms.instances, color_maps.COLOR_MUSHROOM)]
    for instances, color in markers:
        for instance in instances:
            x, _, z = instance.position
            px, py = _world_to_pixel(x, z, settings['ground_size'], resolution)
            pixels[py, px] = color

    return Image.fromarray(pixels, 'RGB')


def _instance_records(instances) -> list[dict]:
    return [dataclasses.asdict(instance) for instance in instances]


def bake_scene(config: dict, output_dir: str, logger: logging.Logger, resolution: int = DEFAULTS.PREVIEW_RESOLUTION) -> dict:
    """
    Generates a scene and writes a complete, portable scene package.

    Returns:
        dict: The manifest that was written.
    """
    start_time = time.time()

    # 1. Create directory structure
    os.makedirs(output_dir, exist_ok=True)
    logger.info(f"Output directory set to '{output_dir}'")

    # 2. Generate the scene
    generator = SceneGenerator(config=config, logger=logger)
    scene = generator.generate()

    # 3. Heightmap and preview
    heightmap = bake_heightmap(generator, resolution)
    np.save(os.path.join(output_dir, "heightmap.npy"), heightmap)
    render_preview(heightmap, scene, generator.settings).save(os.path.join(output_dir, "preview.png"), optimize=True)
    logger.info(f"Saved heightmap.npy and preview.png ({resolution}x{resolution})")

    # 4. Instances
    instances = {
        "trees": _instance_records(scene.forest.instances),
        "mushrooms": _instance_records(scene.mushrooms.instances),
        "tree_templates": {kind: dataclasses.asdict(t) for kind, t in scene.forest.templates.items()},
    }
    with open(os.path.join(output_dir, "instances.json"), 'w') as f:
        json.dump(instances, f)

    # 5. Manifest
    positions = np.array(
        [i.position for i in scene.forest.instances + scene.mushrooms.instances], dtype=np.float64
    ).reshape(-1, 3)
    if len(positions):
        bounds = {"min": positions.min(axis=0).tolist(), "max": positions.max(axis=0).tolist()}
    else:
        bounds = None

    manifest = {
        "scene_name": f"GatewayScene_Seed{generator.seed}",
        "placement_seed": generator.seed,
        "heightmap": {
            "file": "heightmap.npy",
            "resolution": resolution,
            "ground_size": generator.settings['ground_size'],
            "height_range": [float(heightmap.min()), float(heightmap.max())],
        },
        "batches": {name: int(matrices.shape[0]) for name, matrices in scene.batches().items()},
        "instance_bounds": bounds,
    }
    with open(os.path.join(output_dir, "manifest.json"), 'w') as f:
        json.dump(manifest, f, indent=2)

    # 6. Save the "birth certificate" generation_config.json
    with open(os.path.join(output_dir, GENERATION_CONFIG_FILENAME), 'w') as f:
        json.dump(generator.settings, f, indent=4)

    end_time = time.time()
    logger.info("--- Bake Complete ---")
    logger.info(f"Trees: {len(scene.forest.instances)}, mushrooms: {len(scene.mushrooms.instances)}")
    logger.info(f"Total time: {end_time - start_time:.2f} seconds.")
    return manifest


def main(argv: list = None) -> int:
    parser = argparse.ArgumentParser(description="Offline scene baker for the gateway scene generator.")
    parser.add_argument("--config", type=str, required=True, help="Path to the JSON scene configuration file.")
    parser.add_argument("--output", type=str, default=None, help="Output directory (default: baked_scenes/seed_<seed>).")
    parser.add_argument("--seed", type=int, default=None, help="Override the placement seed.")
    parser.add_argument("--resolution", type=int, default=DEFAULTS.PREVIEW_RESOLUTION, help="Heightmap and preview resolution.")
    args = parser.parse_args(argv)

    logger = setup_logging()

    try:
        config = load_config(args.config, logger)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return 1

    if args.seed is not None:
        config['placement_seed'] = args.seed
    seed = config.get('placement_seed', DEFAULTS.DEFAULT_PLACEMENT_SEED)
    output_dir = args.output or os.path.join("baked_scenes", f"seed_{seed}")

    try:
        bake_scene(config, output_dir, logger, resolution=args.resolution)
    except ConfigurationError as e:
        logger.critical(f"Invalid scene configuration: {e}")
        return 1
    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
