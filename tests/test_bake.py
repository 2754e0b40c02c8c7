# ==============================================================================
# File: tests/test_bake.py
# Purpose: Integration test for the offline scene baker.
# ==============================================================================
import json
import logging
import os
import tempfile
import unittest
from unittest import mock
import numpy as np
from PIL import Image

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

import bake_scene
from gateway_world.runtime.world import World


class TestBakeScene(unittest.TestCase):
    """Bakes a small scene into a temporary directory and reads it back."""

    def setUp(self):
        self.logger = logging.getLogger("test_bake")
        self.config = {'tree_count': 12, 'mushroom_count': 9, 'placement_seed': 2024}

    def test_bake_and_reload(self):
        print("\n[TEST] Running test_bake_and_reload...")
        with tempfile.TemporaryDirectory() as tmpdir:
            manifest = bake_scene.bake_scene(self.config, tmpdir, self.logger, resolution=16)

            for name in ("generation_config.json", "manifest.json", "heightmap.npy", "instances.json", "preview.png"):
                self.assertTrue(os.path.exists(os.path.join(tmpdir, name)), f"{name} was not written")

            heightmap = np.load(os.path.join(tmpdir, "heightmap.npy"))
            self.assertEqual(heightmap.shape, (16, 16))
            self.assertEqual(heightmap.dtype, np.float32)

            with Image.open(os.path.join(tmpdir, "preview.png")) as preview:
                self.assertEqual(preview.size, (16, 16))

            self.assertEqual(manifest["placement_seed"], 2024)
            self.assertEqual(manifest["batches"]["stem"], 9)
            self.assertEqual(manifest["batches"]["deciduous_trunk"], 6)
            self.assertIsNotNone(manifest["instance_bounds"])
            low, high = manifest["heightmap"]["height_range"]
            self.assertLessEqual(low, high)

            with open(os.path.join(tmpdir, "instances.json")) as f:
                instances = json.load(f)
            self.assertEqual(len(instances["trees"]), 12)
            self.assertEqual(len(instances["mushrooms"]), 9)

            world = World.from_package(tmpdir)
            self.assertEqual(
                [list(i.position) for i in world.scene.forest.instances],
                [record["position"] for record in instances["trees"]],
            )
        print("[TEST] test_bake_and_reload: OK")

    def test_heightmap_matches_field(self):
        generator = bake_scene.SceneGenerator(self.config, self.logger)
        heightmap = bake_scene.bake_heightmap(generator, 5)
        # Row 0 is z = -50, column 4 is x = 50.
        expected = generator.height_field.height(50.0, -50.0)
        self.assertAlmostEqual(float(heightmap[0, 4]), expected, places=5)

    def test_missing_config_file(self):
        with self.assertRaises(FileNotFoundError):
            bake_scene.load_config("does/not/exist.json", self.logger)

    def test_shipped_scene_config(self):
        """Every key in the shipped config is a scene generation setting."""
        config_path = Path(__file__).parent.parent / "scene_config.json"
        with open(config_path) as f:
            self.assertEqual(set(json.load(f)), {"scene_generation_parameters"})

        parameters = bake_scene.load_config(str(config_path), self.logger)
        generator = bake_scene.SceneGenerator(parameters, self.logger)
        self.assertLessEqual(set(parameters), set(generator.settings))

    def _run_main(self, scene_parameters, tmpdir):
        config_path = os.path.join(tmpdir, "scene_config.json")
        with open(config_path, 'w') as f:
            json.dump({"scene_generation_parameters": scene_parameters}, f)
        output_dir = os.path.join(tmpdir, "out")
        with mock.patch.object(bake_scene, "setup_logging", return_value=self.logger):
            return bake_scene.main(["--config", config_path, "--output", output_dir, "--resolution", "8"]), output_dir

    def test_main_writes_package(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            code, output_dir = self._run_main(self.config, tmpdir)
            self.assertEqual(code, 0)
            self.assertTrue(os.path.exists(os.path.join(output_dir, "manifest.json")))

    def test_main_rejects_invalid_scene(self):
        """A scene that cannot be generated is reported and exits with status 1."""
        with tempfile.TemporaryDirectory() as tmpdir:
            code, _ = self._run_main({'terrain_octaves': 0}, tmpdir)
            self.assertEqual(code, 1)
            code, _ = self._run_main({'spread': 2.0, 'min_distance_trees': 5.0}, tmpdir)
            self.assertEqual(code, 1)

    def test_main_missing_config(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with mock.patch.object(bake_scene, "setup_logging", return_value=self.logger):
                code = bake_scene.main(["--config", os.path.join(tmpdir, "missing.json")])
            self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main()
