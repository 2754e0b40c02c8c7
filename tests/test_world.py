# ==============================================================================
# File: tests/test_world.py
# Purpose: Integration tests for the scene generator and the World runtime.
# ==============================================================================
import json
import logging
import os
import tempfile
import unittest

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from gateway_world.errors import ConfigurationError
from gateway_world.generator import SceneGenerator
from gateway_world.runtime.world import GENERATION_CONFIG_FILENAME, World

SMALL_SCENE = {'tree_count': 20, 'mushroom_count': 15, 'ground_segments': 8}


class TestSceneGenerator(unittest.TestCase):

    def setUp(self):
        self.logger = logging.getLogger("test_generator")

    def test_defaults_are_consolidated(self):
        generator = SceneGenerator({}, self.logger)
        self.assertEqual(generator.seed, 54321)
        self.assertEqual(generator.settings['tree_count'], 200)
        self.assertEqual(generator.settings['terrain_octaves'], 5)
        self.assertEqual(generator.settings['portal_position'], [0.0, 1.5, 0.0])

    def test_user_config_overrides(self):
        generator = SceneGenerator({'placement_seed': 7, 'spread': 12.0}, self.logger)
        self.assertEqual(generator.seed, 7)
        self.assertEqual(generator.settings['spread'], 12.0)

    def test_invalid_settings(self):
        with self.assertRaises(ConfigurationError):
            SceneGenerator({'terrain_octaves': 0}, self.logger)
        with self.assertRaises(ConfigurationError):
            SceneGenerator({'night_duration': 0}, self.logger)

    def test_generation_is_deterministic(self):
        a = SceneGenerator(SMALL_SCENE, self.logger).generate()
        b = SceneGenerator(SMALL_SCENE, self.logger).generate()
        self.assertEqual(a.forest.instances, b.forest.instances)
        self.assertEqual(a.mushrooms.instances, b.mushrooms.instances)
        self.assertEqual(a.forest.templates, b.forest.templates)

    def test_mushrooms_continue_the_tree_stream(self):
        """Mushrooms depend on the tree pass because both share one stream."""
        a = SceneGenerator(SMALL_SCENE, self.logger).generate()
        b = SceneGenerator(dict(SMALL_SCENE, tree_count=21), self.logger).generate()
        self.assertNotEqual(a.mushrooms.instances, b.mushrooms.instances)

    def test_scene_batches(self):
        scene = SceneGenerator(SMALL_SCENE, self.logger).generate()
        batches = scene.batches()
        self.assertEqual(batches['deciduous_trunk'].shape[0], 10)
        self.assertEqual(batches['coniferous_foliage'].shape[0], 10)
        self.assertEqual(batches['stem'].shape[0], 15)

    def test_spawn_stream_is_separate(self):
        generator = SceneGenerator({}, self.logger)
        self.assertEqual(generator.create_spawn_prng().seed, 54321 + 7919)


class TestWorld(unittest.TestCase):

    def test_update_advances_cycle(self):
        world = World(dict(SMALL_SCENE, initial_cycle_progress=0.0))
        state = world.update(30.0)
        self.assertAlmostEqual(state.phase.progress, 0.5)
        self.assertTrue(state.sun.visible)

    def test_time_scale(self):
        world = World(dict(SMALL_SCENE, initial_cycle_progress=0.0, initial_time_scale=2.0))
        world.update(15.0)
        self.assertAlmostEqual(world.phase.progress, 0.5)
        self.assertEqual(world.get_time_string(), "00:30")

    def test_paused_world_does_not_advance(self):
        world = World(SMALL_SCENE)
        world.set_game_speed(0)
        before = world.phase
        world.update(10.0)
        self.assertEqual(world.phase, before)

    def test_toggle(self):
        world = World(SMALL_SCENE)
        state = world.toggle_day_night()
        self.assertEqual(state.phase.name, "Night")
        self.assertEqual(state.phase.progress, 0.0)

    def test_ground(self):
        world = World(SMALL_SCENE)
        self.assertEqual(world.ground.positions.shape, (9, 9, 3))
        self.assertIs(world.ground, world.ground)

    def test_spawn_limit(self):
        world = World(dict(SMALL_SCENE, max_spawned_mushrooms=3))
        spawned = [world.spawn_mushroom() for _ in range(4)]
        self.assertEqual(len(world.spawner), 3)
        self.assertNotIn(spawned[0], list(world.spawner.spawned))

    def test_from_package_round_trip(self):
        world = World(SMALL_SCENE)
        with tempfile.TemporaryDirectory() as tmpdir:
            with open(os.path.join(tmpdir, GENERATION_CONFIG_FILENAME), 'w') as f:
                json.dump(world.settings, f)
            restored = World.from_package(tmpdir)
        self.assertEqual(restored.scene.forest.instances, world.scene.forest.instances)
        self.assertEqual(restored.scene.mushrooms.instances, world.scene.mushrooms.instances)

    def test_from_package_missing_config(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(FileNotFoundError):
                World.from_package(tmpdir)


if __name__ == '__main__':
    unittest.main()
