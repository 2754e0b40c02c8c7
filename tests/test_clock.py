# ==============================================================================
# File: tests/test_clock.py
# Purpose: Unit tests for the scene clock.
# ==============================================================================
import unittest

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from gateway_world.runtime.clock import SceneClock


class TestSceneClock(unittest.TestCase):

    def test_real_time(self):
        clock = SceneClock()
        self.assertEqual(clock.update(0.5), 0.5)
        self.assertEqual(clock.elapsed, 0.5)

    def test_fast_forward(self):
        clock = SceneClock({'initial_time_scale': 4.0})
        self.assertEqual(clock.update(0.25), 1.0)
        self.assertEqual(clock.elapsed, 1.0)

    def test_pause(self):
        clock = SceneClock()
        clock.set_speed(0)
        self.assertEqual(clock.update(1.0), 0.0)
        self.assertEqual(clock.elapsed, 0.0)

    def test_negative_values_are_ignored(self):
        clock = SceneClock()
        self.assertEqual(clock.update(-1.0), 0.0)
        clock.set_speed(-2.0)
        self.assertEqual(clock.time_scale, 0.0)

    def test_time_string(self):
        clock = SceneClock()
        clock.update(125.7)
        self.assertEqual(clock.get_time_string(), "02:05")


if __name__ == '__main__':
    unittest.main()
