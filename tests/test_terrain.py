# ==============================================================================
# File: tests/test_terrain.py
# Purpose: Unit tests for the value-noise height field and the ground mesh.
# ==============================================================================
import unittest
import numpy as np

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from gateway_world import noise
from gateway_world.terrain import HeightField


class TestLatticeHash(unittest.TestCase):

    def test_origin_value(self):
        """At the origin only the final additive constant survives."""
        expected = 1.0 - 1376312589 / 1073741823.0
        self.assertAlmostEqual(noise.lattice_hash(0, 0), expected, places=12)

    def test_range_and_purity(self):
        for ix in range(-20, 20, 3):
            for iz in range(-20, 20, 7):
                value = noise.lattice_hash(ix, iz)
                self.assertGreaterEqual(value, -1.0 - 1e-8)
                self.assertLessEqual(value, 1.0)
                self.assertEqual(value, noise.lattice_hash(ix, iz))


class TestHeightField(unittest.TestCase):

    def setUp(self):
        self.field = HeightField()

    def test_pure_function(self):
        """Repeated queries return identical values, in any order."""
        points = [(5.0, 3.0), (-12.5, 7.25), (0.0, 0.0), (40.0, -33.3)]
        first = [self.field.height(x, z) for x, z in points]
        second = [self.field.height(x, z) for x, z in reversed(points)]
        self.assertEqual(first, list(reversed(second)))

    def test_bounded_by_max_height(self):
        for x in np.linspace(-50, 50, 21):
            for z in np.linspace(-50, 50, 21):
                self.assertLessEqual(abs(self.field.height(x, z)), self.field.max_height + 1e-6)

    def test_continuity(self):
        """A tiny step in x gives a tiny change in height."""
        h0 = self.field.height(5.0, 3.0)
        h1 = self.field.height(5.0 + 1e-4, 3.0)
        self.assertLess(abs(h1 - h0), 1e-3)

    def test_continuous_across_lattice_boundary(self):
        """x = 25 sits exactly on a lattice line of the first octave."""
        below = self.field.height(25.0 - 1e-9, 4.0)
        on = self.field.height(25.0, 4.0)
        self.assertLess(abs(on - below), 1e-6)

    def test_grid_matches_scalar(self):
        xs = np.array([[-3.0, 0.5, 17.25], [8.0, -40.0, 2.2]])
        zs = np.array([[1.0, -6.5, 0.0], [12.0, 3.3, -9.9]])
        grid = self.field.height_grid(xs, zs)
        self.assertEqual(grid.shape, xs.shape)
        for idx in np.ndindex(xs.shape):
            self.assertAlmostEqual(grid[idx], self.field.height(xs[idx], zs[idx]), places=12)

    def test_grid_rejects_mismatched_shapes(self):
        with self.assertRaises(ValueError):
            self.field.height_grid(np.zeros(3), np.zeros(4))

    def test_single_octave_changes_surface(self):
        single = HeightField(octaves=1)
        self.assertNotEqual(single.height(13.7, -2.1), self.field.height(13.7, -2.1))

    def test_ground_mesh(self):
        mesh = self.field.ground_mesh(size=20.0, segments=8)
        self.assertEqual(mesh.positions.shape, (9, 9, 3))
        self.assertEqual(mesh.normals.shape, (9, 9, 3))
        self.assertEqual(mesh.vertex_count, 81)

        # Corners of the plane and heights taken from the field.
        self.assertAlmostEqual(mesh.positions[0, 0, 0], -10.0)
        self.assertAlmostEqual(mesh.positions[-1, -1, 2], 10.0)
        x, y, z = mesh.positions[4, 6]
        self.assertAlmostEqual(y, self.field.height(x, z), places=12)

        lengths = np.linalg.norm(mesh.normals, axis=-1)
        np.testing.assert_allclose(lengths, 1.0, atol=1e-12)
        self.assertTrue(np.all(mesh.normals[..., 1] > 0))


if __name__ == '__main__':
    unittest.main()
