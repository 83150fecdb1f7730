#!/usr/bin/env python3
"""
Unit tests for plane and line fitting.
"""

import os
import sys
import unittest

import numpy as np

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from navkernel.errors import InvalidArgument
from navkernel.math.fitting import estimate_plane_dynamic, fit_line, fit_line_2d, fit_plane


def plane_grid(a=0.5, b=-0.2, c=3.0):
    """Points on z = a*x + b*y + c over a 5x5 grid."""
    xs, ys = np.meshgrid(np.linspace(-2, 2, 5), np.linspace(-2, 2, 5))
    xs, ys = xs.ravel(), ys.ravel()
    return np.column_stack([xs, ys, a * xs + b * ys + c])


class TestFitPlane(unittest.TestCase):
    """Test the SVD plane fit."""

    def test_coplanar_points(self):
        """Test plane fit on exactly coplanar points."""
        pts = plane_grid()
        coeffs, ok = fit_plane(pts, 1e-2)
        self.assertTrue(ok)
        self.assertAlmostEqual(np.linalg.norm(coeffs), 1.0, places=12)
        # Normal is parallel to (0.5, -0.2, -1)
        expected = np.array([0.5, -0.2, -1.0])
        expected /= np.linalg.norm(expected)
        normal = coeffs[:3] / np.linalg.norm(coeffs[:3])
        self.assertAlmostEqual(abs(normal @ expected), 1.0, places=10)
        np.testing.assert_allclose(pts @ coeffs[:3] + coeffs[3], 0.0, atol=1e-10)

    def test_single_outlier_rejects_fit(self):
        """Test that one off-plane point rejects the fit."""
        pts = plane_grid()
        pts[12, 2] += 0.5
        _, ok = fit_plane(pts, 1e-2)
        self.assertFalse(ok)

    def test_three_points(self):
        """Test plane fit through the minimum number of points."""
        pts = [[0.0, 0.0, 1.0], [1.0, 0.0, 1.0], [0.0, 1.0, 1.0]]
        coeffs, ok = fit_plane(pts)
        self.assertTrue(ok)
        self.assertAlmostEqual(abs(coeffs[2] / np.linalg.norm(coeffs[:3])), 1.0, places=10)

    def test_too_few_points(self):
        """Test plane fit with fewer than three points."""
        coeffs, ok = fit_plane([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]])
        self.assertFalse(ok)
        np.testing.assert_array_equal(coeffs, np.zeros(4))

    def test_invalid_shape(self):
        """Test rejection of non-3D point arrays."""
        with self.assertRaises(InvalidArgument):
            fit_plane(np.zeros((4, 2)))


class TestFitLine(unittest.TestCase):
    """Test the 3D and 2D line fits."""

    def setUp(self):
        t = np.linspace(-3, 3, 13)
        self.direction = np.array([1.0, 2.0, -0.5]) / np.linalg.norm([1.0, 2.0, -0.5])
        self.points = np.array([1.0, -1.0, 2.0]) + t[:, None] * self.direction

    def test_collinear_points(self):
        """Test line fit on exactly collinear points."""
        origin, direction, ok = fit_line(self.points, 0.2)
        self.assertTrue(ok)
        np.testing.assert_allclose(origin, self.points.mean(axis=0), atol=1e-12)
        self.assertAlmostEqual(np.linalg.norm(direction), 1.0, places=12)
        self.assertAlmostEqual(abs(direction @ self.direction), 1.0, places=10)

    def test_perpendicular_outlier(self):
        """Test that one distant point rejects the line fit."""
        pts = self.points.copy()
        perp = np.cross(self.direction, [0.0, 0.0, 1.0])
        perp /= np.linalg.norm(perp)
        pts[6] += 2.0 * perp
        _, _, ok = fit_line(pts, 0.2)
        self.assertFalse(ok)

    def test_line_2d(self):
        """Test 2D line coefficients."""
        xs = np.linspace(-1, 4, 8)
        pts = np.column_stack([xs, 2 * xs + 1])
        coeffs, ok = fit_line_2d(pts)
        self.assertTrue(ok)
        self.assertAlmostEqual(np.linalg.norm(coeffs), 1.0, places=12)
        expected = np.array([2.0, -1.0, 1.0]) / np.linalg.norm([2.0, -1.0, 1.0])
        self.assertAlmostEqual(abs(coeffs @ expected), 1.0, places=10)

    def test_line_2d_with_threshold(self):
        """Test optional residual check of the 2D line fit."""
        xs = np.linspace(-1, 4, 8)
        pts = np.column_stack([xs, 2 * xs + 1])
        _, ok = fit_line_2d(pts, eps=1e-4)
        self.assertTrue(ok)

        pts[3, 1] += 1.0
        _, ok = fit_line_2d(pts, eps=1e-4)
        self.assertFalse(ok)
        # Without a threshold the fit is always accepted
        _, ok = fit_line_2d(pts)
        self.assertTrue(ok)


class TestEstimatePlaneDynamic(unittest.TestCase):
    """Test the least-squares plane estimate."""

    def test_horizontal_plane(self):
        """Test least-squares estimate of a horizontal plane."""
        pts = [[0.0, 0.0, 2.0], [1.0, 0.0, 2.0], [0.0, 1.0, 2.0], [1.0, 1.0, 2.0]]
        abcd, ok = estimate_plane_dynamic(pts, 0.05)
        self.assertTrue(ok)
        np.testing.assert_allclose(abcd, [0.0, 0.0, -1.0, 2.0], atol=1e-10)

    def test_outlier_fails(self):
        """Test that an off-plane point fails the threshold."""
        pts = [[0.0, 0.0, 2.0], [1.0, 0.0, 2.0], [0.0, 1.0, 2.0], [1.0, 1.0, 2.0], [0.5, 0.5, 3.0]]
        _, ok = estimate_plane_dynamic(pts, 0.05)
        self.assertFalse(ok)

    def test_too_few_points(self):
        """Test least-squares estimate with too few points."""
        with self.assertLogs('navkernel.math.fitting', level='ERROR'):
            _, ok = estimate_plane_dynamic([[0.0, 0.0, 1.0], [1.0, 0.0, 1.0]], 0.1)
        self.assertFalse(ok)


if __name__ == '__main__':
    unittest.main()
