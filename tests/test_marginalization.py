#!/usr/bin/env python3
"""
Unit tests for Schur-complement marginalization.
"""

import os
import sys
import unittest

import numpy as np

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from navkernel.errors import InvalidArgument
from navkernel.math.marginalization import marginalize


def random_spd(n, seed=5):
    rng = np.random.default_rng(seed)
    A = rng.normal(size=(n, n))
    return A @ A.T + n * np.eye(n)


class TestMarginalize(unittest.TestCase):
    """Test block elimination."""

    def test_uncoupled_blocks_unchanged(self):
        """Test elimination of an uncoupled block."""
        H = np.diag([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
        H[0, 1] = H[1, 0] = 0.5
        res = marginalize(H, 2, 3)
        expected = H.copy()
        expected[2:4, :] = 0.0
        expected[:, 2:4] = 0.0
        np.testing.assert_allclose(res, expected, atol=1e-12)

    def test_matches_explicit_schur_complement(self):
        """Test against the explicit Schur complement."""
        H = random_spd(9)
        start, end = 3, 5
        res = marginalize(H, start, end)

        keep = [0, 1, 2, 6, 7, 8]
        drop = [3, 4, 5]
        schur = (H[np.ix_(keep, keep)]
                 - H[np.ix_(keep, drop)] @ np.linalg.inv(H[np.ix_(drop, drop)]) @ H[np.ix_(drop, keep)])
        np.testing.assert_allclose(res[np.ix_(keep, keep)], schur, atol=1e-10)
        np.testing.assert_array_equal(res[start:end + 1, :], 0.0)
        np.testing.assert_array_equal(res[:, start:end + 1], 0.0)

    def test_covariance_of_kept_variables(self):
        """Test marginal information against the covariance."""
        # The marginal information is the inverse of the kept covariance block
        H = random_spd(7, seed=9)
        res = marginalize(H, 0, 2)
        cov = np.linalg.inv(H)
        np.testing.assert_allclose(np.linalg.inv(res[3:, 3:]), cov[3:, 3:], atol=1e-10)

    def test_trailing_block(self):
        """Test elimination of the last block."""
        H = random_spd(6, seed=2)
        res = marginalize(H, 4, 5)
        schur = H[:4, :4] - H[:4, 4:] @ np.linalg.inv(H[4:, 4:]) @ H[4:, :4]
        np.testing.assert_allclose(res[:4, :4], schur, atol=1e-10)

    def test_result_symmetric_and_input_untouched(self):
        """Test symmetry of the result."""
        H = random_spd(8, seed=4)
        H_copy = H.copy()
        res = marginalize(H, 2, 4)
        np.testing.assert_allclose(res, res.T, atol=1e-10)
        np.testing.assert_array_equal(H, H_copy)

    def test_full_range(self):
        """Test elimination of every variable."""
        res = marginalize(random_spd(4), 0, 3)
        np.testing.assert_array_equal(res, np.zeros((4, 4)))

    def test_singular_block_uses_pseudo_inverse(self):
        """Test singular eliminated block."""
        H = np.eye(4)
        H[2, 2] = 0.0
        res = marginalize(H, 2, 3)
        np.testing.assert_allclose(res[:2, :2], np.eye(2), atol=1e-12)

    def test_invalid_range(self):
        """Test invalid block ranges."""
        H = np.eye(4)
        with self.assertRaises(InvalidArgument):
            marginalize(H, 2, 1)
        with self.assertRaises(InvalidArgument):
            marginalize(H, -1, 1)
        with self.assertRaises(InvalidArgument):
            marginalize(H, 1, 4)
        with self.assertRaises(InvalidArgument):
            marginalize(np.ones((3, 4)), 0, 1)


if __name__ == '__main__':
    unittest.main()
