"""
Mathematical utility functions shared by the navigation kernel.
"""

import logging
import math
from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from .constants import DEG_TO_RAD, PI, RAD_TO_DEG, TWO_PI

logger = logging.getLogger(__name__)


def normalize_angle(angle):
    """
    Normalize angle to [-pi, pi] range.

    Args:
        angle (float): Angle in radians

    Returns:
        float: Normalized angle in [-pi, pi]
    """
    while angle > PI:
        angle -= TWO_PI
    while angle < -PI:
        angle += TWO_PI
    return angle


def wrap_angle(angle):
    """
    Wrap angle to [0, 2*pi] range.

    Args:
        angle (float): Angle in radians

    Returns:
        float: Wrapped angle in [0, 2*pi]
    """
    return angle % TWO_PI


def degrees_to_radians(degrees):
    """Convert degrees to radians."""
    return degrees * DEG_TO_RAD


def radians_to_degrees(radians):
    """Convert radians to degrees."""
    return radians * RAD_TO_DEG


def limit_in_range(num, min_limit, max_limit):
    """
    Clamp a number to [min_limit, max_limit].

    Returns:
        The clamped value
    """
    if num < min_limit:
        return min_limit
    if num >= max_limit:
        return max_limit
    return num


def vec_from_array(values: Sequence[float]) -> np.ndarray:
    """Build a 3-vector from the first three entries of a sequence."""
    return np.array([values[0], values[1], values[2]], dtype=float)


def mat_from_array(values: Sequence[float]) -> np.ndarray:
    """Build a 3x3 matrix from nine row-major entries."""
    return np.asarray(values[:9], dtype=float).reshape(3, 3)


def rotm_to_euler(rot: np.ndarray) -> np.ndarray:
    """
    Convert a rotation matrix to [roll, pitch, yaw] (ZYX order).

    Falls back to yaw = 0 at the pitch = +-90 degree singularity.
    """
    sy = math.sqrt(rot[0, 0] * rot[0, 0] + rot[1, 0] * rot[1, 0])
    if sy >= 1e-6:
        x = math.atan2(rot[2, 1], rot[2, 2])
        y = math.atan2(-rot[2, 0], sy)
        z = math.atan2(rot[1, 0], rot[0, 0])
    else:
        x = math.atan2(-rot[1, 2], rot[1, 1])
        y = math.atan2(-rot[2, 0], sy)
        z = 0.0
    return np.array([x, y, z])


def rpy_to_rotm(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """
    Rotation matrix Rz(yaw) * Ry(pitch) * Rx(roll).

    Matches ROS tf createQuaternionFromRPY.
    """
    return Rotation.from_euler("ZYX", [yaw, pitch, roll]).as_matrix()


def check_nan(m: np.ndarray) -> bool:
    """
    Flag NaN entries in a matrix.

    The matrix is logged and True returned when any entry is NaN. Nothing is
    corrected; the caller decides whether to abort.
    """
    m = np.asarray(m)
    if np.isnan(m).any():
        logger.error("matrix has nan:\n%s", m)
        return True
    return False


def pseudo_inverse(x: np.ndarray) -> np.ndarray:
    """
    Moore-Penrose pseudo-inverse of a 3x2 matrix.

    Singular values below 3 * eps * sigma_max are treated as zero.

    Args:
        x: 3x2 matrix

    Returns:
        2x3 pseudo-inverse
    """
    u, sv, vt = np.linalg.svd(np.asarray(x, dtype=float), full_matrices=False)
    tolerance = np.finfo(float).eps * 3 * abs(sv[0])
    sv_inv = np.array([1.0 / s if abs(s) > tolerance else 0.0 for s in sv])
    return vt.T @ np.diag(sv_inv) @ u.T
