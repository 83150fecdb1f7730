"""
Plane and line fitting with all-or-nothing inlier validation.

The SVD fits solve a homogeneous system and take the right-singular vector
of the smallest (plane, 2D line) or largest (3D line direction) singular
value. After fitting, every input point is checked against the threshold; a
single outlier rejects the whole fit. These are not robust estimators.
"""

import logging
from typing import Optional, Tuple

import numpy as np
from scipy import linalg

from ..errors import InvalidArgument
from .constants import FIT_LINE_EPS, FIT_PLANE_EPS

logger = logging.getLogger(__name__)


def _as_points(points, dim: int) -> np.ndarray:
    pts = np.asarray(points, dtype=float)
    if pts.size == 0:
        return pts.reshape(0, dim)
    if pts.ndim != 2 or pts.shape[1] != dim:
        raise InvalidArgument(f"expected an (N, {dim}) point array, got shape {pts.shape}")
    return pts


def fit_plane(points, eps: float = FIT_PLANE_EPS) -> Tuple[np.ndarray, bool]:
    """
    Fit a plane a*x + b*y + c*z + d = 0 to 3D points.

    Args:
        points: (N, 3) points, N >= 3
        eps: Maximum squared point-to-plane distance

    Returns:
        (coeffs, success): coeffs is the unit 4-vector [a, b, c, d]
    """
    pts = _as_points(points, 3)
    if len(pts) < 3:
        return np.zeros(4), False

    A = np.hstack([pts, np.ones((len(pts), 1))])
    _, _, vt = np.linalg.svd(A, full_matrices=True)
    coeffs = vt[3]

    normal_norm = np.linalg.norm(coeffs[:3])
    if normal_norm == 0.0:
        return coeffs, False

    dist = (pts @ coeffs[:3] + coeffs[3]) / normal_norm
    return coeffs, bool(np.all(dist * dist <= eps))


def fit_line(points, eps: float = FIT_LINE_EPS) -> Tuple[np.ndarray, np.ndarray, bool]:
    """
    Fit a 3D line through points.

    Args:
        points: (N, 3) points, N >= 2
        eps: Maximum squared point-to-line distance

    Returns:
        (origin, direction, success): origin is the centroid, direction is a
        unit vector along the principal axis
    """
    pts = _as_points(points, 3)
    if len(pts) < 2:
        return np.zeros(3), np.zeros(3), False

    origin = pts.mean(axis=0)
    Y = pts - origin
    _, _, vt = np.linalg.svd(Y, full_matrices=True)
    direction = vt[0]

    perp = np.cross(direction, Y)
    return origin, direction, bool(np.all((perp * perp).sum(axis=1) <= eps))


def fit_line_2d(points, eps: Optional[float] = None) -> Tuple[np.ndarray, bool]:
    """
    Fit a 2D line a*x + b*y + c = 0.

    Args:
        points: (N, 2) points, N >= 2
        eps: When given, maximum squared point-to-line distance. When None
            the fit is accepted without checking residuals.

    Returns:
        (coeffs, success): coeffs is the unit 3-vector [a, b, c]
    """
    pts = _as_points(points, 2)
    if len(pts) < 2:
        return np.zeros(3), False

    A = np.hstack([pts, np.ones((len(pts), 1))])
    _, _, vt = np.linalg.svd(A, full_matrices=True)
    coeffs = vt[2]

    if eps is None:
        return coeffs, True

    normal_norm = np.linalg.norm(coeffs[:2])
    if normal_norm == 0.0:
        return coeffs, False
    dist = (pts @ coeffs[:2] + coeffs[2]) / normal_norm
    return coeffs, bool(np.all(dist * dist <= eps))


def estimate_plane_dynamic(points, threshold: float) -> Tuple[np.ndarray, bool]:
    """
    Plane fit through the normal equations of A n = -1.

    Assumes the plane does not pass through the origin. Better conditioned
    than ``fit_plane`` for 3 or 4 points.

    Args:
        points: (N, 3) points, N >= 3
        threshold: Maximum absolute point-to-plane distance

    Returns:
        (abcd, success): [a, b, c] is the unit normal and d = 1 / |n|
    """
    pts = _as_points(points, 3)
    if len(pts) < 3:
        logger.error("The number of points should not be less than 3, given %d", len(pts))
        return np.zeros(4), False

    b = -np.ones(len(pts))
    normvec, _, _, _ = linalg.lstsq(pts, b)

    norm = np.linalg.norm(normvec)
    if norm == 0.0:
        return np.zeros(4), False

    len_inv = 1.0 / norm
    normvec = normvec * len_inv
    abcd = np.append(normvec, len_inv)

    return abcd, bool(np.all(np.abs(pts @ normvec + len_inv) <= threshold))
