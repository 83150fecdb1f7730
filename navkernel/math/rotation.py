"""
SO3 rotation algebra: skew-symmetric matrices, exponential and logarithm maps.

Axis-angle vectors are 3-element arrays whose direction is the rotation axis
and whose norm is the rotation angle in radians. Rotation matrices are 3x3
numpy arrays; quaternion-valued results use scipy's ``Rotation``.

The maps guard their small-angle regimes with explicit thresholds so that a
near-zero rotation never divides by a near-zero norm:

- ``exp_so3`` returns identity when the norm is at most 1e-7
- ``log_so3`` treats trace >= 3 - 1e-6 as identity and switches to the
  linearized form below 1e-3 rad
- ``cos_sinc_sqrt`` evaluates a Taylor series below sqrt(sqrt(eps))
"""

import math
from typing import Tuple

import numpy as np
from scipy.spatial.transform import Rotation

from ..errors import InvalidArgument
from .constants import (
    A_MATRIX_NORM_EPS,
    EXP_COMPONENTS_NORM_EPS,
    EXP_NORM_EPS,
    LOG_SMALL_ANGLE,
    LOG_TRACE_EPS,
)

_EPS = np.finfo(float).eps
_TAYLOR_0_BOUND = _EPS
_TAYLOR_2_BOUND = math.sqrt(_TAYLOR_0_BOUND)
_TAYLOR_N_BOUND = math.sqrt(_TAYLOR_2_BOUND)

# 1/3, 1/4, ..., 1/9
_TAYLOR_INV = [1.0 / k for k in range(3, 10)]


def _as_vec3(v) -> np.ndarray:
    v = np.asarray(v, dtype=float).reshape(-1)
    if v.shape != (3,):
        raise InvalidArgument(f"expected a 3-vector, got shape {v.shape}")
    return v


def skew(v) -> np.ndarray:
    """
    Cross-product (hat) matrix of a 3-vector.

    ``skew(a) @ b == np.cross(a, b)`` for every b.
    """
    v = _as_vec3(v)
    return np.array([
        [0.0, -v[2], v[1]],
        [v[2], 0.0, -v[0]],
        [-v[1], v[0], 0.0]
    ])


def skew_sym_matrix(v1: float, v2: float, v3: float) -> np.ndarray:
    """Cross-product matrix from three scalar components."""
    return skew((v1, v2, v3))


def _rodrigues(axis: np.ndarray, angle: float) -> np.ndarray:
    K = skew(axis)
    return np.eye(3) + math.sin(angle) * K + (1.0 - math.cos(angle)) * (K @ K)


def exp_so3(ang) -> np.ndarray:
    """
    Exponential map from an axis-angle vector to a rotation matrix.

    Args:
        ang: Axis-angle vector (radians)

    Returns:
        3x3 rotation matrix (identity when |ang| <= 1e-7)
    """
    ang = _as_vec3(ang)
    ang_norm = np.linalg.norm(ang)
    if ang_norm > EXP_NORM_EPS:
        return _rodrigues(ang / ang_norm, ang_norm)
    return np.eye(3)


def exp_so3_dt(ang_vel, dt: float) -> np.ndarray:
    """
    Rotation produced by a constant angular rate over a time step.

    Args:
        ang_vel: Angular velocity (rad/s)
        dt: Time step (s)

    Returns:
        3x3 rotation matrix
    """
    ang_vel = _as_vec3(ang_vel)
    ang_vel_norm = np.linalg.norm(ang_vel)
    if ang_vel_norm > EXP_NORM_EPS:
        return _rodrigues(ang_vel / ang_vel_norm, ang_vel_norm * dt)
    return np.eye(3)


def exp_components(v1: float, v2: float, v3: float) -> np.ndarray:
    """Exponential map from three scalars; identity below a norm of 1e-5."""
    norm = math.sqrt(v1 * v1 + v2 * v2 + v3 * v3)
    if norm > EXP_COMPONENTS_NORM_EPS:
        return _rodrigues(np.array([v1, v2, v3]) / norm, norm)
    return np.eye(3)


def cos_sinc_sqrt(x2: float) -> Tuple[float, float]:
    """
    Cosine and sinc of sqrt(x2).

    For x2 below sqrt(sqrt(eps)) a truncated Taylor series is used, which
    avoids the cancellation of sin(x)/x for tiny x.

    Args:
        x2: Squared angle, must be non-negative

    Returns:
        (cos(x), sin(x)/x) with x = sqrt(x2)
    """
    if x2 < 0:
        raise InvalidArgument("argument must be non-negative")

    if x2 >= _TAYLOR_N_BOUND:
        x = math.sqrt(x2)
        return math.cos(x), math.sin(x) / x

    cosi = 1.0
    sinc = 1.0
    term = -0.5 * x2
    for i in range(3):
        cosi += term
        term *= _TAYLOR_INV[2 * i]
        sinc += term
        term *= -_TAYLOR_INV[2 * i + 1] * x2
    return cosi, sinc


def exp_quat(vec, scale: float = 1.0) -> Tuple[float, np.ndarray]:
    """
    Quaternion exponential of ``scale * vec``.

    ``vec`` is a half-angle vector: the resulting unit quaternion rotates by
    2 * |scale * vec|.

    Returns:
        (w, xyz): scalar part and vector part of the unit quaternion
    """
    vec = _as_vec3(vec)
    norm2 = float(vec @ vec)
    cosi, sinc = cos_sinc_sqrt(scale * scale * norm2)
    return cosi, sinc * scale * vec


def exp_rotation(vec, scale: float = 1.0) -> Rotation:
    """Quaternion exponential of ``scale * vec`` as a ``Rotation``."""
    w, xyz = exp_quat(vec, scale)
    return Rotation.from_quat([xyz[0], xyz[1], xyz[2], w])


def log_so3(R) -> np.ndarray:
    """
    Logarithm map from a rotation matrix to an axis-angle vector.

    The input is assumed to be a proper rotation matrix; it is not validated.
    """
    R = np.asarray(R, dtype=float)
    trace = np.trace(R)
    # Rounding can push the trace of a half turn just below -1
    cos_theta = min(1.0, max(-1.0, 0.5 * (trace - 1.0)))
    theta = 0.0 if trace > 3.0 - LOG_TRACE_EPS else math.acos(cos_theta)
    K = np.array([R[2, 1] - R[1, 2], R[0, 2] - R[2, 0], R[1, 0] - R[0, 1]])
    if abs(theta) < LOG_SMALL_ANGLE:
        return 0.5 * K
    return 0.5 * theta / math.sin(theta) * K


def a_matrix(v) -> np.ndarray:
    """
    SO3 left Jacobian.

    J(v) = I + (1 - cos t) / t^2 [v]x + (1 - sin t / t) / t^2 [v]x^2, t = |v|.
    Identity when |v| < 1e-5.
    """
    v = _as_vec3(v)
    squared_norm = float(v @ v)
    norm = math.sqrt(squared_norm)
    if norm < A_MATRIX_NORM_EPS:
        return np.eye(3)
    hat = skew(v)
    return (np.eye(3)
            + (1.0 - math.cos(norm)) / squared_norm * hat
            + (1.0 - math.sin(norm) / norm) / squared_norm * (hat @ hat))
