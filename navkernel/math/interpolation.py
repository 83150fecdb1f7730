"""
SE3 poses and time-indexed pose interpolation.
"""

import bisect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial.transform import Rotation, Slerp

from .constants import POSE_INTERP_DT_EPS, POSE_INTERP_TIME_TH

logger = logging.getLogger(__name__)


@dataclass
class SE3:
    """
    Rigid transform: rotation followed by translation.

    Applied to a point p this is ``rotation.apply(p) + translation``.
    """

    rotation: Rotation = field(default_factory=Rotation.identity)
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.translation = np.asarray(self.translation, dtype=float).reshape(3)

    @classmethod
    def identity(cls) -> 'SE3':
        return cls()

    @classmethod
    def from_matrix(cls, T: np.ndarray) -> 'SE3':
        """Build from a 4x4 homogeneous matrix."""
        T = np.asarray(T, dtype=float)
        return cls(Rotation.from_matrix(T[:3, :3]), T[:3, 3])

    @classmethod
    def rot_z(cls, angle: float, translation=(0.0, 0.0, 0.0)) -> 'SE3':
        """Yaw rotation by ``angle`` radians with the given translation."""
        return cls(Rotation.from_rotvec([0.0, 0.0, angle]), translation)

    def matrix(self) -> np.ndarray:
        """4x4 homogeneous matrix."""
        T = np.eye(4)
        T[:3, :3] = self.rotation.as_matrix()
        T[:3, 3] = self.translation
        return T

    def unit_quaternion(self) -> np.ndarray:
        """Rotation quaternion in scalar-last [x, y, z, w] order."""
        return self.rotation.as_quat()

    def inverse(self) -> 'SE3':
        inv_rot = self.rotation.inv()
        return SE3(inv_rot, -inv_rot.apply(self.translation))

    def apply(self, point) -> np.ndarray:
        return self.rotation.apply(np.asarray(point, dtype=float)) + self.translation

    def __mul__(self, other: 'SE3') -> 'SE3':
        return SE3(self.rotation * other.rotation,
                   self.rotation.apply(other.translation) + self.translation)

    def __repr__(self) -> str:
        q = self.unit_quaternion()
        return (f"SE3(t=[{self.translation[0]:.3f}, {self.translation[1]:.3f}, "
                f"{self.translation[2]:.3f}], q=[{q[0]:.4f}, {q[1]:.4f}, {q[2]:.4f}, {q[3]:.4f}])")


def pose_interp(query_time: float,
                data: Sequence[Any],
                take_time: Callable[[Any], float],
                take_pose: Callable[[Any], SE3],
                time_th: float = POSE_INTERP_TIME_TH) -> Tuple[Optional[SE3], Optional[Any], bool]:
    """
    Interpolate a pose at ``query_time`` from time-ordered samples.

    Rotation is interpolated with slerp and translation linearly. A query
    past the last sample (or before the first) is clamped to that sample when
    it lies within ``time_th`` seconds, and fails otherwise. The first pair is
    never extrapolated backwards: a query before the first sample returns the
    first pose unchanged, not a pose continued along the first segment.

    Args:
        query_time: Time to query (s)
        data: Samples sorted by time
        take_time: Extracts the timestamp of a sample
        take_pose: Extracts the SE3 pose of a sample
        time_th: Allowed extrapolation (s)

    Returns:
        (pose, best_match, success): best_match is the earlier sample when
        the interpolation fraction is below 0.5, else the later one
    """
    data = list(data)
    if not data:
        logger.info("Cannot interpolate because data is empty.")
        return None, None, False

    last = data[-1]
    last_time = take_time(last)
    if query_time > last_time:
        if query_time < last_time + time_th:
            return take_pose(last), last, True
        logger.debug("Query time %.6f is %.3fs past the last pose", query_time,
                     query_time - last_time)
        return None, None, False

    first = data[0]
    first_time = take_time(first)
    if query_time < first_time:
        if query_time > first_time - time_th:
            return take_pose(first), first, True
        logger.debug("Query time %.6f is %.3fs before the first pose", query_time,
                     first_time - query_time)
        return None, None, False

    if len(data) == 1:
        return take_pose(first), first, True

    # t0 <= query_time < t1, or the last pair when query_time == last_time
    times = [take_time(d) for d in data]
    idx = min(bisect.bisect_right(times, query_time) - 1, len(data) - 2)
    match, match_next = data[idx], data[idx + 1]
    t0, t1 = times[idx], times[idx + 1]

    dt = t1 - t0
    if abs(dt) < POSE_INTERP_DT_EPS:
        return take_pose(match), match, True

    s = (query_time - t0) / dt
    pose_first = take_pose(match)
    pose_next = take_pose(match_next)

    slerp = Slerp([0.0, 1.0], Rotation.concatenate([pose_first.rotation, pose_next.rotation]))
    result = SE3(slerp([s])[0],
                 pose_first.translation * (1 - s) + pose_next.translation * s)
    best_match = match if s < 0.5 else match_next
    return result, best_match, True
