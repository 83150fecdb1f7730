"""
Navigation state shared between estimators and renderers.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from scipy.spatial.transform import Rotation

from ..math.interpolation import SE3


@dataclass(eq=False)
class NavState:
    """
    Navigation state: orientation, position, velocity and IMU biases.

    Vectors are stored with ``dtype`` precision (float64 for estimation,
    float32 for rendering); use ``NavStated`` / ``NavStatef`` to build the two
    instantiations.

    Attributes:
        timestamp: Time of the state (s)
        R: Orientation (body to world)
        p: Position (m)
        v: Velocity (m/s)
        bg: Gyroscope bias (rad/s)
        ba: Accelerometer bias (m/s²)
    """

    timestamp: float = 0.0
    R: Rotation = field(default_factory=Rotation.identity)
    p: Optional[np.ndarray] = None
    v: Optional[np.ndarray] = None
    bg: Optional[np.ndarray] = None
    ba: Optional[np.ndarray] = None
    dtype: type = np.float64

    def __post_init__(self):
        self.dtype = np.dtype(self.dtype).type
        for name in ('p', 'v', 'bg', 'ba'):
            value = getattr(self, name)
            if value is None:
                value = np.zeros(3)
            setattr(self, name, np.array(value, dtype=self.dtype).reshape(3))

    @classmethod
    def from_pose(cls, timestamp: float, pose: SE3, vel=None,
                  dtype: type = np.float64) -> 'NavState':
        """Build from an SE3 pose and an optional velocity."""
        return cls(timestamp=timestamp, R=pose.rotation, p=pose.translation,
                   v=vel, dtype=dtype)

    def get_se3(self) -> SE3:
        """Pose (R, p) as an SE3."""
        return SE3(self.R, np.asarray(self.p, dtype=float))

    def astype(self, dtype: type) -> 'NavState':
        """Copy with a different vector precision."""
        return NavState(timestamp=self.timestamp, R=self.R, p=self.p, v=self.v,
                        bg=self.bg, ba=self.ba, dtype=dtype)

    def copy(self) -> 'NavState':
        return self.astype(self.dtype)

    def __str__(self) -> str:
        q = self.R.as_quat()
        return (
            f"p: {np.array2string(self.p)}, v: {np.array2string(self.v)}, "
            f"q: {np.array2string(q)}, bg: {np.array2string(self.bg)}, "
            f"ba: {np.array2string(self.ba)}"
        )


def NavStated(timestamp: float = 0.0, R: Optional[Rotation] = None, p=None, v=None,
              bg=None, ba=None) -> NavState:
    """Double precision navigation state."""
    return NavState(timestamp, R if R is not None else Rotation.identity(),
                    p, v, bg, ba, dtype=np.float64)


def NavStatef(timestamp: float = 0.0, R: Optional[Rotation] = None, p=None, v=None,
              bg=None, ba=None) -> NavState:
    """Single precision navigation state."""
    return NavState(timestamp, R if R is not None else Rotation.identity(),
                    p, v, bg, ba, dtype=np.float32)
