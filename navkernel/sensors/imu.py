"""
IMU sample.
"""

from dataclasses import dataclass, field

import numpy as np


def _frozen_vec3(values) -> np.ndarray:
    vec = np.array(values, dtype=float).reshape(3)
    vec.setflags(write=False)
    return vec


@dataclass(frozen=True, eq=False)
class IMU:
    """
    A single IMU reading.

    Attributes:
        timestamp: Time of the reading (s)
        gyro: Angular velocity (rad/s)
        acce: Linear acceleration (m/s²)
    """

    timestamp: float = 0.0
    gyro: np.ndarray = field(default_factory=lambda: np.zeros(3))
    acce: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        object.__setattr__(self, 'gyro', _frozen_vec3(self.gyro))
        object.__setattr__(self, 'acce', _frozen_vec3(self.acce))
