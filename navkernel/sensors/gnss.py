"""
GNSS fix and UTM coordinate value types.
"""

from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np

from ..errors import InvalidArgument
from ..math.interpolation import SE3


class GpsStatusType(IntEnum):
    """Fix quality reported by the receiver."""

    GNSS_FLOAT_SOLUTION = 5         # Float solution (cm to dm level)
    GNSS_FIXED_SOLUTION = 4         # Fixed solution (cm level)
    GNSS_PSEUDO_SOLUTION = 2        # Pseudo-range differential (dm level)
    GNSS_SINGLE_POINT_SOLUTION = 1  # Single point solution (10 m level)
    GNSS_NOT_EXIST = 0              # No signal
    GNSS_OTHER = -1

    @classmethod
    def from_code(cls, code: int) -> 'GpsStatusType':
        """Map a receiver status code, unknown codes become GNSS_OTHER."""
        try:
            return cls(int(code))
        except ValueError:
            return cls.GNSS_OTHER


@dataclass
class UTMCoordinate:
    """UTM position: zone, planar easting/northing, height, hemisphere."""

    zone: int = 0
    xy: np.ndarray = field(default_factory=lambda: np.zeros(2))
    z: float = 0.0
    north: bool = True

    def __post_init__(self):
        self.xy = np.asarray(self.xy, dtype=float).reshape(2)

    @property
    def easting(self) -> float:
        return float(self.xy[0])

    @property
    def northing(self) -> float:
        return float(self.xy[1])


@dataclass(eq=False)
class GNSS:
    """
    A GNSS reading and the values derived from it.

    ``utm`` and ``utm_pose`` are only meaningful once a conversion routine in
    ``navkernel.geo.utm`` has set the matching validity flag; use
    ``get_utm()`` / ``get_utm_pose()`` for checked access.
    """

    unix_time: float = 0.0
    status: GpsStatusType = GpsStatusType.GNSS_NOT_EXIST
    lat_lon_alt: np.ndarray = field(default_factory=lambda: np.zeros(3))  # degrees, degrees, meters
    heading: float = 0.0            # Dual-antenna heading (degrees)
    heading_valid: bool = False

    utm: UTMCoordinate = field(default_factory=UTMCoordinate)
    utm_valid: bool = False

    utm_pose: SE3 = field(default_factory=SE3)
    utm_pose_valid: bool = False

    def __post_init__(self):
        self.status = GpsStatusType.from_code(self.status)
        self.lat_lon_alt = np.asarray(self.lat_lon_alt, dtype=float).reshape(3)

    @property
    def latitude(self) -> float:
        return float(self.lat_lon_alt[0])

    @property
    def longitude(self) -> float:
        return float(self.lat_lon_alt[1])

    @property
    def altitude(self) -> float:
        return float(self.lat_lon_alt[2])

    def get_utm(self) -> UTMCoordinate:
        if not self.utm_valid:
            raise InvalidArgument("UTM coordinate read before a successful conversion")
        return self.utm

    def get_utm_pose(self) -> SE3:
        if not self.utm_pose_valid:
            raise InvalidArgument("UTM pose read before a successful conversion")
        return self.utm_pose

    def invalidate(self):
        """Reset derived fields before a new conversion."""
        self.utm = UTMCoordinate()
        self.utm_valid = False
        self.utm_pose = SE3()
        self.utm_pose_valid = False
