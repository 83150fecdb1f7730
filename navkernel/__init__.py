"""
Numerical kernel for IMU / wheel odometry / GNSS localization.

This package provides platform-independent implementations of:
- SO3 exponential/logarithm maps and Jacobians
- WGS84 <-> UTM conversion and GNSS pose synthesis
- Batch and incremental Gaussian statistics
- Plane and line fitting
- Schur-complement marginalization
- Time-indexed SE3 interpolation
"""

__version__ = "1.0.0"
__author__ = "DR Vehicle Team"

from .errors import InvalidArgument
from .math import SE3, exp_so3, log_so3, marginalize, pose_interp
from .sensors import IMU, Odom, GNSS, GpsStatusType, UTMCoordinate, TxtIO
from .geo import lat_lon_to_utm, utm_to_lat_lon, convert_gps_to_utm, convert_gps_to_utm_only_trans
from .state import NavState, NavStated, NavStatef

__all__ = [
    "InvalidArgument",
    "SE3", "exp_so3", "log_so3", "marginalize", "pose_interp",
    "IMU", "Odom", "GNSS", "GpsStatusType", "UTMCoordinate", "TxtIO",
    "lat_lon_to_utm", "utm_to_lat_lon", "convert_gps_to_utm", "convert_gps_to_utm_only_trans",
    "NavState", "NavStated", "NavStatef",
]
