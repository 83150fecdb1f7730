"""
Sensor readings and the record file reader.
"""

from .imu import IMU
from .odom import Odom
from .gnss import GNSS, GpsStatusType, UTMCoordinate
from .txt_io import TxtIO

__all__ = ["IMU", "Odom", "GNSS", "GpsStatusType", "UTMCoordinate", "TxtIO"]
