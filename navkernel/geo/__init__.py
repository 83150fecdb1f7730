"""
Geodetic conversions.
"""

from .utm import (
    lat_lon_to_utm,
    utm_to_lat_lon,
    utm_zone,
    convert_gps_to_utm,
    convert_gps_to_utm_only_trans,
)

__all__ = ["lat_lon_to_utm", "utm_to_lat_lon", "utm_zone",
           "convert_gps_to_utm", "convert_gps_to_utm_only_trans"]
