"""
Conversion between WGS84 latitude/longitude, UTM coordinates and vehicle poses.

The transverse Mercator projection is evaluated by pyproj from an explicit
WGS84 definition; zone and hemisphere are computed here on every call.
Failures are reported through the boolean result (and the validity flags of
a GNSS reading), never raised.
"""

import logging
import math
from typing import Tuple

import numpy as np
from pyproj import CRS, Transformer
from scipy.spatial.transform import Rotation

from ..math.constants import (
    DEG_TO_RAD,
    UTM_FALSE_EASTING,
    UTM_FALSE_NORTHING_SOUTH,
    UTM_MAX_EASTING,
    UTM_MAX_LATITUDE,
    UTM_MAX_NORTHING,
    UTM_MIN_LATITUDE,
    UTM_SCALE_FACTOR,
    WGS84_A,
    WGS84_F,
)
from ..math.interpolation import SE3
from ..math.rotation import exp_so3
from ..sensors.gnss import GNSS, UTMCoordinate

logger = logging.getLogger(__name__)

_ELLIPSOID = f"+a={WGS84_A!r} +rf={1.0 / WGS84_F!r}"


def utm_zone(latitude: float, longitude: float) -> int:
    """
    UTM zone number for a position, including the Norway and Svalbard
    exceptions.
    """
    zone = int((longitude + 180.0) / 6.0) + 1
    if zone > 60:
        zone = 60

    if 56.0 <= latitude < 64.0 and 3.0 <= longitude < 12.0:
        zone = 32

    if 72.0 <= latitude <= 84.0 and 0.0 <= longitude < 42.0:
        if longitude < 9.0:
            zone = 31
        elif longitude < 21.0:
            zone = 33
        elif longitude < 33.0:
            zone = 35
        else:
            zone = 37
    return zone


def _zone_transformer(zone: int, north: bool) -> Transformer:
    central_meridian = zone * 6 - 183
    false_northing = 0.0 if north else UTM_FALSE_NORTHING_SOUTH
    crs_geo = CRS.from_proj4(f"+proj=longlat {_ELLIPSOID} +no_defs")
    crs_utm = CRS.from_proj4(
        f"+proj=tmerc +lat_0=0 +lon_0={central_meridian} +k={UTM_SCALE_FACTOR} "
        f"+x_0={UTM_FALSE_EASTING} +y_0={false_northing} {_ELLIPSOID} +units=m +no_defs")
    return Transformer.from_crs(crs_geo, crs_utm, always_xy=True)


def lat_lon_to_utm(latlon) -> Tuple[UTMCoordinate, bool]:
    """
    Project latitude/longitude (degrees) to UTM.

    Args:
        latlon: [latitude, longitude] in degrees

    Returns:
        (utm, success): success is False outside latitude [-80, 84] or
        longitude [-180, 180]
    """
    lat, lon = float(latlon[0]), float(latlon[1])
    if not (math.isfinite(lat) and math.isfinite(lon)):
        logger.warning("Non-finite latitude/longitude: %s, %s", lat, lon)
        return UTMCoordinate(), False
    if not UTM_MIN_LATITUDE <= lat <= UTM_MAX_LATITUDE or not -180.0 <= lon <= 180.0:
        logger.warning("Latitude/longitude out of UTM domain: %.6f, %.6f", lat, lon)
        return UTMCoordinate(), False

    zone = utm_zone(lat, lon)
    north = lat >= 0.0
    easting, northing = _zone_transformer(zone, north).transform(lon, lat)
    if not (np.isfinite(easting) and np.isfinite(northing)):
        logger.warning("Projection failed for %.6f, %.6f in zone %d", lat, lon, zone)
        return UTMCoordinate(), False

    return UTMCoordinate(zone=zone, xy=np.array([easting, northing]), north=north), True


def utm_to_lat_lon(utm_coor: UTMCoordinate) -> Tuple[np.ndarray, bool]:
    """
    Inverse projection from UTM to latitude/longitude.

    Returns:
        ([latitude, longitude] in degrees, success): fails on a zone outside
        1..60 or planar coordinates outside the zone's domain
    """
    easting, northing = float(utm_coor.xy[0]), float(utm_coor.xy[1])
    if not 1 <= utm_coor.zone <= 60:
        logger.warning("Invalid UTM zone: %s", utm_coor.zone)
        return np.zeros(2), False
    if not (0.0 < easting < UTM_MAX_EASTING and 0.0 <= northing <= UTM_MAX_NORTHING):
        logger.warning("UTM coordinate out of domain: %.3f, %.3f", easting, northing)
        return np.zeros(2), False

    lon, lat = _zone_transformer(utm_coor.zone, utm_coor.north).transform(
        easting, northing, direction="INVERSE")
    if not (np.isfinite(lat) and np.isfinite(lon)):
        logger.warning("Inverse projection failed for %.3f, %.3f", easting, northing)
        return np.zeros(2), False
    return np.array([lat, lon]), True


def _yaw(angle: float) -> Rotation:
    return Rotation.from_matrix(exp_so3([0.0, 0.0, angle]))


def convert_gps_to_utm_only_trans(gnss_reading: GNSS) -> bool:
    """
    Fill the UTM coordinate of a reading, without lever arm or heading.

    The pose is set to the UTM position with identity rotation.
    """
    gnss_reading.invalidate()
    utm_rtk, ok = lat_lon_to_utm(gnss_reading.lat_lon_alt[:2])
    if not ok:
        return False

    utm_rtk.z = gnss_reading.altitude
    gnss_reading.utm = utm_rtk
    gnss_reading.utm_valid = True
    gnss_reading.utm_pose = SE3(Rotation.identity(), [utm_rtk.xy[0], utm_rtk.xy[1], utm_rtk.z])
    gnss_reading.utm_pose_valid = True
    return True


def convert_gps_to_utm(gnss_reading: GNSS, antenna_pos, antenna_angle: float,
                       map_origin=(0.0, 0.0, 0.0), require_heading: bool = False) -> bool:
    """
    Compute the UTM position and 6-DOF vehicle pose of a GNSS reading.

    The antenna pose in the vehicle frame is T_BG = (Rz(antenna_angle),
    [antenna_pos, 0]); the vehicle pose is T_WB = T_WG * T_BG^-1 where T_WG
    carries the antenna UTM position minus ``map_origin`` and, when valid,
    the heading converted from north-clockwise to east-counterclockwise.

    Args:
        gnss_reading: Reading to update in place
        antenna_pos: Antenna [x, y] offset in the vehicle frame (m)
        antenna_angle: Antenna mounting yaw (degrees)
        map_origin: Subtracted from the UTM position (m)
        require_heading: Fail when the reading's heading is invalid

    Returns:
        True when ``utm`` and ``utm_pose`` were filled
    """
    gnss_reading.invalidate()
    if require_heading and not gnss_reading.heading_valid:
        logger.warning("GNSS reading at %.6f has no valid heading", gnss_reading.unix_time)
        return False

    utm_rtk, ok = lat_lon_to_utm(gnss_reading.lat_lon_alt[:2])
    if not ok:
        return False
    utm_rtk.z = gnss_reading.altitude

    heading = 0.0
    if gnss_reading.heading_valid:
        heading = (90.0 - gnss_reading.heading) * DEG_TO_RAD

    T_BG = SE3(_yaw(antenna_angle * DEG_TO_RAD), [antenna_pos[0], antenna_pos[1], 0.0])
    T_GB = T_BG.inverse()

    map_origin = np.asarray(map_origin, dtype=float).reshape(3)
    t_WG = np.array([utm_rtk.xy[0], utm_rtk.xy[1], utm_rtk.z]) - map_origin
    T_WB = SE3(_yaw(heading), t_WG) * T_GB

    utm_rtk.xy = T_WB.translation[:2].copy()
    utm_rtk.z = float(T_WB.translation[2])
    gnss_reading.utm = utm_rtk
    gnss_reading.utm_valid = True

    if gnss_reading.heading_valid:
        gnss_reading.utm_pose = T_WB
    else:
        gnss_reading.utm_pose = SE3(Rotation.identity(), T_WB.translation)
    gnss_reading.utm_pose_valid = True
    return True
