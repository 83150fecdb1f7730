"""
Mathematical, geodetic and numerical constants for the navigation kernel.
"""

import math

# Mathematical constants
PI = math.pi
TWO_PI = 2 * math.pi

# Conversion factors
DEG_TO_RAD = math.pi / 180.0
RAD_TO_DEG = 180.0 / math.pi

# Gravity acceleration (m/s²)
GRAVITY_MS2 = 9.81

# WGS84 ellipsoid
WGS84_A = 6378137.0                 # Semi-major axis (meters)
WGS84_F = 1 / 298.257223563         # Flattening

# UTM domain
UTM_MIN_LATITUDE = -80.0
UTM_MAX_LATITUDE = 84.0
UTM_SCALE_FACTOR = 0.9996
UTM_FALSE_EASTING = 500000.0
UTM_FALSE_NORTHING_SOUTH = 10000000.0
UTM_MAX_EASTING = 1000000.0
UTM_MAX_NORTHING = 10000000.0

# Rotation thresholds
EXP_NORM_EPS = 1e-7           # Below this the exponential map returns identity
EXP_COMPONENTS_NORM_EPS = 1e-5
LOG_TRACE_EPS = 1e-6          # trace >= 3 - eps is treated as identity
LOG_SMALL_ANGLE = 1e-3        # Linearized logarithm below this angle
A_MATRIX_NORM_EPS = 1e-5

# Marginalization
MARGINALIZE_SV_EPS = 1e-6     # Singular values at or below are treated as zero

# Pose interpolation
POSE_INTERP_TIME_TH = 0.5     # Allowed extrapolation beyond the last pose (s)
POSE_INTERP_DT_EPS = 1e-6     # Duplicate timestamp threshold (s)

# Geometric fitting defaults
FIT_PLANE_EPS = 1e-2
FIT_LINE_EPS = 0.2
