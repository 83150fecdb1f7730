"""
Numerical kernel: rotation algebra, statistics, fitting, marginalization and
pose interpolation.
"""

from .utils import normalize_angle, wrap_angle, check_nan
from .rotation import skew, exp_so3, exp_so3_dt, exp_rotation, log_so3, a_matrix
from .statistics import (
    compute_mean_and_cov,
    compute_mean_and_cov_diag,
    update_mean_and_cov,
    history_mean_and_var,
    gaussian_pdf,
)
from .fitting import fit_plane, fit_line, fit_line_2d, estimate_plane_dynamic
from .marginalization import marginalize
from .interpolation import SE3, pose_interp

__all__ = [
    "normalize_angle", "wrap_angle", "check_nan",
    "skew", "exp_so3", "exp_so3_dt", "exp_rotation", "log_so3", "a_matrix",
    "compute_mean_and_cov", "compute_mean_and_cov_diag", "update_mean_and_cov",
    "history_mean_and_var", "gaussian_pdf",
    "fit_plane", "fit_line", "fit_line_2d", "estimate_plane_dynamic",
    "marginalize",
    "SE3", "pose_interp",
]
